"""
models.py
Dieses Modul enthält die SQLAlchemy-Modelle für den Movie Tracker.
This module contains the SQLAlchemy models for the movie tracker.
"""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

# Globale SQLAlchemy-Instanz (wird in app.py initialisiert)
db = SQLAlchemy()

# Feste Wertebereiche / Fixed value sets
TIERS = ('S', 'A', 'B', 'C', 'D', 'F')
REVIEWERS = ('Цеха', 'Паша')
PRIORITIES = ('high', 'medium', 'low')
STATUSES = ('watched', 'watchlist')
MIN_RELEASE_YEAR = 1888


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value is not None else None


movie_genres = db.Table(
    'movie_genres',
    db.Column('movie_id', db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True),
    db.Column('genre_id', db.Integer, db.ForeignKey('genres.id'), primary_key=True),
)


class Movie(db.Model):
    """
    Movie
    Repräsentiert einen Film im Katalog (gesehen oder auf der Watchlist).
    Represents a movie in the catalog (watched or on the watchlist).
    """
    __tablename__ = 'movies'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    original_title = db.Column(db.String(255), nullable=True)
    release_year = db.Column(db.Integer, nullable=False)
    director = db.Column(db.String(255), nullable=True)
    poster_url = db.Column(db.String(500), nullable=True)
    trailer_url = db.Column(db.String(500), nullable=True)
    duration = db.Column(db.Integer, nullable=True)  # Minuten / minutes
    description = db.Column(db.Text, nullable=True)
    country = db.Column(db.String(100), nullable=True)
    language = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='watched')
    rating = db.Column(db.Float, nullable=True)  # Durchschnitt der Rezensionen / average of the reviews
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Beziehungen
    genres = db.relationship('Genre', secondary=movie_genres, back_populates='movies', order_by='Genre.name')
    actor_links = db.relationship('MovieActor', back_populates='movie', cascade="all, delete-orphan")
    reviews = db.relationship('Review', back_populates='movie', cascade="all, delete-orphan",
                              order_by='Review.review_date.desc()')
    watchlist_entry = db.relationship('WatchlistEntry', back_populates='movie', uselist=False,
                                      cascade="all, delete-orphan")
    tier_entries = db.relationship('TierListMovie', back_populates='movie', cascade="all, delete-orphan")

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'original_title': self.original_title,
            'release_year': self.release_year,
            'director': self.director,
            'poster_url': self.poster_url,
            'trailer_url': self.trailer_url,
            'duration': self.duration,
            'description': self.description,
            'country': self.country,
            'language': self.language,
            'status': self.status,
            'rating': self.rating,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Movie id={self.id} title={self.title}>"


class Genre(db.Model):
    """
    Genre
    Ein Genre mit eindeutigem Namen.
    A genre with a unique name.
    """
    __tablename__ = 'genres'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    movies = db.relationship('Movie', secondary=movie_genres, back_populates='genres')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Genre id={self.id} name={self.name}>"


class Actor(db.Model):
    """
    Actor
    Ein Schauspieler mit eindeutigem Namen.
    An actor with a unique name.
    """
    __tablename__ = 'actors'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    biography = db.Column(db.Text, nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    movie_links = db.relationship('MovieActor', back_populates='actor')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'biography': self.biography,
            'birth_date': _iso(self.birth_date),
            'photo_url': self.photo_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Actor id={self.id} name={self.name}>"


class MovieActor(db.Model):
    """
    MovieActor
    Verbindet Filme und Schauspieler (n:m) mit Rollenname und Hauptrollen-Flag.
    Connects movies and actors (many-to-many) with role name and lead flag.
    """
    __tablename__ = 'movie_actors'
    movie_id = db.Column(db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True)
    actor_id = db.Column(db.Integer, db.ForeignKey('actors.id'), primary_key=True)
    role_name = db.Column(db.String(255), nullable=True)
    is_lead = db.Column(db.Boolean, nullable=False, default=False)

    movie = db.relationship('Movie', back_populates='actor_links')
    actor = db.relationship('Actor', back_populates='movie_links')

    def __repr__(self):
        return f"<MovieActor movie_id={self.movie_id} actor_id={self.actor_id}>"


class Review(db.Model):
    """
    Review
    Rezension eines der beiden festen Rezensenten; höchstens eine pro Film und Rezensent.
    Review by one of the two fixed reviewers; at most one per movie and reviewer.
    """
    __tablename__ = 'reviews'
    __table_args__ = (
        db.UniqueConstraint('movie_id', 'reviewer_name', name='uq_review_movie_reviewer'),
    )
    id = db.Column(db.Integer, primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), nullable=False)
    reviewer_name = db.Column(db.String(50), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    review_text = db.Column(db.Text, nullable=False)
    review_date = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    movie = db.relationship('Movie', back_populates='reviews')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'movie_id': self.movie_id,
            'reviewer_name': self.reviewer_name,
            'rating': self.rating,
            'review_text': self.review_text,
            'review_date': _iso(self.review_date),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Review id={self.id} movie_id={self.movie_id} reviewer={self.reviewer_name}>"


class WatchlistEntry(db.Model):
    """
    WatchlistEntry
    Eintrag auf der Watchlist (höchstens einer pro Film).
    Watchlist entry (at most one per movie).
    """
    __tablename__ = 'watchlist'
    id = db.Column(db.Integer, primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), nullable=False, unique=True)
    priority = db.Column(db.String(10), nullable=False, default='medium')
    notes = db.Column(db.Text, nullable=True)
    added_date = db.Column(db.DateTime, default=utcnow, nullable=False)

    movie = db.relationship('Movie', back_populates='watchlist_entry')

    def __repr__(self):
        return f"<WatchlistEntry movie_id={self.movie_id} priority={self.priority}>"


class TierList(db.Model):
    """
    TierList
    Benannte Tier-Liste; die Einträge gehören der Liste.
    Named tier list; it owns its entries.
    """
    __tablename__ = 'tier_lists'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    entries = db.relationship('TierListMovie', back_populates='tier_list', cascade="all, delete-orphan")

    def __repr__(self):
        return f"<TierList id={self.id} name={self.name}>"


class TierListMovie(db.Model):
    """
    TierListMovie
    Platzierung eines Films in einer Stufe einer Tier-Liste.
    Placement of a movie in one tier of a tier list.
    """
    __tablename__ = 'tier_list_movies'
    tier_list_id = db.Column(db.Integer, db.ForeignKey('tier_lists.id', ondelete='CASCADE'), primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True)
    tier = db.Column(db.String(1), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    added_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    tier_list = db.relationship('TierList', back_populates='entries')
    movie = db.relationship('Movie', back_populates='tier_entries')

    def __repr__(self):
        return f"<TierListMovie list={self.tier_list_id} movie={self.movie_id} tier={self.tier} pos={self.position}>"
