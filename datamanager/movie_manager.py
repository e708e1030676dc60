"""
movie_manager.py
Datenzugriff für Filme, inklusive Watchlist und Statistik.
Data access for movies, including the watchlist and statistics.
"""

from datetime import datetime
from typing import List, Optional

from flask import current_app
from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import selectinload

from datamanager.base_manager import BaseManager
from datamanager.data_manager_interface import CatalogManagerInterface
from datamanager.errors import NotFoundError, ValidationError
from datamanager.references import parse_reference, resolve_reference
from models import (MIN_RELEASE_YEAR, PRIORITIES, STATUSES, Actor, Genre, Movie, MovieActor,
                    WatchlistEntry, db, utcnow)

DEFAULT_PAGE_SIZE = 12
SEARCH_PAGE_SIZE = 20
SORT_FIELDS = ('created_at', 'title', 'release_year', 'rating', 'duration')
TEXT_FIELDS = ('original_title', 'director', 'poster_url', 'trailer_url', 'description', 'country', 'language')


def _ordered_links(movie: Movie) -> List[MovieActor]:
    # Hauptrollen zuerst, dann nach Name / leads first, then by name
    return sorted(movie.actor_links, key=lambda link: (not link.is_lead, link.actor.name))


class MovieManager(BaseManager, CatalogManagerInterface):
    """
    MovieManager
    Filme mit Genres, Schauspielern, Rezensionen und Watchlist-Status.
    Movies with genres, actors, reviews and watchlist status.
    """

    def __init__(self, review_manager=None):
        self.review_manager = review_manager

    # ---- Serialisierung / serialization ----

    @staticmethod
    def _list_item(movie: Movie) -> dict:
        data = movie.to_dict()
        data['genres'] = [genre.name for genre in movie.genres]
        data['actors'] = [link.actor.name for link in _ordered_links(movie)]
        return data

    @classmethod
    def _list_item_with_reviews(cls, movie: Movie) -> dict:
        data = cls._list_item(movie)
        data['reviews'] = [review.to_dict() for review in movie.reviews]
        return data

    @staticmethod
    def _detail(movie: Movie) -> dict:
        data = movie.to_dict()
        data['genres'] = [{'id': g.id, 'name': g.name, 'description': g.description} for g in movie.genres]
        data['actors'] = [
            {
                'id': link.actor.id,
                'name': link.actor.name,
                'photo_url': link.actor.photo_url,
                'role_name': link.role_name,
                'is_lead': link.is_lead,
            }
            for link in _ordered_links(movie)
        ]
        data['reviews'] = [review.to_dict() for review in movie.reviews]
        entry = movie.watchlist_entry
        data['watchlist'] = None if entry is None else {
            'priority': entry.priority,
            'notes': entry.notes,
            'added_date': entry.added_date.isoformat(),
        }
        return data

    # ---- Validierung / validation ----

    def _validate_year(self, value) -> int:
        if value is None or value == '':
            raise ValidationError("release_year is required.")
        year = self._to_int(value, 'release_year')
        max_year = datetime.now().year + 1
        if not MIN_RELEASE_YEAR <= year <= max_year:
            raise ValidationError(f"release_year must be between {MIN_RELEASE_YEAR} and {max_year}.")
        return year

    def _validate_duration(self, value) -> Optional[int]:
        if value is None or value == '':
            return None
        duration = self._to_int(value, 'duration')
        if duration <= 0:
            raise ValidationError("duration must be a positive number of minutes.")
        return duration

    @staticmethod
    def _as_list(value, field: str) -> list:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValidationError(f"{field} must be a list.")
        return value

    def _parse_actor_refs(self, raw_actors) -> list:
        parsed = []
        for raw in self._as_list(raw_actors, 'actors'):
            extras = raw if isinstance(raw, dict) else {}
            parsed.append((parse_reference(raw), self._optional_text(extras.get('role_name')),
                           bool(extras.get('is_lead', False))))
        return parsed

    def _apply_genres(self, movie: Movie, genre_refs: list) -> None:
        genres = []
        for ref in genre_refs:
            genre = resolve_reference(Genre, ref)
            if genre not in genres:
                genres.append(genre)
        movie.genres = genres

    def _apply_actors(self, movie: Movie, actor_refs: list) -> None:
        if movie.actor_links:
            movie.actor_links.clear()
            db.session.flush()
        seen = set()
        for ref, role_name, is_lead in actor_refs:
            actor = resolve_reference(Actor, ref)
            if actor.id in seen:
                continue
            seen.add(actor.id)
            movie.actor_links.append(MovieActor(actor=actor, role_name=role_name, is_lead=is_lead))

    def _get_movie(self, movie_id: int) -> Movie:
        movie = db.session.get(Movie, movie_id)
        if movie is None:
            current_app.logger.warning(f"Movie with ID {movie_id} not found.")
            # Movie not found. / Film nicht gefunden.
            raise NotFoundError("Movie not found.")
        return movie

    # ---- Katalog / catalog ----

    def _filtered_select(self, filters: dict):
        stmt = select(Movie).options(
            selectinload(Movie.genres),
            selectinload(Movie.actor_links).selectinload(MovieActor.actor),
        )
        genre = filters.get('genre')
        if genre:
            stmt = stmt.where(Movie.genres.any(Genre.name == genre))
        min_rating = filters.get('minRating')
        if min_rating is not None and min_rating > 0:
            stmt = stmt.where(Movie.rating >= min_rating)
        max_rating = filters.get('maxRating')
        if max_rating is not None and max_rating < 10:
            stmt = stmt.where(Movie.rating <= max_rating)
        search = (filters.get('search') or '').strip()
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                Movie.title.ilike(pattern),
                Movie.original_title.ilike(pattern),
                Movie.actor_links.any(MovieActor.actor.has(Actor.name.ilike(pattern))),
            ))
        status = filters.get('status')
        if status:
            stmt = stmt.where(Movie.status == status)

        # Nur erlaubte Sortierfelder, sonst created_at / whitelisted sort fields only
        sort_by = filters.get('sortBy')
        if sort_by not in SORT_FIELDS:
            sort_by = 'created_at'
        sort_order = str(filters.get('sortOrder') or 'DESC').upper()
        column = getattr(Movie, sort_by)
        if sort_order == 'ASC':
            return stmt.order_by(column.asc(), Movie.id.asc())
        return stmt.order_by(column.desc(), Movie.id.desc())

    def list(self, filters: Optional[dict] = None, page: int = 1, limit: Optional[int] = None) -> dict:
        """
        Liefert eine gefilterte, sortierte Seite von Filmen.
        Returns a filtered, sorted page of movies.
        """
        with self._reading("listing movies"):
            stmt = self._filtered_select(filters or {})
            return self._paginate(stmt, page, limit or DEFAULT_PAGE_SIZE, self._list_item)

    def list_with_reviews(self, filters: Optional[dict] = None, page: int = 1, limit: Optional[int] = None) -> dict:
        with self._reading("listing movies with reviews"):
            stmt = self._filtered_select(filters or {}).options(selectinload(Movie.reviews))
            return self._paginate(stmt, page, limit or DEFAULT_PAGE_SIZE, self._list_item_with_reviews)

    def search(self, query: str, page: int = 1, limit: Optional[int] = None, status: Optional[str] = None) -> dict:
        """
        Sucht in Titel, Originaltitel und Schauspielernamen.
        Searches title, original title and actor names.
        """
        self._search_pattern(query)
        filters = {'search': query.strip(), 'status': status}
        return self.list(filters, page, limit or SEARCH_PAGE_SIZE)

    def get_by_id(self, movie_id: int) -> Optional[dict]:
        with self._reading(f"fetching movie {movie_id}"):
            movie = db.session.get(Movie, movie_id)
            return self._detail(movie) if movie else None

    def create(self, data: dict) -> int:
        """
        Legt einen Film samt Genre- und Schauspieler-Verknüpfungen in einer Transaktion an.
        Creates a movie with its genre and actor links in one transaction.
        """
        title = self._clean_text(data.get('title'), 'title')
        year = self._validate_year(data.get('release_year'))
        duration = self._validate_duration(data.get('duration'))
        status = data.get('status') or 'watched'
        if status not in STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(STATUSES)}.")
        genre_refs = [parse_reference(raw) for raw in self._as_list(data.get('genres'), 'genres')]
        actor_refs = self._parse_actor_refs(data.get('actors'))

        with self._transaction(f"creating movie '{title}'"):
            movie = Movie(title=title, release_year=year, duration=duration, status=status)
            for field in TEXT_FIELDS:
                setattr(movie, field, self._optional_text(data.get(field)))
            db.session.add(movie)
            db.session.flush()
            self._apply_genres(movie, genre_refs)
            self._apply_actors(movie, actor_refs)
            if status == 'watchlist':
                movie.watchlist_entry = WatchlistEntry(priority='medium')
        current_app.logger.info(f"Movie '{movie.title}' (ID: {movie.id}) created.")
        # Movie created. / Film angelegt.
        return movie.id

    def update(self, movie_id: int, data: dict) -> bool:
        """
        Teilaktualisierung; Genres und Schauspieler werden nur ersetzt, wenn der Schlüssel vorhanden ist.
        Partial update; genres and actors are replaced only when their key is present.
        """
        with self._transaction(f"updating movie {movie_id}"):
            movie = self._get_movie(movie_id)
            if 'title' in data:
                movie.title = self._clean_text(data.get('title'), 'title')
            if 'release_year' in data:
                movie.release_year = self._validate_year(data.get('release_year'))
            if 'duration' in data:
                movie.duration = self._validate_duration(data.get('duration'))
            for field in TEXT_FIELDS:
                if field in data:
                    setattr(movie, field, self._optional_text(data.get(field)))
            if 'genres' in data:
                self._apply_genres(movie, [parse_reference(raw) for raw in self._as_list(data['genres'], 'genres')])
            if 'actors' in data:
                self._apply_actors(movie, self._parse_actor_refs(data['actors']))
            movie.updated_at = utcnow()
        current_app.logger.info(f"Movie {movie_id} updated.")
        return True

    def delete(self, movie_id: int) -> bool:
        with self._transaction(f"deleting movie {movie_id}"):
            movie = self._get_movie(movie_id)
            db.session.delete(movie)
        current_app.logger.info(f"Movie {movie_id} deleted together with its reviews and placements.")
        # Movie deleted. / Film gelöscht.
        return True

    # ---- Watchlist ----

    def get_watchlist(self) -> List[dict]:
        """
        Watchlist nach Priorität (hoch, mittel, niedrig), dann neueste zuerst.
        Watchlist by priority (high, medium, low), then newest first.
        """
        priority_rank = case({'high': 1, 'medium': 2, 'low': 3}, value=WatchlistEntry.priority, else_=4)
        stmt = (select(WatchlistEntry)
                .options(selectinload(WatchlistEntry.movie).selectinload(Movie.genres))
                .order_by(priority_rank, WatchlistEntry.added_date.desc(), WatchlistEntry.id.desc()))
        with self._reading("fetching the watchlist"):
            entries = db.session.scalars(stmt).all()
            result = []
            for entry in entries:
                data = entry.movie.to_dict()
                data.update({
                    'priority': entry.priority,
                    'notes': entry.notes,
                    'added_date': entry.added_date.isoformat(),
                    'genres': [genre.name for genre in entry.movie.genres],
                })
                result.append(data)
            return result

    def add_to_watchlist(self, movie_id: int, priority: str = 'medium', notes: Optional[str] = '') -> dict:
        """
        Setzt einen Film auf die Watchlist (Upsert) und den Status auf 'watchlist', in einer Transaktion.
        Puts a movie on the watchlist (upsert) and sets its status to 'watchlist', in one transaction.
        """
        priority = priority or 'medium'
        if priority not in PRIORITIES:
            raise ValidationError(f"priority must be one of: {', '.join(PRIORITIES)}.")
        with self._transaction(f"adding movie {movie_id} to the watchlist"):
            movie = self._get_movie(movie_id)
            entry = movie.watchlist_entry
            if entry is None:
                entry = WatchlistEntry(movie=movie)
                db.session.add(entry)
            entry.priority = priority
            entry.notes = notes or ''
            movie.status = 'watchlist'
        current_app.logger.info(f"Movie {movie_id} added to the watchlist with priority '{priority}'.")
        return {'movie_id': movie_id, 'priority': entry.priority, 'notes': entry.notes,
                'added_date': entry.added_date.isoformat()}

    def remove_from_watchlist(self, movie_id: int) -> bool:
        with self._transaction(f"removing movie {movie_id} from the watchlist"):
            movie = self._get_movie(movie_id)
            movie.watchlist_entry = None
            movie.status = 'watched'
        current_app.logger.info(f"Movie {movie_id} removed from the watchlist.")
        return True

    # ---- Statistik / statistics ----

    def stats(self) -> dict:
        with self._reading("computing movie statistics"):
            counts = db.session.execute(select(
                func.count(Movie.id),
                func.count(case((Movie.status == 'watched', 1))),
                func.count(case((Movie.status == 'watchlist', 1))),
            )).one()
        result = {'total': counts[0], 'watched': counts[1], 'watchlist': counts[2]}
        if self.review_manager is not None:
            result['ratingStats'] = self.review_manager.rating_stats()
            result['topRated'] = self.review_manager.top_rated(5)
        return result
