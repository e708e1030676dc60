"""
review_manager.py
Rezensionen der beiden festen Rezensenten und Bewertungsstatistik.
Reviews by the two fixed reviewers and rating statistics.
"""

from typing import List, Optional

from flask import current_app
from sqlalchemy import case, func, select
from sqlalchemy.orm import joinedload

from datamanager.base_manager import BaseManager
from datamanager.errors import ConflictError, NotFoundError, ValidationError
from models import REVIEWERS, Movie, Review, db, utcnow

MIN_RATING = 1
MAX_RATING = 10
MIN_REVIEW_TEXT_LENGTH = 10
REVIEWER_SORT_FIELDS = ('review_date', 'rating', 'updated_at')


class ReviewManager(BaseManager):
    """
    ReviewManager
    Legt Rezensionen an, ändert und löscht sie und hält Movie.rating aktuell.
    Creates, updates and deletes reviews and keeps Movie.rating current.
    """

    @staticmethod
    def _with_movie(review: Review) -> dict:
        data = review.to_dict()
        data['title'] = review.movie.title
        data['poster_url'] = review.movie.poster_url
        data['release_year'] = review.movie.release_year
        return data

    def _validate_rating(self, value) -> int:
        if value is None or value == '':
            raise ValidationError("rating is required.")
        rating = self._to_int(value, 'rating')
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")
        return rating

    def _validate_text(self, value) -> str:
        return self._clean_text(value, 'review_text', MIN_REVIEW_TEXT_LENGTH)

    @staticmethod
    def _refresh_movie_rating(movie_id: int) -> None:
        """
        Berechnet die Durchschnittsbewertung eines Films neu (eine Nachkommastelle, None ohne Rezensionen).
        Recalculates a movie's average rating (one decimal, None without reviews).
        """
        db.session.flush()
        average = db.session.scalar(select(func.avg(Review.rating)).where(Review.movie_id == movie_id))
        movie = db.session.get(Movie, movie_id)
        if movie is not None:
            movie.rating = round(float(average), 1) if average is not None else None

    def _get_review(self, review_id: int) -> Review:
        review = db.session.get(Review, review_id)
        if review is None:
            current_app.logger.warning(f"Review with ID {review_id} not found.")
            raise NotFoundError("Review not found.")
        return review

    # ---- Schreiben / writes ----

    def create(self, movie_id: int, reviewer_name: str, rating, review_text) -> dict:
        """
        Legt eine Rezension an; pro Film und Rezensent ist nur eine erlaubt.
        Creates a review; only one per movie and reviewer is allowed.
        """
        if reviewer_name not in REVIEWERS:
            raise ValidationError(f"Reviewer must be one of: {', '.join(REVIEWERS)}.")
        rating = self._validate_rating(rating)
        text = self._validate_text(review_text)

        with self._transaction(f"creating a review for movie {movie_id}"):
            if db.session.get(Movie, movie_id) is None:
                raise NotFoundError("Movie not found.")
            existing = Review.query.filter_by(movie_id=movie_id, reviewer_name=reviewer_name).first()
            if existing:
                raise ConflictError("A review by this reviewer already exists for this movie.")
            review = Review(movie_id=movie_id, reviewer_name=reviewer_name, rating=rating, review_text=text)
            db.session.add(review)
            self._refresh_movie_rating(movie_id)
        current_app.logger.info(f"Review {review.id} by '{reviewer_name}' created for movie {movie_id}.")
        # Review created. / Rezension angelegt.
        return review.to_dict()

    def update(self, review_id: int, data: dict) -> dict:
        """
        Ändert Bewertung und/oder Text; Rezensent und Film bleiben unverändert.
        Changes rating and/or text; reviewer and movie stay unchanged.
        """
        if 'rating' not in data and 'review_text' not in data:
            raise ValidationError("Nothing to update: provide rating or review_text.")
        with self._transaction(f"updating review {review_id}"):
            review = self._get_review(review_id)
            if 'rating' in data:
                review.rating = self._validate_rating(data.get('rating'))
            if 'review_text' in data:
                review.review_text = self._validate_text(data.get('review_text'))
            review.updated_at = utcnow()
            self._refresh_movie_rating(review.movie_id)
        current_app.logger.info(f"Review {review_id} updated.")
        return review.to_dict()

    def delete(self, review_id: int) -> bool:
        with self._transaction(f"deleting review {review_id}"):
            review = self._get_review(review_id)
            movie_id = review.movie_id
            db.session.delete(review)
            self._refresh_movie_rating(movie_id)
        current_app.logger.info(f"Review {review_id} deleted.")
        return True

    # ---- Lesen / reads ----

    def get_by_id(self, review_id: int) -> Optional[dict]:
        with self._reading(f"fetching review {review_id}"):
            review = db.session.get(Review, review_id)
            return review.to_dict() if review else None

    def get_by_movie(self, movie_id: int) -> List[dict]:
        with self._reading(f"fetching reviews of movie {movie_id}"):
            if db.session.get(Movie, movie_id) is None:
                raise NotFoundError("Movie not found.")
            stmt = (select(Review).where(Review.movie_id == movie_id)
                    .order_by(Review.review_date.desc(), Review.id.desc()))
            return [review.to_dict() for review in db.session.scalars(stmt)]

    def get_all(self, page: int = 1, limit: int = 20) -> dict:
        stmt = (select(Review).options(joinedload(Review.movie))
                .order_by(Review.review_date.desc(), Review.id.desc()))
        with self._reading("listing reviews"):
            return self._paginate(stmt, page, limit, self._with_movie)

    def get_filtered(self, min_rating: Optional[int] = None, max_rating: Optional[int] = None,
                     reviewer: Optional[str] = None, movie_id: Optional[int] = None,
                     page: int = 1, limit: int = 20) -> dict:
        """
        Rezensionen gefiltert nach Bewertungsbereich, Rezensent und Film.
        Reviews filtered by rating range, reviewer and movie.
        """
        stmt = select(Review).options(joinedload(Review.movie))
        if min_rating is not None and min_rating > 0:
            stmt = stmt.where(Review.rating >= min_rating)
        if max_rating is not None and max_rating < 10:
            stmt = stmt.where(Review.rating <= max_rating)
        if reviewer:
            stmt = stmt.where(Review.reviewer_name == reviewer)
        if movie_id:
            stmt = stmt.where(Review.movie_id == movie_id)
        stmt = stmt.order_by(Review.review_date.desc(), Review.id.desc())
        with self._reading("filtering reviews"):
            return self._paginate(stmt, page, limit, self._with_movie)

    def get_by_reviewer(self, reviewer_name: str, page: int = 1, limit: int = 10,
                        sort_by: str = 'review_date', sort_order: str = 'DESC') -> dict:
        if reviewer_name not in REVIEWERS:
            raise ValidationError(f"Reviewer must be one of: {', '.join(REVIEWERS)}.")
        column = getattr(Review, sort_by if sort_by in REVIEWER_SORT_FIELDS else 'review_date')
        ordering = column.asc() if str(sort_order).upper() == 'ASC' else column.desc()
        stmt = (select(Review).options(joinedload(Review.movie))
                .where(Review.reviewer_name == reviewer_name)
                .order_by(ordering, Review.id.desc()))
        with self._reading(f"fetching reviews by '{reviewer_name}'"):
            return self._paginate(stmt, page, limit, self._with_movie)

    def rating_stats(self, movie_id: Optional[int] = None) -> dict:
        """
        Anzahl, Durchschnitt, Minimum, Maximum und Verteilung der Bewertungen.
        Count, average, minimum, maximum and distribution of ratings.

        Buckets: excellent >= 8, good 6-7, average 4-5, poor < 4.
        """
        stmt = select(
            func.count(Review.id),
            func.avg(Review.rating),
            func.min(Review.rating),
            func.max(Review.rating),
            func.count(case((Review.rating >= 8, 1))),
            func.count(case(((Review.rating >= 6) & (Review.rating < 8), 1))),
            func.count(case(((Review.rating >= 4) & (Review.rating < 6), 1))),
            func.count(case((Review.rating < 4, 1))),
        )
        if movie_id:
            stmt = stmt.where(Review.movie_id == movie_id)
        with self._reading("computing rating statistics"):
            row = db.session.execute(stmt).one()
        total, average, minimum, maximum, excellent, good, average_count, poor = row
        return {
            'total_reviews': total,
            'average_rating': round(float(average or 0), 1),
            'min_rating': minimum,
            'max_rating': maximum,
            'excellent_reviews': excellent,
            'good_reviews': good,
            'average_reviews': average_count,
            'poor_reviews': poor,
        }

    def top_rated(self, limit: int = 10) -> List[dict]:
        """
        Gesehene Filme mit mindestens zwei Rezensionen, nach Durchschnitt absteigend.
        Watched movies with at least two reviews, by average rating descending.
        """
        avg_rating = func.avg(Review.rating).label('avg_rating')
        review_count = func.count(Review.id).label('review_count')
        stmt = (select(Movie, avg_rating, review_count)
                .join(Review, Review.movie_id == Movie.id)
                .where(Movie.status == 'watched')
                .group_by(Movie.id)
                .having(func.count(Review.id) >= 2)
                .order_by(avg_rating.desc(), review_count.desc(), Movie.id.asc())
                .limit(limit))
        with self._reading("fetching top rated movies"):
            rows = db.session.execute(stmt).all()
        result = []
        for movie, average, count in rows:
            data = movie.to_dict()
            data['avg_rating'] = round(float(average), 1)
            data['review_count'] = count
            result.append(data)
        return result
