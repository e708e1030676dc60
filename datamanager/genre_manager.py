"""
genre_manager.py
Datenzugriff für Genres.
Data access for genres.
"""

from typing import List, Optional

from flask import current_app
from sqlalchemy import func, or_, select

from datamanager.base_manager import BaseManager
from datamanager.data_manager_interface import CatalogManagerInterface
from datamanager.errors import ConflictError, NotFoundError, ValidationError
from models import Genre, Movie, db, movie_genres, utcnow

MIN_NAME_LENGTH = 2


class GenreManager(BaseManager, CatalogManagerInterface):
    """
    GenreManager
    Genres mit eindeutigem Namen; Löschen nur ohne verknüpfte Filme.
    Genres with unique names; deletion only without linked movies.
    """

    def _get_genre(self, genre_id: int) -> Genre:
        genre = db.session.get(Genre, genre_id)
        if genre is None:
            current_app.logger.warning(f"Genre with ID {genre_id} not found.")
            raise NotFoundError("Genre not found.")
        return genre

    @staticmethod
    def _name_taken(name: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(Genre.id).where(func.lower(Genre.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Genre.id != exclude_id)
        return db.session.scalar(stmt) is not None

    def list(self, filters: Optional[dict] = None, page: int = 1, limit: Optional[int] = None) -> dict:
        """
        Alle Genres nach Name; ohne limit ungeteilt auf einer Seite.
        All genres by name; without a limit on a single page.
        """
        stmt = select(Genre).order_by(Genre.name.asc())
        with self._reading("listing genres"):
            if limit is None:
                genres = [genre.to_dict() for genre in db.session.scalars(stmt)]
                return {'items': genres, 'total': len(genres), 'page': 1,
                        'limit': len(genres), 'totalPages': 1 if genres else 0}
            return self._paginate(stmt, page, limit, Genre.to_dict)

    def get_by_id(self, genre_id: int) -> Optional[dict]:
        with self._reading(f"fetching genre {genre_id}"):
            genre = db.session.get(Genre, genre_id)
            return genre.to_dict() if genre else None

    def create(self, data: dict) -> int:
        name = self._clean_text(data.get('name'), 'Genre name', MIN_NAME_LENGTH)
        with self._transaction(f"creating genre '{name}'"):
            if self._name_taken(name):
                raise ConflictError("A genre with this name already exists.")
            genre = Genre(name=name, description=self._optional_text(data.get('description')))
            db.session.add(genre)
        current_app.logger.info(f"Genre '{genre.name}' (ID: {genre.id}) created.")
        return genre.id

    def update(self, genre_id: int, data: dict) -> bool:
        """
        Teilaktualisierung; mindestens name oder description muss übergeben werden.
        Partial update; at least name or description must be given.
        """
        if 'name' not in data and 'description' not in data:
            raise ValidationError("Nothing to update: provide name or description.")
        with self._transaction(f"updating genre {genre_id}"):
            genre = self._get_genre(genre_id)
            if 'name' in data:
                name = self._clean_text(data.get('name'), 'Genre name', MIN_NAME_LENGTH)
                if name != genre.name and self._name_taken(name, exclude_id=genre_id):
                    raise ConflictError("A genre with this name already exists.")
                genre.name = name
            if 'description' in data:
                genre.description = self._optional_text(data.get('description'))
            genre.updated_at = utcnow()
        current_app.logger.info(f"Genre {genre_id} updated.")
        return True

    def delete(self, genre_id: int) -> bool:
        with self._transaction(f"deleting genre {genre_id}"):
            genre = self._get_genre(genre_id)
            linked = db.session.scalar(
                select(func.count()).select_from(movie_genres).where(movie_genres.c.genre_id == genre_id))
            if linked:
                current_app.logger.warning(f"Refused to delete genre {genre_id}: used by {linked} movies.")
                # Genre still in use. / Genre wird noch verwendet.
                raise ValidationError(f"Cannot delete genre: it is used by {linked} movie(s).")
            db.session.delete(genre)
        current_app.logger.info(f"Genre {genre_id} deleted.")
        return True

    def search(self, query: str, **options) -> List[dict]:
        pattern = self._search_pattern(query)
        stmt = (select(Genre)
                .where(or_(Genre.name.ilike(pattern), Genre.description.ilike(pattern)))
                .order_by(Genre.name.asc()))
        with self._reading("searching genres"):
            return [genre.to_dict() for genre in db.session.scalars(stmt)]

    def stats(self) -> List[dict]:
        """
        Anzahl der Filme und Durchschnittsbewertung je Genre.
        Movie count and average rating per genre.
        """
        movie_count = func.count(movie_genres.c.movie_id).label('movie_count')
        avg_rating = func.avg(Movie.rating).label('avg_rating')
        stmt = (select(Genre.id, Genre.name, movie_count, avg_rating)
                .outerjoin(movie_genres, movie_genres.c.genre_id == Genre.id)
                .outerjoin(Movie, Movie.id == movie_genres.c.movie_id)
                .group_by(Genre.id, Genre.name)
                .order_by(movie_count.desc(), avg_rating.desc(), Genre.name.asc()))
        with self._reading("computing genre statistics"):
            rows = db.session.execute(stmt).all()
        return [
            {
                'id': row.id,
                'name': row.name,
                'movie_count': row.movie_count,
                'avg_rating': round(float(row.avg_rating), 1) if row.avg_rating is not None else None,
            }
            for row in rows
        ]
