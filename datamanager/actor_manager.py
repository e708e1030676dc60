"""
actor_manager.py
Datenzugriff für Schauspieler.
Data access for actors.
"""

from datetime import date
from typing import List, Optional

from flask import current_app
from sqlalchemy import case, func, or_, select

from datamanager.base_manager import BaseManager
from datamanager.data_manager_interface import CatalogManagerInterface
from datamanager.errors import ConflictError, NotFoundError, ValidationError
from models import Actor, Movie, MovieActor, db, utcnow

DEFAULT_PAGE_SIZE = 50
MIN_NAME_LENGTH = 2
SORT_FIELDS = ('name', 'birth_date', 'created_at')
TEXT_FIELDS = ('biography', 'photo_url')


class ActorManager(BaseManager, CatalogManagerInterface):
    """
    ActorManager
    Schauspieler mit eindeutigem Namen; Löschen nur ohne verknüpfte Filme.
    Actors with unique names; deletion only without linked movies.
    """

    def _get_actor(self, actor_id: int) -> Actor:
        actor = db.session.get(Actor, actor_id)
        if actor is None:
            current_app.logger.warning(f"Actor with ID {actor_id} not found.")
            raise NotFoundError("Actor not found.")
        return actor

    @staticmethod
    def _name_taken(name: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(Actor.id).where(func.lower(Actor.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Actor.id != exclude_id)
        return db.session.scalar(stmt) is not None

    @staticmethod
    def _parse_birth_date(value) -> Optional[date]:
        """
        ISO-Datum (YYYY-MM-DD), nicht in der Zukunft.
        ISO date (YYYY-MM-DD), not in the future.
        """
        if value in (None, ''):
            return None
        try:
            birth_date = date.fromisoformat(str(value)[:10])
        except ValueError as e:
            raise ValidationError("birth_date must be an ISO date (YYYY-MM-DD).") from e
        if birth_date > date.today():
            raise ValidationError("birth_date cannot be in the future.")
        return birth_date

    def list(self, filters: Optional[dict] = None, page: int = 1, limit: Optional[int] = None) -> dict:
        """
        Seite von Schauspielern mit optionaler Suche und Sortierung (Standard: Name aufsteigend).
        Page of actors with optional search and sorting (default: name ascending).
        """
        filters = filters or {}
        stmt = select(Actor)
        search = (filters.get('search') or '').strip()
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Actor.name.ilike(pattern), Actor.biography.ilike(pattern)))
        sort_by = filters.get('sortBy')
        column = getattr(Actor, sort_by if sort_by in SORT_FIELDS else 'name')
        if str(filters.get('sortOrder') or 'ASC').upper() == 'DESC':
            stmt = stmt.order_by(column.desc(), Actor.id.desc())
        else:
            stmt = stmt.order_by(column.asc(), Actor.id.asc())
        with self._reading("listing actors"):
            return self._paginate(stmt, page, limit or DEFAULT_PAGE_SIZE, Actor.to_dict)

    def get_by_id(self, actor_id: int) -> Optional[dict]:
        with self._reading(f"fetching actor {actor_id}"):
            actor = db.session.get(Actor, actor_id)
            return actor.to_dict() if actor else None

    def create(self, data: dict) -> int:
        name = self._clean_text(data.get('name'), 'Actor name', MIN_NAME_LENGTH)
        birth_date = self._parse_birth_date(data.get('birth_date'))
        with self._transaction(f"creating actor '{name}'"):
            if self._name_taken(name):
                raise ConflictError("An actor with this name already exists.")
            actor = Actor(name=name, birth_date=birth_date)
            for field in TEXT_FIELDS:
                setattr(actor, field, self._optional_text(data.get(field)))
            db.session.add(actor)
        current_app.logger.info(f"Actor '{actor.name}' (ID: {actor.id}) created.")
        return actor.id

    def update(self, actor_id: int, data: dict) -> bool:
        if not any(key in data for key in ('name', 'birth_date') + TEXT_FIELDS):
            raise ValidationError("Nothing to update.")
        with self._transaction(f"updating actor {actor_id}"):
            actor = self._get_actor(actor_id)
            if 'name' in data:
                name = self._clean_text(data.get('name'), 'Actor name', MIN_NAME_LENGTH)
                if name != actor.name and self._name_taken(name, exclude_id=actor_id):
                    raise ConflictError("An actor with this name already exists.")
                actor.name = name
            if 'birth_date' in data:
                actor.birth_date = self._parse_birth_date(data.get('birth_date'))
            for field in TEXT_FIELDS:
                if field in data:
                    setattr(actor, field, self._optional_text(data.get(field)))
            actor.updated_at = utcnow()
        current_app.logger.info(f"Actor {actor_id} updated.")
        return True

    def delete(self, actor_id: int) -> bool:
        with self._transaction(f"deleting actor {actor_id}"):
            actor = self._get_actor(actor_id)
            linked = db.session.scalar(
                select(func.count()).select_from(MovieActor).where(MovieActor.actor_id == actor_id))
            if linked:
                current_app.logger.warning(f"Refused to delete actor {actor_id}: appears in {linked} movies.")
                # Actor still in use. / Schauspieler wird noch verwendet.
                raise ValidationError(f"Cannot delete actor: they appear in {linked} movie(s).")
            db.session.delete(actor)
        current_app.logger.info(f"Actor {actor_id} deleted.")
        return True

    def search(self, query: str, **options) -> List[dict]:
        pattern = self._search_pattern(query)
        stmt = (select(Actor)
                .where(or_(Actor.name.ilike(pattern), Actor.biography.ilike(pattern)))
                .order_by(Actor.name.asc()))
        with self._reading("searching actors"):
            return [actor.to_dict() for actor in db.session.scalars(stmt)]

    def get_movies(self, actor_id: int) -> List[dict]:
        """
        Filme eines Schauspielers mit Rolle, neueste zuerst.
        Movies of an actor with their role, newest first.
        """
        with self._reading(f"fetching movies of actor {actor_id}"):
            self._get_actor(actor_id)
            stmt = (select(Movie, MovieActor.role_name, MovieActor.is_lead)
                    .join(MovieActor, MovieActor.movie_id == Movie.id)
                    .where(MovieActor.actor_id == actor_id)
                    .order_by(Movie.release_year.desc(), Movie.title.asc()))
            result = []
            for movie, role_name, is_lead in db.session.execute(stmt):
                data = movie.to_dict()
                data['role_name'] = role_name
                data['is_lead'] = is_lead
                result.append(data)
            return result

    def stats(self) -> List[dict]:
        movie_count = func.count(MovieActor.movie_id).label('movie_count')
        avg_rating = func.avg(Movie.rating).label('avg_rating')
        lead_roles = func.count(case((MovieActor.is_lead.is_(True), 1))).label('lead_roles')
        stmt = (select(Actor.id, Actor.name, movie_count, avg_rating, lead_roles)
                .outerjoin(MovieActor, MovieActor.actor_id == Actor.id)
                .outerjoin(Movie, Movie.id == MovieActor.movie_id)
                .group_by(Actor.id, Actor.name)
                .order_by(movie_count.desc(), avg_rating.desc(), Actor.name.asc()))
        with self._reading("computing actor statistics"):
            rows = db.session.execute(stmt).all()
        return [
            {
                'id': row.id,
                'name': row.name,
                'movie_count': row.movie_count,
                'avg_rating': round(float(row.avg_rating), 1) if row.avg_rating is not None else None,
                'lead_roles': row.lead_roles,
            }
            for row in rows
        ]
