"""
tier_list_manager.py
Tier-Listen: sechs Stufen (S, A, B, C, D, F) mit lückenlosen Positionen je Stufe.
Tier lists: six tiers (S, A, B, C, D, F) with dense positions per tier.

Jede Schreiboperation hält die Positionen einer Stufe bei 0..n-1 und läuft in einer Transaktion.
Every write keeps a tier's positions at 0..n-1 and runs in one transaction.
"""

from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from datamanager.base_manager import BaseManager
from datamanager.errors import ConflictError, NotFoundError, ValidationError
from models import TIERS, Movie, TierList, TierListMovie, db

INITIAL_TIER = 'C'


def _movie_card(movie: Movie) -> dict:
    return {
        'id': movie.id,
        'title': movie.title,
        'original_title': movie.original_title,
        'release_year': movie.release_year,
        'poster_url': movie.poster_url,
        'rating': movie.rating,
    }


class TierListManager(BaseManager):
    """
    TierListManager
    Verwaltet Tier-Listen und die Platzierung von Filmen darin.
    Manages tier lists and the placement of movies in them.
    """

    # ---- Hilfsfunktionen / helpers ----

    def _validate_tier(self, tier) -> str:
        if tier not in TIERS:
            raise ValidationError(f"Tier must be one of: {', '.join(TIERS)}.")
        return tier

    def _validate_position(self, value, field: str = 'position') -> int:
        if value is None or value == '':
            return 0
        position = self._to_int(value, field)
        if position < 0:
            raise ValidationError(f"{field} cannot be negative.")
        return position

    def _get_tier_list(self, tier_list_id: int) -> TierList:
        tier_list = db.session.get(TierList, tier_list_id)
        if tier_list is None:
            current_app.logger.warning(f"Tier list with ID {tier_list_id} not found.")
            raise NotFoundError("Tier list not found.")
        return tier_list

    def _get_entry(self, tier_list_id: int, movie_id: int) -> TierListMovie:
        self._get_tier_list(tier_list_id)
        entry = db.session.get(TierListMovie, (tier_list_id, movie_id))
        if entry is None:
            raise NotFoundError("Movie not found in this tier list.")
        return entry

    @staticmethod
    def _bucket(tier_list_id: int, tier: str) -> List[TierListMovie]:
        # Ältere Einträge mit gleicher Position nach added_at / equal positions fall back to added_at
        stmt = (select(TierListMovie)
                .where(TierListMovie.tier_list_id == tier_list_id, TierListMovie.tier == tier)
                .order_by(TierListMovie.position, TierListMovie.added_at, TierListMovie.movie_id))
        return list(db.session.scalars(stmt))

    @staticmethod
    def _renumber(entries: Iterable[TierListMovie]) -> None:
        for index, entry in enumerate(entries):
            entry.position = index

    @staticmethod
    def _insert(bucket: List[TierListMovie], entry: TierListMovie, position: int) -> None:
        bucket.insert(min(position, len(bucket)), entry)

    # ---- Listen / lists ----

    def get_all(self) -> List[dict]:
        """
        Alle Tier-Listen, neueste zuerst, mit Anzahl der Filme.
        All tier lists, newest first, with their movie count.
        """
        movie_count = func.count(TierListMovie.movie_id).label('movie_count')
        stmt = (select(TierList, movie_count)
                .outerjoin(TierListMovie, TierListMovie.tier_list_id == TierList.id)
                .group_by(TierList.id)
                .order_by(TierList.created_at.desc(), TierList.id.desc()))
        with self._reading("listing tier lists"):
            rows = db.session.execute(stmt).all()
        return [
            {'id': tier_list.id, 'name': tier_list.name,
             'created_at': tier_list.created_at.isoformat(), 'movie_count': count}
            for tier_list, count in rows
        ]

    def get_by_id(self, tier_list_id: int) -> Optional[dict]:
        """
        Tier-Liste mit Filmen je Stufe (nach Position) und nicht zugeordneten Filmen (nach Titel).
        Nicht zugeordnete Filme werden nur geliefert, wenn mindestens ein Film zugeordnet ist.

        Tier list with movies per tier (by position) and unassigned movies (by title).
        Unassigned movies are returned only when at least one movie is assigned.
        """
        with self._reading(f"fetching tier list {tier_list_id}"):
            tier_list = db.session.get(TierList, tier_list_id)
            if tier_list is None:
                return None
            stmt = (select(TierListMovie)
                    .options(joinedload(TierListMovie.movie))
                    .where(TierListMovie.tier_list_id == tier_list_id)
                    .order_by(TierListMovie.tier, TierListMovie.position,
                              TierListMovie.added_at, TierListMovie.movie_id))
            entries = db.session.scalars(stmt).all()

            tier_movies = {tier: [] for tier in TIERS}
            for entry in entries:
                card = _movie_card(entry.movie)
                card['position'] = entry.position
                tier_movies[entry.tier].append(card)

            unassigned = []
            if entries:
                assigned_ids = select(TierListMovie.movie_id).where(TierListMovie.tier_list_id == tier_list_id)
                unassigned_stmt = (select(Movie)
                                   .where(Movie.id.not_in(assigned_ids))
                                   .order_by(Movie.title.asc(), Movie.id.asc()))
                unassigned = [_movie_card(movie) for movie in db.session.scalars(unassigned_stmt)]

            return {
                'id': tier_list.id,
                'name': tier_list.name,
                'created_at': tier_list.created_at.isoformat(),
                'tierMovies': tier_movies,
                'unassignedMovies': unassigned,
            }

    def create(self, name, movie_ids=None) -> int:
        """
        Legt eine Tier-Liste an; übergebene Filme landen der Reihe nach in Stufe C.
        Creates a tier list; the given movies go into tier C in order.
        """
        name = self._clean_text(name, 'Tier list name')
        if movie_ids is None:
            movie_ids = []
        if not isinstance(movie_ids, list):
            raise ValidationError("movieIds must be a list.")
        ordered_ids = []
        for raw in movie_ids:
            movie_id = self._to_int(raw, 'movieIds')
            if movie_id not in ordered_ids:
                ordered_ids.append(movie_id)

        with self._transaction(f"creating tier list '{name}'"):
            if ordered_ids:
                found = set(db.session.scalars(select(Movie.id).where(Movie.id.in_(ordered_ids))))
                missing = [movie_id for movie_id in ordered_ids if movie_id not in found]
                if missing:
                    raise ValidationError(f"Movies not found: {', '.join(str(m) for m in missing)}.")
            tier_list = TierList(name=name)
            db.session.add(tier_list)
            for position, movie_id in enumerate(ordered_ids):
                tier_list.entries.append(TierListMovie(movie_id=movie_id, tier=INITIAL_TIER, position=position))
        current_app.logger.info(
            f"Tier list '{tier_list.name}' (ID: {tier_list.id}) created with {len(ordered_ids)} movies.")
        # Tier list created. / Tier-Liste angelegt.
        return tier_list.id

    def update(self, tier_list_id: int, name) -> bool:
        name = self._clean_text(name, 'Tier list name')
        with self._transaction(f"renaming tier list {tier_list_id}"):
            tier_list = self._get_tier_list(tier_list_id)
            tier_list.name = name
        current_app.logger.info(f"Tier list {tier_list_id} renamed to '{name}'.")
        return True

    def delete(self, tier_list_id: int) -> bool:
        with self._transaction(f"deleting tier list {tier_list_id}"):
            db.session.delete(self._get_tier_list(tier_list_id))
        current_app.logger.info(f"Tier list {tier_list_id} deleted with all its entries.")
        return True

    # ---- Platzierungen / placements ----

    def add_movie(self, tier_list_id: int, movie_id, tier, position=0) -> dict:
        """
        Fügt einen Film an der (begrenzten) Position in eine Stufe ein.
        Ein Film darf nur einmal pro Tier-Liste vorkommen.

        Inserts a movie into a tier at the (clamped) position.
        A movie may appear only once per tier list.
        """
        movie_id = self._to_int(movie_id, 'movieId')
        tier = self._validate_tier(tier)
        position = self._validate_position(position)
        with self._transaction(f"adding movie {movie_id} to tier list {tier_list_id}"):
            self._get_tier_list(tier_list_id)
            if db.session.get(Movie, movie_id) is None:
                raise NotFoundError("Movie not found.")
            if db.session.get(TierListMovie, (tier_list_id, movie_id)) is not None:
                raise ConflictError("Movie is already added to this tier list.")
            bucket = self._bucket(tier_list_id, tier)
            entry = TierListMovie(tier_list_id=tier_list_id, movie_id=movie_id, tier=tier)
            self._insert(bucket, entry, position)
            self._renumber(bucket)
            db.session.add(entry)
        current_app.logger.info(f"Movie {movie_id} added to tier {tier} of tier list {tier_list_id}.")
        return {'movieId': movie_id, 'tier': entry.tier, 'position': entry.position}

    def update_movie_position(self, tier_list_id: int, movie_id: int, tier, position) -> dict:
        """
        Verschiebt einen Film in eine (andere) Stufe an die begrenzte Position; beide Stufen bleiben lückenlos.
        Moves a movie into a (different) tier at the clamped position; both tiers stay dense.
        """
        if tier in (None, '') or position in (None, ''):
            raise ValidationError("tier and position are required.")
        tier = self._validate_tier(tier)
        position = self._validate_position(position)
        with self._transaction(f"moving movie {movie_id} in tier list {tier_list_id}"):
            entry = self._get_entry(tier_list_id, movie_id)
            source = [e for e in self._bucket(tier_list_id, entry.tier) if e is not entry]
            self._renumber(source)
            if tier == entry.tier:
                target = source
            else:
                target = [e for e in self._bucket(tier_list_id, tier) if e is not entry]
            entry.tier = tier
            self._insert(target, entry, position)
            self._renumber(target)
        current_app.logger.info(
            f"Movie {movie_id} moved to tier {tier}, position {entry.position}, in tier list {tier_list_id}.")
        return {'movieId': movie_id, 'tier': entry.tier, 'position': entry.position}

    def reorder_movie(self, tier_list_id: int, movie_id: int, new_index) -> List[int]:
        """
        Verschiebt einen Film innerhalb seiner Stufe und nummeriert die Stufe neu.
        Gibt die neue Reihenfolge der Film-IDs zurück.

        Moves a movie within its tier and renumbers the tier.
        Returns the new order of movie ids.
        """
        if new_index is None:
            raise ValidationError("index is required.")
        new_index = self._validate_position(new_index, 'index')
        with self._transaction(f"reordering movie {movie_id} in tier list {tier_list_id}"):
            entry = self._get_entry(tier_list_id, movie_id)
            bucket = [e for e in self._bucket(tier_list_id, entry.tier) if e is not entry]
            self._insert(bucket, entry, new_index)
            self._renumber(bucket)
            order = [e.movie_id for e in bucket]
        current_app.logger.info(f"Tier {entry.tier} of tier list {tier_list_id} reordered: {order}.")
        return order

    def remove_movie(self, tier_list_id: int, movie_id: int) -> bool:
        with self._transaction(f"removing movie {movie_id} from tier list {tier_list_id}"):
            entry = self._get_entry(tier_list_id, movie_id)
            tier = entry.tier
            db.session.delete(entry)
            db.session.flush()
            self._renumber(self._bucket(tier_list_id, tier))
        current_app.logger.info(f"Movie {movie_id} removed from tier list {tier_list_id}.")
        return True
