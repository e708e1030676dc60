"""
client/views.py
Seitenzustände (View-Models): Filmliste, Watchlist, Tier-Listen und der Tier-Listen-Editor.
Page state (view models): movie list, watchlist, tier lists and the tier list editor.

Services und Notifier werden über den Konstruktor übergeben.
Services and the notifier are passed in through the constructor.
"""

import logging
import time
from enum import Enum
from typing import Optional

from client.base import ApiError
from client.debounce import DEFAULT_DELAY, Debouncer
from client.tier_board import TierBoard

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


class PaginatedListView:
    """
    Basis für Listen mit Filtern, Seite, Lade- und Fehlerzustand.
    Filteränderungen setzen die Seite auf 1 zurück.

    Base for lists with filters, page, loading and error state.
    Filter changes reset the page to 1.
    """

    default_filters: dict = {}
    page_size = 12

    def __init__(self, notifier=None):
        self.notifier = notifier
        self.filters = dict(self.default_filters)
        self.page = 1
        self.items = []
        self.pagination = None
        self.loading = False
        self.error = None

    def fetch(self) -> dict:
        raise NotImplementedError

    def load(self) -> None:
        if self.loading:
            return
        self.loading = True
        self.error = None
        try:
            response = self.fetch()
            self.items = response.get('data') or []
            self.pagination = response.get('pagination')
        except ApiError as e:
            self.error = e.message
            if self.notifier is not None:
                self.notifier.error(e.message)
        finally:
            self.loading = False

    def set_filter(self, key: str, value) -> None:
        self.filters[key] = value
        self.page = 1
        self.load()

    def set_filters(self, **filters) -> None:
        self.filters.update(filters)
        self.page = 1
        self.load()

    def reset_filters(self) -> None:
        self.filters = dict(self.default_filters)
        self.page = 1
        self.load()

    def set_page(self, page: int) -> None:
        self.page = page
        self.load()


class MovieListView(PaginatedListView):
    """
    Filmliste mit Filtern und entprellter Suche.
    Movie list with filters and debounced search.
    """

    default_filters = {
        'genre': '',
        'minRating': 0,
        'maxRating': 10,
        'status': '',
        'sortBy': 'created_at',
        'sortOrder': 'DESC',
    }

    def __init__(self, movie_service, notifier=None, search_delay: float = DEFAULT_DELAY, clock=time.monotonic):
        super().__init__(notifier)
        self.movie_service = movie_service
        self.search_query = ''
        self.search_debouncer = Debouncer(self.run_search, search_delay, clock)

    def fetch(self) -> dict:
        if len(self.search_query) >= MIN_SEARCH_LENGTH:
            return self.movie_service.search_movies(self.search_query, {'page': self.page, 'limit': self.page_size})
        params = dict(self.filters)
        params.update({'page': self.page, 'limit': self.page_size})
        return self.movie_service.get_movies(params)

    def type_search(self, text: str) -> None:
        self.search_debouncer(text)

    def run_search(self, text: str) -> None:
        """
        Zu kurze Suchbegriffe leeren die Suche und laden die gefilterte Liste.
        Queries that are too short clear the search and reload the filtered list.
        """
        query = (text or '').strip()
        self.search_query = query if len(query) >= MIN_SEARCH_LENGTH else ''
        self.page = 1
        self.load()


class WatchlistView:
    """
    Watchlist mit Suche nur in Filmen mit Status 'watchlist'.
    Watchlist with search restricted to movies in status 'watchlist'.
    """

    def __init__(self, movie_service, notifier=None):
        self.movie_service = movie_service
        self.notifier = notifier
        self.items = []
        self.loading = False
        self.error = None

    def _report(self, error: ApiError) -> None:
        self.error = error.message
        if self.notifier is not None:
            self.notifier.error(error.message)

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.items = self.movie_service.get_watchlist().get('data') or []
        except ApiError as e:
            self._report(e)
        finally:
            self.loading = False

    def search(self, text: str) -> None:
        query = (text or '').strip()
        if len(query) < MIN_SEARCH_LENGTH:
            self.load()
            return
        try:
            response = self.movie_service.search_movies(query, {'status': 'watchlist'})
            self.items = response.get('data') or []
        except ApiError as e:
            self._report(e)

    def add(self, movie_id: int, priority: str = 'medium', notes: str = '') -> bool:
        try:
            self.movie_service.add_to_watchlist(movie_id, priority, notes)
        except ApiError as e:
            self._report(e)
            return False
        if self.notifier is not None:
            self.notifier.success('Movie added to watchlist')
        self.load()
        return True

    def remove(self, movie_id: int) -> bool:
        try:
            self.movie_service.remove_from_watchlist(movie_id)
        except ApiError as e:
            self._report(e)
            return False
        if self.notifier is not None:
            self.notifier.success('Movie removed from watchlist')
        self.load()
        return True


class TierListsView:

    def __init__(self, tier_list_service, notifier=None):
        self.tier_list_service = tier_list_service
        self.notifier = notifier
        self.items = []
        self.error = None

    def load(self) -> None:
        try:
            self.items = self.tier_list_service.get_all_tier_lists().get('data') or []
            self.error = None
        except ApiError as e:
            self.error = e.message
            if self.notifier is not None:
                self.notifier.error(e.message)

    def _run(self, action, success_message: str):
        try:
            result = action()
        except ApiError as e:
            if self.notifier is not None:
                self.notifier.error(e.message)
            return None
        if self.notifier is not None:
            self.notifier.success(success_message)
        self.load()
        return result

    def create(self, name: str, movie_ids=None) -> Optional[dict]:
        response = self._run(lambda: self.tier_list_service.create_tier_list(name, movie_ids), 'Tier list created')
        return response.get('data') if response else None

    def rename(self, tier_list_id: int, name: str) -> bool:
        return self._run(lambda: self.tier_list_service.update_tier_list(tier_list_id, name),
                         'Tier list renamed') is not None

    def delete(self, tier_list_id: int) -> bool:
        return self._run(lambda: self.tier_list_service.delete_tier_list(tier_list_id),
                         'Tier list deleted') is not None


class EditorState(Enum):
    CLEAN = 'clean'
    OPTIMISTIC = 'optimistic'
    CONFIRMED = 'confirmed'
    REVERTING = 'reverting'


class TierListEditor:
    """
    Editor einer Tier-Liste mit optimistischen Änderungen.
    Jede Änderung wird zuerst lokal angewendet und dann an den Server geschickt;
    schlägt der Aufruf fehl, wird der Stand vom Server neu geladen.

    Editor of one tier list with optimistic changes.
    Every change is applied locally first and then sent to the server;
    when the call fails, the server state is fetched again.

    States: CLEAN -> OPTIMISTIC -> CONFIRMED | REVERTING -> CLEAN
    """

    def __init__(self, tier_list_service, notifier, tier_list_id: int):
        self.tier_list_service = tier_list_service
        self.notifier = notifier
        self.tier_list_id = tier_list_id
        self.name = None
        self.board = TierBoard()
        self.state = EditorState.CLEAN
        self.history = []
        self.error = None

    def _set_state(self, state: EditorState) -> None:
        self.state = state
        self.history.append(state)

    def load(self) -> bool:
        try:
            response = self.tier_list_service.get_tier_list_by_id(self.tier_list_id)
        except ApiError as e:
            self.error = e.message
            self.notifier.error(f"Failed to load tier list: {e.message}")
            return False
        payload = response.get('data') or {}
        self.name = payload.get('name')
        self.board = TierBoard.from_payload(payload)
        self.error = None
        return True

    def _commit(self, remote_call, success_message: str) -> bool:
        # Lokale Änderung ist bereits angewendet / local change is already applied
        self._set_state(EditorState.OPTIMISTIC)
        try:
            remote_call()
        except ApiError as e:
            self._set_state(EditorState.REVERTING)
            logger.warning(f"Tier list {self.tier_list_id}: change rejected ({e.message}), reloading.")
            self.notifier.error(e.message)
            self.load()
            self._set_state(EditorState.CLEAN)
            return False
        self._set_state(EditorState.CONFIRMED)
        self.notifier.success(success_message)
        self._set_state(EditorState.CLEAN)
        return True

    def drop(self, movie_id: int, tier: str) -> bool:
        """
        Drop auf die Zone einer Stufe: Film an Position 0; dieselbe Stufe ist ein No-op.
        Drop onto a tier zone: movie goes to position 0; the same tier is a no-op.
        """
        try:
            move = self.board.drop(movie_id, tier)
        except (KeyError, ValueError):
            self.notifier.error("Movie is not available in this tier list")
            return False
        if move is None:
            return False
        service = self.tier_list_service
        remote = service.add_movie_to_tier if move.kind == 'add' else service.update_movie_position
        return self._commit(lambda: remote(self.tier_list_id, movie_id, tier, move.position), 'Movie moved')

    def addable(self, movies) -> list:
        """
        Filme aus dem Katalog, die noch in keiner Stufe stehen.
        Catalog movies that are not placed in any tier yet.
        """
        return [movie for movie in movies if self.board.locate(movie['id']) is None]

    def add_movies(self, movie_ids) -> bool:
        """
        Fügt die ausgewählten Filme nacheinander an den Anfang von Stufe C ein und lädt danach neu.
        Funktioniert auch bei leeren Listen, deren Pool noch leer ist.

        Adds the selected movies one by one at the head of tier C, then reloads.
        Also works for empty lists whose pool is still empty.
        """
        if not movie_ids:
            self.notifier.error("Select at least one movie")
            return False
        try:
            for movie_id in movie_ids:
                self.tier_list_service.add_movie_to_tier(self.tier_list_id, movie_id, 'C', 0)
        except ApiError as e:
            logger.warning(f"Tier list {self.tier_list_id}: adding movies failed ({e.message}).")
            self.notifier.error(f"Failed to add movies: {e.message}")
            self.load()
            return False
        self.notifier.success(f"{len(movie_ids)} movies added to tier list")
        return self.load()

    def drop_on_insert_zone(self, movie_id: int, tier: str) -> bool:
        """
        Einfügezone am Anfang einer Stufe: innerhalb der Stufe an Index 0, sonst wie drop().
        Insert zone at the head of a tier: index 0 within the tier, otherwise like drop().
        """
        if self.board.locate(movie_id) == tier:
            return self.reorder(tier, movie_id, 0)
        return self.drop(movie_id, tier)

    def drop_on_movie(self, movie_id: int, tier: str, target_movie_id: int) -> bool:
        """
        Drop auf eine Filmkarte: gleiche Stufe und anderer Film -> an dessen Index.
        Drop onto a movie card: same tier and a different movie -> to that movie's index.
        """
        source = self.board.locate(movie_id)
        if source != tier:
            return self.drop(movie_id, tier)
        if movie_id == target_movie_id:
            return False
        return self.reorder(tier, movie_id, self.board.index_of(tier, target_movie_id))

    def reorder(self, tier: str, movie_id: int, new_index: int) -> bool:
        if not self.board.reorder(tier, movie_id, new_index):
            return False
        index = self.board.index_of(tier, movie_id)
        return self._commit(lambda: self.tier_list_service.reorder_movie(self.tier_list_id, movie_id, index),
                            'Movie order changed')

    def remove(self, movie_id: int) -> bool:
        if not self.board.remove(movie_id):
            return False
        return self._commit(lambda: self.tier_list_service.remove_movie_from_tier(self.tier_list_id, movie_id),
                            'Movie removed from tier list')
