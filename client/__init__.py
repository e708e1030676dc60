"""
client package
Python-Clients für die Movie-Tracker-API und der Zustand der Oberfläche.
Python clients for the movie tracker API and the UI state.
"""

from .actor_service import ActorService
from .base import ApiClient, ApiError
from .genre_service import GenreService
from .movie_service import MovieService
from .notifications import Notifier
from .tier_list_service import TierListService


class Services:
    """
    Einmal erzeugte Services mit gemeinsamer Session.
    Services created once, sharing one session.
    """

    def __init__(self, client: ApiClient = None):
        self.client = client or ApiClient()
        self.movies = MovieService(self.client)
        self.genres = GenreService(self.client)
        self.actors = ActorService(self.client)
        self.tier_lists = TierListService(self.client)


__all__ = ['ApiClient', 'ApiError', 'Services', 'MovieService', 'GenreService', 'ActorService',
           'TierListService', 'Notifier']
