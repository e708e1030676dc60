"""
datamanager package
Dieses Paket enthält die Datenzugriffs-Manager des Movie Trackers.
This package contains the data access managers of the movie tracker.
"""

from .actor_manager import ActorManager
from .data_manager_interface import CatalogManagerInterface
from .errors import ConflictError, DataManagerError, ErrorKind, NotFoundError, ValidationError
from .genre_manager import GenreManager
from .movie_manager import MovieManager
from .review_manager import ReviewManager
from .tier_list_manager import TierListManager


class DataManager:
    """
    Bündelt die Manager hinter einem Objekt, wie es die API-Routen verwenden.
    Bundles the managers behind one object, as used by the API routes.
    """

    def __init__(self):
        self.reviews = ReviewManager()
        self.movies = MovieManager(review_manager=self.reviews)
        self.genres = GenreManager()
        self.actors = ActorManager()
        self.tier_lists = TierListManager()


__all__ = [
    'DataManager', 'CatalogManagerInterface', 'MovieManager', 'GenreManager', 'ActorManager',
    'ReviewManager', 'TierListManager', 'DataManagerError', 'ErrorKind', 'ValidationError',
    'NotFoundError', 'ConflictError',
]
