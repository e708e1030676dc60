"""
data_manager_interface.py
Definiert das gemeinsame Interface der Katalog-Manager (Filme, Genres, Schauspieler).
Defines the common interface of the catalog managers (movies, genres, actors).
"""

from abc import ABC, abstractmethod
from typing import Optional


class CatalogManagerInterface(ABC):
    """
    CatalogManagerInterface
    Abstraktes Interface für Katalog-Datenzugriff.
    Abstract interface for catalog data access.

    Fehler werden als DataManagerError (siehe errors.py) geworfen.
    Errors are raised as DataManagerError (see errors.py).
    """

    @abstractmethod
    def list(self, filters: Optional[dict] = None, page: int = 1, limit: Optional[int] = None) -> dict:
        """
        Liefert eine Seite von Einträgen: {items, total, page, limit, totalPages}.
        Returns one page of items: {items, total, page, limit, totalPages}.
        """
        pass

    @abstractmethod
    def get_by_id(self, item_id: int) -> Optional[dict]:
        """
        Liefert einen Eintrag oder None.
        Returns one item or None.
        """
        pass

    @abstractmethod
    def create(self, data: dict) -> int:
        """
        Legt einen Eintrag an und gibt die neue ID zurück.
        Creates an item and returns the new id.
        """
        pass

    @abstractmethod
    def update(self, item_id: int, data: dict) -> bool:
        """
        Aktualisiert die übergebenen Felder eines Eintrags.
        Updates the given fields of an item.
        """
        pass

    @abstractmethod
    def delete(self, item_id: int) -> bool:
        """
        Löscht einen Eintrag.
        Deletes an item.
        """
        pass

    @abstractmethod
    def search(self, query: str, **options):
        """
        Textsuche (mindestens 2 Zeichen). Filme liefern eine Seite, Genres und Schauspieler eine Liste.
        Text search (at least 2 characters). Movies return one page, genres and actors a list.
        """
        pass
