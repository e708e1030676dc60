"""
client/genre_service.py
Client für Genres.
Client for genres.
"""

from client.base import ApiClient


class GenreService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_genres(self) -> dict:
        return self.client.get('/genres')

    def get_genre(self, genre_id: int) -> dict:
        return self.client.get(f'/genres/{genre_id}')

    def create_genre(self, genre_data: dict) -> dict:
        return self.client.post('/genres', genre_data)

    def update_genre(self, genre_id: int, genre_data: dict) -> dict:
        return self.client.put(f'/genres/{genre_id}', genre_data)

    def delete_genre(self, genre_id: int) -> dict:
        return self.client.delete(f'/genres/{genre_id}')

    def get_genre_stats(self) -> dict:
        return self.client.get('/genres/stats')

    def search_genres(self, query: str) -> dict:
        return self.client.get('/genres/search', params={'q': query})
