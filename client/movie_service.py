"""
client/movie_service.py
Client für Filme, Watchlist und Rezensionen.
Client for movies, the watchlist and reviews.
"""

from typing import Optional
from urllib.parse import quote

from client.base import ApiClient


class MovieService:

    def __init__(self, client: ApiClient):
        self.client = client

    # Filme / movies

    def get_movies(self, filters: Optional[dict] = None) -> dict:
        return self.client.get('/movies', params=filters)

    def get_movie(self, movie_id: int) -> dict:
        return self.client.get(f'/movies/{movie_id}')

    def create_movie(self, movie_data: dict) -> dict:
        return self.client.post('/movies', movie_data)

    def update_movie(self, movie_id: int, movie_data: dict) -> dict:
        return self.client.put(f'/movies/{movie_id}', movie_data)

    def delete_movie(self, movie_id: int) -> dict:
        return self.client.delete(f'/movies/{movie_id}')

    def search_movies(self, query: str, pagination: Optional[dict] = None) -> dict:
        """
        Suche über /movies/search; pagination darf page, limit und status enthalten.
        Search via /movies/search; pagination may carry page, limit and status.
        """
        params = {'q': query}
        params.update(pagination or {})
        return self.client.get('/movies/search', params=params)

    def get_movie_stats(self) -> dict:
        return self.client.get('/movies/stats')

    # Watchlist

    def get_watchlist(self) -> dict:
        return self.client.get('/movies/watchlist')

    def add_to_watchlist(self, movie_id: int, priority: str = 'medium', notes: str = '') -> dict:
        return self.client.post(f'/movies/{movie_id}/watchlist', {'priority': priority, 'notes': notes})

    def remove_from_watchlist(self, movie_id: int) -> dict:
        return self.client.delete(f'/movies/{movie_id}/watchlist')

    # Rezensionen / reviews

    def get_reviews(self, filters: Optional[dict] = None) -> dict:
        return self.client.get('/reviews', params=filters)

    def get_movie_reviews(self, movie_id: int) -> dict:
        return self.client.get(f'/reviews/movie/{movie_id}')

    def create_review(self, movie_id: int, review_data: dict) -> dict:
        return self.client.post(f'/reviews/movie/{movie_id}', review_data)

    def update_review(self, review_id: int, review_data: dict) -> dict:
        return self.client.put(f'/reviews/{review_id}', review_data)

    def delete_review(self, review_id: int) -> dict:
        return self.client.delete(f'/reviews/{review_id}')

    def get_rating_stats(self, movie_id: Optional[int] = None) -> dict:
        return self.client.get('/reviews/stats', params={'movieId': movie_id})

    def get_top_rated_movies(self, limit: int = 10) -> dict:
        return self.client.get('/reviews/top-rated', params={'limit': limit})

    def get_reviews_by_reviewer(self, reviewer_name: str, options: Optional[dict] = None) -> dict:
        return self.client.get(f'/reviews/reviewer/{quote(reviewer_name)}', params=options)

    def get_filtered_reviews(self, filters: Optional[dict] = None) -> dict:
        return self.client.get('/reviews/filtered', params=filters)

    def health_check(self) -> dict:
        return self.client.get('/health')
