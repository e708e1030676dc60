"""
client/actor_service.py
Client für Schauspieler.
Client for actors.
"""

from typing import Optional

from client.base import ApiClient


class ActorService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_actors(self, params: Optional[dict] = None) -> dict:
        return self.client.get('/actors', params=params)

    def get_actor(self, actor_id: int) -> dict:
        return self.client.get(f'/actors/{actor_id}')

    def get_actor_movies(self, actor_id: int) -> dict:
        return self.client.get(f'/actors/{actor_id}/movies')

    def create_actor(self, actor_data: dict) -> dict:
        return self.client.post('/actors', actor_data)

    def update_actor(self, actor_id: int, actor_data: dict) -> dict:
        return self.client.put(f'/actors/{actor_id}', actor_data)

    def delete_actor(self, actor_id: int) -> dict:
        return self.client.delete(f'/actors/{actor_id}')

    def get_actor_stats(self) -> dict:
        return self.client.get('/actors/stats')

    def search_actors(self, query: str) -> dict:
        return self.client.get('/actors/search', params={'q': query})
