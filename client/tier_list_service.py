"""
client/tier_list_service.py
Client für Tier-Listen.
Client for tier lists.
"""

from typing import List, Optional

from client.base import ApiClient


class TierListService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_all_tier_lists(self) -> dict:
        return self.client.get('/tier-lists')

    def get_tier_list_by_id(self, tier_list_id: int) -> dict:
        return self.client.get(f'/tier-lists/{tier_list_id}')

    def create_tier_list(self, name: str, movie_ids: Optional[List[int]] = None) -> dict:
        return self.client.post('/tier-lists', {'name': name, 'movieIds': movie_ids or []})

    def update_tier_list(self, tier_list_id: int, name: str) -> dict:
        return self.client.put(f'/tier-lists/{tier_list_id}', {'name': name})

    def delete_tier_list(self, tier_list_id: int) -> dict:
        return self.client.delete(f'/tier-lists/{tier_list_id}')

    def add_movie_to_tier(self, tier_list_id: int, movie_id: int, tier: str, position: int = 0) -> dict:
        return self.client.post(f'/tier-lists/{tier_list_id}/movies',
                                {'movieId': movie_id, 'tier': tier, 'position': position})

    def update_movie_position(self, tier_list_id: int, movie_id: int, tier: str, position: int) -> dict:
        return self.client.put(f'/tier-lists/{tier_list_id}/movies/{movie_id}',
                               {'tier': tier, 'position': position})

    def reorder_movie(self, tier_list_id: int, movie_id: int, index: int) -> dict:
        """
        Verschiebt einen Film innerhalb seiner Stufe mit einem einzigen Aufruf.
        Moves a movie within its tier with a single call.
        """
        return self.client.put(f'/tier-lists/{tier_list_id}/movies/{movie_id}/order', {'index': index})

    def remove_movie_from_tier(self, tier_list_id: int, movie_id: int) -> dict:
        return self.client.delete(f'/tier-lists/{tier_list_id}/movies/{movie_id}')
