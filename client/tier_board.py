"""
client/tier_board.py
Lokaler Zustand des Tier-Listen-Editors: Stufen, Filmkarten und nicht zugeordnete Filme.
Local state of the tier list editor: tiers, movie cards and unassigned movies.

Alle Änderungen halten die Positionen jeder Stufe bei 0..n-1, wie der Server.
Every change keeps each tier's positions at 0..n-1, like the server does.
"""

import copy
from typing import Dict, List, NamedTuple, Optional

TIERS = ('S', 'A', 'B', 'C', 'D', 'F')


class Move(NamedTuple):
    """Ergebnis eines Drops / outcome of a drop: 'add' from the pool, 'move' from another tier."""
    kind: str
    movie_id: int
    tier: str
    position: int


def _renumber(cards: List[dict]) -> None:
    for index, card in enumerate(cards):
        card['position'] = index


class TierBoard:

    def __init__(self, tiers: Optional[Dict[str, List[dict]]] = None, unassigned: Optional[List[dict]] = None):
        self.tiers = {tier: list((tiers or {}).get(tier, [])) for tier in TIERS}
        self.unassigned = list(unassigned or [])

    @classmethod
    def from_payload(cls, payload: dict) -> 'TierBoard':
        """
        Baut das Board aus der Antwort von GET /tier-lists/<id>.
        Builds the board from the response of GET /tier-lists/<id>.
        """
        tiers = {}
        for tier in TIERS:
            cards = [dict(card) for card in (payload.get('tierMovies') or {}).get(tier, [])]
            cards.sort(key=lambda card: card.get('position', 0))
            tiers[tier] = cards
        unassigned = [dict(card) for card in payload.get('unassignedMovies') or []]
        return cls(tiers, unassigned)

    def copy(self) -> 'TierBoard':
        return TierBoard(copy.deepcopy(self.tiers), copy.deepcopy(self.unassigned))

    def locate(self, movie_id: int) -> Optional[str]:
        """
        Stufe des Films, oder None wenn er nicht zugeordnet ist.
        Tier of the movie, or None when it is unassigned.
        """
        for tier, cards in self.tiers.items():
            if any(card['id'] == movie_id for card in cards):
                return tier
        return None

    def order(self, tier: str) -> List[int]:
        return [card['id'] for card in self.tiers[tier]]

    def index_of(self, tier: str, movie_id: int) -> int:
        return self.order(tier).index(movie_id)

    @property
    def assigned_count(self) -> int:
        return sum(len(cards) for cards in self.tiers.values())

    def _take(self, movie_id: int) -> Optional[dict]:
        tier = self.locate(movie_id)
        if tier is not None:
            cards = self.tiers[tier]
            card = cards.pop(self.index_of(tier, movie_id))
            _renumber(cards)
            return card
        for index, card in enumerate(self.unassigned):
            if card['id'] == movie_id:
                return self.unassigned.pop(index)
        return None

    def drop(self, movie_id: int, tier: str) -> Optional[Move]:
        """
        Legt einen Film an den Anfang einer anderen Stufe. Drop in dieselbe Stufe ändert nichts.
        Puts a movie at the head of another tier. A drop into the same tier changes nothing.
        """
        if tier not in TIERS:
            raise ValueError(f"Unknown tier: {tier}")
        source = self.locate(movie_id)
        if source == tier:
            return None
        card = self._take(movie_id)
        if card is None:
            raise KeyError(movie_id)
        self.tiers[tier].insert(0, card)
        _renumber(self.tiers[tier])
        return Move('add' if source is None else 'move', movie_id, tier, 0)

    def reorder(self, tier: str, movie_id: int, new_index: int) -> bool:
        """
        Verschiebt einen Film innerhalb seiner Stufe (herausnehmen, einfügen, neu nummerieren).
        Moves a movie within its tier (splice out, reinsert, renumber).
        """
        cards = self.tiers[tier]
        old_index = self.index_of(tier, movie_id)
        new_index = max(0, min(new_index, len(cards) - 1))
        if old_index == new_index:
            return False
        cards.insert(new_index, cards.pop(old_index))
        _renumber(cards)
        return True

    def remove(self, movie_id: int) -> bool:
        """
        Nimmt einen Film aus seiner Stufe und legt ihn zurück zu den nicht zugeordneten Filmen.
        Takes a movie out of its tier and puts it back with the unassigned movies.
        """
        if self.locate(movie_id) is None:
            return False
        card = self._take(movie_id)
        card.pop('position', None)
        self.unassigned.append(card)
        self.unassigned.sort(key=lambda item: (item.get('title') or '', item['id']))
        return True
