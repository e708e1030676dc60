import pytest

from client.tier_board import TIERS, Move, TierBoard


def _card(movie_id, title, position=None):
    card = {'id': movie_id, 'title': title}
    if position is not None:
        card['position'] = position
    return card


@pytest.fixture
def board():
    return TierBoard.from_payload({
        'tierMovies': {
            'S': [_card(2, 'Bravo', 1), _card(1, 'Alpha', 0)],
            'C': [_card(3, 'Charlie', 0)],
        },
        'unassignedMovies': [_card(4, 'Delta'), _card(5, 'Echo')],
    })


def _positions(board, tier):
    return [(card['id'], card['position']) for card in board.tiers[tier]]


def test_from_payload_sorts_by_position_and_fills_tiers(board):
    assert set(board.tiers) == set(TIERS)
    assert board.order('S') == [1, 2]
    assert board.tiers['F'] == []
    assert board.assigned_count == 3
    assert board.locate(3) == 'C'
    assert board.locate(4) is None


def test_drop_from_pool_adds_at_head(board):
    move = board.drop(4, 'C')
    assert move == Move('add', 4, 'C', 0)
    assert _positions(board, 'C') == [(4, 0), (3, 1)]
    assert [card['id'] for card in board.unassigned] == [5]


def test_drop_between_tiers_keeps_both_dense(board):
    move = board.drop(1, 'F')
    assert move == Move('move', 1, 'F', 0)
    assert _positions(board, 'S') == [(2, 0)]
    assert _positions(board, 'F') == [(1, 0)]
    assert board.assigned_count == 3


def test_drop_into_same_tier_is_a_no_op(board):
    before = board.copy()
    assert board.drop(2, 'S') is None
    assert board.tiers == before.tiers


def test_drop_rejects_unknown_tier_and_movie(board):
    with pytest.raises(ValueError):
        board.drop(4, 'Z')
    with pytest.raises(KeyError):
        board.drop(99, 'S')


def test_reorder_clamps_and_renumbers(board):
    board.drop(4, 'S')
    assert board.order('S') == [4, 1, 2]

    assert board.reorder('S', 4, 2) is True
    assert _positions(board, 'S') == [(1, 0), (2, 1), (4, 2)]

    assert board.reorder('S', 1, 10) is True
    assert board.order('S') == [2, 4, 1]
    assert board.reorder('S', 1, 2) is False


def test_remove_returns_card_to_sorted_pool(board):
    assert board.remove(1) is True
    assert _positions(board, 'S') == [(2, 0)]
    assert [card['title'] for card in board.unassigned] == ['Alpha', 'Delta', 'Echo']
    assert 'position' not in board.unassigned[0]
    assert board.remove(1) is False


def test_copy_is_independent(board):
    snapshot = board.copy()
    board.drop(5, 'A')
    board.reorder('S', 2, 0)
    assert snapshot.order('A') == []
    assert snapshot.order('S') == [1, 2]
    assert snapshot.tiers['S'][0]['position'] == 0
