import pytest

from models import TIERS, TierList, TierListMovie


def _tier(client, tier_list_id, tier):
    data = client.get(f'/api/tier-lists/{tier_list_id}').get_json()['data']
    return [(m['id'], m['position']) for m in data['tierMovies'][tier]]


@pytest.fixture
def movies(make_movie):
    return [make_movie(title, 2000 + i) for i, title in enumerate(['Alpha', 'Bravo', 'Charlie', 'Delta'])]


def _create(client, name='Favourites', movie_ids=None):
    response = client.post('/api/tier-lists', json={'name': name, 'movieIds': movie_ids or []})
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']['id']


def test_empty_tier_list_has_no_unassigned_movies(client, movies):
    tier_list_id = _create(client)
    data = client.get(f'/api/tier-lists/{tier_list_id}').get_json()['data']
    assert set(data['tierMovies']) == set(TIERS)
    assert all(cards == [] for cards in data['tierMovies'].values())
    assert data['unassignedMovies'] == []


def test_unassigned_movies_once_something_is_placed(client, movies):
    alpha, bravo, charlie, delta = movies
    tier_list_id = _create(client)
    client.post(f'/api/tier-lists/{tier_list_id}/movies', json={'movieId': charlie, 'tier': 'S'})

    data = client.get(f'/api/tier-lists/{tier_list_id}').get_json()['data']
    assert [m['id'] for m in data['tierMovies']['S']] == [charlie]
    assert [m['title'] for m in data['unassignedMovies']] == ['Alpha', 'Bravo', 'Delta']


def test_create_places_initial_movies_in_c(client, movies):
    alpha, bravo, charlie, delta = movies
    tier_list_id = _create(client, movie_ids=[charlie, alpha, charlie, bravo])
    assert _tier(client, tier_list_id, 'C') == [(charlie, 0), (alpha, 1), (bravo, 2)]

    summary = client.get('/api/tier-lists').get_json()['data']
    assert summary[0]['movie_count'] == 3


def test_create_validation(client, movies):
    assert client.post('/api/tier-lists', json={'name': '   '}).status_code == 400
    assert client.post('/api/tier-lists', json={}).status_code == 400
    assert client.post('/api/tier-lists', json={'name': 'Bad', 'movieIds': [movies[0], 999]}).status_code == 400
    assert TierList.query.count() == 0


def test_lists_are_newest_first(client):
    first = _create(client, 'First')
    second = _create(client, 'Second')
    assert [t['id'] for t in client.get('/api/tier-lists').get_json()['data']] == [second, first]


def test_rename_and_delete(client, movies):
    tier_list_id = _create(client, movie_ids=movies[:2])
    assert client.put(f'/api/tier-lists/{tier_list_id}', json={'name': '  Renamed  '}).status_code == 200
    assert client.get(f'/api/tier-lists/{tier_list_id}').get_json()['data']['name'] == 'Renamed'
    assert client.put(f'/api/tier-lists/{tier_list_id}', json={'name': ''}).status_code == 400
    assert client.put('/api/tier-lists/999', json={'name': 'x'}).status_code == 404

    assert client.delete(f'/api/tier-lists/{tier_list_id}').status_code == 200
    assert TierListMovie.query.count() == 0
    assert client.get(f'/api/tier-lists/{tier_list_id}').status_code == 404
    assert client.delete(f'/api/tier-lists/{tier_list_id}').status_code == 404


def test_adding_a_movie_twice_is_rejected_across_tiers(client, movies):
    alpha = movies[0]
    tier_list_id = _create(client)
    url = f'/api/tier-lists/{tier_list_id}/movies'
    assert client.post(url, json={'movieId': alpha, 'tier': 'S', 'position': 0}).status_code == 200

    response = client.post(url, json={'movieId': alpha, 'tier': 'A', 'position': 0})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Movie is already added to this tier list.'
    assert TierListMovie.query.count() == 1


def test_add_validation(client, movies):
    tier_list_id = _create(client)
    url = f'/api/tier-lists/{tier_list_id}/movies'
    assert client.post(url, json={'movieId': movies[0], 'tier': 'Z'}).status_code == 400
    assert client.post(url, json={'movieId': movies[0], 'tier': 'S', 'position': -1}).status_code == 400
    assert client.post(url, json={'movieId': 999, 'tier': 'S'}).status_code == 404
    assert client.post('/api/tier-lists/999/movies', json={'movieId': movies[0], 'tier': 'S'}).status_code == 404


def test_add_inserts_at_clamped_position(client, movies):
    alpha, bravo, charlie, delta = movies
    tier_list_id = _create(client)
    url = f'/api/tier-lists/{tier_list_id}/movies'
    client.post(url, json={'movieId': alpha, 'tier': 'B', 'position': 0})
    client.post(url, json={'movieId': bravo, 'tier': 'B', 'position': 0})
    client.post(url, json={'movieId': charlie, 'tier': 'B', 'position': 50})
    client.post(url, json={'movieId': delta, 'tier': 'B', 'position': 1})
    assert _tier(client, tier_list_id, 'B') == [(bravo, 0), (delta, 1), (alpha, 2), (charlie, 3)]


def test_moving_between_tiers_conserves_movies(client, movies):
    alpha, bravo, charlie, delta = movies
    tier_list_id = _create(client, movie_ids=[alpha, bravo, charlie])

    response = client.put(f'/api/tier-lists/{tier_list_id}/movies/{bravo}', json={'tier': 'S', 'position': 0})
    assert response.status_code == 200
    assert response.get_json()['data'] == {'movieId': bravo, 'tier': 'S', 'position': 0}

    assert _tier(client, tier_list_id, 'S') == [(bravo, 0)]
    assert _tier(client, tier_list_id, 'C') == [(alpha, 0), (charlie, 1)]
    assert TierListMovie.query.filter_by(tier_list_id=tier_list_id).count() == 3

    client.put(f'/api/tier-lists/{tier_list_id}/movies/{charlie}', json={'tier': 'S', 'position': 0})
    assert _tier(client, tier_list_id, 'S') == [(charlie, 0), (bravo, 1)]
    assert _tier(client, tier_list_id, 'C') == [(alpha, 0)]

    assert client.put(f'/api/tier-lists/{tier_list_id}/movies/{delta}',
                      json={'tier': 'S', 'position': 0}).status_code == 404


def test_reorder_within_tier(client, movies):
    alpha, bravo, charlie, delta = movies
    tier_list_id = _create(client, movie_ids=[alpha, bravo, charlie])

    response = client.put(f'/api/tier-lists/{tier_list_id}/movies/{alpha}/order', json={'index': 2})
    assert response.status_code == 200
    assert response.get_json()['data']['order'] == [bravo, charlie, alpha]
    assert _tier(client, tier_list_id, 'C') == [(bravo, 0), (charlie, 1), (alpha, 2)]

    client.put(f'/api/tier-lists/{tier_list_id}/movies/{alpha}/order', json={'index': 0})
    assert _tier(client, tier_list_id, 'C') == [(alpha, 0), (bravo, 1), (charlie, 2)]

    assert client.put(f'/api/tier-lists/{tier_list_id}/movies/{alpha}/order', json={}).status_code == 400
    assert client.put(f'/api/tier-lists/{tier_list_id}/movies/{delta}/order', json={'index': 0}).status_code == 404


def test_same_tier_position_update_reorders(client, movies):
    alpha, bravo, charlie, _ = movies
    tier_list_id = _create(client, movie_ids=[alpha, bravo, charlie])
    client.put(f'/api/tier-lists/{tier_list_id}/movies/{charlie}', json={'tier': 'C', 'position': 0})
    assert _tier(client, tier_list_id, 'C') == [(charlie, 0), (alpha, 1), (bravo, 2)]


def test_remove_renumbers(client, movies):
    alpha, bravo, charlie, _ = movies
    tier_list_id = _create(client, movie_ids=[alpha, bravo, charlie])

    assert client.delete(f'/api/tier-lists/{tier_list_id}/movies/{alpha}').status_code == 200
    assert _tier(client, tier_list_id, 'C') == [(bravo, 0), (charlie, 1)]
    unassigned = client.get(f'/api/tier-lists/{tier_list_id}').get_json()['data']['unassignedMovies']
    assert [m['title'] for m in unassigned] == ['Alpha', 'Delta']

    assert client.delete(f'/api/tier-lists/{tier_list_id}/movies/{alpha}').status_code == 404


def test_malformed_numbers_are_rejected(client, movies):
    alpha, bravo = movies[:2]
    assert client.post('/api/tier-lists', json={'name': 'Bad', 'movieIds': ['²']}).status_code == 400
    assert client.post('/api/tier-lists', json={'name': 'Bad', 'movieIds': ['--1']}).status_code == 400

    tier_list_id = _create(client, movie_ids=[alpha])
    url = f'/api/tier-lists/{tier_list_id}/movies'
    assert client.post(url, json={'movieId': '²', 'tier': 'S'}).status_code == 400
    assert client.post(url, json={'movieId': bravo, 'tier': 'S', 'position': '--1'}).status_code == 400
    assert client.put(f'{url}/{alpha}', json={'tier': 'S', 'position': '²'}).status_code == 400
    assert client.put(f'{url}/{alpha}/order', json={'index': '²'}).status_code == 400
    assert _tier(client, tier_list_id, 'C') == [(alpha, 0)]


def test_moving_requires_tier_and_position(client, movies):
    alpha, bravo = movies[:2]
    tier_list_id = _create(client, movie_ids=[alpha, bravo])
    url = f'/api/tier-lists/{tier_list_id}/movies/{bravo}'

    response = client.put(url, json={'tier': 'S'})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'tier and position are required.'
    assert client.put(url, json={'position': 0}).status_code == 400
    assert client.put(url, json={}).status_code == 400
    assert _tier(client, tier_list_id, 'C') == [(alpha, 0), (bravo, 1)]

    assert client.put(url, json={'tier': 'S', 'position': 0}).status_code == 200
