import pytest
import requests
from requests.adapters import BaseAdapter

from client import ApiClient, ApiError
from client.base import build_query


class UnreachableAdapter(BaseAdapter):

    def send(self, request, **kwargs):
        raise requests.exceptions.ConnectionError('connection refused')

    def close(self):
        pass


def test_build_query_drops_empty_values():
    assert build_query({'genre': '', 'status': None, 'minRating': 0, 'page': 2}) == {'minRating': 0, 'page': 2}
    assert build_query(None) == {}


def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv('MOVIE_API_URL', 'http://movies.local/api/')
    assert ApiClient().base_url == 'http://movies.local/api'
    monkeypatch.delenv('MOVIE_API_URL')
    assert ApiClient().base_url == 'http://localhost:5000/api'


def test_server_message_becomes_api_error(services):
    with pytest.raises(ApiError) as excinfo:
        services.movies.get_movie(999)
    assert excinfo.value.message == 'Movie not found'
    assert excinfo.value.status_code == 404


def test_network_failure_becomes_api_error():
    session = requests.Session()
    session.mount('http://offline', UnreachableAdapter())
    client = ApiClient(base_url='http://offline/api', session=session)
    with pytest.raises(ApiError) as excinfo:
        client.get('/health')
    assert excinfo.value.status_code is None
    assert 'connection refused' in excinfo.value.message


def test_movie_and_review_round_trip(services):
    created = services.movies.create_movie({
        'title': 'Brazil', 'release_year': 1985, 'genres': [{'name': 'Satire'}],
        'actors': [{'name': 'Jonathan Pryce', 'is_lead': True}],
    })['data']
    assert created['genres'][0]['name'] == 'Satire'

    services.movies.create_review(created['id'], {
        'reviewer_name': 'Паша', 'rating': 9, 'review_text': 'Bureaucracy at its finest.'})
    services.movies.create_review(created['id'], {
        'reviewer_name': 'Цеха', 'rating': 8, 'review_text': 'Strange and wonderful.'})

    assert services.movies.get_movie(created['id'])['data']['rating'] == 8.5
    assert services.movies.get_rating_stats(created['id'])['data']['total_reviews'] == 2
    by_reviewer = services.movies.get_reviews_by_reviewer('Паша')
    assert [r['movie_id'] for r in by_reviewer['data']] == [created['id']]
    assert services.movies.get_top_rated_movies(5)['data'][0]['id'] == created['id']

    filtered = services.movies.get_movies({'genre': 'Satire', 'status': '', 'minRating': None})
    assert filtered['pagination']['total'] == 1

    found = services.movies.search_movies('pryce', {'page': 1, 'limit': 5})
    assert found['searchQuery'] == 'pryce'
    assert found['pagination']['limit'] == 5

    services.movies.update_movie(created['id'], {'director': 'Terry Gilliam'})
    assert services.movies.get_movie(created['id'])['data']['director'] == 'Terry Gilliam'
    services.movies.delete_movie(created['id'])
    assert services.movies.get_movies()['data'] == []


def test_duplicate_review_message(services):
    movie_id = services.movies.create_movie({'title': 'Heat', 'release_year': 1995})['data']['id']
    review = {'reviewer_name': 'Цеха', 'rating': 7, 'review_text': 'Great shootout scene.'}
    services.movies.create_review(movie_id, review)
    with pytest.raises(ApiError) as excinfo:
        services.movies.create_review(movie_id, review)
    assert excinfo.value.status_code == 400
    assert 'already exists' in excinfo.value.message


def test_watchlist_service(services):
    movie_id = services.movies.create_movie({'title': 'Perfect Days', 'release_year': 2023})['data']['id']
    services.movies.add_to_watchlist(movie_id, 'high', 'cinema')
    watchlist = services.movies.get_watchlist()['data']
    assert [(m['id'], m['priority']) for m in watchlist] == [(movie_id, 'high')]
    services.movies.remove_from_watchlist(movie_id)
    assert services.movies.get_watchlist()['data'] == []


def test_genre_and_actor_services(services):
    genre = services.genres.create_genre({'name': 'Giallo'})['data']
    services.genres.update_genre(genre['id'], {'description': 'Italian thrillers'})
    assert services.genres.search_genres('ital')['data'][0]['id'] == genre['id']
    assert services.genres.get_genre_stats()['data'][0]['movie_count'] == 0
    services.genres.delete_genre(genre['id'])
    assert services.genres.get_genres()['data'] == []

    actor = services.actors.create_actor({'name': 'Toshiro Mifune'})['data']
    services.movies.create_movie({'title': 'Yojimbo', 'release_year': 1961, 'actors': [actor['id']]})
    assert [m['title'] for m in services.actors.get_actor_movies(actor['id'])['data']] == ['Yojimbo']
    assert services.actors.search_actors('mifune')['data'][0]['id'] == actor['id']
    assert services.actors.get_actors({'search': 'toshiro'})['pagination']['total'] == 1
    with pytest.raises(ApiError) as excinfo:
        services.actors.delete_actor(actor['id'])
    assert excinfo.value.status_code == 400


def test_tier_list_service(services):
    movie_ids = [services.movies.create_movie({'title': title, 'release_year': 2000})['data']['id']
                 for title in ('One', 'Two', 'Three')]
    tier_list = services.tier_lists.create_tier_list('Trilogy', movie_ids)['data']
    tier_list_id = tier_list['id']
    assert [m['id'] for m in tier_list['tierMovies']['C']] == movie_ids

    services.tier_lists.update_movie_position(tier_list_id, movie_ids[2], 'S', 0)
    order = services.tier_lists.reorder_movie(tier_list_id, movie_ids[0], 1)['data']['order']
    assert order == [movie_ids[1], movie_ids[0]]
    services.tier_lists.remove_movie_from_tier(tier_list_id, movie_ids[1])

    detail = services.tier_lists.get_tier_list_by_id(tier_list_id)['data']
    assert [m['id'] for m in detail['tierMovies']['S']] == [movie_ids[2]]
    assert [m['id'] for m in detail['tierMovies']['C']] == [movie_ids[0]]
    assert [m['id'] for m in detail['unassignedMovies']] == [movie_ids[1]]

    services.tier_lists.update_tier_list(tier_list_id, 'Renamed')
    assert services.tier_lists.get_all_tier_lists()['data'][0]['name'] == 'Renamed'
    services.tier_lists.delete_tier_list(tier_list_id)
    with pytest.raises(ApiError):
        services.tier_lists.get_tier_list_by_id(tier_list_id)


def test_health_check(services):
    assert services.movies.health_check()['message'] == 'API is running'
