from datetime import datetime

from models import Genre, Movie, Review, TierListMovie, WatchlistEntry, db


def test_create_movie_returns_detail(client):
    response = client.post('/api/movies', json={
        'title': '  Stalker ',
        'original_title': 'Сталкер',
        'release_year': 1979,
        'duration': 161,
        'genres': [{'name': 'Drama'}, 'Sci-Fi'],
        'actors': [
            {'name': 'Nikolai Grinko', 'role_name': 'Professor'},
            {'name': 'Alexander Kaidanovsky', 'role_name': 'Stalker', 'is_lead': True},
        ],
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    movie = body['data']
    assert movie['title'] == 'Stalker'
    assert movie['status'] == 'watched'
    assert movie['rating'] is None
    assert [g['name'] for g in movie['genres']] == ['Drama', 'Sci-Fi']
    # Hauptrollen zuerst / leads first
    assert [a['name'] for a in movie['actors']] == ['Alexander Kaidanovsky', 'Nikolai Grinko']
    assert movie['actors'][0]['role_name'] == 'Stalker'
    assert movie['actors'][0]['is_lead'] is True


def test_release_year_bounds(client):
    for year in (1700, 3000, 1887):
        response = client.post('/api/movies', json={'title': 'Too early or late', 'release_year': year})
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    next_year = datetime.now().year + 1
    assert client.post('/api/movies', json={'title': 'Upcoming', 'release_year': next_year}).status_code == 201
    assert client.post('/api/movies', json={'title': 'First', 'release_year': 1888}).status_code == 201


def test_title_and_year_are_required(client):
    assert client.post('/api/movies', json={'release_year': 2000}).status_code == 400
    assert client.post('/api/movies', json={'title': '   ', 'release_year': 2000}).status_code == 400
    assert client.post('/api/movies', json={'title': 'No year'}).status_code == 400
    assert client.post('/api/movies', json={'title': 'Bad status', 'release_year': 2000,
                                            'status': 'maybe'}).status_code == 400


def test_name_references_reuse_existing_rows(client, make_movie):
    make_movie('Heat', 1995, genres=[{'name': 'Crime'}])
    make_movie('Ronin', 1998, genres=[{'name': 'crime'}, {'name': 'Thriller'}])
    assert Genre.query.count() == 2

    genre_id = Genre.query.filter_by(name='Thriller').one().id
    movie_id = make_movie('Collateral', 2004, genres=[genre_id, str(genre_id)])
    detail = client.get(f'/api/movies/{movie_id}').get_json()['data']
    assert [g['name'] for g in detail['genres']] == ['Thriller']


def test_unknown_reference_rolls_back_the_whole_create(client):
    response = client.post('/api/movies', json={
        'title': 'Ghost', 'release_year': 2001, 'genres': [{'name': 'Horror'}, 999],
    })
    assert response.status_code == 400
    assert Movie.query.count() == 0
    assert Genre.query.count() == 0


def test_create_in_watchlist_status_creates_entry(client, make_movie):
    movie_id = make_movie('Dune: Part Three', 2026, status='watchlist')
    assert db.session.get(Movie, movie_id).status == 'watchlist'
    assert WatchlistEntry.query.filter_by(movie_id=movie_id).count() == 1


def test_get_missing_movie_is_404(client):
    response = client.get('/api/movies/12345')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'message': 'Movie not found'}


def test_partial_update_keeps_links_unless_given(client, make_movie):
    movie_id = make_movie('Alien', 1979, genres=[{'name': 'Horror'}], actors=[{'name': 'Sigourney Weaver'}])

    response = client.put(f'/api/movies/{movie_id}', json={'director': 'Ridley Scott'})
    assert response.status_code == 200
    movie = response.get_json()['data']
    assert movie['director'] == 'Ridley Scott'
    assert [g['name'] for g in movie['genres']] == ['Horror']
    assert [a['name'] for a in movie['actors']] == ['Sigourney Weaver']

    movie = client.put(f'/api/movies/{movie_id}', json={
        'genres': [{'name': 'Sci-Fi'}],
        'actors': [{'name': 'Sigourney Weaver', 'role_name': 'Ripley', 'is_lead': True}],
    }).get_json()['data']
    assert [g['name'] for g in movie['genres']] == ['Sci-Fi']
    assert movie['actors'][0]['role_name'] == 'Ripley'


def test_update_validates_and_reports_missing(client, make_movie):
    movie_id = make_movie('Solaris', 1972)
    assert client.put(f'/api/movies/{movie_id}', json={'release_year': 1700}).status_code == 400
    assert client.put(f'/api/movies/{movie_id}', json={'title': ''}).status_code == 400
    assert client.put('/api/movies/999', json={'title': 'x'}).status_code == 404
    assert db.session.get(Movie, movie_id).release_year == 1972


def test_list_pagination_arithmetic(client, make_movie):
    for i in range(5):
        make_movie(f'Movie {i}', 2000 + i)

    body = client.get('/api/movies?limit=2').get_json()
    assert body['pagination'] == {'page': 1, 'limit': 2, 'total': 5, 'totalPages': 3}
    assert len(body['data']) == 2

    last_page = client.get('/api/movies?limit=2&page=3').get_json()
    assert len(last_page['data']) == 1
    beyond = client.get('/api/movies?limit=2&page=9').get_json()
    assert beyond['data'] == []
    assert beyond['pagination']['total'] == 5


def test_list_defaults_to_newest_first_and_whitelists_sort(client, make_movie):
    make_movie('Bravo', 1990)
    make_movie('Alpha', 1980)
    make_movie('Charlie', 2010)

    titles = [m['title'] for m in client.get('/api/movies').get_json()['data']]
    assert titles == ['Charlie', 'Alpha', 'Bravo']

    by_title = client.get('/api/movies?sortBy=title&sortOrder=asc').get_json()['data']
    assert [m['title'] for m in by_title] == ['Alpha', 'Bravo', 'Charlie']

    injected = client.get('/api/movies?sortBy=title;DROP TABLE movies&sortOrder=sideways')
    assert injected.status_code == 200
    assert [m['title'] for m in injected.get_json()['data']] == titles


def test_list_filters(client, make_movie, make_review):
    drama = make_movie('Drama One', 2001, genres=[{'name': 'Drama'}], actors=[{'name': 'Tom Hardy'}])
    make_movie('Comedy One', 2002, genres=[{'name': 'Comedy'}])
    make_movie('Wishlist', 2003, status='watchlist')
    make_review(drama, 'Цеха', 9)

    by_genre = client.get('/api/movies?genre=Drama').get_json()['data']
    assert [m['title'] for m in by_genre] == ['Drama One']
    assert by_genre[0]['genres'] == ['Drama']
    assert by_genre[0]['actors'] == ['Tom Hardy']

    by_actor = client.get('/api/movies?search=hardy').get_json()['data']
    assert [m['title'] for m in by_actor] == ['Drama One']

    by_status = client.get('/api/movies?status=watchlist').get_json()['data']
    assert [m['title'] for m in by_status] == ['Wishlist']

    rated = client.get('/api/movies?minRating=8').get_json()['data']
    assert [m['title'] for m in rated] == ['Drama One']
    # minRating=0 und maxRating=10 filtern nicht / 0 and 10 do not filter
    assert client.get('/api/movies?minRating=0&maxRating=10').get_json()['pagination']['total'] == 3


def test_search_requires_two_characters(client, make_movie):
    make_movie('Arrival', 2016)
    assert client.get('/api/movies/search?q=a').status_code == 400
    assert client.get('/api/movies/search?q=%20%20a%20').status_code == 400
    assert client.get('/api/movies/search').status_code == 400

    body = client.get('/api/movies/search?q=arr').get_json()
    assert body['searchQuery'] == 'arr'
    assert [m['title'] for m in body['data']] == ['Arrival']
    assert body['pagination']['limit'] == 20


def test_watchlist_round_trip(client, make_movie):
    low = make_movie('Low priority', 2000)
    high = make_movie('High priority', 2001)
    medium = make_movie('Medium priority', 2002)

    assert client.post(f'/api/movies/{low}/watchlist', json={'priority': 'low'}).status_code == 200
    assert client.post(f'/api/movies/{high}/watchlist', json={'priority': 'high', 'notes': 'soon'}).status_code == 200
    assert client.post(f'/api/movies/{medium}/watchlist', json={}).status_code == 200
    assert db.session.get(Movie, high).status == 'watchlist'

    watchlist = client.get('/api/movies/watchlist').get_json()['data']
    assert [m['id'] for m in watchlist] == [high, medium, low]
    assert watchlist[0]['notes'] == 'soon'

    # Upsert ändert die Priorität / upsert changes the priority
    client.post(f'/api/movies/{low}/watchlist', json={'priority': 'high'})
    assert WatchlistEntry.query.filter_by(movie_id=low).one().priority == 'high'

    assert client.delete(f'/api/movies/{high}/watchlist').status_code == 200
    assert db.session.get(Movie, high).status == 'watched'
    assert WatchlistEntry.query.filter_by(movie_id=high).count() == 0


def test_watchlist_validation(client, make_movie):
    movie_id = make_movie('Whatever', 2000)
    assert client.post(f'/api/movies/{movie_id}/watchlist', json={'priority': 'urgent'}).status_code == 400
    assert client.post('/api/movies/999/watchlist', json={}).status_code == 404
    assert client.delete('/api/movies/999/watchlist').status_code == 404


def test_delete_movie_cascades(client, make_movie, make_review):
    movie_id = make_movie('Doomed', 2000, genres=[{'name': 'Drama'}], status='watchlist')
    make_review(movie_id, 'Паша', 5)
    tier_list = client.post('/api/tier-lists', json={'name': 'Best', 'movieIds': [movie_id]}).get_json()['data']

    response = client.delete(f'/api/movies/{movie_id}')
    assert response.status_code == 200
    assert db.session.get(Movie, movie_id) is None
    assert Review.query.count() == 0
    assert WatchlistEntry.query.count() == 0
    assert TierListMovie.query.filter_by(tier_list_id=tier_list['id']).count() == 0
    # Genres bleiben / genres stay
    assert Genre.query.count() == 1
    assert client.delete(f'/api/movies/{movie_id}').status_code == 404


def test_stats_and_with_reviews(client, make_movie, make_review):
    first = make_movie('First', 2000)
    second = make_movie('Second', 2001, status='watchlist')
    make_review(first, 'Цеха', 8)
    make_review(first, 'Паша', 6)

    stats = client.get('/api/movies/stats').get_json()['data']
    assert stats['total'] == 2
    assert stats['watched'] == 1
    assert stats['watchlist'] == 1
    assert stats['ratingStats']['total_reviews'] == 2
    assert [m['id'] for m in stats['topRated']] == [first]

    with_reviews = client.get('/api/movies/with-reviews').get_json()['data']
    by_id = {m['id']: m for m in with_reviews}
    assert len(by_id[first]['reviews']) == 2
    assert by_id[second]['reviews'] == []


def test_unmatched_route_uses_envelope(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'message': 'Route not found'}

    response = client.patch('/api/movies')
    assert response.status_code == 405
    assert response.get_json()['success'] is False


def test_health(client):
    body = client.get('/api/health').get_json()
    assert body['success'] is True
    assert 'timestamp' in body


def test_malformed_references_and_years_are_rejected(client):
    for genres in (['²'], [{'id': '²'}], [{'id': '--1'}]):
        response = client.post('/api/movies', json={'title': 'Broken', 'release_year': 2000, 'genres': genres})
        assert response.status_code == 400, genres
    assert client.post('/api/movies', json={'title': 'Broken', 'release_year': '²'}).status_code == 400
    assert client.post('/api/movies', json={'title': 'Broken', 'release_year': '--2000'}).status_code == 400
    assert Movie.query.count() == 0
    assert Genre.query.count() == 0
