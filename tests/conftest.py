"""
Gemeinsame Fixtures: App mit In-Memory-SQLite, Flask-Testclient und requests-Session auf den Testclient.
Shared fixtures: app with in-memory SQLite, Flask test client and a requests session routed to it.
"""

from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from app import create_app
from client import ApiClient, Notifier, Services
from models import db

TEST_BASE_URL = 'http://testserver/api'


class FlaskTestAdapter(BaseAdapter):
    """Leitet requests-Aufrufe an den Flask-Testclient weiter / routes requests calls into the Flask test client."""

    def __init__(self, flask_client):
        super().__init__()
        self.flask_client = flask_client

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        headers = {key: value for key, value in request.headers.items()
                   if key.lower() not in ('content-length', 'content-type')}
        result = self.flask_client.open(
            parts.path,
            method=request.method,
            query_string=parts.query,
            data=request.body,
            content_type=request.headers.get('Content-Type'),
            headers=headers,
        )
        response = requests.Response()
        response.status_code = result.status_code
        response._content = result.get_data()
        response.headers = CaseInsensitiveDict(result.headers)
        response.url = request.url
        response.request = request
        response.reason = result.status
        response.encoding = 'utf-8'
        return response

    def close(self):
        pass


@pytest.fixture
def app():
    app = create_app({'TESTING': True, 'SQLALCHEMY_DATABASE_URI': 'sqlite://'})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(client):
    session = requests.Session()
    session.mount('http://testserver', FlaskTestAdapter(client))
    return Services(ApiClient(base_url=TEST_BASE_URL, session=session))


class FakeClock:

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier(clock):
    return Notifier(clock=clock)


@pytest.fixture
def make_movie(client):
    """
    Legt Filme über die API an und gibt die neue ID zurück.
    Creates movies through the API and returns the new id.
    """
    def _make_movie(title, release_year=2000, **fields):
        payload = {'title': title, 'release_year': release_year}
        payload.update(fields)
        response = client.post('/api/movies', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']['id']
    return _make_movie


@pytest.fixture
def make_review(client):
    def _make_review(movie_id, reviewer_name, rating, text='A long enough review text.'):
        response = client.post(f'/api/reviews/movie/{movie_id}',
                               json={'reviewer_name': reviewer_name, 'rating': rating, 'review_text': text})
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']['id']
    return _make_review
