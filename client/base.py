"""
client/base.py
HTTP-Grundlage der API-Clients auf Basis von requests.
HTTP foundation of the API clients, built on requests.
"""

import logging
import os
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000/api'
DEFAULT_TIMEOUT = 10  # Sekunden / seconds


class ApiError(Exception):
    """
    Fehler einer API-Anfrage mit der Meldung des Servers und dem HTTP-Status.
    Error of an API request with the server's message and the HTTP status.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_query(params: Optional[dict]) -> dict:
    """
    Entfernt None und leere Strings aus den Query-Parametern.
    Drops None and empty strings from the query parameters.
    """
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None and value != ''}


class ApiClient:
    """
    Gemeinsame Session, Basis-URL und Fehlerbehandlung für alle Services.
    Shared session, base URL and error handling for all services.
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = (base_url or os.getenv('MOVIE_API_URL', DEFAULT_BASE_URL)).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, method: str, endpoint: str, params: Optional[dict] = None, payload=None) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(
                method,
                url,
                params=build_query(params),
                json=payload,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"API request failed: {method} {url}: {e}")
            raise ApiError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = data.get('message') if isinstance(data, dict) else None
            logger.warning(f"API request {method} {url} returned {response.status_code}: {message}")
            raise ApiError(message or f"HTTP error! status: {response.status_code}", response.status_code)
        return data

    def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint: str, payload=None) -> dict:
        return self.request('POST', endpoint, payload=payload)

    def put(self, endpoint: str, payload=None) -> dict:
        return self.request('PUT', endpoint, payload=payload)

    def delete(self, endpoint: str) -> dict:
        return self.request('DELETE', endpoint)
