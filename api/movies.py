"""
api/movies.py
API-Routen für Filme und die Watchlist.
API routes for movies and the watchlist.
"""

from flask import current_app, request

from api import api, data_manager
from api.helpers import (failure, float_arg, handle_api_error, json_body, page_args, paginated,
                         success)
from datamanager.movie_manager import DEFAULT_PAGE_SIZE, SEARCH_PAGE_SIZE


def _movie_filters() -> dict:
    return {
        'genre': request.args.get('genre'),
        'minRating': float_arg('minRating'),
        'maxRating': float_arg('maxRating'),
        'search': request.args.get('search'),
        'status': request.args.get('status'),
        'sortBy': request.args.get('sortBy'),
        'sortOrder': request.args.get('sortOrder'),
    }


@api.route('/movies', methods=['GET'])
@handle_api_error
def get_movies():
    """
    Gibt eine gefilterte, sortierte und paginierte Filmliste zurück.
    Returns a filtered, sorted and paginated list of movies.

    Query:
        genre, minRating, maxRating, search, status, sortBy, sortOrder, page, limit
    """
    page, limit = page_args(DEFAULT_PAGE_SIZE)
    result = data_manager.movies.list(_movie_filters(), page, limit)
    current_app.logger.info(f"Returned {len(result['items'])} of {result['total']} movies (page {page}).")
    return paginated(result)


@api.route('/movies/with-reviews', methods=['GET'])
@handle_api_error
def get_movies_with_reviews():
    page, limit = page_args(DEFAULT_PAGE_SIZE)
    return paginated(data_manager.movies.list_with_reviews(_movie_filters(), page, limit))


@api.route('/movies/search', methods=['GET'])
@handle_api_error
def search_movies():
    """
    Sucht Filme; q muss mindestens 2 Zeichen lang sein.
    Searches movies; q must be at least 2 characters long.
    """
    query = (request.args.get('q') or '').strip()
    page, limit = page_args(SEARCH_PAGE_SIZE)
    result = data_manager.movies.search(query, page, limit, status=request.args.get('status'))
    return paginated(result, searchQuery=query)


@api.route('/movies/stats', methods=['GET'])
@handle_api_error
def get_movie_stats():
    return success(data_manager.movies.stats())


@api.route('/movies/watchlist', methods=['GET'])
@handle_api_error
def get_watchlist():
    """
    Gibt die Watchlist nach Priorität sortiert zurück.
    Returns the watchlist ordered by priority.
    """
    return success(data_manager.movies.get_watchlist())


@api.route('/movies/<int:movie_id>', methods=['GET'])
@handle_api_error
def get_movie(movie_id):
    """
    Gibt einen Film mit Genres, Schauspielern und Rezensionen zurück.
    Returns a movie with its genres, actors and reviews.
    """
    movie = data_manager.movies.get_by_id(movie_id)
    if not movie:
        return failure('Movie not found', 404)
    return success(movie)


@api.route('/movies', methods=['POST'])
@handle_api_error
def create_movie():
    movie_id = data_manager.movies.create(json_body())
    return success(data_manager.movies.get_by_id(movie_id), message='Movie created successfully', status=201)


@api.route('/movies/<int:movie_id>', methods=['PUT'])
@handle_api_error
def update_movie(movie_id):
    data_manager.movies.update(movie_id, json_body())
    return success(data_manager.movies.get_by_id(movie_id), message='Movie updated successfully')


@api.route('/movies/<int:movie_id>', methods=['DELETE'])
@handle_api_error
def delete_movie(movie_id):
    data_manager.movies.delete(movie_id)
    return success(message='Movie deleted successfully')


@api.route('/movies/<int:movie_id>/watchlist', methods=['POST'])
@handle_api_error
def add_to_watchlist(movie_id):
    """
    Setzt einen Film auf die Watchlist (Body: priority, notes).
    Puts a movie on the watchlist (body: priority, notes).
    """
    body = json_body()
    entry = data_manager.movies.add_to_watchlist(movie_id, body.get('priority') or 'medium', body.get('notes') or '')
    return success(entry, message='Movie added to watchlist')


@api.route('/movies/<int:movie_id>/watchlist', methods=['DELETE'])
@handle_api_error
def remove_from_watchlist(movie_id):
    data_manager.movies.remove_from_watchlist(movie_id)
    return success(message='Movie removed from watchlist')
