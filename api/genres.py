"""
api/genres.py
API-Routen für Genres.
API routes for genres.
"""

from flask import request

from api import api, data_manager
from api.helpers import failure, handle_api_error, json_body, success


@api.route('/genres', methods=['GET'])
@handle_api_error
def get_genres():
    return success(data_manager.genres.list()['items'])


@api.route('/genres/search', methods=['GET'])
@handle_api_error
def search_genres():
    return success(data_manager.genres.search(request.args.get('q', '')))


@api.route('/genres/stats', methods=['GET'])
@handle_api_error
def get_genre_stats():
    """
    Anzahl der Filme und Durchschnittsbewertung je Genre.
    Movie count and average rating per genre.
    """
    return success(data_manager.genres.stats())


@api.route('/genres/<int:genre_id>', methods=['GET'])
@handle_api_error
def get_genre(genre_id):
    genre = data_manager.genres.get_by_id(genre_id)
    if not genre:
        return failure('Genre not found', 404)
    return success(genre)


@api.route('/genres', methods=['POST'])
@handle_api_error
def create_genre():
    genre_id = data_manager.genres.create(json_body())
    return success(data_manager.genres.get_by_id(genre_id), message='Genre created successfully', status=201)


@api.route('/genres/<int:genre_id>', methods=['PUT'])
@handle_api_error
def update_genre(genre_id):
    data_manager.genres.update(genre_id, json_body())
    return success(data_manager.genres.get_by_id(genre_id), message='Genre updated successfully')


@api.route('/genres/<int:genre_id>', methods=['DELETE'])
@handle_api_error
def delete_genre(genre_id):
    """
    Löscht ein Genre, sofern kein Film darauf verweist.
    Deletes a genre unless a movie refers to it.
    """
    data_manager.genres.delete(genre_id)
    return success(message='Genre deleted successfully')
