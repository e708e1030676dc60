"""
api/actors.py
API-Routen für Schauspieler.
API routes for actors.
"""

from flask import request

from api import api, data_manager
from api.helpers import failure, handle_api_error, json_body, page_args, paginated, success
from datamanager.actor_manager import DEFAULT_PAGE_SIZE


@api.route('/actors', methods=['GET'])
@handle_api_error
def get_actors():
    """
    Paginierte Schauspielerliste (Query: search, sortBy, sortOrder, page, limit).
    Paginated list of actors (query: search, sortBy, sortOrder, page, limit).
    """
    page, limit = page_args(DEFAULT_PAGE_SIZE)
    filters = {
        'search': request.args.get('search'),
        'sortBy': request.args.get('sortBy'),
        'sortOrder': request.args.get('sortOrder'),
    }
    return paginated(data_manager.actors.list(filters, page, limit))


@api.route('/actors/search', methods=['GET'])
@handle_api_error
def search_actors():
    return success(data_manager.actors.search(request.args.get('q', '')))


@api.route('/actors/stats', methods=['GET'])
@handle_api_error
def get_actor_stats():
    return success(data_manager.actors.stats())


@api.route('/actors/<int:actor_id>', methods=['GET'])
@handle_api_error
def get_actor(actor_id):
    actor = data_manager.actors.get_by_id(actor_id)
    if not actor:
        return failure('Actor not found', 404)
    return success(actor)


@api.route('/actors/<int:actor_id>/movies', methods=['GET'])
@handle_api_error
def get_actor_movies(actor_id):
    return success(data_manager.actors.get_movies(actor_id))


@api.route('/actors', methods=['POST'])
@handle_api_error
def create_actor():
    actor_id = data_manager.actors.create(json_body())
    return success(data_manager.actors.get_by_id(actor_id), message='Actor created successfully', status=201)


@api.route('/actors/<int:actor_id>', methods=['PUT'])
@handle_api_error
def update_actor(actor_id):
    data_manager.actors.update(actor_id, json_body())
    return success(data_manager.actors.get_by_id(actor_id), message='Actor updated successfully')


@api.route('/actors/<int:actor_id>', methods=['DELETE'])
@handle_api_error
def delete_actor(actor_id):
    data_manager.actors.delete(actor_id)
    return success(message='Actor deleted successfully')
