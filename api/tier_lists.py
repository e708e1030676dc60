"""
api/tier_lists.py
API-Routen für Tier-Listen und die Platzierung von Filmen.
API routes for tier lists and the placement of movies.
"""

from api import api, data_manager
from api.helpers import failure, handle_api_error, json_body, success


@api.route('/tier-lists', methods=['GET'])
@handle_api_error
def get_tier_lists():
    return success(data_manager.tier_lists.get_all())


@api.route('/tier-lists/<int:tier_list_id>', methods=['GET'])
@handle_api_error
def get_tier_list(tier_list_id):
    """
    Gibt eine Tier-Liste mit tierMovies und unassignedMovies zurück.
    Returns a tier list with tierMovies and unassignedMovies.
    """
    tier_list = data_manager.tier_lists.get_by_id(tier_list_id)
    if not tier_list:
        return failure('Tier list not found', 404)
    return success(tier_list)


@api.route('/tier-lists', methods=['POST'])
@handle_api_error
def create_tier_list():
    body = json_body()
    tier_list_id = data_manager.tier_lists.create(body.get('name'), body.get('movieIds'))
    return success(data_manager.tier_lists.get_by_id(tier_list_id),
                   message='Tier list created successfully', status=201)


@api.route('/tier-lists/<int:tier_list_id>', methods=['PUT'])
@handle_api_error
def update_tier_list(tier_list_id):
    data_manager.tier_lists.update(tier_list_id, json_body().get('name'))
    return success(message='Tier list updated successfully')


@api.route('/tier-lists/<int:tier_list_id>', methods=['DELETE'])
@handle_api_error
def delete_tier_list(tier_list_id):
    data_manager.tier_lists.delete(tier_list_id)
    return success(message='Tier list deleted successfully')


@api.route('/tier-lists/<int:tier_list_id>/movies', methods=['POST'])
@handle_api_error
def add_movie_to_tier(tier_list_id):
    """
    Fügt einen Film ein (Body: movieId, tier, position).
    Adds a movie (body: movieId, tier, position).
    """
    body = json_body()
    placement = data_manager.tier_lists.add_movie(tier_list_id, body.get('movieId'), body.get('tier'),
                                                  body.get('position', 0))
    return success(placement, message='Movie added to tier list')


@api.route('/tier-lists/<int:tier_list_id>/movies/<int:movie_id>', methods=['PUT'])
@handle_api_error
def update_movie_position(tier_list_id, movie_id):
    body = json_body()
    placement = data_manager.tier_lists.update_movie_position(tier_list_id, movie_id, body.get('tier'),
                                                              body.get('position'))
    return success(placement, message='Movie position updated')


@api.route('/tier-lists/<int:tier_list_id>/movies/<int:movie_id>/order', methods=['PUT'])
@handle_api_error
def reorder_movie(tier_list_id, movie_id):
    """
    Verschiebt einen Film innerhalb seiner Stufe (Body: index) in einem Schritt.
    Moves a movie within its tier (body: index) in a single step.
    """
    order = data_manager.tier_lists.reorder_movie(tier_list_id, movie_id, json_body().get('index'))
    return success({'order': order}, message='Tier reordered')


@api.route('/tier-lists/<int:tier_list_id>/movies/<int:movie_id>', methods=['DELETE'])
@handle_api_error
def remove_movie_from_tier(tier_list_id, movie_id):
    data_manager.tier_lists.remove_movie(tier_list_id, movie_id)
    return success(message='Movie removed from tier list')
