"""
api/reviews.py
API-Routen für Rezensionen.
API routes for reviews.
"""

from flask import request

from api import api, data_manager
from api.helpers import failure, handle_api_error, int_arg, json_body, page_args, paginated, success


@api.route('/reviews', methods=['GET'])
@handle_api_error
def get_reviews():
    page, limit = page_args(20)
    return paginated(data_manager.reviews.get_all(page, limit))


@api.route('/reviews/filtered', methods=['GET'])
@handle_api_error
def get_filtered_reviews():
    """
    Rezensionen gefiltert (Query: minRating, maxRating, reviewer, movieId, page, limit).
    Filtered reviews (query: minRating, maxRating, reviewer, movieId, page, limit).
    """
    page, limit = page_args(20)
    result = data_manager.reviews.get_filtered(
        min_rating=int_arg('minRating'),
        max_rating=int_arg('maxRating'),
        reviewer=request.args.get('reviewer') or None,
        movie_id=int_arg('movieId'),
        page=page,
        limit=limit,
    )
    return paginated(result)


@api.route('/reviews/stats', methods=['GET'])
@handle_api_error
def get_rating_stats():
    return success(data_manager.reviews.rating_stats(int_arg('movieId')))


@api.route('/reviews/top-rated', methods=['GET'])
@handle_api_error
def get_top_rated():
    return success(data_manager.reviews.top_rated(int_arg('limit', 10, minimum=1)))


@api.route('/reviews/reviewer/<reviewer_name>', methods=['GET'])
@handle_api_error
def get_reviews_by_reviewer(reviewer_name):
    page, limit = page_args(10)
    result = data_manager.reviews.get_by_reviewer(
        reviewer_name,
        page=page,
        limit=limit,
        sort_by=request.args.get('sortBy', 'review_date'),
        sort_order=request.args.get('sortOrder', 'DESC'),
    )
    return paginated(result)


@api.route('/reviews/movie/<int:movie_id>', methods=['GET'])
@handle_api_error
def get_movie_reviews(movie_id):
    return success(data_manager.reviews.get_by_movie(movie_id))


@api.route('/reviews/movie/<int:movie_id>', methods=['POST'])
@handle_api_error
def create_review(movie_id):
    """
    Legt eine Rezension an (Body: reviewer_name, rating, review_text).
    Creates a review (body: reviewer_name, rating, review_text).
    """
    body = json_body()
    review = data_manager.reviews.create(movie_id, body.get('reviewer_name'), body.get('rating'),
                                         body.get('review_text'))
    return success(review, message='Review created successfully', status=201)


@api.route('/reviews/<int:review_id>', methods=['GET'])
@handle_api_error
def get_review(review_id):
    review = data_manager.reviews.get_by_id(review_id)
    if not review:
        return failure('Review not found', 404)
    return success(review)


@api.route('/reviews/<int:review_id>', methods=['PUT'])
@handle_api_error
def update_review(review_id):
    review = data_manager.reviews.update(review_id, json_body())
    return success(review, message='Review updated successfully')


@api.route('/reviews/<int:review_id>', methods=['DELETE'])
@handle_api_error
def delete_review(review_id):
    data_manager.reviews.delete(review_id)
    return success(message='Review deleted successfully')
