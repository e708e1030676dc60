"""
api/helpers.py
Gemeinsame Hilfsfunktionen der API: Antwort-Hülle, Fehlerbehandlung, Parameter.
Shared API helpers: response envelope, error handling, parameters.
"""

from functools import wraps

from flask import current_app, jsonify, request

from datamanager.errors import DataManagerError, ErrorKind

# Fehlerart -> HTTP-Status / error kind -> HTTP status
STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 400,
    ErrorKind.INTERNAL: 500,
}

GENERIC_ERROR_MESSAGE = 'An internal server error occurred.'


def success(data=None, message=None, pagination=None, status=200):
    """
    Erfolgreiche Antwort im Format {success, data?, message?, pagination?}.
    Successful response in the {success, data?, message?, pagination?} shape.
    """
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    if pagination is not None:
        body['pagination'] = pagination
    return jsonify(body), status


def failure(message, status):
    return jsonify({'success': False, 'message': message}), status


def paginated(page_result: dict, **extra):
    """
    Wandelt das Seitenergebnis eines Managers in eine Antwort mit pagination-Block um.
    Turns a manager's page result into a response with a pagination block.
    """
    pagination = {
        'page': page_result['page'],
        'limit': page_result['limit'],
        'total': page_result['total'],
        'totalPages': page_result['totalPages'],
    }
    body = {'success': True, 'data': page_result['items'], 'pagination': pagination}
    body.update(extra)
    return jsonify(body), 200


def handle_api_error(f):
    """
    Decorator für die Fehlerbehandlung von API-Routen.
    Decorator for error handling of API routes.

    DataManagerError wird anhand seiner Art auf einen Status abgebildet,
    alles andere wird geloggt und als 500 beantwortet.
    DataManagerError is mapped onto a status by its kind,
    anything else is logged and answered with 500.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except DataManagerError as e:
            status = STATUS_BY_KIND[e.kind]
            if status >= 500:
                current_app.logger.error(f"API Error in endpoint '{f.__name__}': {e.detail}")
                return failure(_internal_message(e), status)
            current_app.logger.info(f"Request to '{f.__name__}' rejected ({status}): {e.detail}")
            return failure(e.detail, status)
        except Exception as e:
            # Log API error for server-side diagnostics.
            # Logge API-Fehler für serverseitige Diagnose.
            current_app.logger.error(f"API Error in endpoint '{f.__name__}': {str(e)}", exc_info=True)
            return failure(_internal_message(e), 500)
    return decorated_function


def _internal_message(error) -> str:
    # Details nur in der Entwicklung / details in development only
    if current_app.config.get('EXPOSE_ERRORS'):
        return f"{GENERIC_ERROR_MESSAGE} {error}"
    return GENERIC_ERROR_MESSAGE


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def int_arg(name: str, default=None, minimum=None):
    """
    Liest einen ganzzahligen Query-Parameter; ungültige Werte ergeben den Standardwert.
    Reads an integer query parameter; invalid values give the default.
    """
    value = request.args.get(name, type=int)
    if value is None:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def float_arg(name: str, default=None):
    return request.args.get(name, default=default, type=float)


def page_args(default_limit: int):
    return int_arg('page', 1, minimum=1), int_arg('limit', default_limit, minimum=1)
