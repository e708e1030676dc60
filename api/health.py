"""
api/health.py
Health-Check der API.
API health check.
"""

from datetime import datetime, timezone

from flask import jsonify

from api import api


@api.route('/health', methods=['GET'])
def health():
    return jsonify({
        'success': True,
        'message': 'API is running',
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }), 200
