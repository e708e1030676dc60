"""
api package
REST-Schnittstelle des Movie Trackers, eingehängt unter /api.
REST interface of the movie tracker, mounted under /api.
"""

from flask import Blueprint

from datamanager import DataManager

# Blueprint für API-Routen erstellen
# Create blueprint for API routes
api = Blueprint('api', __name__)

# DataManager-Instanz
data_manager = DataManager()

# Routen registrieren sich beim Import am Blueprint
# Route modules register themselves on the blueprint when imported
from api import actors, genres, health, movies, reviews, tier_lists  # noqa: E402,F401
