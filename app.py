"""
app.py
Hauptmodul für den Movie Tracker: App-Factory, Konfiguration, Fehlerseiten und Serverstart.
Main module for the movie tracker: app factory, configuration, error handlers and server start.
"""

import logging
import os
import signal
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Environment variables
# Umgebungsvariablen laden
load_dotenv()

from models import db  # noqa: E402
from api import api as api_blueprint  # noqa: E402

DEFAULT_DATABASE_URI = 'sqlite:///movietracker.db'
DEFAULT_PORT = 5000
MAX_UPLOAD_SIZE = 50 * 1024 * 1024  # 50 MB


def database_uri_from_env() -> str:
    """
    Ermittelt die Datenbank-URI: DATABASE_URI, sonst MySQL aus DB_*-Variablen, sonst SQLite.
    Resolves the database URI: DATABASE_URI, else MySQL from DB_* variables, else SQLite.
    """
    uri = os.getenv('DATABASE_URI')
    if uri:
        return uri
    host = os.getenv('DB_HOST')
    if host:
        user = os.getenv('DB_USER', 'root')
        password = os.getenv('DB_PASSWORD', '')
        name = os.getenv('DB_NAME', 'movie_tracker')
        port = os.getenv('DB_PORT', '3306')
        return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"
    return DEFAULT_DATABASE_URI


def create_app(config_overrides: Optional[dict] = None) -> Flask:
    """
    Erstellt und konfiguriert die Flask-Anwendung.
    Creates and configures the Flask application.
    """
    app = Flask(__name__)
    app.config['SQLALCHEMY_DATABASE_URI'] = database_uri_from_env()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev_secret')
    app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE
    app.config['EXPOSE_ERRORS'] = os.getenv('APP_ENV', 'production') == 'development'
    if config_overrides:
        app.config.update(config_overrides)

    # Verbindungspool für Server-Datenbanken / connection pool for server databases
    if not app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
        app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {
            'pool_size': 10,
            'pool_timeout': 60,
            'pool_pre_ping': True,
        })

    app.logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    # Datenbank an die App binden
    # Bind database to the app
    db.init_app(app)

    # Blueprints registrieren
    # Register blueprints
    app.register_blueprint(api_blueprint, url_prefix='/api')

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """
    JSON-Fehlerantworten im Format {success: false, message}.
    JSON error responses in the {success: false, message} shape.
    """

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({'success': False, 'message': 'Route not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'success': False, 'message': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def payload_too_large(e):
        return jsonify({'success': False, 'message': 'Request body too large'}), 413

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.error(f"Unhandled server error: {e}")
        message = 'Internal server error'
        if app.config.get('EXPOSE_ERRORS'):
            message = f"{message}: {getattr(e, 'original_exception', e)}"
        return jsonify({'success': False, 'message': message}), 500


def check_database(app: Flask) -> bool:
    """
    Prüft die Datenbankverbindung mit SELECT 1.
    Probes the database connection with SELECT 1.
    """
    with app.app_context():
        try:
            db.session.execute(text('SELECT 1'))
            app.logger.info("Database connection established.")
            return True
        except SQLAlchemyError as e:
            app.logger.error(f"Database connection failed: {e}")
            return False


def _shutdown(signum, frame):
    logging.getLogger(__name__).info(f"Received signal {signum}, shutting down.")
    sys.exit(0)


def run_server() -> None:
    """
    Startet den Server: DB-Prüfung (Exit 1 bei Fehler), Tabellen anlegen, Signale behandeln.
    Starts the server: database probe (exit 1 on failure), create tables, handle signals.
    """
    logging.basicConfig(level=os.getenv('LOG_LEVEL', 'INFO').upper())
    app = create_app()
    if not check_database(app):
        sys.exit(1)
    with app.app_context():
        db.create_all()

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)

    port = int(os.getenv('PORT', DEFAULT_PORT))
    app.logger.info(f"Movie tracker API listening on port {port}.")
    app.run(host=os.getenv('HOST', '127.0.0.1'), port=port, debug=app.config['EXPOSE_ERRORS'])


if __name__ == '__main__':
    run_server()
