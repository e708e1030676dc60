"""
base_manager.py
Gemeinsame Hilfsfunktionen der Manager: Transaktionen, Paginierung, Validierung.
Shared helpers of the managers: transactions, pagination, validation.
"""

from contextlib import contextmanager
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from datamanager.errors import ConflictError, DataManagerError, ErrorKind, ValidationError
from models import db

MIN_SEARCH_LENGTH = 2
MAX_PAGE_SIZE = 100


class BaseManager:

    @contextmanager
    def _transaction(self, action: str):
        """
        Führt einen Block als eine Transaktion aus: Commit am Ende, Rollback bei jedem Fehler.
        Runs a block as one transaction: commit at the end, rollback on any error.
        """
        try:
            yield db.session
            db.session.commit()
        except DataManagerError:
            db.session.rollback()
            raise
        except IntegrityError as e:
            db.session.rollback()
            current_app.logger.warning(f"Integrity error while {action}: {e.orig}.")
            # Integrity error / Integritätsfehler
            raise ConflictError(f"Conflicting data while {action}.") from e
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Database error while {action}: {e}.")
            # Database error / Datenbankfehler
            raise DataManagerError(f"Database error while {action}.", ErrorKind.INTERNAL) from e

    @contextmanager
    def _reading(self, action: str):
        try:
            yield db.session
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Database error while {action}: {e}.")
            raise DataManagerError(f"Database error while {action}.", ErrorKind.INTERNAL) from e

    @staticmethod
    def _paginate(stmt, page: int, limit: int, serialize) -> dict:
        """
        Paginierung über Flask-SQLAlchemy; totalPages = ceil(total / limit).
        Pagination through Flask-SQLAlchemy; totalPages = ceil(total / limit).
        """
        pagination = db.paginate(stmt, page=page, per_page=limit, max_per_page=MAX_PAGE_SIZE, error_out=False)
        return {
            'items': [serialize(item) for item in pagination.items],
            'total': pagination.total,
            'page': pagination.page,
            'limit': pagination.per_page,
            'totalPages': pagination.pages,
        }

    @staticmethod
    def _clean_text(value, field: str, min_length: int = 1) -> str:
        if not isinstance(value, str) or len(value.strip()) < min_length:
            if min_length <= 1:
                raise ValidationError(f"{field} is required.")
            raise ValidationError(f"{field} must be at least {min_length} characters long.")
        return value.strip()

    @staticmethod
    def _to_int(value, field: str) -> int:
        if isinstance(value, bool):
            raise ValidationError(f"{field} must be an integer.")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as e:
                raise ValidationError(f"{field} must be an integer.") from e
        raise ValidationError(f"{field} must be an integer.")

    @staticmethod
    def _optional_text(value) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @staticmethod
    def _search_pattern(query) -> str:
        query = (query or '').strip()
        if len(query) < MIN_SEARCH_LENGTH:
            raise ValidationError(f"Search query must be at least {MIN_SEARCH_LENGTH} characters long.")
        return f"%{query}%"
