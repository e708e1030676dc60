"""
errors.py
Fehlerarten des DataManagers.
Error kinds raised by the data managers.
"""

from enum import Enum


class ErrorKind(Enum):
    VALIDATION = 'validation'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    INTERNAL = 'internal'


class DataManagerError(Exception):
    """
    Basisfehler mit einer Fehlerart, die die API auf einen HTTP-Status abbildet.
    Base error carrying a kind that the API maps onto an HTTP status.
    """
    kind = ErrorKind.INTERNAL

    def __init__(self, detail: str, kind: ErrorKind = None):
        super().__init__(detail)
        self.detail = detail
        if kind is not None:
            self.kind = kind


class ValidationError(DataManagerError):
    kind = ErrorKind.VALIDATION


class NotFoundError(DataManagerError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DataManagerError):
    kind = ErrorKind.CONFLICT
