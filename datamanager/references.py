"""
references.py
Verweise auf Genres und Schauspieler: per ID oder per Name (wird bei Bedarf angelegt).
References to genres and actors: by id, or by name (created on demand).
"""

from typing import NamedTuple, Union

from flask import current_app
from sqlalchemy import func

from datamanager.errors import ValidationError
from models import db


class ById(NamedTuple):
    id: int


class ByName(NamedTuple):
    name: str


Reference = Union[ById, ByName]


def parse_reference(raw) -> Reference:
    """
    Wandelt einen Rohwert aus dem Request in einen Verweis um.
    Turns a raw request value into a reference.

    Accepted shapes: ``5``, ``"5"``, ``{"id": 5}``, ``{"name": "Drama"}`` and ``"Drama"``.
    """
    if isinstance(raw, dict):
        if raw.get('id') not in (None, ''):
            return parse_reference_id(raw['id'])
        if isinstance(raw.get('name'), str):
            return parse_reference_name(raw['name'])
        raise ValidationError("Reference must contain an 'id' or a 'name'.")
    if isinstance(raw, str) and not raw.strip().isdigit():
        return parse_reference_name(raw)
    return parse_reference_id(raw)


def parse_reference_id(raw) -> ById:
    """
    Nur ganze Zahlen oder Ziffernfolgen; alles andere ist ein Validierungsfehler.
    Integers or digit strings only; anything else is a validation error.
    """
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid reference: {raw!r}.")
    if isinstance(raw, int):
        return ById(raw)
    if isinstance(raw, str) and raw.strip().isdigit():
        try:
            return ById(int(raw.strip()))
        except ValueError as e:
            # z. B. hochgestellte Ziffern / e.g. superscript digits
            raise ValidationError(f"Invalid reference: {raw!r}.") from e
    raise ValidationError(f"Invalid reference: {raw!r}.")


def parse_reference_name(name: str) -> ByName:
    name = name.strip()
    if len(name) < 2:
        raise ValidationError("Referenced name must be at least 2 characters long.")
    return ByName(name)


def resolve_reference(model, ref: Reference):
    """
    Löst einen Verweis innerhalb der laufenden Transaktion auf (ohne Commit).
    Unbekannte IDs sind ein Validierungsfehler, unbekannte Namen werden angelegt.

    Resolves a reference inside the running transaction (no commit).
    Unknown ids are a validation error, unknown names are created.
    """
    label = model.__name__
    if isinstance(ref, ById):
        instance = db.session.get(model, ref.id)
        if instance is None:
            raise ValidationError(f"{label} with ID {ref.id} does not exist.")
        return instance

    instance = model.query.filter(func.lower(model.name) == ref.name.lower()).first()
    if instance is None:
        instance = model(name=ref.name)
        db.session.add(instance)
        db.session.flush()
        current_app.logger.info(f"{label} '{ref.name}' (ID: {instance.id}) created from a name reference.")
    return instance
