"""
Parser turning an untyped JSON document into entities and entries.

The root of the document must be an object whose values are arrays of
objects. Every top-level key becomes an Entity; every array element becomes
an EntityEntry. Elements without a string ``id`` get a generated one written
back into the element, so the parsed fields always carry their identifier.

Parsing is all-or-nothing: the first malformed entity or entry aborts the
whole document.
"""

import json
import math
from typing import Any, Callable

from jsonrest.domain.models import Entity, EntityEntry, GlobalObject
from jsonrest.identifiers import generate_id

IdGenerator = Callable[[], str]


class EntityParseError(ValueError):
    """Base class for documents that do not have the entity shape."""
    pass


class MalformedDocumentError(EntityParseError):
    """The document root is not a JSON object."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Document root must be an object, got {kind}")


class MalformedEntityError(EntityParseError):
    """A top-level value is not a JSON array."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Could not read Entity {name}")


class MalformedRecordError(EntityParseError):
    """An entry of an entity is not a JSON object."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Entry in Entity is not object, got {kind}")


class NonStandardNumberError(ValueError):
    """The text uses NaN, Infinity or a number too large for a finite float."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Number is not valid JSON: {token}")


def _json_kind(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__


def _reject_constant(token: str) -> float:
    raise NonStandardNumberError(token)


def _parse_finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise NonStandardNumberError(token)
    return value


def decode_json(data: bytes | str) -> Any:
    """Decode strict JSON text.

    Unlike plain ``json.loads``, NaN, Infinity and -Infinity are refused, as
    are numbers that overflow to infinity.

    Raises:
        json.JSONDecodeError: The text is not valid JSON.
        NonStandardNumberError: The text holds a non-finite number.
    """
    return json.loads(data, parse_constant=_reject_constant, parse_float=_parse_finite_float)


def parse_entities(db_json: bytes | str, id_generator: IdGenerator | None = None) -> GlobalObject:
    """Decode JSON text and parse it into a GlobalObject.

    Args:
        db_json: UTF-8 encoded JSON document (or an already decoded str).
        id_generator: Strategy for missing identifiers (defaults to uuid style).

    Raises:
        json.JSONDecodeError: The text is not valid JSON.
        NonStandardNumberError: The text holds NaN or an infinite number.
        EntityParseError: The decoded document does not have the entity shape.
    """
    root = decode_json(db_json)
    return parse_document(root, id_generator)


def parse_document(root: Any, id_generator: IdGenerator | None = None) -> GlobalObject:
    """Parse a decoded JSON root into a GlobalObject, keeping key order."""
    if not isinstance(root, dict):
        raise MalformedDocumentError(_json_kind(root))

    entities = [parse_entity(value, name, id_generator) for name, value in root.items()]
    return GlobalObject(entities=entities)


def parse_entity(entries_json: Any, name: str, id_generator: IdGenerator | None = None) -> Entity:
    """Parse one top-level array into an Entity named ``name``."""
    if not isinstance(entries_json, list):
        raise MalformedEntityError(name)

    entries = [parse_entry(entry_json, id_generator) for entry_json in entries_json]
    return Entity(name=name, entries=entries)


def parse_entry(entry_json: Any, id_generator: IdGenerator | None = None) -> EntityEntry:
    """Parse one JSON object into an EntityEntry.

    A non-empty string ``id`` is used as-is. Any other (or missing) ``id`` is replaced
    by a generated identifier, written into ``entry_json`` in place. An empty
    string counts as missing, since identifiers are never empty; such an entry
    does not keep its ``id`` across a parse/serialize round trip.
    """
    if not isinstance(entry_json, dict):
        raise MalformedRecordError(_json_kind(entry_json))

    entry_id = entry_json.get('id')
    if not isinstance(entry_id, str) or not entry_id:
        entry_id = (id_generator or generate_id)()
        entry_json['id'] = entry_id

    return EntityEntry(id=entry_id, fields=entry_json)
