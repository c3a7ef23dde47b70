"""Shared data models: records, entities, the document root and server options."""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Union

JSONValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]


class NotFoundError(LookupError):
    """An entity or record identifier is not present in the document."""

    def __init__(self, entity: str, id: str | None = None) -> None:
        self.entity = entity
        self.id = id
        if id is None:
            message = f"Entity not found: {entity}"
        else:
            message = f"Entry not found: {entity}/{id}"
        super().__init__(message)


@dataclass
class EntityEntry:
    """One record of an entity: a JSON object and its resolved identifier.

    ``fields['id']`` always equals ``id``.
    """

    id: str
    fields: dict[str, JSONValue]


@dataclass
class Entity:
    """A named, ordered collection of entries."""

    name: str
    entries: list[EntityEntry] = field(default_factory=list)

    def find_entry_by_id(self, id: str) -> EntityEntry | None:
        """Return the first entry with the given id, or None."""
        for entry in self.entries:
            if entry.id == id:
                return entry
        return None

    def append_entity_entry(self, entry: EntityEntry) -> None:
        """Append an entry. Identifiers are not checked for collisions."""
        self.entries.append(entry)

    def update_entity_entry(self, id: str, new_entry: EntityEntry) -> None:
        """Overwrite the entry with ``id`` by ``new_entry``.

        This is a full replacement of both identifier and fields, not a merge.

        Raises:
            NotFoundError: No entry with ``id`` exists.
        """
        existing = self.find_entry_by_id(id)
        if existing is None:
            raise NotFoundError(self.name, id)
        existing.id = new_entry.id
        existing.fields = new_entry.fields

    def to_list(self) -> list[dict[str, JSONValue]]:
        return [entry.fields for entry in self.entries]


@dataclass
class GlobalObject:
    """The whole parsed document: every entity in source key order."""

    entities: list[Entity] = field(default_factory=list)

    def find_entity(self, name: str) -> Entity | None:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def find_record(self, entity_name: str, id: str) -> EntityEntry | None:
        entity = self.find_entity(entity_name)
        if entity is None:
            return None
        return entity.find_entry_by_id(id)

    def append_record(self, entity_name: str, entry: EntityEntry) -> None:
        self._require_entity(entity_name).append_entity_entry(entry)

    def update_record(self, entity_name: str, id: str, entry: EntityEntry) -> None:
        self._require_entity(entity_name).update_entity_entry(id, entry)

    def to_dict(self) -> dict[str, list[dict[str, JSONValue]]]:
        """Rebuild the root JSON object keyed by entity name."""
        return {entity.name: entity.to_list() for entity in self.entities}

    def to_json(self, pretty: bool = True) -> bytes:
        """Serialize the document to UTF-8 JSON bytes.

        Raises:
            ValueError: A field holds NaN or an infinite float, which JSON cannot carry.
        """
        text = json.dumps(self.to_dict(), indent=2 if pretty else None, ensure_ascii=False, allow_nan=False)
        return text.encode('utf-8')

    def _require_entity(self, name: str) -> Entity:
        entity = self.find_entity(name)
        if entity is None:
            raise NotFoundError(name)
        return entity


@dataclass
class ServerOptions:
    """Options controlling the served store.

    Defaults may be overridden through ``JSONREST_*`` environment variables.
    """

    store: str = './db.json'
    host: str = '0.0.0.0'
    port: int = 8080
    id_style: str = 'uuid'
    pretty: bool = True

    @classmethod
    def from_env(cls) -> 'ServerOptions':
        return cls(
            store=os.environ.get('JSONREST_STORE', cls.store),
            host=os.environ.get('JSONREST_HOST', cls.host),
            port=int(os.environ.get('JSONREST_PORT', cls.port)),
            id_style=os.environ.get('JSONREST_ID_STYLE', cls.id_style),
        )
