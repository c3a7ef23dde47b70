"""Process-wide owner of the parsed document.

All reads and writes of the entity/entry sequences go through one
``EntityStore`` and are serialized by a single lock. The on-change callback
runs under the same lock, so persisted snapshots reach storage in mutation
order.
"""

import copy
import logging
import threading
from typing import Any, Callable, Optional

from jsonrest.domain.models import GlobalObject, JSONValue, NotFoundError
from jsonrest.entity_parser import IdGenerator, parse_entry

logger = logging.getLogger(__name__)

OnChange = Callable[['EntityStore'], Any]


class EntityStore:
    """Lock-guarded CRUD surface over a GlobalObject.

    Returned fields are deep copies; callers never hold references into the
    live document.

    Args:
        document: The parsed document, owned by this store from now on.
        on_change: Called with the store after every successful mutation.
            Its result is ignored.
        id_generator: Strategy for records created without an ``id``.
    """

    def __init__(
        self,
        document: GlobalObject,
        on_change: Optional[OnChange] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._document = document
        self._on_change = on_change
        self._id_generator = id_generator

    def entity_names(self) -> list[str]:
        with self._lock:
            return [entity.name for entity in self._document.entities]

    def has_entity(self, entity_name: str) -> bool:
        with self._lock:
            return self._document.find_entity(entity_name) is not None

    def counts(self) -> dict[str, int]:
        """Entity name -> number of entries."""
        with self._lock:
            return {entity.name: len(entity.entries) for entity in self._document.entities}

    def list_records(self, entity_name: str) -> list[dict[str, JSONValue]]:
        with self._lock:
            entity = self._document.find_entity(entity_name)
            if entity is None:
                raise NotFoundError(entity_name)
            return copy.deepcopy(entity.to_list())

    def get_record(self, entity_name: str, id: str) -> dict[str, JSONValue]:
        with self._lock:
            entry = self._document.find_record(entity_name, id)
            if entry is None:
                raise NotFoundError(entity_name, id)
            return copy.deepcopy(entry.fields)

    def create_record(self, entity_name: str, body: Any) -> dict[str, JSONValue]:
        """Append ``body`` as a new entry of ``entity_name``.

        The identifier is generated unless ``body`` already carries a string
        ``id``. Duplicate identifiers are accepted.

        Raises:
            MalformedRecordError: ``body`` is not a JSON object.
            NotFoundError: ``entity_name`` is not part of the document.
        """
        entry = parse_entry(copy.deepcopy(body), self._id_generator)
        with self._lock:
            self._document.append_record(entity_name, entry)
            logger.debug("Created %s/%s", entity_name, entry.id)
            self._notify()
            return copy.deepcopy(entry.fields)

    def update_record(self, entity_name: str, id: str, body: Any) -> dict[str, JSONValue]:
        """Replace the entry ``id`` of ``entity_name`` with ``body``.

        Any ``id`` inside ``body`` is overridden by ``id``. The replacement is
        total; fields missing from ``body`` are dropped.

        Raises:
            MalformedRecordError: ``body`` is not a JSON object.
            NotFoundError: the entity or the entry does not exist.
        """
        entry = parse_entry(copy.deepcopy(body), self._id_generator)
        entry.id = id
        entry.fields['id'] = id
        with self._lock:
            self._document.update_record(entity_name, id, entry)
            logger.debug("Updated %s/%s", entity_name, id)
            self._notify()
            return copy.deepcopy(entry.fields)

    def serialize(self, pretty: bool = True) -> bytes:
        with self._lock:
            return self._document.to_json(pretty=pretty)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
