"""JSON output for the store.

Overwrites the whole store file with the serialized document after every
mutation. There is no journaling and no retry.
"""

import logging
import os

from jsonrest.store import EntityStore

logger = logging.getLogger(__name__)


class StoreWriteError(Exception):
    """Error writing the store file."""
    pass


class StoreWriter:
    """Persistence callback writing the serialized document to ``path``.

    Use an instance as ``EntityStore(on_change=...)``.

    Args:
        path: Store file to overwrite.
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(self, path: str, pretty: bool = True) -> None:
        self._path = path
        self._pretty = pretty

    def __call__(self, store: EntityStore) -> bool:
        return self.write(store.serialize(pretty=self._pretty))

    def write(self, data: bytes) -> bool:
        """Overwrite the store file. Returns False when the write failed."""
        try:
            parent = os.path.dirname(self._path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self._path, 'wb') as f:
                f.write(data)
        except OSError as e:
            logger.error("Could not write to file %s: %s", self._path, e)
            return False
        logger.debug("Wrote %d bytes to %s", len(data), self._path)
        return True
