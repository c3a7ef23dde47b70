"""Store reader for JSON document files."""
import logging
import os

from jsonrest.domain.models import GlobalObject
from jsonrest.entity_parser import IdGenerator, parse_entities

logger = logging.getLogger(__name__)


class StoreReadError(Exception):
    """Error reading the store file."""
    pass


class StoreReader:
    """Reads the JSON document backing the store."""

    def read(self, path: str) -> bytes:
        """Read raw store bytes."""
        if not os.path.isfile(path):
            raise StoreReadError(f"Could not read from file {path}")
        try:
            with open(path, 'rb') as f:
                return f.read()
        except OSError as e:
            raise StoreReadError(f"Could not read from file {path}: {e}")

    def load(self, path: str, id_generator: IdGenerator | None = None) -> GlobalObject:
        """Read and parse the store into a GlobalObject.

        Parse errors (invalid JSON, wrong document shape) propagate unchanged.
        """
        document = parse_entities(self.read(path), id_generator)
        logger.info("Loaded %d entities from %s", len(document.entities), path)
        return document
