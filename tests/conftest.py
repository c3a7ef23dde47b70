"""Shared test fixtures."""

import json

import pytest

from jsonrest.entity_parser import parse_entities
from jsonrest.store import EntityStore
from jsonrest.store_writer import StoreWriter
from jsonrest.web.app import create_app


# ── Sample Documents ─────────────────────────────────────────────────────

LIBRARY_JSON = """\
{
  "books": [
    {"id": "book-0", "title": "book 0 title", "author": "john smith"},
    {"id": "book-1", "title": "book 1 title", "author": "john smith II"}
  ],
  "authors": [
    {"id": "auth-1", "firstname": "John", "lastname": "Smith"}
  ]
}
"""

MIXED_IDS_JSON = """\
{
  "books": [
    {"id": "book-0", "title": "has id"},
    {"title": "no id"},
    {"id": 7, "title": "numeric id"}
  ]
}
"""

BOOK_WITH_NESTED_FIELDS = {
    'id': '1234',
    'title': 'The history of everything',
    'author': {'firstName': 'John', 'lastName': 'Smith'},
    'tags': ['history', 'reference'],
    'pages': 320,
    'in_print': True,
    'isbn': None,
}


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def library_doc():
    """The decoded library document."""
    return json.loads(LIBRARY_JSON)


@pytest.fixture
def store_file(tmp_path):
    """Write JSON content to a temp store file and return its path."""
    def _write(content: str = LIBRARY_JSON, filename: str = "db.json") -> str:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def sequential_ids():
    """Deterministic id generator: gen-1, gen-2, ..."""
    counter = {'n': 0}

    def _next() -> str:
        counter['n'] += 1
        return f"gen-{counter['n']}"
    return _next


@pytest.fixture
def store(sequential_ids):
    """An in-memory store over the library document, recording on-change calls."""
    changes = []
    s = EntityStore(
        parse_entities(LIBRARY_JSON),
        on_change=lambda st: changes.append(st.serialize()),
        id_generator=sequential_ids,
    )
    s.changes = changes
    return s


@pytest.fixture
def persisted_store(store_file, sequential_ids):
    """A store backed by a temp file, persisting through StoreWriter."""
    path = store_file()
    with open(path, 'rb') as f:
        document = parse_entities(f.read(), sequential_ids)
    return EntityStore(document, on_change=StoreWriter(path), id_generator=sequential_ids), path


@pytest.fixture
def client(store):
    """Flask test client over the in-memory store."""
    app = create_app(store)
    app.config['TESTING'] = True
    return app.test_client()
