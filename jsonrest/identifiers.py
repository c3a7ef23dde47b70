"""Identifier generation for records that arrive without an ``id``.

Two strategies are available:
  - 'uuid'  → dash-separated hex groups, e.g. 3f2a9c1e-8b7d-4e6f-a1b2-c3d4e5f6a7b8
  - 'short' → fixed-length alphanumeric string, e.g. aZ3kP9qL0x

Generated identifiers are not checked against existing records.
"""

import secrets
import string
import uuid
from typing import Callable

SHORT_ID_ALPHABET = string.ascii_letters + string.digits
SHORT_ID_LENGTH = 10


def generate_id() -> str:
    """Return a UUID-v4 style identifier built from random bytes."""
    return str(uuid.uuid4())


def generate_short_id(length: int = SHORT_ID_LENGTH) -> str:
    """Return a random alphanumeric identifier of ``length`` characters."""
    return ''.join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(length))


_GENERATORS: dict[str, Callable[[], str]] = {
    'uuid': generate_id,
    'short': generate_short_id,
}


def get_generator(style: str) -> Callable[[], str]:
    """Look up an identifier strategy by name.

    Raises:
        ValueError: ``style`` is not a known strategy.
    """
    try:
        return _GENERATORS[style]
    except KeyError:
        raise ValueError(
            f"Unknown id style '{style}' (expected one of: {', '.join(sorted(_GENERATORS))})"
        ) from None


def supported_styles() -> list[str]:
    return sorted(_GENERATORS)
