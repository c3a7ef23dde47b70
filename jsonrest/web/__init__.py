"""Flask transport for the entity store."""

from jsonrest.web.app import create_app

__all__ = ['create_app']
