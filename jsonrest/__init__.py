"""Serve a JSON document as REST resources."""

__version__ = "0.1.0"
