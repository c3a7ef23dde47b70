"""Flask REST interface over an EntityStore.

Routes, for every entity ``E`` of the store:
  GET  /E        → all entries of E
  GET  /E/<id>   → one entry, 404 if absent
  POST /E        → create an entry from a JSON object body
  PUT  /E/<id>   → replace an entry, 404 if absent
"""

import logging

from flask import Flask, Response, jsonify, request

from jsonrest.domain.models import NotFoundError
from jsonrest.entity_parser import MalformedRecordError, decode_json
from jsonrest.store import EntityStore

logger = logging.getLogger(__name__)


def _not_found() -> Response:
    return Response('404 page not found', status=404, mimetype='text/plain')


def _bad_request() -> Response:
    return Response('400 bad request', status=400, mimetype='text/plain')


def _method_not_allowed(allowed) -> Response:
    resp = Response('405 method not allowed', status=405, mimetype='text/plain')
    if allowed:
        resp.headers['Allow'] = ', '.join(sorted(allowed))
    return resp


def _parse_body():
    """Decode the request body, or None when it is not a strict JSON object."""
    try:
        body = decode_json(request.get_data())
    except ValueError as e:
        logger.info("Rejected body for %s %s: %s", request.method, request.path, e)
        return None
    if not isinstance(body, dict):
        logger.info("Rejected body for %s %s: not a JSON object", request.method, request.path)
        return None
    return body


def create_app(store: EntityStore, pretty: bool = True) -> Flask:
    """Build the Flask application serving ``store``.

    Args:
        store: The process-wide store every handler reads and mutates.
        pretty: Indent JSON responses by two spaces.
    """
    app = Flask(__name__)
    app.json.sort_keys = False
    app.json.compact = not pretty
    app.json.ensure_ascii = False

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        logger.debug("%s", e)
        return _not_found()

    @app.errorhandler(MalformedRecordError)
    def handle_malformed(e: MalformedRecordError):
        logger.info("Bad request: %s", e)
        return _bad_request()

    @app.errorhandler(404)
    def handle_unknown_route(e):
        return _not_found()

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return _method_not_allowed(e.valid_methods)

    @app.route('/<entity_name>', methods=['GET'])
    def list_entries(entity_name: str):
        return jsonify(store.list_records(entity_name))

    @app.route('/<entity_name>/<record_id>', methods=['GET'])
    def get_entry(entity_name: str, record_id: str):
        return jsonify(store.get_record(entity_name, record_id))

    @app.route('/<entity_name>', methods=['POST'])
    def create_entry(entity_name: str):
        if not store.has_entity(entity_name):
            return _not_found()
        body = _parse_body()
        if body is None:
            return _bad_request()
        return jsonify(store.create_record(entity_name, body))

    @app.route('/<entity_name>/<record_id>', methods=['PUT'])
    def update_entry(entity_name: str, record_id: str):
        if not store.has_entity(entity_name):
            return _not_found()
        body = _parse_body()
        if body is None:
            return _bad_request()
        return jsonify(store.update_record(entity_name, record_id, body))

    return app
