"""CLI for jsonrest."""

import argparse
import logging
import sys

from jsonrest.domain.models import ServerOptions
from jsonrest.identifiers import get_generator, supported_styles
from jsonrest.store import EntityStore
from jsonrest.store_reader import StoreReader, StoreReadError
from jsonrest.store_writer import StoreWriter, StoreWriteError
from jsonrest.web.app import create_app

# JSONDecodeError, EntityParseError, unknown id styles and bad JSONREST_PORT values are ValueErrors
STORE_ERRORS = (StoreReadError, StoreWriteError, ValueError)


def build_store(options: ServerOptions) -> EntityStore:
    """Load the store file and wire persistence back to the same path.

    Raises:
        StoreReadError: The file is missing or unreadable.
        json.JSONDecodeError: The file is not valid JSON.
        EntityParseError: The document is not an object of arrays of objects.
    """
    id_generator = get_generator(options.id_style)
    document = StoreReader().load(options.store, id_generator)
    writer = StoreWriter(options.store, pretty=options.pretty)
    return EntityStore(document, on_change=writer, id_generator=id_generator)


def dump_store(store_path: str, output_path: str, options: ServerOptions) -> dict[str, int]:
    """Write the store with every entry's identifier assigned to ``output_path``.

    Returns:
        Entity name -> entry count of the written document.
    """
    id_generator = get_generator(options.id_style)
    document = StoreReader().load(store_path, id_generator)
    writer = StoreWriter(output_path, pretty=options.pretty)
    if not writer.write(document.to_json(pretty=options.pretty)):
        raise StoreWriteError(f"Could not write to file {output_path}")
    return {entity.name: len(entity.entries) for entity in document.entities}


def _options_from_args(args: argparse.Namespace) -> ServerOptions:
    options = ServerOptions.from_env()
    if getattr(args, 'store', None):
        options.store = args.store
    if getattr(args, 'port', None) is not None:
        options.port = args.port
    if getattr(args, 'host', None):
        options.host = args.host
    if getattr(args, 'id_style', None):
        options.id_style = args.id_style
    if getattr(args, 'no_pretty', False):
        options.pretty = False
    return options


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='jsonrest', description='Serve a JSON document as REST resources')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command')

    # serve command
    serve_parser = subparsers.add_parser('serve', help='Serve the store over HTTP')
    serve_parser.add_argument('--store', help='JSON file to store/retrieve data from (default: ./db.json)')
    serve_parser.add_argument('--port', type=int, help='The port to run the server on (default: 8080)')
    serve_parser.add_argument('--host', help='Interface to bind (default: all interfaces)')
    serve_parser.add_argument('--id-style', choices=supported_styles(), help='Identifier style for new entries')
    serve_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')

    # entities command
    entities_parser = subparsers.add_parser('entities', help='List entities and their entry counts')
    entities_parser.add_argument('--store', help='JSON file to read (default: ./db.json)')

    # dump command
    dump_parser = subparsers.add_parser('dump', help='Write the store with all identifiers assigned')
    dump_parser.add_argument('output', help='Output JSON file')
    dump_parser.add_argument('--store', help='JSON file to read (default: ./db.json)')
    dump_parser.add_argument('--id-style', choices=supported_styles(), help='Identifier style for missing ids')
    dump_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return

    try:
        options = _options_from_args(args)
    except ValueError as e:
        _fail(str(e))

    if args.command == 'serve':
        try:
            store = build_store(options)
        except STORE_ERRORS as e:
            _fail(str(e))

        app = create_app(store, pretty=options.pretty)
        print(f"Server running on port {options.port}")
        app.run(host=options.host, port=options.port)

    elif args.command == 'entities':
        try:
            store = build_store(options)
        except STORE_ERRORS as e:
            _fail(str(e))
        for name, count in store.counts().items():
            print(f"  {name}: {count}")

    elif args.command == 'dump':
        try:
            counts = dump_store(options.store, args.output, options)
        except STORE_ERRORS as e:
            _fail(str(e))
        print(f"Done! Wrote {len(counts)} entities ({sum(counts.values())} entries)")
        print(f"Output: {args.output}")


if __name__ == '__main__':
    main()
