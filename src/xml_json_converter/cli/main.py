"""Main CLI entry point for the xml-json command-line tool.

Converts XML files to JSON (``xml-json tojson``) and JSON files to XML
(``xml-json toxml``). ``-`` reads from standard input.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml_json_converter import __version__
from xml_json_converter.api import encode_json, to_json, to_xml
from xml_json_converter.shared.config import (
    ConfigError,
    ToJsonConfig,
    ToXmlConfig,
)
from xml_json_converter.shared.errors import ParseError
from xml_json_converter.shared.logging import get_logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT

logger = get_logger(__name__, component="cli")


def load_options(config_path: Optional[Path]) -> Dict[str, Any]:
    """Load conversion options from a JSON file.

    The file holds a flat mapping of option names, e.g.
    ``{"reversible": true, "arrayNotation": ["item"]}``.
    """
    if config_path is None:
        return {}
    with config_path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {config_path}")
    return data


def read_input(path: Path) -> bytes:
    """Read raw input bytes from a file, or from stdin for ``-``."""
    if str(path) == "-":
        return sys.stdin.buffer.read()
    return path.read_bytes()


def write_output(text: str, output: Optional[Path]) -> None:
    """Write converted text to a file or stdout."""
    if output is None:
        print(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    print(f"Output written to {output}", file=sys.stderr)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-json",
        description="Convert between XML documents and JSON"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # tojson command
    json_parser = subparsers.add_parser("tojson", help="Convert XML to JSON")
    json_parser.add_argument("path", type=Path, help="XML file, or - for stdin")
    json_parser.add_argument(
        "--reversible",
        action="store_true",
        help="Keep text nodes so the JSON converts back to the same XML"
    )
    json_parser.add_argument(
        "--coerce",
        action="store_true",
        help="Convert numeric and boolean values"
    )
    json_parser.add_argument(
        "--no-trim",
        dest="trim",
        action="store_false",
        help="Keep surrounding whitespace in text"
    )
    arrays = json_parser.add_mutually_exclusive_group()
    arrays.add_argument(
        "--array-notation",
        action="store_true",
        help="Represent every element as an array"
    )
    arrays.add_argument(
        "--force-array",
        action="append",
        metavar="NAME",
        help="Always represent NAME as an array (repeatable)"
    )
    json_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output"
    )

    # toxml command
    xml_parser = subparsers.add_parser("toxml", help="Convert JSON to XML")
    xml_parser.add_argument("path", type=Path, help="JSON file, or - for stdin")
    xml_parser.add_argument(
        "--ignore-null",
        action="store_true",
        help="Omit null values instead of writing empty elements"
    )

    for sub in (json_parser, xml_parser):
        sub.add_argument(
            "--text-node",
            metavar="KEY",
            help="Key holding element text (default: $t)"
        )
        sub.add_argument(
            "--sanitize",
            action="store_true",
            help="Escape XML reserved characters in values"
        )
        sub.add_argument(
            "--config", "-c",
            type=Path,
            help="JSON file with conversion options"
        )
        sub.add_argument(
            "--output", "-o",
            type=Path,
            help="Output file (default: stdout)"
        )

    return parser


def _common_options(args: argparse.Namespace) -> Dict[str, Any]:
    options = load_options(args.config)
    if args.text_node:
        options["alternate_text_node"] = args.text_node
    if args.sanitize:
        options["sanitize"] = True
    return options


def cmd_tojson(args: argparse.Namespace) -> int:
    """Handle tojson command."""
    options = _common_options(args)
    if args.reversible:
        options["reversible"] = True
    if args.coerce:
        options["coerce"] = True
    if not args.trim:
        options["trim"] = False
    if args.array_notation:
        options["array_notation"] = True
    elif args.force_array:
        options["array_notation"] = args.force_array

    config = ToJsonConfig.from_dict(options).override(as_object=True)
    node = to_json(read_input(args.path), config)
    write_output(encode_json(node, indent=2 if args.pretty else None), args.output)
    return EXIT_OK


def cmd_toxml(args: argparse.Namespace) -> int:
    """Handle toxml command."""
    options = _common_options(args)
    if args.ignore_null:
        options["ignore_null"] = True

    config = ToXmlConfig.from_dict(options)
    write_output(to_xml(read_input(args.path), config), args.output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    handlers = {"tojson": cmd_tojson, "toxml": cmd_toxml}
    try:
        return handlers[args.command](args)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except (ConfigError, ValueError, OSError) as e:
        logger.debug("Conversion failed", extra={"error_type": type(e).__name__})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
