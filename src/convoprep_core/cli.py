"""CLI entry point: convert a JSON message log into provider-ready messages."""

import argparse
import json
import logging
import sys
from typing import TextIO

from pydantic import ValidationError

from convoprep_core.config import ConvoPrepConfig
from convoprep_core.errors import ConvoPrepError
from convoprep_core.model_messages import dump_model_messages
from convoprep_core.pipeline import convert_to_model_messages

logger = logging.getLogger(__name__)


def run_convert(
    source: TextIO,
    out: TextIO,
    *,
    include_cache_control: bool = True,
    indent: int | None = 2,
) -> None:
    """Read a JSON array of messages from ``source`` and write the result to ``out``."""
    raw = json.load(source)
    if not isinstance(raw, list):
        raise ValueError("Expected a JSON array of messages")
    result = convert_to_model_messages(
        raw,
        include_cache_control=include_cache_control,
        config=ConvoPrepConfig(),
    )
    json.dump(dump_model_messages(result, json_safe=True), out, indent=indent, ensure_ascii=False)
    out.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="convoprep",
        description="convoprep: message history normalization and prompt caching",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    sub = parser.add_subparsers(dest="command")

    convert_parser = sub.add_parser(
        "convert", help="Convert a JSON message log to provider-ready messages"
    )
    convert_parser.add_argument(
        "file",
        nargs="?",
        type=argparse.FileType("r", encoding="utf-8"),
        default=sys.stdin,
        help="JSON file with an array of messages (default: stdin)",
    )
    convert_parser.add_argument(
        "--no-cache-control",
        dest="include_cache_control",
        action="store_false",
        help="Do not place cache anchors",
    )
    convert_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation of the output (default: 2)",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    if args.command == "convert":
        try:
            run_convert(
                args.file,
                sys.stdout,
                include_cache_control=args.include_cache_control,
                indent=args.indent,
            )
        except (ConvoPrepError, ValidationError, ValueError) as e:
            logger.debug("convert failed", exc_info=True)
            message = str(e).splitlines()[0] if str(e) else type(e).__name__
            print(f"error: {message}", file=sys.stderr)
            sys.exit(1)
        finally:
            if args.file is not sys.stdin:
                args.file.close()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
