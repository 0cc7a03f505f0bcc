"""Command line tools for cursor pagination.

``generate-secret`` prints a new secret for ``build_cursor_secret()``.
``decode-cursor`` decrypts a cursor with the configured secret, which is
handy when debugging rejected cursors.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import configure_logging, get_settings
from .errors import SqlCursorPaginationError
from .pagination import decrypt_cursor, generate_secret, get_cursor_secret

logger = logging.getLogger(__name__)


def _generate_secret(args: argparse.Namespace) -> int:
    secret = generate_secret()
    if args.env:
        print(f"CURSOR_PAGINATION_CURSOR_SECRET={secret}")
    else:
        print(secret)
    return 0


async def _decode_cursor(cursor: str) -> int:
    cursor_secret = await get_cursor_secret()
    decoded = decrypt_cursor(cursor, cursor_secret)
    if decoded is None:
        logger.error("Cursor is invalid or was created with a different secret")
        return 1
    print(decoded.model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cursor-pagination", description="Cursor pagination tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate-secret", help="Generate a random cursor secret")
    generate.add_argument("--env", action="store_true", help="Print as an environment variable assignment")

    decode = subparsers.add_parser("decode-cursor", help="Decrypt a cursor with the configured secret")
    decode.add_argument("cursor", help="Encoded cursor string")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings())

    if args.command == "generate-secret":
        return _generate_secret(args)

    try:
        return asyncio.run(_decode_cursor(args.cursor))
    except SqlCursorPaginationError as e:
        logger.error(e.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())
