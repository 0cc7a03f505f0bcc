"""Cursor encoding utilities for cursor pagination.

An encoded cursor has the form ``<nonce>.<ciphertext>``, both parts URL-safe
base64 without padding. The nonce is the truncated HMAC of the serialized
cursor, so the same cursor always encodes to the same string, and AES-GCM
authentication makes any tampering fail decryption.
"""

import base64
import binascii
import logging
import re
from typing import Any, Mapping, Optional, Sequence, Union

from cryptography.exceptions import InvalidTag
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ErrUnexpected
from ..models import Cursor, CursorField, SortField
from .secret import CursorSecret

logger = logging.getLogger(__name__)

# 128 bit nonce taken from the HMAC-SHA-256 of the cursor
NONCE_SIZE = 16

_ENCODED_CURSOR_RE = re.compile(r"([A-Za-z0-9_-]+)\.([A-Za-z0-9_-]+)")


class RawCursor(BaseModel):
    """A trusted cursor supplied by the caller, used without decryption.

    Create one with ``raw_cursor()``. A bare ``Cursor`` is never accepted as a
    boundary on its own.
    """

    cursor: Cursor

    model_config = ConfigDict(frozen=True)


BoundaryCursor = Union[str, RawCursor, None]


class ResolvedCursor(BaseModel):
    """Outcome of resolving a boundary cursor."""

    success: bool = Field(description="False when an encoded cursor failed to decode")
    cursor: Optional[Cursor] = Field(default=None, description="Resolved cursor, if any")


def raw_cursor(cursor: Union[Cursor, Mapping[str, Any]]) -> RawCursor:
    """Mark a cursor as trusted so it can be passed as a boundary.

    Raises:
        pydantic.ValidationError: If ``cursor`` is not a valid cursor
    """
    return RawCursor(cursor=Cursor.model_validate(cursor))


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> Optional[bytes]:
    padded = segment + "=" * (-len(segment) % 4)
    try:
        data = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return None

    # Reject encodings that only differ in unused trailing bits
    if _b64url_encode(data) != segment:
        return None
    return data


def encrypt_cursor(cursor: Cursor, secret: CursorSecret) -> str:
    """Encrypt and authenticate a cursor.

    Args:
        cursor: The cursor to encode
        secret: Keys from ``build_cursor_secret()``

    Returns:
        Encoded cursor string ``<nonce>.<ciphertext>``
    """
    plaintext = cursor.model_dump_json().encode("utf-8")
    nonce = secret.sign(plaintext)[:NONCE_SIZE]
    ciphertext = secret.encrypt(nonce, plaintext)
    return f"{_b64url_encode(nonce)}.{_b64url_encode(ciphertext)}"


def decrypt_cursor(encoded_cursor: str, secret: CursorSecret) -> Optional[Cursor]:
    """Decrypt an encoded cursor.

    Args:
        encoded_cursor: String produced by ``encrypt_cursor()``
        secret: Keys from ``build_cursor_secret()``

    Returns:
        The cursor, or None if the string is malformed, tampered with, or
        was encrypted with a different secret
    """
    if not isinstance(encoded_cursor, str):
        return None

    match = _ENCODED_CURSOR_RE.fullmatch(encoded_cursor)
    if not match:
        return None

    nonce = _b64url_decode(match.group(1))
    ciphertext = _b64url_decode(match.group(2))
    if nonce is None or ciphertext is None:
        return None

    try:
        plaintext = secret.decrypt(nonce, ciphertext)
    except (InvalidTag, ValueError):
        return None

    try:
        return Cursor.model_validate_json(plaintext)
    except ValidationError:
        return None


def resolve_cursor(cursor: Any, cursor_secret: Optional[CursorSecret]) -> ResolvedCursor:
    """Turn a boundary input into a cursor.

    Args:
        cursor: None, an encoded cursor string, or a ``RawCursor``
        cursor_secret: Keys for decoding strings, or None if cursors are disabled

    Returns:
        ResolvedCursor; ``success`` is False only for undecodable strings

    Raises:
        ErrUnexpected: If a string is given without a secret, or the input is
            neither None, a string nor a ``RawCursor``
    """
    if isinstance(cursor, str):
        if cursor_secret is None:
            raise ErrUnexpected("String cursor not supported when no `cursor_secret` is provided")
        decoded = decrypt_cursor(cursor, cursor_secret)
        if decoded is None:
            logger.warning("Rejected cursor that failed to decrypt")
            return ResolvedCursor(success=False)
        return ResolvedCursor(success=True, cursor=decoded)

    if isinstance(cursor, RawCursor):
        return ResolvedCursor(success=True, cursor=cursor.cursor)

    if cursor is None:
        return ResolvedCursor(success=True)

    raise ErrUnexpected("Invalid cursor. Raw cursors must be wrapped with `raw_cursor()`")


def build_cursor(
    node: Mapping[str, Any],
    query_name: str,
    sort_fields: Sequence[SortField]
) -> Cursor:
    """Build the raw cursor of a result row.

    Raises:
        ErrUnexpected: If a sort field is missing from the row or holds a value
            that cannot be stored in a cursor
    """
    fields = []
    for sort_field in sort_fields:
        if sort_field.alias not in node:
            raise ErrUnexpected(f'"{sort_field.alias}" field is missing')

        value = node[sort_field.alias]
        try:
            fields.append(CursorField(field=sort_field.name, value=value))
        except ValidationError as e:
            raise ErrUnexpected(
                f'"{sort_field.alias}" field has unsupported value {value!r}. '
                "Cursor values must be strings, numbers or booleans"
            ) from e

    return Cursor(query_name=query_name, fields=tuple(fields))
