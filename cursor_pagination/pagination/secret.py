"""Cursor secret derivation.

A secret string is hashed once with SHA-256 and the digest is imported twice:
as an HMAC-SHA-256 key that can only sign, and as an AES-GCM key that can only
encrypt and decrypt. The resulting ``CursorSecret`` is immutable and safe to
share between concurrent pagination calls.
"""

import asyncio
import hashlib
import logging
import secrets
from typing import Annotated, Dict, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import StringConstraints, TypeAdapter, ValidationError

from ..config import Settings, get_settings
from ..errors import ErrInvalidCursorSecret, ErrUnexpected

logger = logging.getLogger(__name__)

SECRET_MIN_LENGTH = 30

_secret_adapter = TypeAdapter(
    Annotated[str, StringConstraints(strict=True, min_length=SECRET_MIN_LENGTH)]
)

# Derived secrets keyed by the configured secret value
_derived_secrets: Dict[str, "CursorSecret"] = {}


class _HmacSigner:
    """HMAC-SHA-256 key with the sign capability only."""

    __slots__ = ("_key",)

    def __init__(self, key: bytes):
        # Fails early with UnsupportedAlgorithm if the backend lacks HMAC-SHA-256
        hmac.HMAC(key, hashes.SHA256())
        self._key = key

    def sign(self, data: bytes) -> bytes:
        mac = hmac.HMAC(self._key, hashes.SHA256())
        mac.update(data)
        return mac.finalize()


class CursorSecret:
    """Opaque pair of keys used to sign and encrypt cursors.

    Build one with ``build_cursor_secret()``; the key material is never exposed.
    """

    __slots__ = ("_signer", "_cipher")

    def __init__(self, signer: _HmacSigner, cipher: AESGCM):
        self._signer = signer
        self._cipher = cipher

    def sign(self, data: bytes) -> bytes:
        """Return the HMAC-SHA-256 of ``data``."""
        return self._signer.sign(data)

    def encrypt(self, nonce: bytes, data: bytes) -> bytes:
        """AES-GCM encrypt ``data``; the result carries the 16 byte tag."""
        return self._cipher.encrypt(nonce, data, None)

    def decrypt(self, nonce: bytes, data: bytes) -> bytes:
        """AES-GCM decrypt ``data``.

        Raises:
            cryptography.exceptions.InvalidTag: If authentication fails
            ValueError: If the nonce length is not supported
        """
        return self._cipher.decrypt(nonce, data, None)

    def __repr__(self) -> str:
        return "CursorSecret(<redacted>)"


async def build_cursor_secret(secret: str) -> CursorSecret:
    """Derive the cursor keys from a secret string.

    Args:
        secret: Secret of at least 30 characters, see ``generate_secret()``

    Returns:
        CursorSecret to pass as ``cursor_secret`` in the pagination setup

    Raises:
        ErrInvalidCursorSecret: If the secret is not a long enough string
        ErrUnexpected: If the crypto backend lacks HMAC-SHA-256 or AES-GCM
    """
    try:
        secret = _secret_adapter.validate_python(secret)
    except ValidationError as e:
        raise ErrInvalidCursorSecret() from e

    digest = hashlib.sha256(secret.encode("utf-8")).digest()

    try:
        signer, cipher = await asyncio.gather(
            asyncio.to_thread(_HmacSigner, digest),
            asyncio.to_thread(AESGCM, digest),
        )
    except UnsupportedAlgorithm as e:
        logger.error(f"Crypto backend cannot derive cursor keys: {e}")
        raise ErrUnexpected("Crypto support missing") from e

    logger.debug("Derived cursor signing and cipher keys")
    return CursorSecret(signer, cipher)


async def get_cursor_secret(config: Optional[Settings] = None) -> CursorSecret:
    """Return the cursor secret configured in settings, deriving it once.

    Raises:
        ErrUnexpected: If no ``cursor_secret`` is configured
    """
    config = config or get_settings()
    if config.cursor_secret is None:
        raise ErrUnexpected("No `cursor_secret` configured")

    secret = config.cursor_secret.get_secret_value()
    cursor_secret = _derived_secrets.get(secret)
    if cursor_secret is None:
        cursor_secret = await build_cursor_secret(secret)
        _derived_secrets[secret] = cursor_secret
    return cursor_secret


def generate_secret() -> str:
    """Generate a random URL-safe secret suitable for ``build_cursor_secret()``."""
    return secrets.token_urlsafe(SECRET_MIN_LENGTH)
