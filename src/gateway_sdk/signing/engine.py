"""
Canonical string construction and digest signing

Pure functions implementing the gateway's V3 signature scheme. The output of
every function here must match the server's canonicalization byte for byte,
so nothing in this module depends on locale, time or randomness.
"""

import base64
import hashlib
from typing import Mapping, Optional

from .types import SIGN_DIGEST, SigningContext


def _digest_hex(data: str) -> str:
    hasher = hashlib.new(SIGN_DIGEST)
    hasher.update(data.encode('utf-8'))
    return hasher.hexdigest()


def build_header_block(headers: Mapping[str, Optional[str]]) -> str:
    """
    Join signed headers into the canonical header block.

    Args:
        headers: Headers to sign, already sorted by name

    Returns:
        str: ``name:value`` lines joined by newlines, no trailing newline
    """
    return "\n".join(f"{name}:{value if value is not None else ''}" for name, value in headers.items())


def process_body(body: Optional[str]) -> str:
    """
    Compute the body digest that takes part in the canonical string.

    The hex digest of the body is itself base64-encoded; the server expects
    this double encoding.

    Args:
        body: Request body text

    Returns:
        str: Base64 of the lowercase hex digest, or empty string for no body
    """
    if not body:
        return ""

    hex_digest = _digest_hex(body)
    return base64.b64encode(hex_digest.encode('utf-8')).decode('ascii')


def join(
    method: str,
    path: str,
    query: str,
    header_block: str,
    body_digest: str,
    secret: str
) -> str:
    """
    Assemble the canonical string.

    Layout is ``METHOD\\npath\\nmiddle\\nsecret`` where ``middle`` joins the
    non-empty parts of query, header block and body digest, in that order.
    ``middle`` is emitted even when empty.

    Args:
        method: HTTP method (upper-cased here)
        path: Request path without query
        query: Sorted query string
        header_block: Output of :func:`build_header_block`
        body_digest: Output of :func:`process_body`
        secret: Secret key

    Returns:
        str: Canonical string to sign
    """
    middle = "\n".join(part for part in (query, header_block, body_digest) if part)
    return "\n".join([method.upper(), path, middle, secret])


def sign(string_to_sign: str) -> str:
    """
    Sign a canonical string.

    Args:
        string_to_sign: Canonical string

    Returns:
        str: Lowercase hex digest of the UTF-8 bytes
    """
    return _digest_hex(string_to_sign)


def build_canonical_string(context: SigningContext) -> str:
    """Build the canonical string for a signing context."""
    return join(
        context.method,
        context.path,
        context.query_string,
        build_header_block(context.sorted_headers),
        context.body_digest,
        context.secret,
    )
