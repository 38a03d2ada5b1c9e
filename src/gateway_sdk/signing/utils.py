"""
Utility functions for request signing

This module provides nonce and timestamp generation, sorted query string
construction and small normalization helpers shared by the signer and the
client.
"""

import re
import secrets
import time
from typing import Mapping, Optional


_NONCE_PATTERN = re.compile(r'^[1-9][0-9]{5}$')


def generate_nonce() -> str:
    """
    Generate a random 6-digit decimal nonce.

    Returns:
        str: Nonce in the range 100000-999999
    """
    return str(100000 + secrets.randbelow(900000))


def generate_timestamp() -> str:
    """
    Generate the current Unix time in milliseconds.

    Returns:
        str: Milliseconds since epoch as a decimal string
    """
    return str(int(time.time() * 1000))


def validate_nonce(nonce: str) -> bool:
    """
    Validate nonce format (6 decimal digits, no leading zero).

    Args:
        nonce: Nonce string to validate

    Returns:
        bool: True if nonce is valid
    """
    if not isinstance(nonce, str):
        return False

    return bool(_NONCE_PATTERN.match(nonce))


def validate_timestamp(timestamp: str) -> bool:
    """
    Validate a millisecond timestamp string.

    Args:
        timestamp: Millisecond timestamp to validate

    Returns:
        bool: True if it is a decimal string between 2000 and 2100
    """
    if not isinstance(timestamp, str) or not timestamp.isdigit():
        return False

    year_2000_ms = 946684800000
    year_2100_ms = 4102444800000

    return year_2000_ms <= int(timestamp) <= year_2100_ms


def build_query_string(query_params: Optional[Mapping[str, Optional[str]]]) -> str:
    """
    Build the sorted query string used for both signing and the request URL.

    Parameters are sorted by key and those with empty values are dropped.
    Values are not URL-encoded beyond what the caller already supplied.

    Args:
        query_params: Query parameters

    Returns:
        str: ``k1=v1&k2=v2`` or empty string
    """
    if not query_params:
        return ""

    return "&".join(
        f"{key}={value}"
        for key, value in sorted(query_params.items())
        if value is not None and str(value) != ""
    )


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.lower().strip()


def normalize_path(path: str) -> str:
    """
    Return ``path`` with exactly one leading slash.

    Raises:
        ValueError: If the path carries a query string; query parameters are
            passed separately so that they are sorted and signed
    """
    if '?' in path:
        raise ValueError(f"Path must not contain a query string, pass query_params instead: {path}")
    return '/' + path.lstrip('/')


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Mask a secret or token for logging, keeping the first few characters."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)
