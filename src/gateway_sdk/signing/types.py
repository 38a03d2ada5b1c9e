"""
Type definitions for request signing functionality

This module provides the constants and data classes describing the gateway's
V3 signature scheme: the headers that take part in a signature, the signing
context a canonical string is built from, and the signing result.
"""

from typing import Dict, List, Callable
from dataclasses import dataclass, field
from enum import Enum


# Signed-header wire contract
ACCESS_ID_HEADER = "x-access-id"
NONCE_HEADER = "x-nonce"
SIGN_VERSION_HEADER = "x-sign-version"
TIMESTAMP_HEADER = "x-timestamp"
SIGNATURE_HEADER = "x-signature"
SIGNATURE_HEADERS_HEADER = "x-signature-headers"
ACCESS_TOKEN_HEADER = "open-access-key"

SIGN_VERSION = "V3"

# Digest used for both the body digest and the signature itself
SIGN_DIGEST = "md5"


class HttpMethod(str, Enum):
    """HTTP methods supported for signing"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class SigningContext:
    """
    Inputs of one canonical string

    Attributes:
        method: HTTP method, upper-cased and checked against HttpMethod
        path: Request path without query string
        sorted_headers: Headers to sign, ordered by name
        query_string: Sorted query string (may be empty)
        body_digest: Processed body digest (may be empty)
        secret: Secret key appended as the last line
    """
    method: str
    path: str
    sorted_headers: Dict[str, str] = field(default_factory=dict)
    query_string: str = ""
    body_digest: str = ""
    secret: str = ""

    def __post_init__(self):
        """Normalize method and header ordering"""
        self.method = HttpMethod(self.method.upper()).value
        self.sorted_headers = dict(sorted(self.sorted_headers.items()))


@dataclass
class SignatureResult:
    """
    Generated signature for one request

    Attributes:
        headers: Every header to attach (signed headers, signature list, signature)
        signature: Lowercase hex signature
        canonical_string: Canonical string that was signed
        signed_header_names: Sorted names of the signed headers
        nonce: Nonce used for this signature
        timestamp: Millisecond timestamp used for this signature
        query_string: Sorted query string that was signed
        body_digest: Processed body digest that was signed
    """
    headers: Dict[str, str]
    signature: str
    canonical_string: str
    signed_header_names: List[str]
    nonce: str
    timestamp: str
    query_string: str = ""
    body_digest: str = ""


NonceGenerator = Callable[[], str]
TimestampGenerator = Callable[[], str]
