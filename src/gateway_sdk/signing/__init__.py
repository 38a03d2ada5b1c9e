"""
Gateway Python SDK - Request Signing Module

V3 signature scheme for the API gateway: canonical string construction,
digest signing and the per-identity request signer.
"""

from .types import (
    SigningContext,
    SignatureResult,
    HttpMethod,
    ACCESS_ID_HEADER,
    NONCE_HEADER,
    SIGN_VERSION_HEADER,
    TIMESTAMP_HEADER,
    SIGNATURE_HEADER,
    SIGNATURE_HEADERS_HEADER,
    ACCESS_TOKEN_HEADER,
    SIGN_VERSION,
    SIGN_DIGEST,
)

from .engine import (
    build_header_block,
    process_body,
    join,
    sign,
    build_canonical_string,
)

from .signer import (
    RequestSigner,
    create_signer,
)

from .utils import (
    generate_nonce,
    generate_timestamp,
    validate_nonce,
    validate_timestamp,
    build_query_string,
    normalize_header_name,
    normalize_path,
    mask_secret,
)

# Public API exports
__all__ = [
    # Types
    'SigningContext',
    'SignatureResult',
    'HttpMethod',
    'ACCESS_ID_HEADER',
    'NONCE_HEADER',
    'SIGN_VERSION_HEADER',
    'TIMESTAMP_HEADER',
    'SIGNATURE_HEADER',
    'SIGNATURE_HEADERS_HEADER',
    'ACCESS_TOKEN_HEADER',
    'SIGN_VERSION',
    'SIGN_DIGEST',
    # Engine
    'build_header_block',
    'process_body',
    'join',
    'sign',
    'build_canonical_string',
    # Signer
    'RequestSigner',
    'create_signer',
    # Utilities
    'generate_nonce',
    'generate_timestamp',
    'validate_nonce',
    'validate_timestamp',
    'build_query_string',
    'normalize_header_name',
    'normalize_path',
    'mask_secret',
]
