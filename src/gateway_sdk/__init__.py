"""
Gateway Python SDK
Signed requests and access token management for the API gateway
"""

from .version import __version__
from .exceptions import (
    GatewaySDKError,
    ConfigurationError,
    TransportError,
    ProtocolError,
)
from .config import (
    ClientConfig,
    load_client_config_from_dict,
    load_client_config_from_json,
    load_client_config_from_file,
    load_client_config_from_env,
)
from .signing import (
    # Engine
    build_header_block,
    process_body,
    join,
    sign,
    build_canonical_string,
    # Signer and types
    RequestSigner,
    create_signer,
    SigningContext,
    SignatureResult,
    HttpMethod,
    # Utilities
    generate_nonce,
    generate_timestamp,
    build_query_string,
)
from .cache import (
    TokenCache,
    InMemoryTokenCache,
    CacheEntry,
    token_cache_key,
    shared_token_cache,
    reset_shared_token_cache,
)
from .auth import (
    TokenManager,
    TokenMetrics,
)
from .transport import (
    HttpRequest,
    HttpResponse,
    Transport,
    HttpxTransport,
    RequestsTransport,
)
from .json_fields import extract_field
from .diagnostics import build_curl_command
from .result import Result, capture
from .client import (
    GatewayClient,
    create_client,
)


# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'GatewaySDKError',
    'ConfigurationError',
    'TransportError',
    'ProtocolError',
    # Configuration
    'ClientConfig',
    'load_client_config_from_dict',
    'load_client_config_from_json',
    'load_client_config_from_file',
    'load_client_config_from_env',
    # Signing
    'build_header_block',
    'process_body',
    'join',
    'sign',
    'build_canonical_string',
    'RequestSigner',
    'create_signer',
    'SigningContext',
    'SignatureResult',
    'HttpMethod',
    'generate_nonce',
    'generate_timestamp',
    'build_query_string',
    # Token cache
    'TokenCache',
    'InMemoryTokenCache',
    'CacheEntry',
    'token_cache_key',
    'shared_token_cache',
    'reset_shared_token_cache',
    # Token management
    'TokenManager',
    'TokenMetrics',
    # Transports
    'HttpRequest',
    'HttpResponse',
    'Transport',
    'HttpxTransport',
    'RequestsTransport',
    # Helpers
    'extract_field',
    'build_curl_command',
    'Result',
    'capture',
    # Client
    'GatewayClient',
    'create_client',
]
