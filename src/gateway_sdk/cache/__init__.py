"""
Token caching for Gateway Python SDK
"""

from .base import (
    TokenCache,
    token_cache_key,
    TOKEN_CACHE_KEY_PREFIX,
)
from .memory import (
    CacheEntry,
    InMemoryTokenCache,
    shared_token_cache,
    reset_shared_token_cache,
)

__all__ = [
    'TokenCache',
    'token_cache_key',
    'TOKEN_CACHE_KEY_PREFIX',
    'CacheEntry',
    'InMemoryTokenCache',
    'shared_token_cache',
    'reset_shared_token_cache',
]
