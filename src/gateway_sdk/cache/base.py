"""
Token cache capability

Any storage that honours this read/write contract (in-memory, Redis, ...) can
be handed to the token manager.
"""

from abc import ABC, abstractmethod
from typing import Optional


TOKEN_CACHE_KEY_PREFIX = "gateway_token::"


def token_cache_key(access_id: str) -> str:
    """Return the cache key holding the token of ``access_id``."""
    return f"{TOKEN_CACHE_KEY_PREFIX}{access_id}"


class TokenCache(ABC):
    """Async get/set-with-TTL storage for access tokens"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get a token from the cache.

        Args:
            key: Cache key, see :func:`token_cache_key`

        Returns:
            Optional[str]: The token if present and not expired, otherwise None
        """

    @abstractmethod
    async def set(self, key: str, token: str, ttl_seconds: int) -> None:
        """
        Store a token.

        Args:
            key: Cache key
            token: Access token
            ttl_seconds: Lifetime in seconds; zero or negative means the entry
                is already expired
        """
