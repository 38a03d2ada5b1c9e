"""
Access token management

This module provides the token manager that acquires, caches and refreshes the
short-lived access token issued by the gateway's authentication endpoint.
Concurrent callers share a single in-flight refresh per identity.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

from ..cache.base import TokenCache, token_cache_key
from ..exceptions import ConfigurationError, GatewaySDKError, ProtocolError, TransportError
from ..json_fields import extract_field
from ..result import Result, capture
from ..signing.signer import RequestSigner
from ..signing.utils import mask_secret
from ..transport.base import HttpRequest, Transport

logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "auth"
ACCESS_KEY_FIELD = "accessKey"
EXPIRE_SECONDS_FIELD = "expireSeconds"

# Subtracted from the advertised lifetime to absorb clock skew and latency
DEFAULT_EXPIRY_BUFFER_SECONDS = 60


@dataclass
class TokenMetrics:
    """Counters describing token acquisition"""
    cache_hits: int = 0
    cache_misses: int = 0
    refreshes: int = 0
    refresh_failures: int = 0
    last_refresh_at: Optional[float] = None

    @property
    def cache_hit_rate(self) -> float:
        """Calculate cache hit rate"""
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return self.cache_hits / total


class TokenManager:
    """
    Produces a currently valid access token for one identity

    Lookups that hit the cache take no lock and make no network call. On a
    miss the caller takes the refresh lock for the identity's cache key,
    checks the cache again and only then authenticates, so at most one
    authentication call per key is in flight at any time.
    """

    def __init__(
        self,
        access_id: str,
        secret_key: str,
        base_url: str,
        transport: Transport,
        token_cache: TokenCache,
        signer: Optional[RequestSigner] = None,
        buffer_seconds: int = DEFAULT_EXPIRY_BUFFER_SECONDS
    ):
        """
        Initialize the token manager.

        Args:
            access_id: Access identity
            secret_key: Secret key
            base_url: Gateway base URL
            transport: Transport used for the authentication call
            token_cache: Token storage
            signer: Optional signer (created from the identity if not provided)
            buffer_seconds: Seconds subtracted from the advertised token lifetime

        Raises:
            ConfigurationError: If identity, secret or base URL is invalid
        """
        if not base_url:
            raise ConfigurationError("base_url cannot be empty")
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"Invalid base URL format: {base_url}")
        if not access_id:
            raise ConfigurationError("access_id cannot be empty")
        if not secret_key:
            raise ConfigurationError("secret_key cannot be empty")
        if token_cache is None:
            raise ConfigurationError("token_cache is required")

        self.access_id = access_id
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.transport = transport
        self.token_cache = token_cache
        self.signer = signer or RequestSigner(access_id, secret_key)
        self.buffer_seconds = buffer_seconds
        self.cache_key = token_cache_key(access_id)
        self.metrics = TokenMetrics()

        # One lock per cache key, paired with the loop it was created in
        self._refresh_locks: Dict[str, Tuple[asyncio.AbstractEventLoop, asyncio.Lock]] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        """Return the refresh lock for ``key`` usable in the running loop"""
        loop = asyncio.get_running_loop()
        entry = self._refresh_locks.get(key)
        if entry is None or entry[0] is not loop:
            # A lock is bound to the loop it was first used in; replace it
            # when the manager is reused under a new loop
            entry = self._refresh_locks[key] = (loop, asyncio.Lock())
        return entry[1]

    async def get_token(self, timeout: Optional[float] = None) -> str:
        """
        Get a valid access token, refreshing it if needed.

        Args:
            timeout: Optional bound in seconds on waiting for the refresh lock
                and the authentication call together

        Returns:
            str: Access token

        Raises:
            ProtocolError: If the authentication endpoint rejects the request
                or returns an unusable body
            TransportError: If the authentication call fails or times out
        """
        token = await self.token_cache.get(self.cache_key)
        if token:
            self.metrics.cache_hits += 1
            return token

        self.metrics.cache_misses += 1

        if timeout is None:
            return await self._refresh(self.cache_key, None)

        try:
            return await asyncio.wait_for(self._refresh(self.cache_key, timeout), timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Timed out after {timeout} seconds waiting for access token",
                "TOKEN_TIMEOUT",
                {'access_id': self.access_id}
            ) from e

    async def try_get_token(self, timeout: Optional[float] = None) -> Result[str]:
        """Like :meth:`get_token` but returns a :class:`Result` instead of raising"""
        return await capture(self.get_token(timeout))

    async def _refresh(self, key: str, timeout: Optional[float]) -> str:
        async with self._lock_for(key):
            # Another caller may have refreshed while we waited
            token = await self.token_cache.get(key)
            if token:
                logger.debug(f"Token for {self.access_id} refreshed by a concurrent caller")
                return token

            try:
                access_key, expire_seconds = await self._authenticate(timeout)
            except GatewaySDKError:
                self.metrics.refresh_failures += 1
                raise

            ttl_seconds = expire_seconds - self.buffer_seconds
            if ttl_seconds <= 0:
                logger.warning(
                    f"Token lifetime {expire_seconds}s does not exceed the {self.buffer_seconds}s "
                    f"expiry buffer; it will not be served from cache"
                )

            await self.token_cache.set(key, access_key, ttl_seconds)

            self.metrics.refreshes += 1
            self.metrics.last_refresh_at = time.time()
            logger.info(
                f"Access token refreshed for {self.access_id}: {mask_secret(access_key)} "
                f"(cached for {ttl_seconds}s)"
            )
            return access_key

    async def _authenticate(self, timeout: Optional[float]) -> Tuple[str, int]:
        """
        Call the authentication endpoint.

        Returns:
            Tuple of (access_key, expire_seconds)
        """
        signature = self.signer.sign("GET", AUTH_ENDPOINT)
        request = HttpRequest(
            method="GET",
            url=self.base_url + AUTH_ENDPOINT,
            headers=dict(signature.headers),
        )

        logger.debug(f"Requesting access token for {self.access_id} from {request.url}")
        response = await self.transport.send(request, timeout)

        if not response.ok:
            raise ProtocolError(
                f"Authentication failed: HTTP {response.status_code}",
                "AUTH_HTTP_ERROR",
                http_status=response.status_code,
                method=request.method,
                url=request.url,
                response_body=response.text,
                request_headers=request.headers,
            )

        body = response.text
        access_key = extract_field(body, ACCESS_KEY_FIELD)
        expire_text = extract_field(body, EXPIRE_SECONDS_FIELD)

        expire_seconds = None
        if expire_text:
            try:
                expire_seconds = int(expire_text)
            except ValueError:
                expire_seconds = None

        if not access_key or expire_seconds is None:
            raise ProtocolError(
                f"Unable to parse {ACCESS_KEY_FIELD} or {EXPIRE_SECONDS_FIELD} from response. "
                f"Response body: {body}",
                "AUTH_RESPONSE_INVALID",
                http_status=response.status_code,
                method=request.method,
                url=request.url,
                response_body=body,
            )

        return access_key, expire_seconds

    async def invalidate(self) -> None:
        """Drop the cached token so the next call authenticates again"""
        # An empty token is never served, so this works for any cache implementation
        await self.token_cache.set(self.cache_key, "", 0)
        logger.debug(f"Cached token invalidated for {self.access_id}")

    def close(self) -> None:
        """Release refresh lock resources"""
        self._refresh_locks.clear()

    def __repr__(self) -> str:
        return f"TokenManager(access_id={self.access_id!r}, base_url={self.base_url!r})"
