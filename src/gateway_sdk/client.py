"""
Gateway client for signed business calls

This module provides the client that attaches the current access token and the
V3 signature headers to outbound business requests, sends them through a
transport and surfaces failures with enough context to replay them by hand.
"""

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .auth.token_manager import TokenManager
from .cache.base import TokenCache
from .cache.memory import shared_token_cache
from .config import ClientConfig
from .diagnostics import build_curl_command
from .exceptions import ProtocolError
from .result import Result, capture
from .signing.signer import RequestSigner
from .signing.types import ACCESS_TOKEN_HEADER, SIGNATURE_HEADER
from .signing.utils import normalize_header_name, normalize_path
from .transport.base import HttpRequest, Transport
from .transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

RequestBody = Union[str, Dict[str, Any], list, None]


class GatewayClient:
    """
    Client for the API gateway

    The client signs every request with a fresh nonce and timestamp, adds the
    access token obtained from its :class:`TokenManager` and never retries;
    retry policy belongs to the caller.

    Extra headers passed to :meth:`request` are applied last. A name that
    collides with a signed header or the token header (compared
    case-insensitively) replaces it; the last write wins and a warning is
    logged, since the gateway will then reject the signature.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        token_cache: Optional[TokenCache] = None,
        token_manager: Optional[TokenManager] = None,
        signer: Optional[RequestSigner] = None
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration
            transport: Optional transport (an httpx transport is created if not provided)
            token_cache: Optional token cache (the process-wide shared cache if not provided)
            token_manager: Optional pre-built token manager
            signer: Optional pre-built signer
        """
        self.config = config

        self._owns_transport = transport is None
        if transport is None:
            default_headers = {'User-Agent': config.user_agent}
            default_headers.update(config.default_headers)
            transport = HttpxTransport(
                timeout=config.timeout,
                verify_ssl=config.verify_ssl,
                headers=default_headers,
            )
        self.transport = transport

        self.signer = signer or RequestSigner(config.access_id, config.secret_key)

        if token_manager is None:
            token_manager = TokenManager(
                access_id=config.access_id,
                secret_key=config.secret_key,
                base_url=config.base_url,
                transport=self.transport,
                token_cache=token_cache if token_cache is not None else shared_token_cache(),
                signer=self.signer,
                buffer_seconds=config.token_buffer_seconds,
            )
        self.token_manager = token_manager

        logger.info(f"Initialized gateway client for {config.base_url} (access id: {config.access_id})")

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs) -> 'GatewayClient':
        """Create a client from a configuration"""
        return cls(config, **kwargs)

    async def __aenter__(self) -> 'GatewayClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get_token(self, timeout: Optional[float] = None) -> str:
        """Get the current access token"""
        return await self.token_manager.get_token(timeout)

    def _build_url(self, path: str, query_string: str) -> str:
        url = self.config.base_url + path.lstrip('/')
        if query_string:
            url += f"?{query_string}"
        return url

    @staticmethod
    def _serialize_body(body: RequestBody) -> Optional[str]:
        if body is None or isinstance(body, str):
            return body
        return json.dumps(body, ensure_ascii=False)

    @staticmethod
    def _apply_extra_headers(
        request_headers: Dict[str, str],
        extra_headers: Mapping[str, str],
        protected: Iterable[str]
    ) -> None:
        protected = {normalize_header_name(name) for name in protected}

        for name, value in extra_headers.items():
            normalized = normalize_header_name(name)
            if normalized in protected:
                logger.warning(f"Extra header '{name}' overrides the signed or token header '{normalized}'")
            for existing in [key for key in request_headers if normalize_header_name(key) == normalized]:
                del request_headers[existing]
            request_headers[name] = value

    async def request(
        self,
        method: str,
        path: str,
        body: RequestBody = None,
        query_params: Optional[Mapping[str, Optional[str]]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None
    ) -> str:
        """
        Make a signed business request.

        Args:
            method: HTTP method
            path: Path relative to the base URL; query parameters go in
                ``query_params``, never inline
            body: JSON body as text, or an object serialized with ``json.dumps``
            query_params: Query parameters; sorted, empty values dropped
            headers: Extra headers, applied after the signed headers
            timeout: Optional timeout in seconds, applied to token acquisition
                and to the request separately

        Returns:
            str: Response body

        Raises:
            ProtocolError: On non-2xx responses
            TransportError: If the request could not be completed
            ValueError: If ``path`` contains a query string or ``method`` is unknown
        """
        path = normalize_path(path)
        body_text = self._serialize_body(body)
        token = await self.token_manager.get_token(timeout)

        signature = self.signer.sign(method, path, body_text, query_params)

        request_headers = {ACCESS_TOKEN_HEADER: token}
        request_headers.update(signature.headers)
        protected = list(request_headers)
        if body_text:
            request_headers['content-type'] = JSON_CONTENT_TYPE
        if headers:
            self._apply_extra_headers(request_headers, headers, protected)

        request = HttpRequest(
            method=method,
            url=self._build_url(path, signature.query_string),
            headers=request_headers,
            body=body_text or None,
        )

        logger.debug(f"Sending {request.method} {request.url}")
        response = await self.transport.send(request, timeout)

        if not response.ok:
            logger.error(
                "--- Begin CURL Info for failed request ---\n"
                f"{build_curl_command(request, masked_headers=(ACCESS_TOKEN_HEADER, SIGNATURE_HEADER))}\n"
                f"Response Status: {response.status_code}\n"
                f"Response Body: {response.text}\n"
                "--- End CURL Info ---"
            )
            raise ProtocolError(
                f"Request failed: {request.method} {request.url} returned HTTP {response.status_code}",
                "HTTP_ERROR",
                http_status=response.status_code,
                method=request.method,
                url=request.url,
                response_body=response.text,
                request_headers=request.headers,
                curl_command=build_curl_command(request),
            )

        return response.text

    async def try_request(self, method: str, path: str, **kwargs) -> Result[str]:
        """Like :meth:`request` but returns a :class:`Result` instead of raising"""
        return await capture(self.request(method, path, **kwargs))

    async def get(self, path: str, **kwargs) -> str:
        """Make a signed GET request"""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, body: RequestBody = None, **kwargs) -> str:
        """Make a signed POST request"""
        return await self.request("POST", path, body=body, **kwargs)

    async def put(self, path: str, body: RequestBody = None, **kwargs) -> str:
        """Make a signed PUT request"""
        return await self.request("PUT", path, body=body, **kwargs)

    async def delete(self, path: str, **kwargs) -> str:
        """Make a signed DELETE request"""
        return await self.request("DELETE", path, **kwargs)

    async def close(self) -> None:
        """Release the token manager and any transport created by this client"""
        self.token_manager.close()
        if self._owns_transport:
            await self.transport.close()
        logger.debug("Gateway client closed")


def create_client(
    base_url: str,
    access_id: str,
    secret_key: str,
    transport: Optional[Transport] = None,
    token_cache: Optional[TokenCache] = None,
    **config_kwargs
) -> GatewayClient:
    """
    Create a gateway client with default configuration.

    Args:
        base_url: Gateway base URL
        access_id: Access identity
        secret_key: Secret key
        transport: Optional transport
        token_cache: Optional token cache (the process-wide shared cache if not provided)
        **config_kwargs: Further :class:`ClientConfig` fields

    Returns:
        GatewayClient: Configured client
    """
    config = ClientConfig(
        base_url=base_url,
        access_id=access_id,
        secret_key=secret_key,
        **config_kwargs
    )
    return GatewayClient(config, transport=transport, token_cache=token_cache)
