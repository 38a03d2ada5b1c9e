"""
Async transport backed by httpx
"""

import logging
from typing import Dict, Optional

import httpx

from ..exceptions import TransportError
from .base import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Transport sending requests through an ``httpx.AsyncClient``

    A client passed in stays owned by the caller; a client created here is
    closed by :meth:`close`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None
    ):
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, verify=verify_ssl, headers=headers)

    async def send(self, request: HttpRequest, timeout: Optional[float] = None) -> HttpResponse:
        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            logger.debug(f"Making {request.method} request to {request.url}")
            response = await self.client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body.encode('utf-8') if request.body else None,
                timeout=effective_timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timeout after {effective_timeout} seconds",
                "TRANSPORT_TIMEOUT",
                {'method': request.method, 'url': request.url}
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Request failed: {e}",
                details={'method': request.method, 'url': request.url}
            ) from e

        return HttpResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    async def close(self) -> None:
        """Close the underlying client if this transport created it"""
        if self._owns_client:
            await self.client.aclose()
            logger.debug("httpx client closed")
