"""
Transport backed by a requests session

The blocking session call runs in the event loop's default executor so that
awaiting callers are not blocked.
"""

import asyncio
import functools
import logging
from typing import Dict, Optional

import requests

from ..exceptions import TransportError
from .base import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class RequestsTransport:
    """Transport sending requests through a ``requests.Session``"""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None
    ):
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._owns_session = session is None
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

    def _send_sync(self, request: HttpRequest, timeout: float) -> HttpResponse:
        try:
            logger.debug(f"Making {request.method} request to {request.url}")
            response = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body.encode('utf-8') if request.body else None,
                timeout=timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(
                f"Request timeout after {timeout} seconds",
                "TRANSPORT_TIMEOUT",
                {'method': request.method, 'url': request.url}
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(
                f"Connection error: {e}",
                details={'method': request.method, 'url': request.url}
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Request failed: {e}",
                details={'method': request.method, 'url': request.url}
            ) from e

        response.encoding = response.encoding or 'utf-8'
        return HttpResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    async def send(self, request: HttpRequest, timeout: Optional[float] = None) -> HttpResponse:
        effective_timeout = timeout if timeout is not None else self.timeout
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(self._send_sync, request, effective_timeout)
        )

    async def close(self) -> None:
        """Close the session if this transport created it"""
        if self._owns_session:
            self.session.close()
            logger.debug("HTTP session closed")
