"""
Transport abstractions

The token manager and the client only talk to the network through an object
implementing :class:`Transport`. Transports never retry; retry policy belongs to
the caller.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, runtime_checkable


@dataclass
class HttpRequest:
    """
    Outbound HTTP request

    Attributes:
        method: HTTP method
        url: Absolute request URL including query string
        headers: Request headers
        body: Optional request body text
    """
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.url:
            raise ValueError("Request URL cannot be empty")
        self.method = self.method.upper()


@dataclass
class HttpResponse:
    """
    HTTP response as seen by the SDK

    Attributes:
        status_code: HTTP status code
        text: Response body text
        headers: Response headers
    """
    status_code: int
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True for 2xx responses"""
        return 200 <= self.status_code < 300


@runtime_checkable
class Transport(Protocol):
    """Protocol for HTTP transports"""

    async def send(self, request: HttpRequest, timeout: Optional[float] = None) -> HttpResponse:
        """
        Send a request and return the response.

        Raises:
            TransportError: If the request could not be completed
        """
        ...

    async def close(self) -> None:
        """Release transport resources"""
        ...
