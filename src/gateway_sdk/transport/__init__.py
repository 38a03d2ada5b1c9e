"""
HTTP transports for Gateway Python SDK
"""

from .base import (
    HttpRequest,
    HttpResponse,
    Transport,
)
from .httpx_transport import HttpxTransport
from .requests_transport import RequestsTransport

__all__ = [
    'HttpRequest',
    'HttpResponse',
    'Transport',
    'HttpxTransport',
    'RequestsTransport',
]
