"""
Shared fixtures for Gateway SDK tests

The fake transport answers authentication and business calls without any
network access and records every request it receives.
"""

import asyncio
from typing import Callable, List, Optional

import pytest

from gateway_sdk.cache import InMemoryTokenCache, reset_shared_token_cache
from gateway_sdk.config import ClientConfig
from gateway_sdk.signing import RequestSigner
from gateway_sdk.transport import HttpRequest, HttpResponse

BASE_URL = "https://gateway.example.com/"
ACCESS_ID = "app-id"
SECRET_KEY = "secret"
FIXED_NONCE = "123456"
FIXED_TIMESTAMP = "1700000000000"


def auth_body(token: str = "token-1", expire_seconds: int = 7200) -> str:
    """Build a flat authentication response body."""
    return f'{{"accessKey":"{token}","expireSeconds":{expire_seconds}}}'


class FakeTransport:
    """Transport double answering /auth and business calls."""

    def __init__(
        self,
        auth_response: Optional[HttpResponse] = None,
        business_response: Optional[HttpResponse] = None,
        auth_delay: float = 0.0,
        handler: Optional[Callable[[HttpRequest], HttpResponse]] = None
    ):
        self.auth_response = auth_response or HttpResponse(200, auth_body())
        self.business_response = business_response or HttpResponse(200, '{"ok":true}')
        self.auth_delay = auth_delay
        self.handler = handler
        self.requests: List[HttpRequest] = []
        self.closed = False

    @property
    def auth_requests(self) -> List[HttpRequest]:
        return [r for r in self.requests if r.url.endswith('/auth')]

    @property
    def business_requests(self) -> List[HttpRequest]:
        return [r for r in self.requests if not r.url.endswith('/auth')]

    async def send(self, request: HttpRequest, timeout: Optional[float] = None) -> HttpResponse:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if request.url.endswith('/auth'):
            if self.auth_delay:
                await asyncio.sleep(self.auth_delay)
            return self.auth_response
        return self.business_response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport():
    """Fake transport with default successful responses."""
    return FakeTransport()


@pytest.fixture
def token_cache():
    """Fresh in-memory token cache."""
    return InMemoryTokenCache()


@pytest.fixture
def fixed_signer():
    """Signer with deterministic nonce and timestamp."""
    return RequestSigner(
        ACCESS_ID,
        SECRET_KEY,
        nonce_generator=lambda: FIXED_NONCE,
        timestamp_generator=lambda: FIXED_TIMESTAMP,
    )


@pytest.fixture
def client_config():
    """Test client configuration."""
    return ClientConfig(base_url=BASE_URL, access_id=ACCESS_ID, secret_key=SECRET_KEY)


@pytest.fixture(autouse=True)
def fresh_shared_cache():
    """Isolate the process-wide token cache between tests."""
    yield reset_shared_token_cache()
    reset_shared_token_cache()
