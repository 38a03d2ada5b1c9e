"""
Access token acquisition for Gateway Python SDK
"""

from .token_manager import (
    TokenManager,
    TokenMetrics,
    AUTH_ENDPOINT,
    DEFAULT_EXPIRY_BUFFER_SECONDS,
)

__all__ = [
    'TokenManager',
    'TokenMetrics',
    'AUTH_ENDPOINT',
    'DEFAULT_EXPIRY_BUFFER_SECONDS',
]
