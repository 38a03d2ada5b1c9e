"""
Explicit success/failure results

Callers that prefer handling failures as values rather than exceptions can use
the ``try_*`` variants of the client and token manager, which return a
:class:`Result` instead of raising :class:`GatewaySDKError`.
"""

from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from .exceptions import GatewaySDKError

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a Gateway SDK error"""
    value: Optional[T] = None
    error: Optional[GatewaySDKError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.error_code if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the captured error"""
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value

    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: GatewaySDKError) -> 'Result[T]':
        return cls(error=error)


async def capture(awaitable: Awaitable[T]) -> Result[T]:
    """
    Await ``awaitable`` and wrap its outcome in a :class:`Result`.

    Only :class:`GatewaySDKError` is captured; anything else, including
    cancellation, propagates.
    """
    try:
        return Result.success(await awaitable)
    except GatewaySDKError as e:
        return Result.failure(e)
