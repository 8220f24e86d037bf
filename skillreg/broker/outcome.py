"""Result-or-failure values for calls against the remote broker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from skillreg.utils.exceptions import GatewayUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    """Either a value or the reason the gateway could not provide one."""

    value: T | None = None
    error: GatewayUnavailable | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def attempt(
    operation: str,
    call: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> Outcome[T]:
    """Run one gateway call and capture any failure in the returned Outcome."""
    try:
        return Outcome(value=await call(*args, **kwargs))
    except GatewayUnavailable as exc:
        logger.warning("Broker %s failed: %s", operation, exc.detail)
        return Outcome(error=exc)
    except Exception as exc:  # any broker-side fault means "unavailable"
        logger.warning("Broker %s failed: %s", operation, exc)
        return Outcome(error=GatewayUnavailable(operation, str(exc) or type(exc).__name__))
