"""Asynchronous broker jobs: observable states and a bounded poller."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

from skillreg.utils.exceptions import PollTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pending:
    """Job accepted by the broker but not finished yet."""

    attempt_id: str
    status: str = "pending"


@dataclass(frozen=True)
class Resolved:
    """Job reached its terminal state."""

    result: dict[str, Any] = field(default_factory=dict)


JobState = Union[Pending, Resolved]


async def poll_until_resolved(
    check: Callable[[], Awaitable[JobState]],
    attempt_id: str,
    interval_ms: int,
    timeout_ms: int,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Resolved:
    """Call ``check`` until it yields ``Resolved`` or the timeout elapses.

    Errors raised by ``check`` propagate unchanged.

    Raises:
        PollTimeout: still pending once ``timeout_ms`` has passed.
    """
    deadline = clock() + timeout_ms / 1000
    last_status = ""

    while True:
        state = await check()
        if isinstance(state, Resolved):
            return state

        if state.status != last_status:
            logger.debug("Job %s status: %s", attempt_id, state.status)
            last_status = state.status

        remaining = deadline - clock()
        if remaining <= 0:
            raise PollTimeout(attempt_id, timeout_ms)
        await sleep(min(interval_ms / 1000, remaining))
