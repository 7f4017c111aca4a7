"""Drive long-running remote operations to completion with bounded backoff."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator

from ..core.errors import OperationFailed, OperationTimedOut
from ..core.settings import Settings

logger = logging.getLogger(__name__)

StatusFetcher = Callable[["OperationHandle"], Awaitable[dict[str, Any]]]
Sleeper = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class OperationHandle:
    operation_id: str
    model_id: str


@dataclass(frozen=True)
class PollState:
    attempt: int
    delay: float


@dataclass(frozen=True)
class PollConfig:
    initial_delay: float = 5.0
    backoff_multiplier: float = 1.5
    max_delay: float = 60.0
    max_attempts: int = 120

    @classmethod
    def from_settings(cls, settings: Settings) -> "PollConfig":
        return cls(
            initial_delay=settings.lro_initial_delay_seconds,
            backoff_multiplier=settings.lro_backoff_multiplier,
            max_delay=settings.lro_max_delay_seconds,
            max_attempts=settings.lro_max_attempts,
        )

    @property
    def timeout_bound(self) -> float:
        """Worst-case elapsed time reported on timeout."""

        return self.max_attempts * self.max_delay

    def next_state(self, state: PollState) -> PollState:
        delay = min(state.delay * self.backoff_multiplier, self.max_delay)
        return PollState(attempt=state.attempt + 1, delay=delay)


def backoff_delays(config: PollConfig) -> Iterator[float]:
    """Yield the sleep before each of the ``max_attempts`` status fetches."""

    state = PollState(attempt=1, delay=config.initial_delay)
    while state.attempt <= config.max_attempts:
        yield state.delay
        state = config.next_state(state)


class OperationPoller:
    """Poll an operation until it is done, failed, or out of attempts.

    Each iteration sleeps first and then fetches status, so the remote side is
    never queried immediately after submission. A fetch that raises ends the
    loop with that error. Cancelling the surrounding task interrupts the sleep
    and no further fetch is issued; the remote operation itself is left
    running.
    """

    def __init__(self, config: PollConfig, sleep: Sleeper = asyncio.sleep) -> None:
        self._config = config
        self._sleep = sleep

    @property
    def config(self) -> PollConfig:
        return self._config

    async def poll(self, handle: OperationHandle, fetch: StatusFetcher) -> dict[str, Any]:
        state = PollState(attempt=1, delay=self._config.initial_delay)
        while True:
            if state.attempt > self._config.max_attempts:
                logger.error(
                    "Operation %s timed out after %d attempts",
                    handle.operation_id,
                    self._config.max_attempts,
                )
                raise OperationTimedOut(self._config.timeout_bound)

            await self._sleep(state.delay)
            logger.debug(
                "Polling operation %s (attempt %d)", handle.operation_id, state.attempt
            )
            status = await fetch(handle)

            if status.get("done"):
                error = status.get("error")
                if error:
                    raise OperationFailed(
                        error.get("code"), error.get("message") or "Unknown error"
                    )
                response = status.get("response")
                if response is None:
                    raise OperationFailed(None, "LRO completed but no response found")
                logger.info(
                    "Operation %s completed after %d attempts",
                    handle.operation_id,
                    state.attempt,
                )
                return response

            state = self._config.next_state(state)


__all__ = [
    "OperationHandle",
    "OperationPoller",
    "PollConfig",
    "PollState",
    "backoff_delays",
]
