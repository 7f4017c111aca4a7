from __future__ import annotations

import asyncio
from typing import Any

import pytest

from mediagen.core.errors import OperationFailed, OperationTimedOut, RemoteApiError
from mediagen.services.polling import (
    OperationHandle,
    OperationPoller,
    PollConfig,
    backoff_delays,
)

HANDLE = OperationHandle(operation_id="projects/p/operations/op-1", model_id="veo-3.0-generate-preview")


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ScriptedFetch:
    def __init__(self, statuses: list[dict[str, Any]]) -> None:
        self.statuses = statuses
        self.calls = 0

    async def __call__(self, handle: OperationHandle) -> dict[str, Any]:
        self.calls += 1
        index = min(self.calls, len(self.statuses)) - 1
        return self.statuses[index]


def test_default_delay_sequence_is_capped_and_non_decreasing() -> None:
    delays = list(backoff_delays(PollConfig()))
    assert len(delays) == 120
    assert delays[0] == 5.0
    assert delays[1] == 7.5
    assert max(delays) <= 60.0
    assert delays[-1] == 60.0
    assert all(later >= earlier for earlier, later in zip(delays, delays[1:]))


def test_completes_with_response_after_backoff() -> None:
    sleep = RecordingSleep()
    fetch = ScriptedFetch(
        [{"done": False}, {}, {"done": True, "response": {"videos": [{"gcsUri": "gs://b/v.mp4"}]}}]
    )
    poller = OperationPoller(PollConfig(), sleep=sleep)

    response = asyncio.run(poller.poll(HANDLE, fetch))

    assert response == {"videos": [{"gcsUri": "gs://b/v.mp4"}]}
    assert fetch.calls == 3
    assert sleep.delays == [5.0, 7.5, 11.25]


def test_remote_error_is_surfaced_verbatim() -> None:
    fetch = ScriptedFetch([{"done": True, "error": {"code": 3, "message": "Prompt was blocked"}}])
    poller = OperationPoller(PollConfig(), sleep=RecordingSleep())

    with pytest.raises(OperationFailed) as excinfo:
        asyncio.run(poller.poll(HANDLE, fetch))

    assert excinfo.value.code == 3
    assert excinfo.value.message == "Prompt was blocked"


def test_done_without_response_fails() -> None:
    fetch = ScriptedFetch([{"done": True}])
    poller = OperationPoller(PollConfig(), sleep=RecordingSleep())
    with pytest.raises(OperationFailed):
        asyncio.run(poller.poll(HANDLE, fetch))


def test_times_out_without_extra_fetch() -> None:
    config = PollConfig(initial_delay=1.0, max_delay=2.0, max_attempts=3)
    fetch = ScriptedFetch([{"done": False}])
    sleep = RecordingSleep()
    poller = OperationPoller(config, sleep=sleep)

    with pytest.raises(OperationTimedOut) as excinfo:
        asyncio.run(poller.poll(HANDLE, fetch))

    assert fetch.calls == 3
    assert len(sleep.delays) == 3
    assert excinfo.value.elapsed_bound == 6.0
    assert str(excinfo.value) == "Operation timed out after 6 seconds"


def test_fetch_error_is_terminal() -> None:
    calls = 0

    async def failing_fetch(handle: OperationHandle) -> dict[str, Any]:
        nonlocal calls
        calls += 1
        raise RemoteApiError("https://example.test/op", 500, "backend unavailable")

    poller = OperationPoller(PollConfig(), sleep=RecordingSleep())
    with pytest.raises(RemoteApiError):
        asyncio.run(poller.poll(HANDLE, failing_fetch))
    assert calls == 1


def test_cancellation_stops_polling() -> None:
    fetch = ScriptedFetch([{"done": False}])

    async def scenario() -> None:
        poller = OperationPoller(PollConfig(initial_delay=30.0))
        task = asyncio.create_task(poller.poll(HANDLE, fetch))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert fetch.calls == 0
