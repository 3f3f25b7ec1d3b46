from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from ..errors import CreationFailed, MissingIdentifier, PollCancelled, RetryExhausted
from .contracts import IndexStatus, PollPolicy, StatusQuery, parse_status

log = logging.getLogger("pineconekit.indexpoller")

TimeFn = Callable[[], float]
SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class PollAttempt:
    attempt: int
    elapsed: float
    status: Union[IndexStatus, str, None]


def _is_not_found(exc: BaseException) -> bool:
    return bool(getattr(exc, "not_found", False))


class IndexReadinessPoller:
    """
    Waits for an index to reach a terminal provisioning state.

    Polling -> Ready   when the query reports READY (returns)
    Polling -> Failed  when the query reports FAILED (raises CreationFailed)
    Polling -> Polling on any other status or a not-found query error

    Other query errors propagate unchanged. The loop is bounded by
    policy.max_attempts and, if set, policy.timeout_seconds.
    """

    def __init__(
        self,
        query: StatusQuery,
        policy: Optional[PollPolicy] = None,
        *,
        sleep: Optional[SleepFn] = None,
        now: Optional[TimeFn] = None,
    ) -> None:
        self._query = query
        self.policy = policy or PollPolicy()
        self._sleep = sleep or asyncio.sleep
        self._now = now or time.monotonic

    async def wait_until_ready(self, index_name: str, *, cancel: Optional[asyncio.Event] = None) -> None:
        if not index_name:
            raise MissingIdentifier()

        policy = self.policy
        started = self._now()
        attempt = 0

        while True:
            if cancel is not None and cancel.is_set():
                raise PollCancelled(index_name, attempt)

            attempt += 1
            try:
                status = parse_status(await self._query(index_name))
            except Exception as exc:
                if not _is_not_found(exc):
                    log.warning("poll.query_error index=%s attempt=%d err=%s", index_name, attempt, exc)
                    raise
                status = None

            record = PollAttempt(attempt=attempt, elapsed=self._now() - started, status=status)

            if status is IndexStatus.READY:
                log.info("poll.ready index=%s attempts=%d elapsed=%.2fs", index_name, record.attempt, record.elapsed)
                return
            if status is IndexStatus.FAILED:
                log.error("poll.failed index=%s attempts=%d", index_name, record.attempt)
                raise CreationFailed(index_name)

            if record.attempt >= policy.max_attempts:
                raise RetryExhausted(index_name, record.attempt, record.elapsed)

            delay = policy.delay_for(record.attempt)
            if policy.timeout_seconds is not None and record.elapsed + delay > policy.timeout_seconds:
                raise RetryExhausted(index_name, record.attempt, record.elapsed)

            log.debug(
                "poll.pending index=%s attempt=%d status=%s next_in=%.2fs",
                index_name, record.attempt, record.status, delay,
            )
            await self._sleep(delay)

            if cancel is not None and cancel.is_set():
                raise PollCancelled(index_name, attempt)
