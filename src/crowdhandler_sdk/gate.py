from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from crowdhandler_sdk.result import QueueDecision
from crowdhandler_sdk.session import RequestSession


@dataclass(frozen=True)
class GateCheck:
    decision: QueueDecision
    started_at: float


class QueueGate:
    """Checks a URL against the queue and reports how long the visit took to serve.

    Each ``check`` returns its own ``GateCheck`` carrying the start time, so
    concurrent checks on one gate are timed independently. ``report`` sends
    the elapsed milliseconds for a promoted decision that carries a response
    id and is a no-op otherwise.
    """

    def __init__(self, session: RequestSession, *, clock: Callable[[], float] = time.monotonic):
        self._session = session
        self._clock = clock

    @property
    def session(self) -> RequestSession:
        return self._session

    async def check(self, target_url: str) -> GateCheck:
        started_at = self._clock()
        decision = await self._session.create_or_fetch(target_url)
        return GateCheck(decision=decision, started_at=started_at)

    def elapsed_ms(self, check: GateCheck) -> int:
        return max(0, int((self._clock() - check.started_at) * 1000))

    async def report(self, check: GateCheck, status_code: int = 200) -> bool:
        decision = check.decision
        if not decision.is_promoted or not decision.response_id:
            return False
        await self._session.report_elapsed_time(decision.response_id, self.elapsed_ms(check), status_code)
        return True
