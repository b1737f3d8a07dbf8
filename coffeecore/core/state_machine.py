"""
Submission State Machine
------------------------
Per-surface lifecycle of one interest submission:

    idle --begin--> submitting --delivered--> succeeded
                               --rejected / transport_failed--> degraded
    succeeded | degraded --reset--> idle

Transitions are pure functions over an immutable Submission value; the
SubmissionMachine wrapper owns the current value for one UI surface and is
the only place that awaits the Notification Client.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional

from coffeecore.catalog.models import Catalog
from coffeecore.errors import SubmissionBusy
from coffeecore.notify.client import NotificationClient, Outcome
from coffeecore.notify.fallback import ManualContactAction, resolve_fallback
from coffeecore.notify.record import InterestRecord
from coffeecore.observability.logging import log

# Surface: nothing pending, form enabled
# Display: no message
IDLE = "idle"

# Surface: request in flight, re-submission disabled
# Display: progress indicator
SUBMITTING = "submitting"

# Surface: endpoint acknowledged the record
# Display: confirmation message
SUCCEEDED = "succeeded"

# Surface: delivery not confirmed, manual channel offered
# Display: no message; caller opens the ManualContactAction
DEGRADED = "degraded"

STATES = (IDLE, SUBMITTING, SUCCEEDED, DEGRADED)


@dataclass(frozen=True)
class Submission:
    state: str = IDLE
    # Bumped on every accepted begin; outcomes for an older attempt are stale
    attempt: int = 0
    record: Optional[InterestRecord] = None
    outcome: Optional[Outcome] = None
    message: Optional[str] = None
    fallback: Optional[ManualContactAction] = None

    @property
    def busy(self) -> bool:
        return self.state == SUBMITTING

    def hidden(self) -> "Submission":
        """Same lifecycle state, nothing for the visitor to act on."""
        return replace(self, message=None, fallback=None)

    def view(self) -> dict:
        return {
            "state": self.state,
            "message": self.message,
            "fallback": self.fallback.to_dict() if self.fallback else None,
        }


def begin(sub: Submission, record: InterestRecord) -> Submission:
    """idle -> submitting. Any other state returns `sub` unchanged."""
    if sub.state != IDLE:
        return sub
    return Submission(state=SUBMITTING, attempt=sub.attempt + 1, record=record)


def apply_outcome(
    sub: Submission,
    attempt: int,
    outcome: Outcome,
    *,
    confirmation: str,
    fallback_fn: Callable[[InterestRecord], ManualContactAction] = resolve_fallback,
) -> Submission:
    """submitting -> succeeded | degraded. Stale or unexpected outcomes return `sub` unchanged."""
    if sub.state != SUBMITTING or attempt != sub.attempt or sub.record is None:
        return sub
    if outcome is Outcome.DELIVERED:
        return replace(sub, state=SUCCEEDED, outcome=outcome, message=confirmation, fallback=None)
    return replace(sub, state=DEGRADED, outcome=outcome, message=None, fallback=fallback_fn(sub.record))


def reset(sub: Submission) -> Submission:
    # Keeps the attempt counter so an abandoned in-flight outcome can't land
    if sub.state == IDLE and sub.record is None:
        return sub
    return Submission(state=IDLE, attempt=sub.attempt)


class SubmissionMachine:
    def __init__(
        self,
        client: NotificationClient,
        *,
        confirmation: str,
        surface: str = "default",
        catalog: Optional[Catalog] = None,
    ):
        self.client = client
        self.confirmation = confirmation
        self.surface = surface
        self.catalog = catalog
        self._current = Submission()

    @property
    def current(self) -> Submission:
        return self._current

    @property
    def state(self) -> str:
        return self._current.state

    @property
    def busy(self) -> bool:
        return self._current.busy

    def _fallback(self, record: InterestRecord) -> ManualContactAction:
        return resolve_fallback(record, self.catalog)

    async def submit(self, record: InterestRecord) -> Submission:
        """
        Begin a submission and drive it to a resting state.
        The switch to `submitting` happens before the first suspension point,
        so observers see it while the request is in flight.
        A resting state (succeeded / degraded) is reset first.
        Raises SubmissionBusy (without sending anything) if a request is already in flight.
        """
        if self._current.state in (SUCCEEDED, DEGRADED):
            self.reset()
        started = begin(self._current, record)
        if started is self._current:
            log(event="submission_busy", surface=self.surface, state=self._current.state)
            raise SubmissionBusy(f"{self.surface}: submission in state {self._current.state}")

        self._current = started
        attempt = started.attempt
        log(event="submission_begin", surface=self.surface, attempt=attempt, product=record.productId)

        outcome = await self.client.submit(record)

        resolved = apply_outcome(
            self._current,
            attempt,
            outcome,
            confirmation=self.confirmation,
            fallback_fn=self._fallback,
        )
        if resolved is self._current:
            log(event="submission_stale_outcome", surface=self.surface, attempt=attempt,
                currentAttempt=self._current.attempt, outcome=outcome.value)
            return self._current

        self._current = resolved
        if resolved.state == SUCCEEDED:
            log(event="submission_succeeded", surface=self.surface, attempt=attempt)
        else:
            log(event="submission_degraded", surface=self.surface, attempt=attempt, outcome=outcome.value)
        return resolved

    def reset(self) -> Submission:
        prev = self._current.state
        self._current = reset(self._current)
        if prev != IDLE:
            log(event="submission_reset", surface=self.surface, fromState=prev)
        return self._current
