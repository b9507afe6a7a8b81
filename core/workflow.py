"""
Generic "submit, wait, resolve" workflow for simulated async actions.

State machine:

    IDLE -> SUBMITTING -> SUCCEEDED -> (auto-close signal)
    IDLE -> FAILED                      (synchronous validation failure)
    FAILED -> SUBMITTING | FAILED       (user corrects and resubmits)
    any -> IDLE                         (reset, e.g. dialog reopened)

The delayed transition stands in for a network round trip against a
deterministic backend: once validation passes, the submission always
succeeds. At most one timer is outstanding per instance; submitting while
SUBMITTING is ignored, and reset() cancels anything still pending so a stale
completion can never land on a newer attempt.
"""

import logging
from enum import Enum
from typing import Callable

from core.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    """Lifecycle of one async action."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def always_valid(value: str) -> bool:
    """Validator for submissions already checked at the form level."""
    return True


class AsyncActionWorkflow:
    """
    One instance of a delayed verification/async action.

    Callbacks:
        on_success(value): after the delay, once the state is SUCCEEDED
        on_failure(value): on synchronous validation failure
        on_auto_close(): after the auto-close delay that follows success
    """

    def __init__(
        self,
        name: str,
        scheduler: Scheduler,
        validate: Callable[[str], bool],
        delay_ms: int,
        auto_close_delay_ms: int,
        on_success: Callable[[str], None] | None = None,
        on_failure: Callable[[str], None] | None = None,
        on_auto_close: Callable[[], None] | None = None,
    ):
        self.name = name
        self._scheduler = scheduler
        self._validate = validate
        self._delay_ms = delay_ms
        self._auto_close_delay_ms = auto_close_delay_ms
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_auto_close = on_auto_close

        self.state = WorkflowState.IDLE
        self.input_value = ""
        self.result_flag = False
        self.auto_closed = False
        self._submit_timer: TimerHandle | None = None
        self._close_timer: TimerHandle | None = None

    @property
    def busy(self) -> bool:
        return self.state == WorkflowState.SUBMITTING

    def submit(
        self,
        value: str,
        validate: Callable[[str], bool] | None = None,
        delay_ms: int | None = None,
    ) -> WorkflowState:
        """
        Submit a value.

        Invalid input fails immediately with no timer. Valid input enters
        SUBMITTING and resolves to SUCCEEDED after the delay. Ignored while
        SUBMITTING, and after SUCCEEDED (the result is sticky until reset).

        Returns the state after the call.
        """
        if self.state == WorkflowState.SUBMITTING:
            logger.warning(f"{self.name}: submit ignored, already submitting")
            return self.state
        if self.state == WorkflowState.SUCCEEDED:
            logger.info(f"{self.name}: submit ignored, already succeeded")
            return self.state

        check = validate or self._validate
        delay = self._delay_ms if delay_ms is None else delay_ms
        self.input_value = value

        if not check(value):
            self.state = WorkflowState.FAILED
            logger.info(f"{self.name}: submission rejected by validation")
            if self._on_failure is not None:
                self._on_failure(value)
            return self.state

        self.state = WorkflowState.SUBMITTING
        self._submit_timer = self._scheduler.schedule_once(
            delay, lambda: self._complete(value)
        )
        return self.state

    def _complete(self, value: str) -> None:
        self._submit_timer = None
        self.state = WorkflowState.SUCCEEDED
        self.result_flag = True
        logger.info(f"{self.name}: succeeded")

        # Auto-close is armed before callbacks run so a callback may reset it
        self._close_timer = self._scheduler.schedule_once(
            self._auto_close_delay_ms, self._auto_close
        )
        if self._on_success is not None:
            self._on_success(value)

    def _auto_close(self) -> None:
        self._close_timer = None
        self.auto_closed = True
        self.input_value = ""
        logger.debug(f"{self.name}: auto-close")
        if self._on_auto_close is not None:
            self._on_auto_close()

    def reset(self) -> None:
        """Cancel pending transitions and return to IDLE. result_flag is kept."""
        self._cancel_timers()
        self.state = WorkflowState.IDLE
        self.input_value = ""
        self.auto_closed = False

    def discard(self) -> None:
        """Reset and forget any previous success."""
        self.reset()
        self.result_flag = False

    def _cancel_timers(self) -> None:
        for timer in (self._submit_timer, self._close_timer):
            if timer is not None:
                timer.cancel()
        self._submit_timer = None
        self._close_timer = None
