"""Run state machine — the single authority on which phase a run is in.

Every status change goes through the transition table below; anything not
listed (e.g. writing -> researching) raises IllegalTransition.
"""

from typing import Callable

from squad.errors import IllegalTransition
from squad.state import RunStatus

TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.IDLE: frozenset({RunStatus.RESEARCHING}),
    RunStatus.RESEARCHING: frozenset({RunStatus.JUDGING, RunStatus.ERROR}),
    RunStatus.JUDGING: frozenset({RunStatus.RESEARCHING, RunStatus.WRITING, RunStatus.ERROR}),
    RunStatus.WRITING: frozenset({RunStatus.COMPLETED, RunStatus.ERROR}),
    RunStatus.COMPLETED: frozenset({RunStatus.RESEARCHING}),
    RunStatus.ERROR: frozenset({RunStatus.RESEARCHING}),
}

# Statuses from which a new run may start.
RESTING_STATES = frozenset({RunStatus.IDLE, RunStatus.COMPLETED, RunStatus.ERROR})

StatusObserver = Callable[[RunStatus, RunStatus], None]


class RunStateMachine:
    def __init__(self, status: RunStatus = RunStatus.IDLE) -> None:
        self._status = status
        self._observers: list[StatusObserver] = []

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def can_start(self) -> bool:
        return self._status in RESTING_STATES

    @property
    def is_active(self) -> bool:
        return self._status not in RESTING_STATES

    def transition(self, target: RunStatus) -> None:
        """Move to target, notifying observers with (old, new)."""
        if target not in TRANSITIONS[self._status]:
            raise IllegalTransition(self._status, target)
        old, self._status = self._status, target
        for observer in self._observers:
            observer(old, target)

    def fail(self) -> None:
        """Move the active run to ERROR."""
        self.transition(RunStatus.ERROR)

    def subscribe(self, observer: StatusObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: StatusObserver) -> None:
        self._observers.remove(observer)
