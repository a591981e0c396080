"""Run Result Holder — the latest course document and the sources behind it."""

from squad.state import CourseDocument, RunStatus, SourceRef
from squad.status import RunStateMachine


class RunResultHolder:
    """Holds the current run's document and sources as one unit.

    Status is read from the run state machine, so get() always reports the
    live phase next to whatever result is stored.
    """

    def __init__(self, machine: RunStateMachine) -> None:
        self._machine = machine
        self._result: tuple[CourseDocument | None, tuple[SourceRef, ...]] = (None, ())
        self._last_completed: tuple[CourseDocument | None, tuple[SourceRef, ...]] = (None, ())

    def get(self) -> tuple[CourseDocument | None, tuple[SourceRef, ...], RunStatus]:
        document, sources = self._result
        return document, sources, self._machine.status

    def set(self, document: CourseDocument, sources: list[SourceRef]) -> None:
        # Single assignment so document and sources are never observed apart.
        self._result = (document, tuple(sources))
        self._last_completed = self._result

    def clear(self) -> None:
        self._result = (None, ())

    def last_completed(self) -> tuple[CourseDocument | None, tuple[SourceRef, ...]]:
        """Most recent successful result, kept across runs that later fail."""
        return self._last_completed
