"""Orchestrator — runs one topic through research, review and writing.

The orchestrator owns the event log, the run state machine and the result
holder. Callers see only start_run() and read-only views of those three.
Anything that raises inside a run, collaborator or observer, ends the run in
ERROR and is never raised to the caller.
"""

import asyncio
import sys

from squad.config import get_config
from squad.errors import CollaboratorFailure
from squad.events import EventLog, LogObserver
from squad.graph import Squad, build_graph
from squad.results import RunResultHolder
from squad.state import (
    AgentRole,
    CourseDocument,
    LogEvent,
    RunStatus,
    Severity,
    SourceRef,
    initial_state,
)
from squad.status import RunStateMachine, StatusObserver
from squad.utils.validator import validate_topic

DEFAULT_MAX_ITERATIONS = 3


class Orchestrator:
    def __init__(
        self,
        squad: Squad,
        max_iterations: int | None = None,
        pacing: float | None = None,
    ) -> None:
        config = get_config()
        if max_iterations is None:
            max_iterations = config.get("max_iterations", DEFAULT_MAX_ITERATIONS)
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1.")
        if pacing is None:
            pacing = config.get("pacing_seconds", 0.0)

        self._max_iterations = max_iterations
        self._pacing = pacing
        self._log = EventLog()
        self._machine = RunStateMachine()
        self._results = RunResultHolder(self._machine)
        self._graph = build_graph(squad, self._log, self._machine, pacing=pacing)

    @property
    def status(self) -> RunStatus:
        return self._machine.status

    @property
    def log(self) -> tuple[LogEvent, ...]:
        return self._log.events

    @property
    def result(self) -> tuple[CourseDocument | None, tuple[SourceRef, ...]]:
        document, sources, _ = self._results.get()
        return document, sources

    @property
    def last_completed(self) -> tuple[CourseDocument | None, tuple[SourceRef, ...]]:
        return self._results.last_completed()

    def subscribe_log(self, observer: LogObserver) -> None:
        self._log.subscribe(observer)

    def unsubscribe_log(self, observer: LogObserver) -> None:
        self._log.unsubscribe(observer)

    def subscribe_status(self, observer: StatusObserver) -> None:
        self._machine.subscribe(observer)

    def unsubscribe_status(self, observer: StatusObserver) -> None:
        self._machine.unsubscribe(observer)

    async def start_run(self, topic: str) -> bool:
        """Run the full pipeline for a topic.

        Returns False without touching status, log or result when a run is
        already in flight or the topic is empty. Returns True once the run
        has finished, whether it ended in COMPLETED or ERROR.
        """
        if not self._machine.can_start:
            return False
        try:
            topic = validate_topic(topic)
        except ValueError as exc:
            print(f"[SQUAD] Run ignored: {exc}", file=sys.stderr)
            return False

        self._log.clear()
        self._results.clear()
        state = initial_state(topic, self._max_iterations)

        try:
            # Claimed synchronously, before the first await, so a second request
            # arriving while this run is suspended sees an active status.
            self._machine.transition(RunStatus.RESEARCHING)
            self._log.append(AgentRole.ORCHESTRATOR, f'Initializing squad for topic: "{topic}"')
            if self._pacing > 0:
                await asyncio.sleep(self._pacing)

            final_state = await self._graph.ainvoke(
                state,
                config={"recursion_limit": self._max_iterations * 3 + 10},
            )
            self._results.set(final_state["document"], final_state["current_sources"])
            self._machine.transition(RunStatus.COMPLETED)
            self._log.append(
                AgentRole.ORCHESTRATOR,
                "Process finished. Course is ready.",
                Severity.SUCCESS,
            )
        except Exception as exc:
            self._fail_run(exc)
        return True

    def _fail_run(self, exc: Exception) -> None:
        """End the run in ERROR, whatever raised inside it."""
        if isinstance(exc, CollaboratorFailure):
            print(f"[SQUAD] Run failed: {exc!r}", file=sys.stderr)
        else:
            print(f"[SQUAD] Run failed unexpectedly: {exc!r}", file=sys.stderr)
        if self._machine.is_active:
            self._machine.fail()
        self._log.append(
            AgentRole.ORCHESTRATOR,
            f"An error occurred during the orchestration process: {exc}",
            Severity.ERROR,
        )
