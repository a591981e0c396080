"""Tests for the RunResultHolder."""

from squad.results import RunResultHolder
from squad.state import RunStatus, SourceRef
from squad.status import RunStateMachine

SOURCES = [SourceRef(title="Nature", uri="https://nature.com/q")]


class TestRunResultHolder:
    def test_empty_on_creation(self):
        holder = RunResultHolder(RunStateMachine())
        assert holder.get() == (None, (), RunStatus.IDLE)
        assert holder.last_completed() == (None, ())

    def test_set_stores_document_and_sources_together(self, course):
        holder = RunResultHolder(RunStateMachine())
        holder.set(course, SOURCES)
        document, sources, _ = holder.get()
        assert document is course
        assert sources == tuple(SOURCES)

    def test_sources_are_copied(self, course):
        holder = RunResultHolder(RunStateMachine())
        sources = list(SOURCES)
        holder.set(course, sources)
        sources.append(SourceRef(title="Later", uri="https://example.com"))
        assert len(holder.get()[1]) == 1

    def test_status_follows_machine(self):
        machine = RunStateMachine()
        holder = RunResultHolder(machine)
        machine.transition(RunStatus.RESEARCHING)
        assert holder.get()[2] is RunStatus.RESEARCHING

    def test_clear_keeps_last_completed(self, course):
        holder = RunResultHolder(RunStateMachine())
        holder.set(course, SOURCES)
        holder.clear()
        assert holder.get()[:2] == (None, ())
        assert holder.last_completed() == (course, tuple(SOURCES))
