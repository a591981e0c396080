"""LangGraph StateGraph definition for the Research-Judge review loop.

research -> judge -> (research | exhausted | write) -> END

The graph is built per orchestrator so its nodes can report to that
orchestrator's event log and state machine. Loop state lives only in the
ResearchState flowing through the graph.
"""

import asyncio
import sys
from dataclasses import dataclass
from typing import Awaitable, Callable

from langgraph.graph import END, StateGraph

from squad.errors import JudgeUnavailable, ResearchFailure, WriteFailure
from squad.events import EventLog
from squad.state import (
    AgentRole,
    CourseDocument,
    JudgeVerdict,
    ResearchBrief,
    ResearchState,
    RunStatus,
    Severity,
)
from squad.status import RunStateMachine

ResearchFn = Callable[[str, str | None, str | None], Awaitable[ResearchBrief]]
JudgeFn = Callable[[str, str], Awaitable[JudgeVerdict]]
WriteFn = Callable[[str, str, str], Awaitable[CourseDocument]]


@dataclass(frozen=True)
class Squad:
    """The three agents a run delegates to."""

    research: ResearchFn
    judge: JudgeFn
    write: WriteFn


def route_after_judge(state: ResearchState) -> str:
    """Conditional edge: decide next step after the Judge node.

    Priority order:
    1. approved → write
    2. iteration >= max_iterations → exhausted (write with best research so far)
    3. rejected + passes left → research again
    """
    if state["approved"]:
        return "write"
    if state["iteration"] >= state["max_iterations"]:
        return "exhausted"
    return "research"


def build_graph(squad: Squad, log: EventLog, machine: RunStateMachine, pacing: float = 0.0):
    """Compile the review loop graph for one orchestrator."""

    async def _pace() -> None:
        if pacing > 0:
            await asyncio.sleep(pacing)

    async def research_node(state: ResearchState) -> dict:
        if machine.status is not RunStatus.RESEARCHING:
            machine.transition(RunStatus.RESEARCHING)

        if state["iteration"] == 0:
            log.append(AgentRole.ORCHESTRATOR, "Delegating task to Researcher Agent...")
            log.append(
                AgentRole.RESEARCHER,
                "Analyzing topic and searching for comprehensive sources...",
                Severity.THINKING,
            )
            prior_text, feedback = None, None
        else:
            log.append(
                AgentRole.ORCHESTRATOR,
                f"Sending research back for refinement (pass {state['iteration'] + 1} "
                f"of {state['max_iterations']}).",
            )
            log.append(
                AgentRole.RESEARCHER,
                "Refining research to address the Judge's feedback...",
                Severity.THINKING,
            )
            prior_text, feedback = state["current_text"], state["last_feedback"]

        try:
            text, sources = await squad.research(state["topic"], prior_text, feedback)
            sources = list(sources)
        except ResearchFailure:
            raise
        except Exception as exc:
            raise ResearchFailure(f"Researcher agent failed: {exc}") from exc

        log.append(
            AgentRole.RESEARCHER,
            f"Research complete. Found {len(sources)} relevant sources.",
            Severity.SUCCESS,
        )
        await _pace()
        # Text and sources always move together; earlier sources are dropped.
        return {"current_text": text, "current_sources": sources}

    async def judge_node(state: ResearchState) -> dict:
        machine.transition(RunStatus.JUDGING)
        log.append(AgentRole.ORCHESTRATOR, "Passing research data to Judge Agent for verification.")
        log.append(
            AgentRole.JUDGE,
            "Reviewing research for accuracy, bias, and completeness...",
            Severity.THINKING,
        )

        try:
            verdict = await squad.judge(state["topic"], state["current_text"])
            if not isinstance(verdict, JudgeVerdict):
                raise TypeError(f"expected a JudgeVerdict, got {type(verdict).__name__}")
        except Exception as exc:
            print(
                f"[SQUAD] Judge failed: {exc!r}. Treating research as approved.",
                file=sys.stderr,
            )
            verdict = JudgeVerdict(approved=True, feedback=JudgeUnavailable.feedback)

        await _pace()

        if verdict.approved:
            log.append(AgentRole.JUDGE, f"Research approved. {verdict.feedback}", Severity.SUCCESS)
            return {"approved": True, "judge_feedback": verdict.feedback}

        log.append(AgentRole.JUDGE, "Research rejected. Revisions requested.")
        log.append(AgentRole.JUDGE, f"Feedback: {verdict.feedback}")
        return {
            "approved": False,
            "judge_feedback": verdict.feedback,
            "last_feedback": verdict.feedback,
            "iteration": state["iteration"] + 1,
        }

    async def exhausted_node(state: ResearchState) -> dict:
        log.append(
            AgentRole.ORCHESTRATOR,
            f"Max iterations reached ({state['max_iterations']}). "
            "Proceeding with the best available research.",
        )
        return {"iteration": state["iteration"]}

    async def write_node(state: ResearchState) -> dict:
        machine.transition(RunStatus.WRITING)
        log.append(AgentRole.ORCHESTRATOR, "Instructing Writer Agent to compile final course.")
        log.append(
            AgentRole.WRITER,
            "Structuring course modules based on verified research...",
            Severity.THINKING,
        )

        try:
            document = await squad.write(
                state["topic"], state["current_text"], state["judge_feedback"]
            )
        except WriteFailure:
            raise
        except Exception as exc:
            raise WriteFailure(f"Writer agent failed: {exc}") from exc

        if not isinstance(document, CourseDocument):
            raise WriteFailure("Writer agent returned no course document.")

        log.append(
            AgentRole.WRITER,
            "Course syllabus and content generated successfully.",
            Severity.SUCCESS,
        )
        return {"document": document}

    # --- Build the graph ---

    workflow = StateGraph(ResearchState)

    workflow.add_node("research", research_node)
    workflow.add_node("judge", judge_node)
    workflow.add_node("exhausted", exhausted_node)
    workflow.add_node("write", write_node)

    workflow.set_entry_point("research")

    workflow.add_edge("research", "judge")

    workflow.add_conditional_edges(
        "judge",
        route_after_judge,
        {
            "write": "write",
            "exhausted": "exhausted",
            "research": "research",
        },
    )

    workflow.add_edge("exhausted", "write")
    workflow.add_edge("write", END)

    return workflow.compile()
