"""Squad State — run status, log records, loop state and the course document."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple, TypedDict


class RunStatus(str, Enum):
    IDLE = "idle"
    RESEARCHING = "researching"
    JUDGING = "judging"
    WRITING = "writing"
    COMPLETED = "completed"
    ERROR = "error"


class AgentRole(str, Enum):
    ORCHESTRATOR = "Orchestrator"
    RESEARCHER = "Researcher"
    JUDGE = "Judge"
    WRITER = "Writer"


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    THINKING = "thinking"


@dataclass(frozen=True)
class LogEvent:
    id: str
    role: AgentRole
    message: str
    timestamp: datetime
    severity: Severity = Severity.INFO


@dataclass(frozen=True)
class SourceRef:
    title: str
    uri: str


class ResearchBrief(NamedTuple):
    """Researcher output: the research body and the references backing it."""

    text: str
    sources: list[SourceRef]


@dataclass(frozen=True)
class JudgeVerdict:
    approved: bool
    feedback: str


@dataclass(frozen=True)
class CourseModule:
    title: str
    description: str
    key_points: tuple[str, ...] = ()


@dataclass(frozen=True)
class CourseDocument:
    """Terminal artifact of a run. Field names follow the Writer's JSON schema."""

    title: str
    introduction: str
    summary: str
    modules: tuple[CourseModule, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict) -> "CourseDocument":
        return cls(
            title=data["title"],
            introduction=data["introduction"],
            summary=data["summary"],
            modules=tuple(
                CourseModule(
                    title=m["title"],
                    description=m["description"],
                    key_points=tuple(m["keyPoints"]),
                )
                for m in data["modules"]
            ),
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "introduction": self.introduction,
            "summary": self.summary,
            "modules": [
                {
                    "title": m.title,
                    "description": m.description,
                    "keyPoints": list(m.key_points),
                }
                for m in self.modules
            ],
        }


class ResearchState(TypedDict):
    topic: str  # Validated topic. Immutable after init.
    max_iterations: int  # Pass budget for the review loop.
    current_text: str  # Latest research body. Starts empty.
    current_sources: list[SourceRef]  # Sources of current_text. Replaced each pass.
    last_feedback: str | None  # Most recent rejection feedback.
    iteration: int  # Rejected passes so far. Starts at 0.
    approved: bool  # Latest verdict.
    judge_feedback: str  # Latest verdict feedback, approval or rejection.
    document: CourseDocument | None  # Set by the write step.


def initial_state(topic: str, max_iterations: int) -> ResearchState:
    """Return a fresh ResearchState for a new run."""
    return {
        "topic": topic,
        "max_iterations": max_iterations,
        "current_text": "",
        "current_sources": [],
        "last_feedback": None,
        "iteration": 0,
        "approved": False,
        "judge_feedback": "",
        "document": None,
    }
