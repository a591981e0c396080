"""Shared fixtures for the squad test suite."""

import pytest
from unittest.mock import patch

from squad.graph import Squad
from squad.state import CourseDocument, JudgeVerdict, ResearchBrief, SourceRef


class ScriptedSquad:
    """Fake Researcher/Judge/Writer that replay scripted outcomes and record calls.

    Each script entry is either a value to return or an exception to raise.
    """

    def __init__(self, research=None, verdicts=None, document=None, write_error=None):
        self.research_script = list(research or [])
        self.verdict_script = list(verdicts or [])
        self.document = document
        self.write_error = write_error
        self.research_calls = []
        self.judge_calls = []
        self.write_calls = []

    async def research(self, topic, prior_text=None, feedback=None):
        self.research_calls.append((topic, prior_text, feedback))
        outcome = self.research_script[len(self.research_calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def judge(self, topic, text):
        self.judge_calls.append((topic, text))
        outcome = self.verdict_script[len(self.judge_calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def write(self, topic, text, feedback):
        self.write_calls.append((topic, text, feedback))
        if self.write_error is not None:
            raise self.write_error
        return self.document

    def as_squad(self) -> Squad:
        return Squad(research=self.research, judge=self.judge, write=self.write)


def brief(n: int) -> ResearchBrief:
    """Research output for pass n, with sources unique to that pass."""
    return ResearchBrief(
        text=f"research pass {n}",
        sources=[
            SourceRef(title=f"Source {n}a", uri=f"https://example.com/{n}/a"),
            SourceRef(title=f"Source {n}b", uri=f"https://example.com/{n}/b"),
        ],
    )


def reject(n: int) -> JudgeVerdict:
    return JudgeVerdict(approved=False, feedback=f"gaps in pass {n}")


def approve(comment: str = "Looks thorough.") -> JudgeVerdict:
    return JudgeVerdict(approved=True, feedback=comment)


@pytest.fixture
def valid_writer_response():
    """Complete valid Writer JSON response dict."""
    return {
        "title": "Quantum Physics Fundamentals",
        "introduction": "A first course on the quantum world.",
        "summary": "You can now reason about superposition and measurement.",
        "modules": [
            {
                "title": "Wave-Particle Duality",
                "description": "Light and matter behave as both waves and particles.",
                "keyPoints": ["Double-slit experiment", "Photoelectric effect"],
            },
            {
                "title": "Superposition",
                "description": "States combine linearly until measured.",
                "keyPoints": ["Qubits", "Measurement collapse"],
            },
        ],
    }


@pytest.fixture
def course(valid_writer_response):
    return CourseDocument.from_dict(valid_writer_response)


@pytest.fixture
def base_state():
    """Minimal valid ResearchState."""
    return {
        "topic": "Quantum Physics",
        "max_iterations": 3,
        "current_text": "",
        "current_sources": [],
        "last_feedback": None,
        "iteration": 0,
        "approved": False,
        "judge_feedback": "",
        "document": None,
    }


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "researcher_model": "gemini-test",
        "judge_model": "claude-test",
        "writer_model": "gemini-test",
        "max_iterations": 3,
        "pacing_seconds": 0,
        "output_path": "./output/course.md",
    }
    with patch("squad.config._config", test_config):
        yield test_config
