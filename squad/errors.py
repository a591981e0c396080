"""Exception hierarchy for the research/judge/write pipeline."""


class SquadError(Exception):
    """Base class for all squad errors."""


class CollaboratorFailure(SquadError):
    """An agent call failed in a way that ends the run."""


class ResearchFailure(CollaboratorFailure):
    """The Researcher could not produce research for the topic."""


class WriteFailure(CollaboratorFailure):
    """The Writer produced no parsable course."""


class JudgeUnavailable(SquadError):
    """The Judge could not evaluate. Degraded to an approval, never fatal."""

    # Feedback carried by the implicit approval that replaces a missing verdict.
    feedback = "Judge unavailable, proceeding."


class IllegalTransition(SquadError):
    """A status change not listed in the run state machine's transition table."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Illegal status transition: {current.value} -> {target.value}")
