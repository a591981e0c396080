"""Researcher Agent — gathers research on the topic with Google Search grounding.

On refinement passes it receives its previous brief plus the Judge's critique
and produces a new, complete brief. Sources come from the grounding metadata
of the response, so they always belong to the text returned with them.
"""

from langchain_google_genai import ChatGoogleGenerativeAI

from squad.config import get_config
from squad.errors import ResearchFailure
from squad.state import ResearchBrief, SourceRef
from squad.utils.parsing import response_text

EMPTY_RESEARCH_TEXT = "No research data found."

SYSTEM_PROMPT = """\
You are the Researcher agent in a course-building squad (Researcher, Judge, Writer).

Your job is to gather comprehensive, accurate and structured information about a topic \
so that a Writer can turn it into an educational course. Use Google Search to ground \
your findings in current sources.

Cover:
- Key concepts and fundamental principles
- Historical context
- The current state of the art
- Common misconceptions and open questions

Format the output as a detailed research brief in Markdown with clear section headings.\
"""

REFINE_INSTRUCTIONS = """\
A Quality Judge reviewed your previous research brief and returned this critique:
"{feedback}"

Refine and expand the previous research:
1. Address the Judge's feedback point by point.
2. Keep the accurate parts of the previous research.
3. Search for the missing information.

Output a NEW, complete, improved research brief (not a diff).

## Previous Research Draft
{prior_text}\
"""


def _build_user_prompt(topic: str, prior_text: str | None, feedback: str | None) -> str:
    """Construct the user prompt; refinement only when both hints are present."""
    parts = [f"## Topic\n{topic}"]
    if prior_text and feedback:
        parts.append(REFINE_INSTRUCTIONS.format(feedback=feedback, prior_text=prior_text))
    return "\n\n".join(parts)


def _extract_sources(response) -> list[SourceRef]:
    """Read web sources from the grounding metadata of a Gemini response."""
    metadata = getattr(response, "response_metadata", None) or {}
    grounding = metadata.get("grounding_metadata") or {}
    sources = []
    for chunk in grounding.get("grounding_chunks") or []:
        web = chunk.get("web") or {}
        uri = web.get("uri")
        if not uri:
            continue
        sources.append(SourceRef(title=web.get("title") or uri, uri=uri))
    return sources


async def run_researcher(
    topic: str,
    prior_text: str | None = None,
    feedback: str | None = None,
) -> ResearchBrief:
    """Research a topic, optionally refining a previous brief with Judge feedback.

    Raises ResearchFailure if the model call fails.
    """
    config = get_config()
    model_name = config["researcher_model"]

    llm = ChatGoogleGenerativeAI(model=model_name, temperature=0)
    grounded = llm.bind_tools([{"google_search": {}}])

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _build_user_prompt(topic, prior_text, feedback)},
    ]

    try:
        response = await grounded.ainvoke(messages)
    except Exception as exc:
        raise ResearchFailure("Researcher agent failed to gather information.") from exc

    text = response_text(response).strip() or EMPTY_RESEARCH_TEXT
    return ResearchBrief(text=text, sources=_extract_sources(response))
