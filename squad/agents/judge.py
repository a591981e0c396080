"""Judge Agent — decides whether the research is good enough to build a course on.

Required output schema:
{
  "approved": true | false,
  "feedback": "string"
}

The Judge never raises to the orchestrator. Any failure to get a usable
verdict is reported as JudgeUnavailable internally and degraded to an
approval, so an unavailable Judge cannot stall the pipeline.
"""

import sys

from langchain_anthropic import ChatAnthropic

from squad.config import get_config
from squad.errors import JudgeUnavailable
from squad.state import JudgeVerdict
from squad.utils.parsing import parse_json_object, response_text

EMPTY_OUTPUT_FEEDBACK = "No output from judge, assuming approval."

SYSTEM_PROMPT = """\
You are the Judge agent in a course-building squad (Researcher, Judge, Writer).

Your job is to review a research brief and decide whether it is sufficient to build a \
high-quality educational course on the topic.

Criteria for approval:
1. Is the information accurate and relevant to the topic?
2. Are there hallucinations or obvious errors?
3. Is the breadth and depth sufficient for a full course?

If the research is good enough, approve it with a brief positive comment.
If it has major gaps or errors, reject it and give specific, actionable instructions \
the Researcher can follow to fix it.

You MUST respond with valid JSON matching this exact schema:
{
  "approved": true or false,
  "feedback": "string — fix instructions if rejected, a brief comment if approved"
}

Respond ONLY with the JSON object. No markdown fences, no commentary.\
"""


def _validate_response(data: dict) -> None:
    """Validate that the Judge response matches the required schema."""
    if "approved" not in data:
        raise ValueError("Judge response missing 'approved' field.")
    if not isinstance(data["approved"], bool):
        raise ValueError(f"'approved' must be a boolean, got {data['approved']!r}.")
    if not isinstance(data.get("feedback", ""), str):
        raise ValueError("'feedback' must be a string.")


async def _evaluate(topic: str, text: str) -> JudgeVerdict:
    config = get_config()
    model_name = config["judge_model"]

    llm = ChatAnthropic(model=model_name, temperature=0)

    user_prompt = (
        f"## Topic\n{topic}\n\n"
        f"## Research Brief\n{text}"
    )
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]

    try:
        response = await llm.ainvoke(messages)
    except Exception as exc:
        raise JudgeUnavailable(f"Judge call failed: {exc!r}") from exc

    content = response_text(response).strip()
    if not content:
        return JudgeVerdict(approved=True, feedback=EMPTY_OUTPUT_FEEDBACK)

    try:
        data = parse_json_object(content)
        _validate_response(data)
    except ValueError as exc:
        raise JudgeUnavailable(f"Judge returned an unusable verdict: {exc}") from exc

    return JudgeVerdict(approved=data["approved"], feedback=data.get("feedback", ""))


async def run_judge(topic: str, text: str) -> JudgeVerdict:
    """Evaluate research for a topic. Never raises."""
    try:
        return await _evaluate(topic, text)
    except JudgeUnavailable as exc:
        print(f"[SQUAD] {exc} Proceeding as approved.", file=sys.stderr)
        return JudgeVerdict(approved=True, feedback=JudgeUnavailable.feedback)
