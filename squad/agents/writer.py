"""Writer Agent — compiles the final research into a structured course.

The Writer outputs a JSON course with: title, introduction, summary, and
modules (each with title, description and keyPoints). Output is validated
and normalized before it becomes a CourseDocument.
"""

from langchain_google_genai import ChatGoogleGenerativeAI

from squad.config import get_config
from squad.errors import WriteFailure
from squad.state import CourseDocument
from squad.utils.parsing import parse_json_object, response_text

REQUIRED_FIELDS = ("title", "introduction", "summary", "modules")
REQUIRED_MODULE_FIELDS = {"title", "description", "keyPoints"}

# Map common LLM key deviations to the schema's keys
_MODULE_KEY_ALIASES = {
    "key_points": "keyPoints",
    "keypoints": "keyPoints",
    "points": "keyPoints",
    "name": "title",
    "overview": "description",
}

SYSTEM_PROMPT = """\
You are the Writer agent in a course-building squad (Researcher, Judge, Writer).

You are a best-selling course creator and educational writer. Using the research brief \
and the Judge's final comments, create a comprehensive course structure for the topic.

You MUST respond with valid JSON matching this exact schema:
{
  "title": "string — the course title",
  "introduction": "string — 1-3 paragraphs introducing the course and who it is for",
  "summary": "string — closing summary of what the learner will have mastered",
  "modules": [
    {
      "title": "string",
      "description": "string — what this module covers",
      "keyPoints": ["string — one concrete takeaway per entry"]
    }
  ]
}

Rules:
- Order modules from fundamentals to advanced material.
- Every module must have all three fields. keyPoints must be a non-empty array.
- Only use facts supported by the research brief.
- Respond ONLY with the JSON object. No markdown fences, no commentary.\
"""


def _build_user_prompt(topic: str, text: str, feedback: str) -> str:
    return (
        f"## Topic\n{topic}\n\n"
        f"## Research Brief\n{text}\n\n"
        f"## Judge's Final Comments\n{feedback or 'None.'}"
    )


def _validate_response(data: dict) -> None:
    """Validate and normalize the Writer response to match the required schema."""
    for key in REQUIRED_FIELDS:
        if key not in data:
            raise ValueError(f"Writer response missing '{key}' field.")
    for key in ("title", "introduction", "summary"):
        if not isinstance(data[key], str):
            raise ValueError(f"'{key}' must be a string.")

    modules = data["modules"]
    if not isinstance(modules, list) or not modules:
        raise ValueError("'modules' must be a non-empty array.")

    for i, module in enumerate(modules):
        if not isinstance(module, dict):
            raise ValueError(f"Module {i} is not an object.")
        for alias, key in _MODULE_KEY_ALIASES.items():
            if alias in module and key not in module:
                module[key] = module.pop(alias)
        missing = REQUIRED_MODULE_FIELDS - set(module.keys())
        if missing:
            raise ValueError(f"Module {i} missing required fields: {missing}")
        points = module["keyPoints"]
        if isinstance(points, str):
            module["keyPoints"] = [points]
        elif not isinstance(points, list):
            raise ValueError(f"Module {i} keyPoints must be an array.")


async def run_writer(topic: str, text: str, feedback: str) -> CourseDocument:
    """Write the course for a topic from the final research and Judge comments.

    Re-prompts once on a malformed reply. Raises WriteFailure if no parsable
    course is produced.
    """
    config = get_config()
    model_name = config["writer_model"]

    llm = ChatGoogleGenerativeAI(model=model_name, temperature=0)

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _build_user_prompt(topic, text, feedback)},
    ]

    try:
        # First attempt
        response = await llm.ainvoke(messages)
        content = response_text(response)
        if not content.strip():
            raise WriteFailure("Writer produced no output.")

        try:
            data = parse_json_object(content)
            _validate_response(data)
        except ValueError:
            # Re-prompt once before giving up
            messages.append({"role": "assistant", "content": content})
            messages.append({
                "role": "user",
                "content": (
                    "Your response did not match the required JSON schema. "
                    "Please try again with ONLY the raw JSON object — "
                    "no markdown fences, no commentary."
                ),
            })
            response = await llm.ainvoke(messages)
            data = parse_json_object(response_text(response))
            _validate_response(data)
    except WriteFailure:
        raise
    except Exception as exc:
        raise WriteFailure("Writer agent failed to create the course.") from exc

    return CourseDocument.from_dict(data)
