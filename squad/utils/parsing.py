"""Shared parsing utilities for agent responses."""

import json
import re

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


def strip_fences(text: str) -> str:
    """Strip markdown code fences from LLM output if present."""
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text.strip()


def response_text(response) -> str:
    """Return the text of a chat model response.

    Content may be a plain string or a list of content blocks (Gemini and
    Claude both return blocks when tools or thinking are involved).
    """
    content = response.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def parse_json_object(text: str) -> dict:
    """Parse a fenced or bare JSON object. Raises ValueError if it isn't one."""
    data = json.loads(strip_fences(text))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}.")
    return data
