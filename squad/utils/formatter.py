"""Output Formatter — converts a finished CourseDocument into a Markdown course."""

import re
from pathlib import Path

from squad.config import get_config
from squad.state import CourseDocument, SourceRef

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _slugify(title: str) -> str:
    return _SLUG_RE.sub("-", title.lower()).strip("-")


def render_markdown(course: CourseDocument, sources=()) -> str:
    """Convert a CourseDocument and its sources into a Markdown course."""
    lines = []

    lines.append(f"# {course.title or 'Untitled Course'}")
    lines.append("")

    if course.introduction:
        lines.append("## Introduction")
        lines.append("")
        lines.append(course.introduction)
        lines.append("")

    # Modules
    if course.modules:
        lines.append("## Modules")
        lines.append("")
        for i, module in enumerate(course.modules, 1):
            lines.append(f"### Module {i}: {module.title}")
            lines.append("")
            if module.description:
                lines.append(module.description)
                lines.append("")
            if module.key_points:
                lines.append("**Key points:**")
                lines.append("")
                for point in module.key_points:
                    lines.append(f"- {point}")
                lines.append("")

    if course.summary:
        lines.append("## Summary")
        lines.append("")
        lines.append(course.summary)
        lines.append("")

    # Sources the research was grounded on
    if sources:
        lines.append("## Sources")
        lines.append("")
        for source in sources:
            lines.append(f"- [{source.title}]({source.uri})")
        lines.append("")

    return "\n".join(lines)


def write_course(course: CourseDocument, sources: list[SourceRef]) -> Path:
    """Write the course as Markdown into the configured output directory.

    The file is named after the course title and never overwrites an
    existing file.

    Returns the Path to the written file.
    """
    config = get_config()
    base_path = Path(__file__).resolve().parent.parent.parent / config["output_path"]
    output_dir = base_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    stem = _slugify(course.title) or base_path.stem

    # Find a non-conflicting filename
    output_path = output_dir / f"{stem}.md"
    counter = 1
    while output_path.exists():
        counter += 1
        output_path = output_dir / f"{stem} ({counter}).md"

    output_path.write_text(render_markdown(course, sources), encoding="utf-8")
    return output_path
