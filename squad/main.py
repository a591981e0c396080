"""Entry point: validates input, runs the squad on a topic, writes the course."""

import asyncio
import sys

from squad.agents.judge import run_judge
from squad.agents.researcher import run_researcher
from squad.agents.writer import run_writer
from squad.graph import Squad
from squad.orchestrator import Orchestrator
from squad.state import LogEvent, RunStatus
from squad.utils.formatter import write_course
from squad.utils.validator import validate_topic


def default_squad() -> Squad:
    """The LLM-backed Researcher, Judge and Writer."""
    return Squad(research=run_researcher, judge=run_judge, write=run_writer)


def _print_event(event: LogEvent) -> None:
    print(f"[{event.timestamp:%H:%M:%S}] [{event.role.value}] {event.message}")


def run(topic: str, export: bool = True) -> RunStatus:
    """Run the full pipeline on a topic string.

    Args:
        topic: Subject of the course.
        export: Write the finished course as Markdown.
    """
    validated = validate_topic(topic)

    orchestrator = Orchestrator(default_squad())
    orchestrator.subscribe_log(_print_event)

    asyncio.run(orchestrator.start_run(validated))

    document, sources = orchestrator.result
    print(f"[SQUAD] Status: {orchestrator.status.value}")
    if document is not None:
        print(f"[SQUAD] Course: {document.title} ({len(document.modules)} modules, {len(sources)} sources)")
        if export:
            output_path = write_course(document, sources)
            print(f"[SQUAD] Output written to: {output_path}")

    return orchestrator.status


def main() -> None:
    """CLI entry point — accepts the topic as argument or from stdin."""
    export = True
    args = sys.argv[1:]

    if "--no-export" in args:
        export = False
        args.remove("--no-export")

    if args:
        topic = " ".join(args)
    else:
        print("Enter a topic (Ctrl+D / Ctrl+Z to submit):")
        topic = sys.stdin.read()

    status = run(topic, export=export)
    if status is RunStatus.ERROR:
        sys.exit(1)


if __name__ == "__main__":
    main()
