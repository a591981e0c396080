"""Course Squad — Streamlit UI for turning a topic into a course."""

import sys
from pathlib import Path

# Add project root to path so 'squad' package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import asyncio

import streamlit as st

from squad.main import default_squad
from squad.orchestrator import Orchestrator
from squad.state import AgentRole, CourseDocument, LogEvent, RunStatus, Severity
from squad.utils.formatter import render_markdown

st.set_page_config(page_title="Course Squad", layout="wide")
st.title("Turn any topic into a complete course")
st.markdown(
    "Enter a subject and a squad of agents will build a course for it: a **Researcher** "
    "(Gemini, grounded in Google Search) gathers material, a **Judge** (Claude) sends it "
    "back until it is good enough, and a **Writer** (Gemini) compiles the final modules."
)

st.divider()

if "orchestrator" not in st.session_state:
    st.session_state["orchestrator"] = Orchestrator(default_squad())

orchestrator: Orchestrator = st.session_state["orchestrator"]


# ---------------------------------------------------------------------------
# Helper renderers
# ---------------------------------------------------------------------------

_PIPELINE_STEPS = [
    (RunStatus.RESEARCHING, AgentRole.RESEARCHER),
    (RunStatus.JUDGING, AgentRole.JUDGE),
    (RunStatus.WRITING, AgentRole.WRITER),
]

_SEVERITY_ICONS = {
    Severity.INFO: "ℹ️",
    Severity.SUCCESS: "✅",
    Severity.ERROR: "❌",
    Severity.THINKING: "💭",
}


def _render_status_strip(status: RunStatus) -> str:
    """One line showing which agent is working."""
    order = [s for s, _ in _PIPELINE_STEPS]
    cells = []
    for step, role in _PIPELINE_STEPS:
        if status is step:
            cells.append(f"**▶ {role.value}**")
        elif status is RunStatus.COMPLETED or (status in order and order.index(step) < order.index(status)):
            cells.append(f"~~{role.value}~~ ✓")
        else:
            cells.append(role.value)
    line = " → ".join(cells)
    if status is RunStatus.ERROR:
        line += " — **failed**"
    return line


def _render_log_line(event: LogEvent) -> str:
    icon = _SEVERITY_ICONS.get(event.severity, "")
    return f"`{event.timestamp:%H:%M:%S}` {icon} **{event.role.value}** — {event.message}"


def _render_course(course: CourseDocument, sources) -> None:
    st.header(course.title)
    st.markdown(course.introduction)

    for i, module in enumerate(course.modules, 1):
        with st.expander(f"Module {i}: {module.title}", expanded=(i == 1)):
            st.markdown(module.description)
            for point in module.key_points:
                st.markdown(f"- {point}")

    st.subheader("Summary")
    st.markdown(course.summary)

    if sources:
        with st.expander(f"Sources ({len(sources)})"):
            for source in sources:
                st.markdown(f"- [{source.title}]({source.uri})")

    st.download_button(
        label="Download course.md",
        data=render_markdown(course, sources),
        file_name="course.md",
        mime="text/markdown",
    )


# ---------------------------------------------------------------------------
# Page logic
# ---------------------------------------------------------------------------

topic = st.text_input(
    "What do you want to learn?",
    placeholder="e.g., Quantum Physics, Sourdough Baking",
)

status_placeholder = st.empty()
log_container = st.container()

if st.button("Build", type="primary", disabled=orchestrator.status not in
             (RunStatus.IDLE, RunStatus.COMPLETED, RunStatus.ERROR)):
    if not topic or not topic.strip():
        st.error("Please enter a non-empty topic.")
        st.stop()

    log_lines = log_container.empty()
    rendered: list[str] = []

    def _on_log(event: LogEvent) -> None:
        rendered.append(_render_log_line(event))
        log_lines.markdown("\n\n".join(rendered))

    def _on_status(_old: RunStatus, new: RunStatus) -> None:
        status_placeholder.markdown(_render_status_strip(new))

    # Placeholders belong to this script run, so observers are detached afterwards.
    orchestrator.subscribe_log(_on_log)
    orchestrator.subscribe_status(_on_status)
    try:
        asyncio.run(orchestrator.start_run(topic))
    finally:
        orchestrator.unsubscribe_log(_on_log)
        orchestrator.unsubscribe_status(_on_status)
    st.rerun()

if orchestrator.status is not RunStatus.IDLE:
    status_placeholder.markdown(_render_status_strip(orchestrator.status))
    with log_container.expander("Agent log", expanded=orchestrator.status is RunStatus.ERROR):
        for event in orchestrator.log:
            st.markdown(_render_log_line(event))

document, sources = orchestrator.result
if document is None and orchestrator.status is RunStatus.ERROR:
    st.error("The squad could not finish this course. See the agent log for details.")
    # A failed run shows the last course that did complete.
    document, sources = orchestrator.last_completed

if document is not None:
    st.divider()
    _render_course(document, sources)
