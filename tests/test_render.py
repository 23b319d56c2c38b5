from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from kernel_outputs import (
    DisplayData,
    ErrorOutput,
    ExecutionAggregator,
    ExecutionStatus,
    RenderSettings,
    StreamContent,
    render_block,
    render_execution,
    status_fallback,
)
from kernel_outputs.outputs import ErrorResult, Media
from kernel_outputs.terminal import TerminalOutput


def _to_text(renderable) -> str:
    console = Console(width=80, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_status_fallbacks_cover_every_status() -> None:
    labels = {status: status_fallback(status).plain for status in ExecutionStatus}

    assert labels == {
        ExecutionStatus.UNKNOWN: "...",
        ExecutionStatus.CONNECTING_TO_KERNEL: "Connecting to kernel...",
        ExecutionStatus.EXECUTING: "Executing...",
        ExecutionStatus.FINISHED: "✓",
    }


def test_empty_execution_renders_unknown_fallback() -> None:
    view = ExecutionAggregator("exec-1")

    rendered = render_execution(view)

    assert isinstance(rendered, Text)
    assert rendered.plain == "..."
    assert view.num_lines() == 1


def test_fallback_uses_configured_labels() -> None:
    view = ExecutionAggregator("exec-1")
    view.set_status(ExecutionStatus.FINISHED)

    rendered = render_execution(view, RenderSettings(finished_label="done"))

    assert rendered.plain == "done"


def test_unsupported_media_is_skipped() -> None:
    assert render_block(Media("image/png", "abc")) is None

    view = ExecutionAggregator("exec-1")
    view.accept(StreamContent("before\n"))
    view.accept(DisplayData(data={"text/plain": "shown"}))

    rendered = render_execution(view)

    assert isinstance(rendered, Group)
    assert "before" in _to_text(rendered)
    assert "shown" in _to_text(rendered)


def test_markdown_media_respects_setting() -> None:
    block = Media("text/markdown", "# Title")

    assert isinstance(render_block(block), Markdown)
    assert isinstance(render_block(block, RenderSettings(render_markdown=False)), Text)


def test_error_renders_headline_and_traceback() -> None:
    rendered = render_block(ErrorResult("KeyError", "'a'", TerminalOutput("frame 1\nframe 2")))

    assert isinstance(rendered, Panel)
    output = _to_text(rendered)
    assert "KeyError: 'a'" in output
    assert "frame 2" in output


def test_rendering_does_not_mutate_outputs() -> None:
    view = ExecutionAggregator("exec-1")
    view.accept(StreamContent("a"))
    view.accept(ErrorOutput("E", "v", ["t"]))
    before = view.outputs

    render_execution(view)

    assert view.outputs == before
