from __future__ import annotations

from typing import assert_never

from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from .aggregator import ExecutionAggregator, ExecutionStatus
from .config import RenderSettings
from .mime import MARKDOWN, PLAIN, as_text
from .outputs import ErrorResult, Media, OutputBlock, PlainText, StreamText


def status_fallback(status: ExecutionStatus, settings: RenderSettings | None = None) -> Text:
    """Return the placeholder shown while an execution has no outputs.

    Example:
        ```python
        status_fallback(ExecutionStatus.EXECUTING).plain  # "Executing..."
        ```
    """
    settings = settings or RenderSettings()
    if status is ExecutionStatus.CONNECTING_TO_KERNEL:
        return Text(settings.connecting_label, style="dim")
    if status is ExecutionStatus.EXECUTING:
        return Text(settings.executing_label, style="dim")
    if status is ExecutionStatus.FINISHED:
        return Text(settings.finished_label, style="green")
    return Text(settings.unknown_label, style="dim")


def _render_media(block: Media, settings: RenderSettings) -> RenderableType | None:
    """Render the media types the terminal can show; skip the rest.

    Example:
        ```python
        _render_media(Media("text/plain", "hi"), RenderSettings())
        ```
    """
    if block.mime_type == PLAIN:
        return Text(as_text(block.value))
    if block.mime_type == MARKDOWN:
        if settings.render_markdown:
            return Markdown(as_text(block.value))
        return Text(as_text(block.value))
    return None


def _render_error(block: ErrorResult, settings: RenderSettings) -> RenderableType:
    """Render an error headline above its traceback.

    Example:
        ```python
        _render_error(ErrorResult("E", "bad", TerminalOutput()), RenderSettings())
        ```
    """
    headline = Text(f"{block.ename}: {block.evalue}", style="bold")
    return Panel(
        Group(headline, block.traceback.render()),
        border_style=settings.error_border_style,
        expand=True,
    )


def render_block(block: OutputBlock, settings: RenderSettings | None = None) -> RenderableType | None:
    """Render one output block, or return None when it has no visual form.

    Example:
        ```python
        console.print(render_block(StreamText(TerminalOutput("hi"))))
        ```
    """
    settings = settings or RenderSettings()
    if isinstance(block, (PlainText, StreamText)):
        return block.buffer.render()
    if isinstance(block, Media):
        return _render_media(block, settings)
    if isinstance(block, ErrorResult):
        return _render_error(block, settings)
    assert_never(block)


def render_execution(
    aggregator: ExecutionAggregator,
    settings: RenderSettings | None = None,
) -> RenderableType:
    """Render every block of an execution in order, or its status fallback.

    Example:
        ```python
        Console().print(render_execution(view))
        ```
    """
    settings = settings or RenderSettings()
    outputs = aggregator.outputs
    if not outputs:
        return status_fallback(aggregator.status, settings)
    renderables = [
        renderable
        for renderable in (render_block(block, settings) for block in outputs)
        if renderable is not None
    ]
    return Group(*renderables)
