from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias, assert_never

from .mime import as_text
from .terminal import TerminalOutput

# Line heights are reported in an unsigned byte and saturate there.
LINE_COUNT_MAX = 255


def saturating_add(left: int, right: int) -> int:
    """Add two line counts, clamping at `LINE_COUNT_MAX`.

    Example:
        ```python
        saturating_add(250, 10)  # 255
        ```
    """
    return min(LINE_COUNT_MAX, left + right)


def _clamp(count: int) -> int:
    """Clamp a raw line count into the reportable range.

    Example:
        ```python
        _clamp(1000)  # 255
        ```
    """
    return max(0, min(LINE_COUNT_MAX, count))


def count_text_lines(text: str) -> int:
    """Count `\\n`-delimited lines; a trailing newline does not open a new line.

    Other line separators such as `\\r` or form feeds stay inside their line.

    Example:
        ```python
        count_text_lines("a\\nb\\n")  # 2
        ```
    """
    if not text:
        return 0
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return _clamp(len(lines))


@dataclass(slots=True, eq=True)
class PlainText:
    """A finished text result, such as a plain or markdown execute result.

    Example:
        ```python
        block = PlainText(TerminalOutput("42"))
        ```
    """

    buffer: TerminalOutput


@dataclass(slots=True, eq=True)
class Media:
    """A rich result carried opaquely for the renderer.

    Example:
        ```python
        block = Media("image/png", "iVBORw0KGgo...")
        ```
    """

    mime_type: str
    value: Any


@dataclass(slots=True, eq=True)
class StreamText:
    """Growing stdout/stderr text; adjacent stream chunks merge into it.

    Example:
        ```python
        block = StreamText(TerminalOutput("progress: 10%"))
        ```
    """

    buffer: TerminalOutput


@dataclass(slots=True, eq=True)
class ErrorResult:
    """A structured failure with its traceback.

    Example:
        ```python
        block = ErrorResult("ZeroDivisionError", "division by zero", TerminalOutput("..."))
        ```
    """

    ename: str
    evalue: str
    traceback: TerminalOutput


OutputBlock: TypeAlias = PlainText | Media | StreamText | ErrorResult


def num_lines(block: OutputBlock) -> int:
    """Estimate how many text lines a block occupies when rendered.

    Example:
        ```python
        num_lines(ErrorResult("E", "bad", TerminalOutput("l1\\nl2")))  # 4
        ```
    """
    if isinstance(block, (PlainText, StreamText)):
        return _clamp(block.buffer.num_lines())
    if isinstance(block, Media):
        return count_text_lines(as_text(block.value))
    if isinstance(block, ErrorResult):
        height = 0
        height = saturating_add(height, count_text_lines(block.ename))
        height = saturating_add(height, count_text_lines(block.evalue))
        height = saturating_add(height, _clamp(block.traceback.num_lines()))
        return height
    assert_never(block)


def block_kind(block: OutputBlock) -> str:
    """Return a short name for the block variant.

    Example:
        ```python
        block_kind(Media("image/png", "..."))  # "media"
        ```
    """
    if isinstance(block, PlainText):
        return "plain"
    if isinstance(block, Media):
        return "media"
    if isinstance(block, StreamText):
        return "stream"
    if isinstance(block, ErrorResult):
        return "error"
    assert_never(block)
