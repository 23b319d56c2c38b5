from __future__ import annotations

from typing import Protocol

from rich.ansi import AnsiDecoder
from rich.text import Text


class TerminalBuffer(Protocol):
    def append_text(self, text: str) -> None:
        """Append a raw chunk, control sequences included.

        Example:
            ```python
            buffer.append_text("\\x1b[32mok\\x1b[0m\\n")
            ```
        """
        ...

    def num_lines(self) -> int:
        """Return how many display lines the buffer spans.

        Example:
            ```python
            height = buffer.num_lines()
            ```
        """
        ...

    def render(self) -> Text:
        """Return a renderable form of the buffer.

        Example:
            ```python
            console.print(buffer.render())
            ```
        """
        ...


def _display_lines(raw: str) -> list[str]:
    """Split raw terminal text into the lines a terminal would show.

    A bare carriage return rewinds to the start of the line, so only the
    last non-empty segment of each line is kept.

    Example:
        ```python
        _display_lines("10%\\r100%\\ndone\\n")  # ["100%", "done"]
        ```
    """
    if not raw:
        return []
    lines = raw.replace("\r\n", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    shown: list[str] = []
    for line in lines:
        segments = [segment for segment in line.split("\r") if segment]
        shown.append(segments[-1] if segments else "")
    return shown


class TerminalOutput:
    """Accumulates raw terminal text and renders it with ANSI styling.

    Example:
        ```python
        out = TerminalOutput("hello\\n")
        out.append_text("\\x1b[1mworld\\x1b[0m")
        out.num_lines()  # 2
        ```
    """

    __slots__ = ("_raw",)

    def __init__(self, text: str = "") -> None:
        """Create a buffer, optionally seeded with text.

        Example:
            ```python
            out = TerminalOutput()
            ```
        """
        self._raw = text

    @property
    def text(self) -> str:
        """Return every chunk appended so far, unmodified.

        Example:
            ```python
            TerminalOutput("a").text  # "a"
            ```
        """
        return self._raw

    def append_text(self, text: str) -> None:
        """Append a raw chunk to the end of the buffer.

        Example:
            ```python
            out.append_text("more output\\n")
            ```
        """
        self._raw += text

    def num_lines(self) -> int:
        """Return the number of display lines.

        Example:
            ```python
            TerminalOutput("a\\nb\\n").num_lines()  # 2
            ```
        """
        return len(_display_lines(self._raw))

    def render(self) -> Text:
        """Decode ANSI sequences into styled rich text.

        Example:
            ```python
            Console().print(TerminalOutput("\\x1b[31merror\\x1b[0m").render())
            ```
        """
        decoder = AnsiDecoder()
        return Text("\n").join(decoder.decode_line(line) for line in _display_lines(self._raw))

    def plain(self) -> str:
        """Return the displayed text with styling removed.

        Example:
            ```python
            TerminalOutput("\\x1b[1mx\\x1b[0m").plain()  # "x"
            ```
        """
        return self.render().plain

    def __repr__(self) -> str:
        """Return a debug representation.

        Example:
            ```python
            repr(TerminalOutput("x"))  # "TerminalOutput('x')"
            ```
        """
        return f"TerminalOutput({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        """Compare buffers by their raw contents.

        Example:
            ```python
            assert TerminalOutput("a") == TerminalOutput("a")
            ```
        """
        if not isinstance(other, TerminalOutput):
            return NotImplemented
        return self._raw == other._raw

    __hash__ = None  # type: ignore[assignment]
