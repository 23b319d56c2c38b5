from __future__ import annotations

import argparse
import json
from functools import partial
from pathlib import Path
from typing import Any, Never, Sequence, assert_never

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich_argparse import RawTextRichHelpFormatter
from kernel_outputs import ExecutionAggregator, RenderSettings, message_from_dict, render_execution
from kernel_outputs.logs import configure_logging
from kernel_outputs.messages import parent_execution_id
from kernel_outputs.mime import as_text
from kernel_outputs.outputs import ErrorResult, Media, OutputBlock, PlainText, StreamText, block_kind, num_lines

_CONSOLE = Console(no_color=False)
_DEFAULT_EXECUTION_ID = "replay"


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m kout")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


class ReplayError(Exception):
    """Raised when a capture file cannot be replayed."""


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for replaying captured kernel messages.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m kout",
        description=(
            "kernel-outputs CLI\n"
            "Replay captured Jupyter kernel messages and show the resulting outputs."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m kout replay capture.jsonl\n"
            "  python -m kout replay capture.jsonl --summary\n"
            "  python -m kout replay capture.jsonl --execution-id 4f1c...\n"
            "  python -m kout --log-level DEBUG replay capture.jsonl"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--log-level",
        help=(
            "Enable library logging at this level.\n"
            "Example: --log-level DEBUG"
        ),
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    replay_cmd = sub.add_parser(
        "replay",
        help="Fold a JSONL capture of kernel messages into outputs.",
        description=(
            "Read one Jupyter message per line and feed them, in order,\n"
            "to a fresh aggregator. Blank lines are skipped."
        ),
        epilog=(
            "Examples:\n"
            "  python -m kout replay capture.jsonl\n"
            "  python -m kout replay capture.jsonl --config render.toml --summary"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    replay_cmd.add_argument("capture", help="Path to a JSONL file of kernel messages.")
    replay_cmd.add_argument(
        "--execution-id",
        help=(
            "Only replay messages whose parent_header.msg_id matches.\n"
            "Messages without a parent header are always replayed."
        ),
    )
    replay_cmd.add_argument(
        "--config",
        help="Path to a render settings TOML file.",
    )
    replay_cmd.add_argument(
        "--summary",
        action="store_true",
        help="Also print a table of output blocks and the final status.",
    )

    return parser


def load_capture(path: Path) -> list[dict[str, Any]]:
    """Read a JSONL capture into a list of raw message dictionaries.

    Example:
        ```python
        raw_messages = load_capture(Path("capture.jsonl"))
        ```
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReplayError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    messages: list[dict[str, Any]] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ReplayError(f"Line {lineno}: invalid JSON ({exc.msg})") from exc
        if not isinstance(raw, dict):
            raise ReplayError(f"Line {lineno}: expected a JSON object")
        messages.append(raw)
    return messages


def replay(
    raw_messages: list[dict[str, Any]],
    execution_id: str | None = None,
) -> ExecutionAggregator:
    """Feed raw messages to a new aggregator and return it.

    Example:
        ```python
        view = replay([{"msg_type": "stream", "content": {"text": "hi"}}])
        ```
    """
    view = ExecutionAggregator(execution_id or _DEFAULT_EXECUTION_ID)
    for index, raw in enumerate(raw_messages, start=1):
        parent = parent_execution_id(raw)
        if execution_id is not None and parent is not None and parent != execution_id:
            continue
        try:
            message = message_from_dict(raw)
        except ValueError as exc:
            raise ReplayError(f"Message {index}: {exc}") from exc
        view.accept(message)
    return view


def _block_detail(block: OutputBlock) -> str:
    """Return a one-line description of a block for the summary table.

    Example:
        ```python
        _block_detail(Media("image/png", "..."))  # "image/png"
        ```
    """
    if isinstance(block, (PlainText, StreamText)):
        lines = block.buffer.plain().splitlines()
        return lines[0] if lines else ""
    if isinstance(block, Media):
        text = as_text(block.value).splitlines()
        return f"{block.mime_type}: {text[0]}" if text else block.mime_type
    if isinstance(block, ErrorResult):
        return f"{block.ename}: {block.evalue}"
    assert_never(block)


def _print_summary(view: ExecutionAggregator) -> None:
    """Render output blocks and final status in a rich table.

    Example:
        ```python
        _print_summary(view)
        ```
    """
    table = Table(title=f"Execution {view.execution_id}")
    table.add_column("#", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Lines")
    table.add_column("Detail", overflow="ellipsis", no_wrap=True)
    for index, block in enumerate(view.outputs):
        table.add_row(str(index), block_kind(block), str(num_lines(block)), Text(_block_detail(block)))
    _CONSOLE.print(table)
    _CONSOLE.print(
        Panel.fit(
            f"Status: {view.status.value}\nLines: {view.num_lines()}",
            title="Summary",
            border_style="green",
        )
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `kout` CLI command handler.

    Example:
        ```python
        code = main(["replay", "capture.jsonl"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        if args.log_level:
            configure_logging(args.log_level)
        if args.command == "replay":
            settings = RenderSettings.from_file(args.config) if args.config else RenderSettings()
            view = replay(load_capture(Path(args.capture)), execution_id=args.execution_id)
            _CONSOLE.print(render_execution(view, settings))
            if args.summary:
                _print_summary(view)
            return 0
    except (ReplayError, ValueError) as exc:
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {escape(str(exc))}", border_style="red"))
        return 1

    parser.error("Unhandled command")
    return 2
