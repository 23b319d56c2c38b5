from kernel_outputs.outputs import (
    LINE_COUNT_MAX,
    ErrorResult,
    Media,
    PlainText,
    StreamText,
    block_kind,
    num_lines,
    saturating_add,
)
from kernel_outputs.terminal import TerminalOutput


def test_text_blocks_delegate_to_buffer() -> None:
    assert num_lines(PlainText(TerminalOutput("1\n2\n3"))) == 3
    assert num_lines(StreamText(TerminalOutput("a\nb\n"))) == 2


def test_media_counts_text_lines_or_zero() -> None:
    assert num_lines(Media("text/plain", "a\nb\nc")) == 3
    assert num_lines(Media("image/png", {"not": "text"})) == 0
    assert num_lines(Media("text/markdown", "")) == 0


def test_error_result_sums_all_parts() -> None:
    block = ErrorResult("ValueError", "bad value", TerminalOutput("frame 1\nframe 2"))

    assert num_lines(block) == 4


def test_error_result_line_height_saturates() -> None:
    many = "\n".join(["x"] * 200)
    block = ErrorResult(many, many, TerminalOutput(many))

    assert num_lines(block) == LINE_COUNT_MAX


def test_text_block_line_height_is_clamped() -> None:
    block = StreamText(TerminalOutput("line\n" * 1000))

    assert num_lines(block) == LINE_COUNT_MAX


def test_saturating_add_clamps_at_maximum() -> None:
    assert saturating_add(1, 2) == 3
    assert saturating_add(LINE_COUNT_MAX, 1) == LINE_COUNT_MAX
    assert saturating_add(200, 200) == LINE_COUNT_MAX


def test_line_height_is_stable_for_identical_input() -> None:
    block = Media("text/plain", "x\ny")

    assert num_lines(block) == num_lines(Media("text/plain", "x\ny"))


def test_block_kind_names() -> None:
    assert block_kind(PlainText(TerminalOutput())) == "plain"
    assert block_kind(Media("image/png", "")) == "media"
    assert block_kind(StreamText(TerminalOutput())) == "stream"
    assert block_kind(ErrorResult("E", "v", TerminalOutput())) == "error"


def test_only_newlines_split_text_lines() -> None:
    assert num_lines(Media("text/plain", "page1\x0cpage2")) == 1
    assert num_lines(Media("text/plain", "a\x0bb c")) == 1
    assert num_lines(ErrorResult("E", "10%\r100%", TerminalOutput())) == 2
    assert num_lines(Media("text/plain", "a\r\nb\r\n")) == 2
    assert num_lines(Media("text/plain", "\n")) == 1
