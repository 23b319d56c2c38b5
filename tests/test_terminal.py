from kernel_outputs.terminal import TerminalOutput


def test_empty_buffer_has_no_lines() -> None:
    out = TerminalOutput()

    assert out.num_lines() == 0
    assert out.plain() == ""


def test_append_accumulates_raw_chunks() -> None:
    out = TerminalOutput("hel")
    out.append_text("lo\nwor")
    out.append_text("ld\n")

    assert out.text == "hello\nworld\n"
    assert out.num_lines() == 2
    assert out.plain() == "hello\nworld"


def test_ansi_sequences_are_styled_not_shown() -> None:
    out = TerminalOutput("\x1b[31mred\x1b[0m plain")

    rendered = out.render()

    assert rendered.plain == "red plain"
    assert any(span.style.color is not None and span.style.color.number == 1 for span in rendered.spans)


def test_carriage_return_rewinds_line() -> None:
    out = TerminalOutput("progress 10%\rprogress 50%")
    out.append_text("\rprogress 100%\ndone\n")

    assert out.num_lines() == 2
    assert out.plain() == "progress 100%\ndone"


def test_crlf_counts_as_one_line_break() -> None:
    assert TerminalOutput("a\r\nb\r\n").num_lines() == 2


def test_buffers_compare_by_contents() -> None:
    assert TerminalOutput("a") == TerminalOutput("a")
    assert TerminalOutput("a") != TerminalOutput("b")
