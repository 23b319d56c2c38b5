from kernel_outputs.mime import PRIORITY_ORDER, as_text, is_text_mime, richest


def test_richest_prefers_markdown_over_plain() -> None:
    data = {"text/plain": "x = 1", "text/markdown": "**x** = 1"}

    assert richest(data) == ("text/markdown", "**x** = 1")
    assert richest(dict(reversed(list(data.items())))) == ("text/markdown", "**x** = 1")


def test_richest_falls_back_to_plain() -> None:
    assert richest({"text/html": "<b>1</b>", "text/plain": "1"}) == ("text/plain", "1")


def test_richest_returns_none_without_prioritized_types() -> None:
    data = {"image/png": "iVBORw0KGgo=", "text/html": "<img>"}

    assert richest(data) is None
    assert richest(data) is None
    assert richest({}) is None


def test_richest_accepts_custom_priority() -> None:
    data = {"text/plain": "1", "image/png": "abc"}

    assert richest(data, ("image/png", *PRIORITY_ORDER)) == ("image/png", "abc")


def test_text_mime_types_are_markdown_and_plain_only() -> None:
    assert is_text_mime("text/markdown")
    assert is_text_mime("text/plain")
    assert not is_text_mime("text/html")


def test_as_text_handles_strings_lists_and_others() -> None:
    assert as_text("abc") == "abc"
    assert as_text(["line 1\n", "line 2"]) == "line 1\nline 2"
    assert as_text({"a": 1}) == ""
    assert as_text(None) == ""
    assert as_text([1, 2]) == ""
