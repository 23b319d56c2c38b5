from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

MARKDOWN = "text/markdown"
PLAIN = "text/plain"
HTML = "text/html"
PNG = "image/png"
JSON = "application/json"

# Highest to lowest; plain text is the common fallback.
PRIORITY_ORDER: tuple[str, ...] = (MARKDOWN, PLAIN)
TEXT_MIME_TYPES = frozenset({MARKDOWN, PLAIN})


def richest(
    data: Mapping[str, Any],
    priority: Sequence[str] = PRIORITY_ORDER,
) -> tuple[str, Any] | None:
    """Return the most preferred `(mime_type, value)` pair present in a bundle.

    Returns `None` when the bundle holds none of the prioritized types.

    Example:
        ```python
        richest({"text/plain": "1", "text/markdown": "**1**"})
        # ("text/markdown", "**1**")
        ```
    """
    for mime_type in priority:
        if mime_type in data:
            return mime_type, data[mime_type]
    return None


def is_text_mime(mime_type: str) -> bool:
    """Return whether a MIME type is rendered as terminal text.

    Example:
        ```python
        assert is_text_mime("text/plain")
        ```
    """
    return mime_type in TEXT_MIME_TYPES


def as_text(value: Any) -> str:
    """Return the textual form of a bundle value, or an empty string.

    Jupyter may split multi-line text into a list of strings.

    Example:
        ```python
        as_text(["a\\n", "b"])  # "a\\nb"
        as_text({"x": 1})  # ""
        ```
    """
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return "".join(value)
    return ""
