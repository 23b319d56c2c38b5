from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_FALLBACK_RENDER: dict[str, Any] = {
    "unknown_label": "...",
    "connecting_label": "Connecting to kernel...",
    "executing_label": "Executing...",
    "finished_label": "✓",
    "error_border_style": "red",
    "render_markdown": True,
}


def _default_config_path() -> Path:
    """Return bundled default render TOML path.

    Example:
        ```python
        path = _default_config_path()
        ```
    """
    return Path(__file__).with_name("default_render.toml")


def _read_render_toml(path: Path) -> dict[str, Any]:
    """Read render TOML and return the render table.

    Example:
        ```python
        raw = _read_render_toml(Path("/tmp/render.toml"))
        ```
    """
    if not path.exists():
        return dict(_FALLBACK_RENDER)
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    render_obj = raw.get("render", raw)
    if not isinstance(render_obj, dict):
        raise ValueError("Render config must be a TOML table")
    return render_obj


def _str_value(raw: dict[str, Any], field_name: str) -> str:
    """Validate a string setting, falling back to the bundled default.

    Example:
        ```python
        label = _str_value({"finished_label": "done"}, "finished_label")
        ```
    """
    value = raw.get(field_name, _DEFAULT_RENDER_RAW[field_name])
    if not isinstance(value, str):
        raise ValueError(f"'{field_name}' must be a string")
    return value


def _bool_value(raw: dict[str, Any], field_name: str) -> bool:
    """Validate a boolean setting, falling back to the bundled default.

    Example:
        ```python
        enabled = _bool_value({"render_markdown": False}, "render_markdown")
        ```
    """
    value = raw.get(field_name, _DEFAULT_RENDER_RAW[field_name])
    if not isinstance(value, bool):
        raise ValueError(f"'{field_name}' must be a boolean")
    return value


_DEFAULT_RENDER_RAW = {**_FALLBACK_RENDER, **_read_render_toml(_default_config_path())}
DEFAULT_UNKNOWN_LABEL = str(_DEFAULT_RENDER_RAW["unknown_label"])
DEFAULT_CONNECTING_LABEL = str(_DEFAULT_RENDER_RAW["connecting_label"])
DEFAULT_EXECUTING_LABEL = str(_DEFAULT_RENDER_RAW["executing_label"])
DEFAULT_FINISHED_LABEL = str(_DEFAULT_RENDER_RAW["finished_label"])
DEFAULT_ERROR_BORDER_STYLE = str(_DEFAULT_RENDER_RAW["error_border_style"])
DEFAULT_RENDER_MARKDOWN = bool(_DEFAULT_RENDER_RAW["render_markdown"])


@dataclass(slots=True)
class RenderSettings:
    """Presentation settings for rendering an execution.

    Example:
        ```python
        settings = RenderSettings(finished_label="done", render_markdown=False)
        ```
    """

    unknown_label: str = DEFAULT_UNKNOWN_LABEL
    connecting_label: str = DEFAULT_CONNECTING_LABEL
    executing_label: str = DEFAULT_EXECUTING_LABEL
    finished_label: str = DEFAULT_FINISHED_LABEL
    error_border_style: str = DEFAULT_ERROR_BORDER_STYLE
    render_markdown: bool = DEFAULT_RENDER_MARKDOWN
    config_path: str | None = None

    @classmethod
    def from_file(cls, config_path: str) -> "RenderSettings":
        """Create settings from a TOML file.

        Missing keys keep their bundled defaults.

        Example:
            ```python
            settings = RenderSettings.from_file("/tmp/render.toml")
            ```
        """
        path = Path(config_path)
        if not path.exists():
            raise ValueError(f"Config file not found: {config_path}")
        raw = _read_render_toml(path)
        return cls(
            unknown_label=_str_value(raw, "unknown_label"),
            connecting_label=_str_value(raw, "connecting_label"),
            executing_label=_str_value(raw, "executing_label"),
            finished_label=_str_value(raw, "finished_label"),
            error_border_style=_str_value(raw, "error_border_style"),
            render_markdown=_bool_value(raw, "render_markdown"),
            config_path=config_path,
        )
