from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias


class MessageFormatError(ValueError):
    """Raised when a decoded kernel message has malformed content."""


class ExecutionState(StrEnum):
    BUSY = "busy"
    IDLE = "idle"


@dataclass(frozen=True, slots=True)
class ExecuteResult:
    """Result of the last expression of an execution, as a MIME bundle.

    Example:
        ```python
        msg = ExecuteResult(data={"text/plain": "2"}, execution_count=1)
        ```
    """

    data: Mapping[str, Any]
    execution_count: int | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DisplayData:
    """Output published by `display(...)`, as a MIME bundle.

    Example:
        ```python
        msg = DisplayData(data={"image/png": "iVBORw0KGgo..."})
        ```
    """

    data: Mapping[str, Any]
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class StreamContent:
    """A chunk of stdout or stderr text.

    Example:
        ```python
        msg = StreamContent(text="hello\\n", name="stdout")
        ```
    """

    text: str
    name: str = "stdout"


@dataclass(frozen=True, slots=True)
class ErrorOutput:
    """An exception raised by the executed code.

    Example:
        ```python
        msg = ErrorOutput("NameError", "name 'x' is not defined", ["Traceback...", "NameError: ..."])
        ```
    """

    ename: str
    evalue: str
    traceback: tuple[str, ...] | list[str] = ()


@dataclass(frozen=True, slots=True)
class Status:
    """Kernel busy/idle transition.

    Example:
        ```python
        msg = Status(ExecutionState.BUSY)
        ```
    """

    execution_state: ExecutionState


@dataclass(frozen=True, slots=True)
class UnknownMessage:
    """Any message type the aggregator has no use for.

    Example:
        ```python
        msg = UnknownMessage("clear_output", {"wait": False})
        ```
    """

    msg_type: str
    content: Mapping[str, Any] = field(default_factory=dict)


KernelMessage: TypeAlias = (
    ExecuteResult | DisplayData | StreamContent | ErrorOutput | Status | UnknownMessage
)


def _msg_type(raw: Mapping[str, Any]) -> str:
    """Return the message type from the header or the flat form.

    Example:
        ```python
        _msg_type({"header": {"msg_type": "stream"}})  # "stream"
        ```
    """
    header = raw.get("header")
    if isinstance(header, Mapping) and "msg_type" in header:
        value = header["msg_type"]
    else:
        value = raw.get("msg_type")
    if not isinstance(value, str):
        raise MessageFormatError("Message is missing a string 'msg_type'")
    return value


def _mapping_field(content: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Read an optional mapping field from message content.

    Example:
        ```python
        data = _mapping_field({"data": {"text/plain": "1"}}, "data")
        ```
    """
    value = content.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MessageFormatError(f"'{name}' must be an object")
    return value


def _str_field(content: Mapping[str, Any], name: str, default: str = "") -> str:
    """Read an optional string field from message content.

    Example:
        ```python
        _str_field({"text": "hi"}, "text")  # "hi"
        ```
    """
    value = content.get(name, default)
    if not isinstance(value, str):
        raise MessageFormatError(f"'{name}' must be a string")
    return value


def message_from_dict(raw: Mapping[str, Any]) -> KernelMessage:
    """Build a typed kernel message from a decoded Jupyter message.

    Accepts both the wire shape (`header.msg_type`) and a flat `msg_type` key.
    Unsupported types and execution states map to `UnknownMessage`.

    Example:
        ```python
        msg = message_from_dict({"msg_type": "stream", "content": {"name": "stdout", "text": "hi"}})
        ```
    """
    msg_type = _msg_type(raw)
    content = _mapping_field(raw, "content")

    if msg_type == "execute_result":
        count = content.get("execution_count")
        if count is not None and not isinstance(count, int):
            raise MessageFormatError("'execution_count' must be an integer")
        return ExecuteResult(
            data=_mapping_field(content, "data"),
            execution_count=count,
            metadata=_mapping_field(content, "metadata"),
        )
    if msg_type == "display_data":
        return DisplayData(
            data=_mapping_field(content, "data"),
            metadata=_mapping_field(content, "metadata"),
        )
    if msg_type == "stream":
        return StreamContent(
            text=_str_field(content, "text"),
            name=_str_field(content, "name", "stdout"),
        )
    if msg_type == "error":
        traceback = content.get("traceback", [])
        if not isinstance(traceback, list) or not all(isinstance(line, str) for line in traceback):
            raise MessageFormatError("'traceback' must be a list of strings")
        return ErrorOutput(
            ename=_str_field(content, "ename"),
            evalue=_str_field(content, "evalue"),
            traceback=tuple(traceback),
        )
    if msg_type == "status":
        state = content.get("execution_state")
        try:
            return Status(ExecutionState(state))
        except ValueError:
            return UnknownMessage(msg_type, content)
    return UnknownMessage(msg_type, content)


def parent_execution_id(raw: Mapping[str, Any]) -> str | None:
    """Return the id of the request a message answers, if it carries one.

    Example:
        ```python
        parent_execution_id({"parent_header": {"msg_id": "abc"}})  # "abc"
        ```
    """
    parent = raw.get("parent_header")
    if isinstance(parent, Mapping):
        msg_id = parent.get("msg_id")
        if isinstance(msg_id, str) and msg_id:
            return msg_id
    return None
