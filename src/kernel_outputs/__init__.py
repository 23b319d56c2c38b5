from .aggregator import ExecutionAggregator, ExecutionStatus
from .config import RenderSettings
from .messages import (
    DisplayData,
    ErrorOutput,
    ExecuteResult,
    ExecutionState,
    KernelMessage,
    MessageFormatError,
    Status,
    StreamContent,
    UnknownMessage,
    message_from_dict,
)
from .mime import PRIORITY_ORDER, richest
from .outputs import ErrorResult, Media, OutputBlock, PlainText, StreamText, num_lines
from .render import render_block, render_execution, status_fallback
from .terminal import TerminalOutput

__all__ = [
    "ExecutionAggregator",
    "ExecutionStatus",
    "RenderSettings",
    "DisplayData",
    "ErrorOutput",
    "ExecuteResult",
    "ExecutionState",
    "KernelMessage",
    "MessageFormatError",
    "Status",
    "StreamContent",
    "UnknownMessage",
    "message_from_dict",
    "PRIORITY_ORDER",
    "richest",
    "ErrorResult",
    "Media",
    "OutputBlock",
    "PlainText",
    "StreamText",
    "num_lines",
    "render_block",
    "render_execution",
    "status_fallback",
    "TerminalOutput",
]
