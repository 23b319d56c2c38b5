from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from .logs import get_logger
from .messages import (
    DisplayData,
    ErrorOutput,
    ExecuteResult,
    ExecutionState,
    KernelMessage,
    Status,
    StreamContent,
)
from .mime import PRIORITY_ORDER, as_text, is_text_mime, richest
from .outputs import ErrorResult, Media, OutputBlock, PlainText, StreamText, num_lines, saturating_add
from .terminal import TerminalOutput

_LOG = get_logger(__name__)


class ExecutionStatus(Enum):
    UNKNOWN = "unknown"
    CONNECTING_TO_KERNEL = "connecting_to_kernel"
    EXECUTING = "executing"
    FINISHED = "finished"


Listener = Callable[["ExecutionAggregator"], None]


class ExecutionAggregator:
    """Folds the kernel messages of one execution into output blocks and a status.

    Not thread-safe: feed messages from a single caller, in arrival order.

    Example:
        ```python
        view = ExecutionAggregator("exec-1")
        view.accept(StreamContent("hello\\n"))
        view.accept(Status(ExecutionState.IDLE))
        view.status  # ExecutionStatus.FINISHED
        ```
    """

    def __init__(self, execution_id: str) -> None:
        """Create an empty aggregator for one execution request.

        Example:
            ```python
            view = ExecutionAggregator("exec-1")
            ```
        """
        if not execution_id:
            raise ValueError("ExecutionAggregator requires a non-empty 'execution_id'")
        self._execution_id = execution_id
        self._outputs: list[OutputBlock] = []
        self._status = ExecutionStatus.UNKNOWN
        self._listeners: list[Listener] = []

    @property
    def execution_id(self) -> str:
        """Return the id of the execution this aggregator belongs to.

        Example:
            ```python
            ExecutionAggregator("exec-1").execution_id  # "exec-1"
            ```
        """
        return self._execution_id

    @property
    def outputs(self) -> tuple[OutputBlock, ...]:
        """Return the output blocks in arrival order.

        Example:
            ```python
            for block in view.outputs:
                print(num_lines(block))
            ```
        """
        return tuple(self._outputs)

    @property
    def status(self) -> ExecutionStatus:
        """Return the current execution status.

        Example:
            ```python
            view.status  # ExecutionStatus.UNKNOWN
            ```
        """
        return self._status

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every state change.

        Returns a function that removes the callback.

        Example:
            ```python
            unsubscribe = view.subscribe(lambda v: redraw(v))
            unsubscribe()
            ```
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            """Remove the listener if it is still registered.

            Example:
                ```python
                unsubscribe()
                ```
            """
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def accept(self, message: KernelMessage | object) -> bool:
        """Apply one kernel message and report whether state changed.

        Bundles with no supported MIME type and unknown message kinds are
        ignored without error.

        Example:
            ```python
            changed = view.accept(ExecuteResult(data={"text/plain": "42"}))
            ```
        """
        if isinstance(message, ExecuteResult):
            block = self._execute_result_block(message)
        elif isinstance(message, DisplayData):
            block = self._display_data_block(message)
        elif isinstance(message, StreamContent):
            block = self._apply_stream_text(message.text)
            if block is None:
                self._notify()
                return True
        elif isinstance(message, ErrorOutput):
            traceback = TerminalOutput()
            traceback.append_text("\n".join(message.traceback))
            block = ErrorResult(ename=message.ename, evalue=message.evalue, traceback=traceback)
        elif isinstance(message, Status):
            self._apply_execution_state(message.execution_state)
            return True
        else:
            _LOG.debug(
                "message_ignored",
                execution_id=self._execution_id,
                kind=getattr(message, "msg_type", type(message).__name__),
            )
            return False

        if block is None:
            return False
        self._outputs.append(block)
        _LOG.debug(
            "output_appended",
            execution_id=self._execution_id,
            kind=type(block).__name__,
            index=len(self._outputs) - 1,
        )
        self._notify()
        return True

    def set_status(self, status: ExecutionStatus) -> None:
        """Overwrite the execution status outside the message stream.

        Example:
            ```python
            view.set_status(ExecutionStatus.CONNECTING_TO_KERNEL)
            ```
        """
        if not isinstance(status, ExecutionStatus):
            raise ValueError(f"Expected an ExecutionStatus, got {status!r}")
        self._status = status
        _LOG.debug("status_set", execution_id=self._execution_id, status=status.value)
        self._notify()

    def num_lines(self) -> int:
        """Return the total line height, reserving one line for the status fallback.

        Example:
            ```python
            ExecutionAggregator("exec-1").num_lines()  # 1
            ```
        """
        if not self._outputs:
            return 1
        height = 0
        for block in self._outputs:
            height = saturating_add(height, num_lines(block))
        return height

    def _execute_result_block(self, message: ExecuteResult) -> OutputBlock | None:
        """Build the block for an execute result, or None when unrepresentable.

        Example:
            ```python
            block = view._execute_result_block(ExecuteResult(data={"text/plain": "1"}))
            ```
        """
        selected = self._select(message.data)
        if selected is None:
            return None
        mime_type, value = selected
        if is_text_mime(mime_type):
            return PlainText(TerminalOutput(as_text(value)))
        return Media(mime_type=mime_type, value=value)

    def _display_data_block(self, message: DisplayData) -> OutputBlock | None:
        """Build the block for display data; always media, even for text.

        Example:
            ```python
            block = view._display_data_block(DisplayData(data={"text/plain": "1"}))
            ```
        """
        selected = self._select(message.data)
        if selected is None:
            return None
        mime_type, value = selected
        return Media(mime_type=mime_type, value=value)

    def _select(self, data: Any) -> tuple[str, Any] | None:
        """Pick the richest supported representation from a bundle.

        Example:
            ```python
            view._select({"text/html": "<b>1</b>"})  # None
            ```
        """
        selected = richest(data, PRIORITY_ORDER)
        if selected is None:
            _LOG.debug(
                "bundle_unrepresentable",
                execution_id=self._execution_id,
                mime_types=list(data),
            )
        return selected

    def _apply_stream_text(self, text: str) -> StreamText | None:
        """Merge text into a trailing stream block, or return a new one.

        Any other block at the tail starts a fresh stream block, even when an
        earlier stream block exists.

        Example:
            ```python
            new_block = view._apply_stream_text("more\\n")
            ```
        """
        if self._outputs:
            last = self._outputs[-1]
            if isinstance(last, StreamText):
                last.buffer.append_text(text)
                _LOG.debug(
                    "stream_merged",
                    execution_id=self._execution_id,
                    index=len(self._outputs) - 1,
                )
                return None
        buffer = TerminalOutput()
        buffer.append_text(text)
        return StreamText(buffer)

    def _apply_execution_state(self, state: ExecutionState) -> None:
        """Map a busy/idle transition onto the execution status.

        Example:
            ```python
            view._apply_execution_state(ExecutionState.BUSY)
            ```
        """
        if state is ExecutionState.BUSY:
            self._status = ExecutionStatus.EXECUTING
        elif state is ExecutionState.IDLE:
            self._status = ExecutionStatus.FINISHED
        _LOG.debug("status_changed", execution_id=self._execution_id, status=self._status.value)
        self._notify()

    def _notify(self) -> None:
        """Run every registered listener.

        Example:
            ```python
            view._notify()
            ```
        """
        for listener in list(self._listeners):
            listener(self)
