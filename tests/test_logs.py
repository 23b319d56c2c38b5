import logging

import pytest
from rich.logging import RichHandler

from kernel_outputs.logs import configure_logging, get_logger


def test_configure_logging_installs_single_rich_handler() -> None:
    logger = logging.getLogger("kernel_outputs")
    try:
        configure_logging("DEBUG")
        configure_logging("INFO")

        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.INFO
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("LOUD")


def test_logger_renders_key_values(caplog: pytest.LogCaptureFixture) -> None:
    log = get_logger("kernel_outputs.test")

    with caplog.at_level(logging.DEBUG, logger="kernel_outputs"):
        log.debug("stream_merged", execution_id="exec-1")

    assert "event='stream_merged'" in caplog.text
    assert "execution_id='exec-1'" in caplog.text
