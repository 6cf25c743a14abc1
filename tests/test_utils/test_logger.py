"""
Tests for logging helpers.
"""
import logging

import pytest

from audio_normalizer.utils.logger import level_from_flags, log_performance, setup_logging


def test_level_from_flags():
    assert level_from_flags() == logging.INFO
    assert level_from_flags(verbose=True) == logging.DEBUG
    assert level_from_flags(quiet=True) == logging.ERROR
    assert level_from_flags(verbose=True, quiet=True) == logging.DEBUG


def test_log_file_receives_debug(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    setup_logging(logging.ERROR, log_file=str(log_file), console_output=False)
    try:
        logging.getLogger("audio_normalizer.test").debug("decoded 10 frames")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "decoded 10 frames" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        setup_logging(logging.WARNING, console_output=False)


def test_log_performance_reraises():
    @log_performance
    def fails():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        fails()
