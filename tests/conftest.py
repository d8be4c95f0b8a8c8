"""Shared pytest fixtures and configuration for all tests."""

import logging

import pytest

from miniyaml.diagnostics import DiagnosticLog, default_log


@pytest.fixture(autouse=True)
def clean_default_log():
    """Every test starts and ends with an empty process-wide log."""
    default_log().clear()
    yield
    default_log().clear()


@pytest.fixture(autouse=True)
def reset_miniyaml_logger():
    """Undo handlers installed by ``configure_logging`` during CLI tests."""
    logger = logging.getLogger("miniyaml")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def log():
    """A private diagnostic log so tests never depend on global state."""
    return DiagnosticLog()


@pytest.fixture
def write_yaml(tmp_path):
    """Write ``text`` to a file under tmp_path and return its path."""

    def _write(text, name="config.yaml"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
