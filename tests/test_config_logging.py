"""Tests for logging configuration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.config_logging import get_logger, setup_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_get_logger_name() -> None:
    """Test loggers are named after the module."""
    logger = get_logger("garch_corridor.some_module")
    assert logger.name == "garch_corridor.some_module"


def test_setup_logging_level_name(restore_root_logging: logging.Logger) -> None:
    """Test a level name is resolved case-insensitively."""
    setup_logging("debug", force=True)
    assert restore_root_logging.level == logging.DEBUG
    assert any(isinstance(h, logging.StreamHandler) for h in restore_root_logging.handlers)


def test_setup_logging_int_level(restore_root_logging: logging.Logger) -> None:
    """Test an integer level is applied directly."""
    setup_logging(logging.WARNING, force=True)
    assert restore_root_logging.level == logging.WARNING


def test_setup_logging_unknown_level() -> None:
    """Test an unknown level name raises."""
    with pytest.raises(ValueError, match="Unknown log level: VERBOSE"):
        setup_logging("VERBOSE")
