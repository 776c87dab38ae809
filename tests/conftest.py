from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """
    Ensure `src/` is importable when running pytest without installing the package.

    This only affects the test environment.
    """
    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Per-test literal config file location (not created)."""
    return tmp_path / "settings.literal"


@pytest.fixture(autouse=True)
def _restore_root_log_level():
    """SettingsService.open changes the root logger level; put it back after each test."""
    root = logging.getLogger()
    saved_level = root.level
    saved_handlers = list(root.handlers)
    saved_handler_levels = [(h, h.level) for h in saved_handlers]
    yield
    root.setLevel(saved_level)
    for handler in [h for h in root.handlers if h not in saved_handlers]:
        root.removeHandler(handler)
    for handler, level in saved_handler_levels:
        handler.setLevel(level)
