"""Tests for structured logging setup and context helpers."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from shapechanger.core.config import Settings
from shapechanger.core.logging import (
    AppContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults, root handlers and an empty context."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_context()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_from_settings(
        self, settings: Settings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(settings.model_copy(update={"log_level": "WARNING"}))

        get_logger(__name__).info("Hidden")
        get_logger(__name__).warning("Shown")

        out = capsys.readouterr().out
        assert logging.getLogger().level == logging.WARNING
        assert "Shown" in out
        assert "Hidden" not in out

    def test_json_events(
        self, settings: Settings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(settings.model_copy(update={"json_logs": True}))
        bind_context(actor_id="a1")

        get_logger(__name__).info("Transformation applied", source="Beast Shape")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert '"event": "Transformation applied"' in line
        assert '"actor_id": "a1"' in line
        assert '"app": "shapechanger"' in line

    def test_log_file(self, settings: Settings, tmp_path: Path) -> None:
        path = tmp_path / "shapechanger.log"

        configure_logging(settings, log_file=str(path))
        logging.getLogger("sqlite").warning("disk busy")

        assert "disk busy" in path.read_text()


class TestContext:
    """Tests for logging context helpers."""

    def test_bind_and_clear_context(self) -> None:
        """Bound values appear in the context until cleared."""
        clear_context()
        bind_context(actor_id="a1", source="Reduce Person")
        assert structlog.contextvars.get_contextvars() == {
            "actor_id": "a1",
            "source": "Reduce Person",
        }

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_app_context_keeps_explicit_app(self) -> None:
        stamp = AppContext("shapechanger")

        assert stamp(None, "info", {"event": "x"})["app"] == "shapechanger"
        assert stamp(None, "info", {"event": "x", "app": "other"})["app"] == "other"
