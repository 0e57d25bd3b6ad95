"""Tests for the shared core: result type, error taxonomy, settings, logging, engine."""

from __future__ import annotations

import pytest
import structlog

from src.dealflow.config import Environment, Settings, get_settings
from src.dealflow.core import database
from src.dealflow.core.logging import configure_structlog
from src.dealflow.errors import (
    DatabaseOperationError,
    DealflowError,
    EncodeRecordFailed,
    QueueOperationFailed,
)
from src.dealflow.result import Err, Ok


class TestResult:
    """Tests for Ok / Err."""

    def test_ok(self):
        result = Ok({})
        assert result.ok == {}
        assert result.is_ok
        assert not result.is_err

    def test_err(self):
        result = Err(QueueOperationFailed("boom"))
        assert result.is_err
        assert not result.is_ok
        assert result.error.message == "boom"

    def test_pattern_matching(self):
        match Err(EncodeRecordFailed("bad")):
            case Ok():
                matched = "ok"
            case Err(error=EncodeRecordFailed()):
                matched = "encode"
        assert matched == "encode"


class TestErrors:
    """Tests for the failure taxonomy."""

    @pytest.mark.parametrize(
        ("error_cls", "name"),
        [
            (EncodeRecordFailed, "EncodeRecordFailed"),
            (QueueOperationFailed, "QueueOperationFailed"),
            (DatabaseOperationError, "DatabaseOperationError"),
        ],
    )
    def test_names_and_messages(self, error_cls, name):
        error = error_cls("detail")
        assert isinstance(error, DealflowError)
        assert error.name == name
        assert str(error) == f"{name}: detail"

    def test_empty_message(self):
        assert str(QueueOperationFailed()) == "QueueOperationFailed"


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DEAL_VIEW_DEFAULT_LIMIT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.DEAL_VIEW_DEFAULT_LIMIT == 100
        assert settings.ENVIRONMENT == Environment.development

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SQS_SEND_TIMEOUT", "2.5")
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings = Settings(_env_file=None)
        assert settings.SQS_SEND_TIMEOUT == 2.5
        assert settings.ENVIRONMENT == Environment.production


class TestLogging:
    """structlog configuration picks a renderer per environment."""

    @pytest.mark.parametrize(
        ("environment", "renderer"),
        [
            ("production", structlog.processors.JSONRenderer),
            ("development", structlog.dev.ConsoleRenderer),
        ],
    )
    def test_renderer(self, monkeypatch, environment, renderer):
        monkeypatch.setenv("ENVIRONMENT", environment)
        get_settings.cache_clear()
        try:
            configure_structlog()
            processors = structlog.get_config()["processors"]
        finally:
            get_settings.cache_clear()
            structlog.reset_defaults()

        assert isinstance(processors[-1], renderer)


class TestEngine:
    """Tests for the engine singleton."""

    @pytest.mark.asyncio
    async def test_singleton_and_close(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'engine.db'}")
        get_settings.cache_clear()
        await database.close_db()
        try:
            engine = database.get_engine()
            assert database.get_engine() is engine
            assert engine.url.database.endswith("engine.db")
        finally:
            await database.close_db()
            get_settings.cache_clear()

        assert database._engine is None

    @pytest.mark.asyncio
    async def test_create_engine_is_independent(self, tmp_path):
        """Explicit URLs never touch the singleton."""
        await database.close_db()
        engine = database.create_engine(f"sqlite+aiosqlite:///{tmp_path / 'other.db'}")
        try:
            assert engine.url.database.endswith("other.db")
            assert database._engine is None
        finally:
            await engine.dispose()
