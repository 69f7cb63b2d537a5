"""
Infrastructure 层测试 - 日志、错误处理、配置
"""

import asyncio
import json
import logging

import pytest

from cryptosight.domain.models import ErrorCode
from cryptosight.infrastructure.config import Settings
from cryptosight.infrastructure.errors import (
    ConfigurationError,
    CryptoSightError,
    ValidationError,
    async_error_boundary,
)
from cryptosight.infrastructure.logging import (
    LogContext,
    SimpleFormatter,
    StructuredFormatter,
    get_logger,
    log_async_performance,
)


def make_record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogging:
    """日志系统测试"""

    def test_get_logger(self):
        logger = get_logger("test")
        assert isinstance(logger, logging.Logger)

    def test_structured_formatter(self):
        formatted = StructuredFormatter().format(
            make_record(request_id="abc123", intent="price_query", cache_key="price:pepe")
        )
        data = json.loads(formatted)
        assert data["message"] == "Test message"
        assert data["request_id"] == "abc123"
        assert data["intent"] == "price_query"
        assert data["cache_key"] == "price:pepe"

    def test_structured_formatter_skips_missing_fields(self):
        data = json.loads(StructuredFormatter().format(make_record()))
        assert "request_id" not in data
        assert "duration_ms" not in data

    def test_simple_formatter(self):
        formatted = SimpleFormatter().format(make_record(request_id="r1", duration_ms=12.5))
        assert "Test message" in formatted
        assert "[r1]" in formatted
        assert "(12.50ms)" in formatted

    def test_log_context_records_completion(self, caplog):
        logger = get_logger("test.context")
        with caplog.at_level(logging.INFO, logger="test.context"):
            with LogContext(logger, "处理消息", request_id="r1"):
                pass
        messages = [r.getMessage() for r in caplog.records]
        assert "开始 处理消息" in messages
        assert "完成 处理消息" in messages

    def test_log_context_does_not_swallow(self):
        logger = get_logger("test.context")
        with pytest.raises(RuntimeError):
            with LogContext(logger, "失败操作"):
                raise RuntimeError("boom")

    def test_log_async_performance_reraises(self):
        @log_async_performance()
        async def failing():
            raise ValueError("bad")

        with pytest.raises(ValueError):
            asyncio.run(failing())


class TestErrors:
    """错误处理测试"""

    def test_base_error_to_dict(self):
        error = CryptoSightError("出错了", ErrorCode.DATA_UNAVAILABLE, {"source": "coingecko"})
        assert error.to_dict() == {
            "error_code": "data_unavailable",
            "message": "出错了",
            "details": {"source": "coingecko"},
        }

    def test_validation_error(self):
        error = ValidationError("Token address is required", field="address")
        assert error.error_code == ErrorCode.INVALID_INPUT
        assert str(error) == "Token address is required"

    def test_configuration_error(self):
        error = ConfigurationError("missing", setting="TELEGRAM_BOT_TOKEN")
        assert error.details == {"setting": "TELEGRAM_BOT_TOKEN"}

    def test_async_error_boundary_returns_default(self):
        @async_error_boundary(default="fallback", context="test")
        async def failing():
            raise IOError("disk full")

        assert asyncio.run(failing()) == "fallback"

    def test_async_error_boundary_passes_result(self):
        @async_error_boundary(default=None)
        async def ok():
            return 7

        assert asyncio.run(ok()) == 7


class TestSettings:
    """配置测试"""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "LLM_PROVIDER", "LLM_MODEL", "TELEGRAM_BOT_TOKEN",
                     "LLM_API_KEY", "GEMINI_API_KEY"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()
        assert settings.PORT == 3000
        assert settings.llm_model_route == "gemini/gemini-1.5-flash"
        assert settings.TELEGRAM_BOT_TOKEN is None

    def test_gemini_key_fallback(self, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")
        assert Settings().LLM_API_KEY == "g-key"

    def test_missing_credentials_only_warn(self, monkeypatch):
        for name in ("TELEGRAM_BOT_TOKEN", "LLM_API_KEY", "GEMINI_API_KEY"):
            monkeypatch.delenv(name, raising=False)

        warnings = Settings().validate()
        assert len(warnings) == 2

    def test_empty_provider_uses_bare_model(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "")
        monkeypatch.setenv("LLM_MODEL", "gpt-4o-mini")
        assert Settings().llm_model_route == "gpt-4o-mini"
