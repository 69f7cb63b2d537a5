"""
基础设施层 - 横切关注点

提供日志、缓存、配置、错误处理、安全等基础服务。

包含：
- cache: TTL 缓存与缓存键
- config: 环境变量配置
- errors: 异常层次与错误边界
- logging: 结构化日志系统
- security: 安全中间件和输入验证
"""

from cryptosight.infrastructure.cache import (
    CACHE_TTLS,
    CacheConfig,
    CacheKeys,
    CacheNamespace,
    CacheSweeper,
    ExpiringCache,
)
from cryptosight.infrastructure.config import Settings, get_settings
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
    setup_logging,
)
from cryptosight.infrastructure.security import SecurityHeadersMiddleware, TokenInputValidator

__all__ = [
    "CACHE_TTLS",
    "CacheConfig",
    "CacheKeys",
    "CacheNamespace",
    "CacheSweeper",
    "ExpiringCache",
    "Settings",
    "get_settings",
    "ConfigurationError",
    "CryptoSightError",
    "ValidationError",
    "async_error_boundary",
    "LogContext",
    "SimpleFormatter",
    "StructuredFormatter",
    "get_logger",
    "log_async_performance",
    "setup_logging",
    "SecurityHeadersMiddleware",
    "TokenInputValidator",
]
