"""
错误处理 - 统一错误定义和处理

提供：
- 业务异常类层次
- 错误码定义
- 错误边界（内部簿记失败不影响回复）
"""

from functools import wraps
from typing import Any, Dict, Optional
import logging

from cryptosight.domain.models import ErrorCode


logger = logging.getLogger(__name__)


# ==================== 异常类层次 ====================

class CryptoSightError(Exception):
    """CryptoSight 基础异常"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(CryptoSightError):
    """验证错误，message 直接展示给用户"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_INPUT,
            details={"field": field} if field else {}
        )


class ConfigurationError(CryptoSightError):
    """配置错误（缺少凭据等）"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INTERNAL_ERROR,
            details={"setting": setting} if setting else {}
        )


# ==================== 错误边界 ====================

def async_error_boundary(
    default: Any = None,
    context: Optional[str] = None
):
    """
    异步错误边界装饰器

    捕获异常、记录日志并返回默认值，用于查询日志写入等
    不应影响用户回复的簿记操作。

    Args:
        default: 失败时返回的默认值
        context: 上下文信息
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"错误边界捕获 [{context or func.__name__}]: {e}",
                    exc_info=True
                )
                return default
        return wrapper
    return decorator
