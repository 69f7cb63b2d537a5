"""
安全与输入验证

提供：
- 安全头中间件
- 代币地址 / 符号校验
"""

from typing import Callable
import re

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from cryptosight.infrastructure.errors import ValidationError


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    安全头中间件

    添加基本的安全响应头。
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # 查询日志是实时数据
        response.headers["Cache-Control"] = "no-store"

        return response


class TokenInputValidator:
    """
    代币输入验证器

    错误信息会直接回复给用户。
    """

    # EVM (0x + 40 hex) | Solana (base58, 32-44) | Bitcoin legacy (base58, 26-35)
    ADDRESS_PATTERN = re.compile(
        r"^(0x[a-fA-F0-9]{40}|[1-9A-HJ-NP-Za-km-z]{32,44}|[13][a-km-zA-HJ-NP-Z1-9]{25,34})$"
    )

    SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
    SYMBOL_MAX_LENGTH = 10

    @classmethod
    def validate_address(cls, address: str) -> str:
        """
        校验链上地址

        Returns:
            去除首尾空白后的地址

        Raises:
            ValidationError: 地址为空或格式无效
        """
        address = (address or "").strip()
        if not address:
            raise ValidationError("Token address is required", field="address")
        if not cls.ADDRESS_PATTERN.match(address):
            raise ValidationError(
                "Invalid token address. Must be a valid Ethereum, Solana, or Bitcoin address",
                field="address",
            )
        return address

    @classmethod
    def validate_symbol(cls, symbol: str) -> str:
        """
        校验代币符号

        Returns:
            大写符号

        Raises:
            ValidationError: 符号为空、非字母数字或过长
        """
        symbol = (symbol or "").strip().lstrip("$")
        if not symbol:
            raise ValidationError("Token symbol is required", field="symbol")
        if not cls.SYMBOL_PATTERN.match(symbol):
            raise ValidationError("Token symbol must be alphanumeric", field="symbol")
        if len(symbol) > cls.SYMBOL_MAX_LENGTH:
            raise ValidationError(
                f"Token symbol must be at most {cls.SYMBOL_MAX_LENGTH} characters",
                field="symbol",
            )
        return symbol.upper()
