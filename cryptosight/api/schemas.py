"""
API 响应模型 - Pydantic Schema 定义
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from cryptosight.domain.models import QueryLogEntry


class QueryLogRecord(BaseModel):
    """查询日志记录"""
    user_id: str = Field(..., description="聊天用户 ID")
    command: str = Field(..., description="命令类型：analyze 或 price")
    token_address: Optional[str] = Field(default=None, description="代币合约地址")
    chain_id: Optional[str] = Field(default=None, description="链 ID，如 ethereum、solana")
    token_id: Optional[str] = Field(default=None, description="代币符号")
    token_name: Optional[str] = None
    response: Dict[str, Any] = Field(default_factory=dict, description="回复时的数据快照")
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: QueryLogEntry) -> "QueryLogRecord":
        return cls(**entry.to_dict())


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = Field(..., description="healthy 或 degraded")
    timestamp: datetime
    version: str
    components: Dict[str, str] = Field(default_factory=dict)
    cache: Dict[str, Any] = Field(default_factory=dict, description="缓存统计")


class ErrorResponse(BaseModel):
    """错误响应"""
    error: str
