"""
端口接口定义 - 依赖倒置的核心

所有外部服务交互都通过这些接口进行，
具体实现由适配器层提供。

设计原则：
1. 接口隔离：每个接口只包含相关的方法
2. 依赖倒置：用例层依赖接口，不依赖具体实现
3. 异常抽象：接口定义标准异常类型
4. 全部异步：每次远程调用都是可等待的
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from cryptosight.domain.models import (
    CoinGeckoToken,
    CommandKind,
    DexScreenerToken,
    MarketOverview,
    QueryLogEntry,
    TrendingToken,
)


# ==================== 异常定义 ====================

class PortError(Exception):
    """端口层基础异常"""
    def __init__(self, message: str, source: str = "unknown"):
        self.message = message
        self.source = source
        super().__init__(f"[{source}] {message}")


class DataUnavailableError(PortError):
    """数据源传输失败（网络错误、非 2xx、响应无法解析）"""
    pass


class LLMUnavailableError(PortError):
    """LLM 调用失败（含超时）"""
    pass


# ==================== 端口接口 ====================

class DexDataPort(ABC):
    """链上流动性数据端口（DexScreener）"""

    @abstractmethod
    async def get_token_by_address(self, address: str) -> Optional[DexScreenerToken]:
        """
        按合约地址查询代币

        Returns:
            找不到时返回 None

        Raises:
            DataUnavailableError: 数据源不可用
        """
        pass

    @abstractmethod
    async def get_token_by_symbol(self, symbol: str) -> Optional[DexScreenerToken]:
        """
        按符号搜索代币

        Returns:
            找不到时返回 None

        Raises:
            DataUnavailableError: 数据源不可用
        """
        pass


class MarketDataPort(ABC):
    """行情数据端口（CoinGecko）"""

    @abstractmethod
    async def get_token_price(self, symbol: str) -> Optional[CoinGeckoToken]:
        """按符号获取价格、成交量、市值；找不到时返回 None"""
        pass

    @abstractmethod
    async def get_trending_tokens(self) -> List[TrendingToken]:
        """获取热门代币"""
        pass

    @abstractmethod
    async def get_token_list(self) -> List[str]:
        """获取已知代币符号列表（大写、去重）"""
        pass

    @abstractmethod
    async def get_market_overview(self) -> MarketOverview:
        """获取全市场概览"""
        pass


class LLMPort(ABC):
    """LLM 服务端口"""

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        发送提示词并返回模型文本

        Raises:
            LLMUnavailableError: 调用失败或超时
        """
        pass


class QueryLogPort(ABC):
    """查询日志端口（只追加）"""

    @abstractmethod
    async def log_query(self, entry: QueryLogEntry) -> None:
        """追加一条查询记录"""
        pass

    @abstractmethod
    async def get_recent_queries(
        self,
        command: CommandKind,
        token_address: Optional[str] = None,
        token_id: Optional[str] = None,
        limit: int = 50,
    ) -> List[QueryLogEntry]:
        """按命令类型读取最近的查询记录（新的在前）"""
        pass


class TimePort(ABC):
    """时间服务端口"""

    @abstractmethod
    def get_current_datetime(self) -> datetime:
        """获取当前日期时间"""
        pass

    @abstractmethod
    def get_date(self) -> str:
        """获取当前日期（YYYY-MM-DD）"""
        pass
