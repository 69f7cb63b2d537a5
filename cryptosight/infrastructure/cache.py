"""
缓存系统 - 上游调用去重

提供：
- 带 TTL 的内存缓存（可注入时钟）
- 确定性的缓存键构造
- 周期性过期清理
- 缓存命中率统计
"""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, Generic, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar('T')

Clock = Callable[[], float]


class CacheNamespace(str, Enum):
    """缓存键命名空间（每类操作一个）"""
    ADDRESS = "address"                # 地址分析回复
    PRICE = "price"                    # 价格查询回复
    RECOMMENDATION = "recommendation"  # 推荐回复
    COMPARISON = "comparison"          # 对比回复
    MARKET_TRENDS = "market_trends"    # 市场趋势回复（按日期）
    GENERAL = "general"                # 通用问答回复
    TOKEN_ADDRESS = "token_address"    # 地址维度的代币数据
    TOKEN_SYMBOL = "token_symbol"      # 符号维度的代币数据
    TOKEN_LIST = "token_list"          # 已知代币符号列表


# 各命名空间的 TTL（秒）
CACHE_TTLS: Dict[CacheNamespace, int] = {
    CacheNamespace.ADDRESS: 300,           # 5分钟
    CacheNamespace.PRICE: 300,             # 5分钟
    CacheNamespace.RECOMMENDATION: 7200,   # 2小时
    CacheNamespace.COMPARISON: 3600,       # 1小时
    CacheNamespace.MARKET_TRENDS: 3600,    # 1小时
    CacheNamespace.GENERAL: 3600,          # 1小时
    CacheNamespace.TOKEN_ADDRESS: 600,     # 10分钟
    CacheNamespace.TOKEN_SYMBOL: 600,      # 10分钟
    CacheNamespace.TOKEN_LIST: 86400,      # 24小时
}


def normalize_text(text: str) -> str:
    """小写并把连续空白折叠为单个下划线"""
    return "_".join(text.lower().split())


class CacheKeys:
    """
    缓存键构造

    键格式为 "<命名空间>:<参数>"。自由文本参数统一规范化；
    地址区分大小写（base58），按原样保留；符号不区分大小写，统一小写。
    """

    @staticmethod
    def make(namespace: CacheNamespace, argument: str) -> str:
        return f"{namespace.value}:{argument}"

    @classmethod
    def address(cls, address: str) -> str:
        return cls.make(CacheNamespace.ADDRESS, address.strip())

    @classmethod
    def price(cls, symbol: str) -> str:
        return cls.make(CacheNamespace.PRICE, symbol.strip().lower())

    @classmethod
    def recommendation(cls, category: str) -> str:
        return cls.make(CacheNamespace.RECOMMENDATION, normalize_text(category))

    @classmethod
    def comparison(cls, query: str) -> str:
        return cls.make(CacheNamespace.COMPARISON, normalize_text(query))

    @classmethod
    def market_trends(cls, date: str) -> str:
        return cls.make(CacheNamespace.MARKET_TRENDS, date)

    @classmethod
    def general(cls, question: str) -> str:
        return cls.make(CacheNamespace.GENERAL, normalize_text(question))

    @classmethod
    def token_address(cls, address: str) -> str:
        return cls.make(CacheNamespace.TOKEN_ADDRESS, address.strip())

    @classmethod
    def token_symbol(cls, symbol: str) -> str:
        return cls.make(CacheNamespace.TOKEN_SYMBOL, symbol.strip().lower())

    @classmethod
    def token_list(cls) -> str:
        return CacheNamespace.TOKEN_LIST.value


@dataclass
class CacheConfig:
    """缓存配置"""
    max_size: int = 10000          # 最大缓存条目数
    sweep_interval: float = 60.0   # 过期清理间隔（秒）

    def __post_init__(self):
        if self.max_size < 1:
            raise ValueError(f"max_size 必须 >= 1，实际为 {self.max_size}")


@dataclass
class CacheEntry(Generic[T]):
    """缓存条目"""
    value: T
    expires_at: float
    hits: int = 0

    def is_expired(self, now: float) -> bool:
        """检查是否过期"""
        return now >= self.expires_at

    def touch(self) -> None:
        """记录命中"""
        self.hits += 1


@dataclass
class CacheStats:
    """缓存统计"""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        """命中率"""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """转为字典"""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "size": self.size,
            "hit_rate": round(self.hit_rate * 100, 2),
        }


class ExpiringCache(Generic[T]):
    """
    TTL 缓存实现

    支持：
    - 每条目独立 TTL，读取时惰性淘汰
    - cleanup_expired() 周期清理，保证不读的条目也会被回收
    - 最大容量限制（超出时淘汰最早写入的条目）
    - 线程安全，同键并发写入以最后一次为准
    - 可注入时钟，便于测试
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Clock = time.monotonic,
    ):
        """
        初始化缓存

        Args:
            config: 缓存配置
            clock: 返回秒数的单调时钟
        """
        self.config = config or CacheConfig()
        self._clock = clock
        self._cache: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._lock = RLock()
        self._stats = CacheStats()

    def get(self, key: str) -> Optional[T]:
        """
        获取缓存值

        Args:
            key: 缓存键

        Returns:
            缓存值；不存在或已过期时返回 None
        """
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                self._stats.misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._cache[key]
                self._stats.misses += 1
                self._stats.expirations += 1
                return None

            entry.touch()
            self._stats.hits += 1
            return entry.value

    def set(self, key: str, value: T, ttl: float) -> None:
        """
        设置缓存值，无条件覆盖同键条目

        Args:
            key: 缓存键
            value: 缓存值
            ttl: 过期时间（秒）；<= 0 视为立即过期
        """
        with self._lock:
            self._cache.pop(key, None)

            if ttl <= 0:
                return

            while len(self._cache) >= self.config.max_size:
                self._evict_one()

            self._cache[key] = CacheEntry(
                value=value,
                expires_at=self._clock() + ttl,
            )

    def _evict_one(self) -> None:
        """容量已满：优先清理过期条目，否则淘汰最早写入的条目"""
        if self.cleanup_expired():
            return
        self._cache.popitem(last=False)
        self._stats.evictions += 1

    def delete(self, key: str) -> bool:
        """删除缓存条目"""
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        """清空缓存"""
        with self._lock:
            self._cache.clear()

    def cleanup_expired(self) -> int:
        """
        清理过期条目

        Returns:
            清理的条目数
        """
        with self._lock:
            now = self._clock()
            expired_keys = [
                k for k, v in self._cache.items()
                if v.is_expired(now)
            ]
            for key in expired_keys:
                del self._cache[key]

            self._stats.expirations += len(expired_keys)
            return len(expired_keys)

    @property
    def stats(self) -> CacheStats:
        """获取统计信息"""
        with self._lock:
            self._stats.size = len(self._cache)
            return self._stats

    def get_stats_dict(self) -> Dict[str, Any]:
        """获取统计信息字典"""
        return self.stats.to_dict()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._cache.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class CacheSweeper:
    """
    周期性过期清理任务

    在事件循环中每隔 interval 秒调用一次 cleanup_expired()。
    """

    def __init__(self, cache: ExpiringCache, interval: Optional[float] = None):
        self.cache = cache
        self.interval = interval if interval is not None else cache.config.sweep_interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """启动清理任务（需在运行中的事件循环内调用）"""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"缓存清理任务已启动，间隔 {self.interval}s")

    async def stop(self) -> None:
        """停止清理任务"""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("缓存清理任务已停止")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            removed = self.cache.cleanup_expired()
            if removed:
                logger.debug(f"清理过期缓存 {removed} 条")
