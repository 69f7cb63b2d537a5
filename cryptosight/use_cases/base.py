"""
用例基类 - 定义回复用例的基本结构
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, Optional, TypeVar
import logging

from cryptosight.domain.models import BotReply, MessageContext, ReplyKind
from cryptosight.infrastructure.cache import CACHE_TTLS, CacheNamespace, ExpiringCache
from cryptosight.infrastructure.errors import ValidationError
from cryptosight.ports.interfaces import DataUnavailableError, LLMUnavailableError


logger = logging.getLogger(__name__)

D = TypeVar('D')


class ReplyUseCase(ABC, Generic[D]):
    """
    回复用例基类

    每个用例处理一种路由决策：
    1. 计算确定性的缓存键，命中则直接回复
    2. 未命中时调用 build_reply() 获取数据并生成回复
    3. 只缓存正常回答（ReplyKind.ANSWER），TTL 由命名空间决定
    4. 校验失败 -> 校验消息；数据源/LLM 故障 -> failure_message

    用例只依赖端口接口，不依赖具体适配器实现。
    """

    namespace: ClassVar[CacheNamespace]
    failure_message: ClassVar[str]

    def __init__(self, cache: ExpiringCache):
        self.cache = cache

    @abstractmethod
    def cache_key(self, decision: D) -> Optional[str]:
        """缓存键；返回 None 表示本次不走缓存"""

    @abstractmethod
    async def build_reply(self, decision: D, context: MessageContext) -> BotReply:
        """缓存未命中时生成回复"""

    @property
    def ttl(self) -> int:
        return CACHE_TTLS[self.namespace]

    async def execute(self, decision: D, context: MessageContext) -> BotReply:
        """
        执行用例

        Args:
            decision: 路由决策
            context: 消息上下文

        Returns:
            BotReply: 回复
        """
        key = self.cache_key(decision)
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info(f"回复缓存命中: {key}", extra={'cache_key': key})
                return BotReply(text=cached, cached=True)

        try:
            reply = await self.build_reply(decision, context)
        except ValidationError as e:
            return BotReply(text=e.message, kind=ReplyKind.INVALID_INPUT)
        except (DataUnavailableError, LLMUnavailableError) as e:
            logger.error(f"{type(self).__name__} 上游失败: {e}")
            return BotReply(text=self.failure_message, kind=ReplyKind.RETRY_LATER)

        if key is not None and reply.cacheable:
            self.cache.set(key, reply.text, self.ttl)
        return reply
