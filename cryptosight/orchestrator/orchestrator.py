"""
消息编排器 - 统一消息处理入口

设计原则：
1. 单一入口：所有聊天消息通过 Orchestrator 处理
2. 依赖注入：缓存、端口和用例都通过构造函数注入
3. 穷尽分发：决策类型 -> 用例的映射在构造时检查完整性
4. 可观测性：记录路由结果、缓存命中与耗时
"""

import logging
import uuid
from typing import Mapping, Optional, Type

from cryptosight.domain.models import (
    DECISION_TYPES,
    BotReply,
    MessageContext,
    ReplyKind,
    RouteDecision,
    decision_args,
)
from cryptosight.infrastructure.cache import ExpiringCache
from cryptosight.infrastructure.logging import LogContext
from cryptosight.orchestrator.router import IntentRouter
from cryptosight.orchestrator.symbol_extractor import SymbolExtractor
from cryptosight.ports.interfaces import (
    DexDataPort,
    LLMPort,
    MarketDataPort,
    QueryLogPort,
    TimePort,
)
from cryptosight.presentation.messages import PROCESSING_FAILED
from cryptosight.use_cases.base import ReplyUseCase


logger = logging.getLogger(__name__)


class Orchestrator:
    """
    消息编排器

    职责：
    1. 接收 MessageContext
    2. 调用 IntentRouter 得到路由决策
    3. 按决策类型执行对应的用例
    4. 返回 BotReply
    """

    def __init__(
        self,
        router: IntentRouter,
        handlers: Mapping[Type, ReplyUseCase],
    ):
        """
        初始化编排器

        Args:
            router: 意图路由器
            handlers: 决策类型 -> 用例，必须覆盖所有意图

        Raises:
            ValueError: 映射缺少或多出决策类型
        """
        expected = set(DECISION_TYPES.values())
        missing = expected - set(handlers)
        unknown = set(handlers) - expected
        if missing or unknown:
            raise ValueError(
                f"用例映射不完整: 缺少 {sorted(t.__name__ for t in missing)}，"
                f"多余 {sorted(t.__name__ for t in unknown)}"
            )

        self.router = router
        self._handlers = dict(handlers)

    def handler_for(self, decision: RouteDecision) -> ReplyUseCase:
        return self._handlers[type(decision)]

    async def handle_message(self, context: MessageContext) -> BotReply:
        """
        处理一条聊天消息

        Args:
            context: 消息上下文

        Returns:
            BotReply: 回复（未预期的错误返回通用失败提示）
        """
        request_id = str(uuid.uuid4())[:8]

        try:
            with LogContext(logger, "处理消息", request_id=request_id, user_id=context.user_id):
                decision = await self.router.route(context.text)
                logger.info(
                    f"分发 {decision.intent.value} {decision_args(decision)}",
                    extra={'request_id': request_id, 'intent': decision.intent.value},
                )
                return await self.handler_for(decision).execute(decision, context)
        except Exception:
            return BotReply(text=PROCESSING_FAILED, kind=ReplyKind.RETRY_LATER)


# 工厂函数：便于创建 Orchestrator 实例
def create_orchestrator(
    dex_port: DexDataPort,
    market_data_port: MarketDataPort,
    llm_port: LLMPort,
    query_log_port: QueryLogPort,
    time_port: TimePort,
    cache: Optional[ExpiringCache] = None,
) -> Orchestrator:
    """
    创建 Orchestrator 实例并装配全部用例

    便于依赖注入和测试
    """
    # 延迟导入用例，避免循环依赖
    from cryptosight.domain.models import (
        AddressLookup,
        GeneralQuestion,
        MarketTrends,
        PriceQuery,
        TokenComparison,
        TokenRecommendation,
    )
    from cryptosight.services import InsightService, TokenService
    from cryptosight.use_cases import (
        AnalyzeTokenAddressUseCase,
        AnswerGeneralQuestionUseCase,
        CompareTokensUseCase,
        GetMarketTrendsUseCase,
        GetTokenPriceUseCase,
        RecommendTokensUseCase,
    )

    cache = cache if cache is not None else ExpiringCache()
    tokens = TokenService(dex_port, market_data_port, llm_port, query_log_port, cache)
    insights = InsightService(llm_port)
    extractor = SymbolExtractor(llm_port)

    handlers = {
        AddressLookup: AnalyzeTokenAddressUseCase(cache, tokens),
        PriceQuery: GetTokenPriceUseCase(cache, tokens),
        TokenRecommendation: RecommendTokensUseCase(cache, market_data_port, insights),
        TokenComparison: CompareTokensUseCase(cache, tokens, extractor, insights),
        MarketTrends: GetMarketTrendsUseCase(cache, market_data_port, time_port, insights),
        GeneralQuestion: AnswerGeneralQuestionUseCase(cache, tokens, extractor, insights),
    }
    return Orchestrator(router=IntentRouter(llm_port), handlers=handlers)
