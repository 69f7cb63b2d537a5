"""
市场趋势用例
"""

from typing import Optional

from cryptosight.domain.models import BotReply, MarketTrends, MessageContext
from cryptosight.infrastructure.cache import CacheKeys, CacheNamespace
from cryptosight.ports.interfaces import MarketDataPort, TimePort
from cryptosight.presentation.messages import MARKET_TRENDS_FAILED
from cryptosight.services.insight_service import InsightService
from cryptosight.use_cases.base import ReplyUseCase


class GetMarketTrendsUseCase(ReplyUseCase[MarketTrends]):
    """
    市场趋势

    全市场概览 + 热门代币交给 LLM 总结，按日期缓存。
    """

    namespace = CacheNamespace.MARKET_TRENDS
    failure_message = MARKET_TRENDS_FAILED

    def __init__(
        self,
        cache,
        market_data_port: MarketDataPort,
        time_port: TimePort,
        insight_service: InsightService,
    ):
        super().__init__(cache)
        self.market_data = market_data_port
        self.time = time_port
        self.insights = insight_service

    def cache_key(self, decision: MarketTrends) -> Optional[str]:
        return CacheKeys.market_trends(self.time.get_date())

    async def build_reply(self, decision: MarketTrends, context: MessageContext) -> BotReply:
        overview = await self.market_data.get_market_overview()
        trending = await self.market_data.get_trending_tokens()
        text = await self.insights.summarize_market(self.time.get_date(), overview, trending)
        return BotReply(text=text)
