"""
代币推荐用例
"""

from typing import Optional

from cryptosight.domain.models import BotReply, MessageContext, TokenRecommendation
from cryptosight.infrastructure.cache import CacheKeys, CacheNamespace
from cryptosight.ports.interfaces import MarketDataPort
from cryptosight.presentation.messages import RECOMMENDATION_FAILED
from cryptosight.services.insight_service import InsightService
from cryptosight.use_cases.base import ReplyUseCase


class RecommendTokensUseCase(ReplyUseCase[TokenRecommendation]):
    """按类别推荐代币（CoinGecko 热门列表 + LLM）"""

    namespace = CacheNamespace.RECOMMENDATION
    failure_message = RECOMMENDATION_FAILED

    def __init__(self, cache, market_data_port: MarketDataPort, insight_service: InsightService):
        super().__init__(cache)
        self.market_data = market_data_port
        self.insights = insight_service

    def cache_key(self, decision: TokenRecommendation) -> Optional[str]:
        return CacheKeys.recommendation(decision.category)

    async def build_reply(self, decision: TokenRecommendation, context: MessageContext) -> BotReply:
        trending = await self.market_data.get_trending_tokens()
        text = await self.insights.recommend_tokens(decision.category, trending)
        return BotReply(text=text)
