"""
代币对比用例
"""

from typing import Optional

from cryptosight.domain.models import BotReply, MessageContext, ReplyKind, TokenComparison
from cryptosight.infrastructure.cache import CacheKeys, CacheNamespace
from cryptosight.orchestrator.symbol_extractor import SymbolExtractor
from cryptosight.presentation.messages import COMPARISON_FAILED, SPECIFY_TOKENS, SYMBOL_NOT_FOUND
from cryptosight.services.insight_service import InsightService
from cryptosight.services.token_service import TokenService
from cryptosight.use_cases.base import ReplyUseCase


class CompareTokensUseCase(ReplyUseCase[TokenComparison]):
    """
    代币对比

    至少需要提到两个代币；少于两个时请用户补充。
    """

    namespace = CacheNamespace.COMPARISON
    failure_message = COMPARISON_FAILED

    MIN_TOKENS = 2

    def __init__(
        self,
        cache,
        token_service: TokenService,
        symbol_extractor: SymbolExtractor,
        insight_service: InsightService,
    ):
        super().__init__(cache)
        self.tokens = token_service
        self.extractor = symbol_extractor
        self.insights = insight_service

    def cache_key(self, decision: TokenComparison) -> Optional[str]:
        return CacheKeys.comparison(decision.query)

    async def build_reply(self, decision: TokenComparison, context: MessageContext) -> BotReply:
        known = await self.tokens.get_known_symbols()
        symbols = await self.extractor.extract(decision.query, known)
        if len(symbols) < self.MIN_TOKENS:
            return BotReply(text=SPECIFY_TOKENS, kind=ReplyKind.CLARIFY)

        snapshots = await self.tokens.get_token_snapshots(sorted(symbols))
        if len(snapshots) < self.MIN_TOKENS:
            return BotReply(text=SYMBOL_NOT_FOUND, kind=ReplyKind.NOT_FOUND)

        text = await self.insights.compare_tokens(decision.query, list(snapshots.values()))
        return BotReply(text=text)
