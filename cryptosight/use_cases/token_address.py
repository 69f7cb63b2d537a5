"""
合约地址分析用例
"""

from typing import Optional

from cryptosight.domain.models import AddressLookup, BotReply, MessageContext, ReplyKind
from cryptosight.infrastructure.cache import CacheKeys, CacheNamespace
from cryptosight.presentation.messages import (
    ADDRESS_NOT_FOUND,
    ANALYSIS_FAILED_INSIGHT,
    LOOKUP_FAILED,
    render_address_reply,
)
from cryptosight.services.token_service import TokenService
from cryptosight.use_cases.base import ReplyUseCase


class AnalyzeTokenAddressUseCase(ReplyUseCase[AddressLookup]):
    """
    合约地址分析

    DexScreener 交易对 + CoinGecko 行情 + LLM 安全解读。
    LLM 解读失败时仍回复数据，但不缓存。
    """

    namespace = CacheNamespace.ADDRESS
    failure_message = LOOKUP_FAILED

    def __init__(self, cache, token_service: TokenService):
        super().__init__(cache)
        self.tokens = token_service

    def cache_key(self, decision: AddressLookup) -> Optional[str]:
        return CacheKeys.address(decision.address)

    async def build_reply(self, decision: AddressLookup, context: MessageContext) -> BotReply:
        token = await self.tokens.get_token_by_address(decision.address, context)
        if token is None:
            return BotReply(text=ADDRESS_NOT_FOUND, kind=ReplyKind.NOT_FOUND)

        kind = ReplyKind.PARTIAL if token.insight == ANALYSIS_FAILED_INSIGHT else ReplyKind.ANSWER
        return BotReply(text=render_address_reply(token), kind=kind)
