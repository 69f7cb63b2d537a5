"""
代币价格查询用例
"""

from typing import Optional

from cryptosight.domain.models import BotReply, MessageContext, PriceQuery, ReplyKind
from cryptosight.infrastructure.cache import CacheKeys, CacheNamespace
from cryptosight.presentation.messages import (
    LOOKUP_FAILED,
    SPECIFY_SYMBOL,
    SYMBOL_NOT_FOUND,
    render_price_reply,
)
from cryptosight.services.token_service import TokenService
from cryptosight.use_cases.base import ReplyUseCase


class GetTokenPriceUseCase(ReplyUseCase[PriceQuery]):
    """按符号查询价格、成交量与流动性"""

    namespace = CacheNamespace.PRICE
    failure_message = LOOKUP_FAILED

    def __init__(self, cache, token_service: TokenService):
        super().__init__(cache)
        self.tokens = token_service

    def cache_key(self, decision: PriceQuery) -> Optional[str]:
        if not decision.symbol:
            return None
        return CacheKeys.price(decision.symbol)

    async def build_reply(self, decision: PriceQuery, context: MessageContext) -> BotReply:
        if not decision.symbol:
            return BotReply(text=SPECIFY_SYMBOL, kind=ReplyKind.CLARIFY)

        token = await self.tokens.get_token_by_symbol(decision.symbol, context)
        if token is None:
            return BotReply(text=SYMBOL_NOT_FOUND, kind=ReplyKind.NOT_FOUND)

        return BotReply(text=render_price_reply(token))
