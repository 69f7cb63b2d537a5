"""
通用问答用例
"""

from typing import Optional

from cryptosight.domain.models import BotReply, GeneralQuestion, MessageContext
from cryptosight.infrastructure.cache import CacheKeys, CacheNamespace
from cryptosight.orchestrator.symbol_extractor import SymbolExtractor
from cryptosight.presentation.messages import GENERAL_QUESTION_FAILED
from cryptosight.services.insight_service import InsightService
from cryptosight.services.token_service import TokenService
from cryptosight.use_cases.base import ReplyUseCase


class AnswerGeneralQuestionUseCase(ReplyUseCase[GeneralQuestion]):
    """
    通用问答

    分支：
    1. 提到多个有数据的代币且问题含 "compare" -> 对比
    2. 提到有数据的代币 -> 基于数据回答
    3. 其他 -> 直接由 LLM 回答
    """

    namespace = CacheNamespace.GENERAL
    failure_message = GENERAL_QUESTION_FAILED

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

    def cache_key(self, decision: GeneralQuestion) -> Optional[str]:
        return CacheKeys.general(decision.question)

    async def build_reply(self, decision: GeneralQuestion, context: MessageContext) -> BotReply:
        question = decision.question
        known = await self.tokens.get_known_symbols()
        symbols = await self.extractor.extract(question, known)

        snapshots = []
        if symbols:
            snapshots = list((await self.tokens.get_token_snapshots(sorted(symbols))).values())

        if len(snapshots) > 1 and "compare" in question.lower():
            text = await self.insights.compare_tokens(question, snapshots)
        elif snapshots:
            text = await self.insights.answer_token_question(question, snapshots)
        else:
            text = await self.insights.answer_general_question(question)
        return BotReply(text=text)
