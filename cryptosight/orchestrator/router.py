"""
意图路由器 - LLM 分类 + 固定兜底

设计原则：
1. LLM 分类：把用户原文交给远程分类调用
2. 失败即关闭：响应先经 schema 校验，任何不符都走兜底
3. 全函数：route() 对任意输入都返回合法的 RouteDecision，从不抛出
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from cryptosight.domain.models import (
    Intent,
    PriceQuery,
    RouteDecision,
    build_decision,
)
from cryptosight.ports.interfaces import LLMPort
from cryptosight.presentation.formatters import clean_json_block


logger = logging.getLogger(__name__)


class ClassifierPayload(BaseModel):
    """分类调用的响应结构：{"intent": "...", "args": ["..."]}"""
    model_config = ConfigDict(extra="ignore")

    intent: Intent
    args: List[StrictStr] = Field(default_factory=list)


class IntentRouter:
    """
    意图路由器

    职责：
    1. 调用远程分类
    2. 剥离代码块并按 schema 解码
    3. 校验意图与参数个数，构造路由决策变体
    4. 任何失败返回 FALLBACK_DECISION
    """

    # 兜底：查询 BTC 价格，保证总能给出某个有效回复
    FALLBACK_DECISION: RouteDecision = PriceQuery(symbol="BTC")

    SYSTEM_PROMPT = "You are a Telegram bot message router for a crypto assistant."

    ROUTING_PROMPT = """Decide which handler should answer the user's message.

Handlers (intent, arguments):
- "price_query", [symbol]: the user asks for the price of a token ("$BTC", "What's the price of $ETH?") or just sends a token symbol or name ("SOL", "bonk", "dogwifhat"). Be optimistic: if it sounds like a token, it is a price query. Return the symbol WITHOUT the "$" sign.
- "token_address", [address]: the user sends a blockchain token address (Ethereum "0x" + 40 hex characters, Solana base58 of 32-44 characters, or a Bitcoin address). Return the address exactly as written.
- "market_trends", []: the user asks how the crypto market is doing overall.
- "token_recommendation", [category]: the user asks for token suggestions; the argument is the category ("DeFi", "meme", "gaming", or "general").
- "token_comparison", [original message]: the user wants to compare two or more tokens; the argument is the full original message.
- "general_question", [original message]: any other crypto-related question; the argument is the full original message.

Respond ONLY with a raw JSON object like this:
{{"intent": "price_query", "args": ["BTC"]}}

User message: {message}"""

    def __init__(self, llm_port: LLMPort):
        """
        初始化路由器

        Args:
            llm_port: LLM 端口（远程分类调用）
        """
        self.llm = llm_port

    async def route(self, text: str) -> RouteDecision:
        """
        执行路由决策

        Args:
            text: 用户原始消息

        Returns:
            RouteDecision: 路由决策（失败时为 FALLBACK_DECISION）
        """
        message = (text or "").strip()
        if not message:
            return self.FALLBACK_DECISION

        try:
            raw = await self.llm.complete(
                self.ROUTING_PROMPT.format(message=message),
                system=self.SYSTEM_PROMPT,
                temperature=0.0,
            )
        except Exception as e:
            logger.warning(f"意图分类调用失败，使用兜底意图: {e}")
            return self.FALLBACK_DECISION

        decision = self.parse_response(raw)
        if decision is None:
            logger.warning(f"意图分类响应无效，使用兜底意图: {raw!r:.200}")
            return self.FALLBACK_DECISION

        logger.info(f"意图路由: {decision.intent.value}", extra={'intent': decision.intent.value})
        return decision

    @staticmethod
    def parse_response(raw: Optional[str]) -> Optional[RouteDecision]:
        """
        解码分类响应

        Returns:
            合法的路由决策；结构、意图或参数不符时返回 None
        """
        if not raw or not isinstance(raw, str):
            return None

        try:
            payload = ClassifierPayload.model_validate_json(clean_json_block(raw))
            return build_decision(payload.intent, payload.args)
        except (ValidationError, ValueError):
            return None
