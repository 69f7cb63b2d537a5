"""
LLM 解读服务 - 把市场数据交给 LLM 生成聊天回复

所有方法在 LLM 失败时抛出 LLMUnavailableError，由用例转换为"稍后重试"。
"""

import json
from typing import Iterable, List

from cryptosight.domain.models import MarketOverview, TokenSnapshot, TrendingToken
from cryptosight.ports.interfaces import LLMPort
from cryptosight.presentation.formatters import (
    clean_markdown_formatting,
    format_compact,
    format_currency,
    format_percent,
)


SYSTEM_PROMPT = (
    "You are a concise cryptocurrency assistant in a Telegram chat. "
    "Answer in plain text without Markdown. Never present anything as financial advice."
)

RECOMMENDATION_PROMPT = """The user asked for token suggestions in this category: {category}

Currently trending tokens on CoinGecko:
{trending}

Suggest 3 to 5 tokens that fit the category. Prefer trending tokens when they fit.
For each token give the symbol and one sentence on why it is interesting, then one short risk note for the whole list."""

COMPARISON_PROMPT = """Compare these tokens for the user.

User request: {query}

Market data (JSON, null means the source has no data):
{data}

Compare price, liquidity, 24h volume and market cap where available, then give a short balanced conclusion."""

TOKEN_QUESTION_PROMPT = """Answer the user's question using the market data below.

Question: {question}

Market data (JSON, null means the source has no data):
{data}

Keep the answer short and factual."""

GENERAL_PROMPT = """Answer this cryptocurrency question briefly and accurately:

{question}"""

MARKET_TRENDS_PROMPT = """Summarize today's ({date}) cryptocurrency market for the user.

Global market:
- Total market cap: {market_cap} ({market_cap_change} in 24h)
- Total 24h volume: {volume}
- BTC dominance: {btc_dominance}
- ETH dominance: {eth_dominance}

Trending tokens:
{trending}

Describe the overall direction, notable movers and the general sentiment in a few short paragraphs."""


def _dominance(value) -> str:
    return "N/A" if value is None else f"{value:.1f}%"


def format_trending(tokens: Iterable[TrendingToken]) -> str:
    """热门代币列表（提示词用）"""
    lines = []
    for token in tokens:
        rank = f"#{token.market_cap_rank}" if token.market_cap_rank else "unranked"
        lines.append(
            f"- {token.name} ({token.symbol}), {rank}, "
            f"price {format_currency(token.price_usd)}, "
            f"24h {format_percent(token.price_change_24h)}"
        )
    return "\n".join(lines) or "(no trending data)"


class InsightService:
    """
    LLM 解读服务

    负责拼装提示词并清理输出中的 Markdown 标记。
    """

    def __init__(self, llm_port: LLMPort):
        self.llm = llm_port

    async def _ask(self, prompt: str) -> str:
        answer = await self.llm.complete(prompt, system=SYSTEM_PROMPT)
        return clean_markdown_formatting(answer)

    async def recommend_tokens(self, category: str, trending: List[TrendingToken]) -> str:
        return await self._ask(RECOMMENDATION_PROMPT.format(
            category=category,
            trending=format_trending(trending),
        ))

    async def compare_tokens(self, query: str, snapshots: List[TokenSnapshot]) -> str:
        return await self._ask(COMPARISON_PROMPT.format(
            query=query,
            data=self._dump(snapshots),
        ))

    async def answer_token_question(self, question: str, snapshots: List[TokenSnapshot]) -> str:
        return await self._ask(TOKEN_QUESTION_PROMPT.format(
            question=question,
            data=self._dump(snapshots),
        ))

    async def answer_general_question(self, question: str) -> str:
        return await self._ask(GENERAL_PROMPT.format(question=question))

    async def summarize_market(
        self,
        date: str,
        overview: MarketOverview,
        trending: List[TrendingToken],
    ) -> str:
        return await self._ask(MARKET_TRENDS_PROMPT.format(
            date=date,
            market_cap=format_compact(overview.total_market_cap_usd),
            market_cap_change=format_percent(overview.market_cap_change_24h),
            volume=format_compact(overview.total_volume_usd),
            btc_dominance=_dominance(overview.btc_dominance),
            eth_dominance=_dominance(overview.eth_dominance),
            trending=format_trending(trending),
        ))

    @staticmethod
    def _dump(snapshots: List[TokenSnapshot]) -> str:
        return json.dumps([s.to_dict() for s in snapshots], indent=2, ensure_ascii=False)
