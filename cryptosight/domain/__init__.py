"""
领域模型层 - 核心业务实体和值对象

包含：
- Intent / RouteDecision: 封闭意图集合与路由决策变体
- Token / DexScreenerToken / CoinGeckoToken: 代币数据
- BotReply / MessageContext: 消息与回复
- QueryLogEntry: 查询日志记录
"""

from cryptosight.domain.models import (
    AddressLookup,
    BotReply,
    CoinGeckoToken,
    CommandKind,
    DECISION_TYPES,
    DexScreenerToken,
    ErrorCode,
    GeneralQuestion,
    Intent,
    MarketOverview,
    MarketTrends,
    MessageContext,
    PriceQuery,
    QueryLogEntry,
    ReplyKind,
    RouteDecision,
    SymbolSet,
    Token,
    TokenAnalysis,
    TokenComparison,
    TokenRecommendation,
    TokenSnapshot,
    TrendingToken,
    build_decision,
)

__all__ = [
    "AddressLookup",
    "BotReply",
    "CoinGeckoToken",
    "CommandKind",
    "DECISION_TYPES",
    "DexScreenerToken",
    "ErrorCode",
    "GeneralQuestion",
    "Intent",
    "MarketOverview",
    "MarketTrends",
    "MessageContext",
    "PriceQuery",
    "QueryLogEntry",
    "ReplyKind",
    "RouteDecision",
    "SymbolSet",
    "Token",
    "TokenAnalysis",
    "TokenComparison",
    "TokenRecommendation",
    "TokenSnapshot",
    "TrendingToken",
    "build_decision",
]
