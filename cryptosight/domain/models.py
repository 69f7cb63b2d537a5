"""
核心领域模型 - 所有业务实体和值对象的定义

设计原则：
1. 不可变性：使用 frozen=True 确保模型不可变
2. 类型安全：路由结果是封闭意图集合上的标签联合类型
3. 自描述：每个字段都有明确的含义
4. 可序列化：支持 JSON 序列化
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Sequence, Type, Union


# ==================== 枚举类型 ====================

class Intent(str, Enum):
    """用户意图分类（封闭集合）"""
    PRICE_QUERY = "price_query"                    # 代币价格查询
    TOKEN_ADDRESS = "token_address"                # 合约地址分析
    MARKET_TRENDS = "market_trends"                # 市场趋势
    TOKEN_RECOMMENDATION = "token_recommendation"  # 代币推荐
    TOKEN_COMPARISON = "token_comparison"          # 代币对比
    GENERAL_QUESTION = "general_question"          # 通用问答


class ReplyKind(str, Enum):
    """回复类别"""
    ANSWER = "answer"            # 正常回答（可缓存）
    PARTIAL = "partial"          # 有数据但 LLM 解读失败
    NOT_FOUND = "not_found"      # 数据源中不存在
    INVALID_INPUT = "invalid_input"
    CLARIFY = "clarify"          # 需要用户补充信息
    RETRY_LATER = "retry_later"  # 上游或 LLM 故障


class CommandKind(str, Enum):
    """查询日志中的命令类型"""
    ANALYZE = "analyze"
    PRICE = "price"


class ErrorCode(str, Enum):
    """错误码"""
    INVALID_INPUT = "invalid_input"
    DATA_UNAVAILABLE = "data_unavailable"
    INTERNAL_ERROR = "internal_error"


# ==================== 路由决策（标签联合） ====================

@dataclass(frozen=True)
class PriceQuery:
    """价格查询：参数为去掉 $ 前缀的大写代币符号"""
    symbol: str

    intent: ClassVar[Intent] = Intent.PRICE_QUERY
    arity: ClassVar[int] = 1

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "PriceQuery":
        return cls(symbol=args[0].strip().lstrip("$").upper())


@dataclass(frozen=True)
class AddressLookup:
    """合约地址分析：参数为原样保留的链上地址"""
    address: str

    intent: ClassVar[Intent] = Intent.TOKEN_ADDRESS
    arity: ClassVar[int] = 1

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "AddressLookup":
        return cls(address=args[0].strip())


@dataclass(frozen=True)
class MarketTrends:
    """市场趋势：无参数"""

    intent: ClassVar[Intent] = Intent.MARKET_TRENDS
    arity: ClassVar[int] = 0

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "MarketTrends":
        return cls()


@dataclass(frozen=True)
class TokenRecommendation:
    """代币推荐：参数为推荐类别（如 DeFi、meme）"""
    category: str

    intent: ClassVar[Intent] = Intent.TOKEN_RECOMMENDATION
    arity: ClassVar[int] = 1

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "TokenRecommendation":
        return cls(category=args[0].strip())


@dataclass(frozen=True)
class TokenComparison:
    """代币对比：参数为用户原始查询"""
    query: str

    intent: ClassVar[Intent] = Intent.TOKEN_COMPARISON
    arity: ClassVar[int] = 1

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "TokenComparison":
        return cls(query=args[0].strip())


@dataclass(frozen=True)
class GeneralQuestion:
    """通用问答：参数为用户原始问题"""
    question: str

    intent: ClassVar[Intent] = Intent.GENERAL_QUESTION
    arity: ClassVar[int] = 1

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "GeneralQuestion":
        return cls(question=args[0].strip())


RouteDecision = Union[
    PriceQuery,
    AddressLookup,
    MarketTrends,
    TokenRecommendation,
    TokenComparison,
    GeneralQuestion,
]

# 意图 -> 变体类型，覆盖整个封闭集合
DECISION_TYPES: Dict[Intent, Type] = {
    Intent.PRICE_QUERY: PriceQuery,
    Intent.TOKEN_ADDRESS: AddressLookup,
    Intent.MARKET_TRENDS: MarketTrends,
    Intent.TOKEN_RECOMMENDATION: TokenRecommendation,
    Intent.TOKEN_COMPARISON: TokenComparison,
    Intent.GENERAL_QUESTION: GeneralQuestion,
}


def build_decision(intent: Intent, args: Sequence[str]) -> RouteDecision:
    """
    根据意图和位置参数构造路由决策

    Raises:
        ValueError: 参数个数不符或参数为空
    """
    decision_type = DECISION_TYPES[intent]
    if len(args) != decision_type.arity:
        raise ValueError(
            f"意图 {intent.value} 需要 {decision_type.arity} 个参数，实际 {len(args)} 个"
        )
    if any(not arg.strip().lstrip("$") for arg in args):
        raise ValueError(f"意图 {intent.value} 的参数不能为空")
    return decision_type.from_args(args)


SymbolSet = FrozenSet[str]


# ==================== 代币数据 ====================

@dataclass(frozen=True)
class DexScreenerToken:
    """DexScreener 交易对数据"""
    name: str
    symbol: str
    chain: str
    price: float
    liquidity: float
    volume_24h: float
    txns_24h: int
    fdv: Optional[float]
    address: str


@dataclass(frozen=True)
class CoinGeckoToken:
    """CoinGecko 市场数据"""
    name: str
    symbol: str
    price: float
    volume_24h: float
    market_cap: Optional[float] = None


@dataclass(frozen=True)
class Token:
    """合并后的代币描述"""
    name: str
    symbol: str
    chain: Optional[str]
    price: float
    liquidity: float
    volume_24h: float
    address: str = ""
    txns_24h: Optional[int] = None
    fdv: Optional[float] = None
    market_cap: Optional[float] = None
    insight: Optional[str] = None
    safety_score: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TokenAnalysis:
    """LLM 对代币安全性的解读"""
    insight: str
    safety_score: str
    succeeded: bool = True


@dataclass(frozen=True)
class TokenSnapshot:
    """单个代币在两个数据源中的数据"""
    symbol: str
    dex_screener: Optional[DexScreenerToken] = None
    coin_gecko: Optional[CoinGeckoToken] = None

    @property
    def has_data(self) -> bool:
        return self.dex_screener is not None or self.coin_gecko is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "dex_screener": asdict(self.dex_screener) if self.dex_screener else None,
            "coin_gecko": asdict(self.coin_gecko) if self.coin_gecko else None,
        }


@dataclass(frozen=True)
class TrendingToken:
    """CoinGecko 热门代币"""
    name: str
    symbol: str
    market_cap_rank: Optional[int] = None
    price_usd: Optional[float] = None
    price_change_24h: Optional[float] = None


@dataclass(frozen=True)
class MarketOverview:
    """全市场概览"""
    total_market_cap_usd: float
    total_volume_usd: float
    market_cap_change_24h: float
    btc_dominance: Optional[float] = None
    eth_dominance: Optional[float] = None
    active_cryptocurrencies: Optional[int] = None


# ==================== 请求/响应模型 ====================

@dataclass(frozen=True)
class MessageContext:
    """单条聊天消息的上下文"""
    text: str
    user_id: Optional[str] = None
    chat_id: Optional[int] = None
    received_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class BotReply:
    """机器人回复"""
    text: str
    kind: ReplyKind = ReplyKind.ANSWER
    cached: bool = False

    @property
    def cacheable(self) -> bool:
        return self.kind == ReplyKind.ANSWER


@dataclass(frozen=True)
class QueryLogEntry:
    """查询日志记录"""
    user_id: str
    command: CommandKind
    response: Dict[str, Any]
    token_address: Optional[str] = None
    chain_id: Optional[str] = None
    token_id: Optional[str] = None
    token_name: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典（用于 JSON 序列化）"""
        return {
            "user_id": self.user_id,
            "command": self.command.value,
            "response": self.response,
            "token_address": self.token_address,
            "chain_id": self.chain_id,
            "token_id": self.token_id,
            "token_name": self.token_name,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryLogEntry":
        return cls(
            user_id=data["user_id"],
            command=CommandKind(data["command"]),
            response=data.get("response") or {},
            token_address=data.get("token_address"),
            chain_id=data.get("chain_id"),
            token_id=data.get("token_id"),
            token_name=data.get("token_name"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


def decision_args(decision: RouteDecision) -> List[str]:
    """取出路由决策的位置参数（日志用）"""
    return [str(value) for value in asdict(decision).values()]
