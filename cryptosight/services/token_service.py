"""
代币服务 - 数据源聚合

组合 DexScreener、CoinGecko 和 LLM，提供各用例共享的代币查询：
- 按地址分析（含 LLM 解读与安全评分）
- 按符号查价
- 已知符号列表
- 单个代币的双源快照
- 查询日志写入（失败不影响回复）
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from cryptosight.domain.models import (
    CoinGeckoToken,
    CommandKind,
    DexScreenerToken,
    MessageContext,
    QueryLogEntry,
    Token,
    TokenAnalysis,
    TokenSnapshot,
)
from cryptosight.infrastructure.cache import CACHE_TTLS, CacheKeys, CacheNamespace, ExpiringCache
from cryptosight.infrastructure.errors import async_error_boundary
from cryptosight.infrastructure.security import TokenInputValidator
from cryptosight.ports.interfaces import (
    DataUnavailableError,
    DexDataPort,
    LLMPort,
    LLMUnavailableError,
    MarketDataPort,
    QueryLogPort,
)
from cryptosight.presentation.formatters import clean_markdown_formatting
from cryptosight.presentation.messages import ANALYSIS_FAILED_INSIGHT, ANALYSIS_FAILED_SCORE


logger = logging.getLogger(__name__)


class TokenService:
    """
    代币服务

    数据源的"未找到"返回 None；传输失败抛出 DataUnavailableError，
    由用例转换为"稍后重试"回复。
    """

    INSIGHT_PROMPT = """Analyze this token to help users understand its safety and status:
Name: {name}
Symbol: {symbol}
Chain: {chain}
Price: {price}
Liquidity: {liquidity}
Volume 24h: {volume}
Txns 24h: {txns}
FDV: {fdv}

Provide a concise analysis of the token's safety and current status. Consider:
1. Liquidity levels and their adequacy
2. Trading volume and market activity
3. On-chain transaction frequency
4. The ratio of FDV (Fully Diluted Valuation) to liquidity as a potential risk indicator
5. Any unusual patterns or red flags in the provided metrics

Offer a balanced view of the token's strengths and potential risks."""

    SAFETY_SCORE_PROMPT = """Assign a safety percentage from 0-100% to this token considering liquidity, volume, and on-chain activity. Treat a high FDV relative to liquidity as a risk factor.

Name: {name}
Symbol: {symbol}
Chain: {chain}
Price: {price}
Liquidity: {liquidity}
Volume 24h: {volume}
Txns 24h: {txns}
FDV: {fdv}

Format: [Percentage]%: [Reason]"""

    def __init__(
        self,
        dex_port: DexDataPort,
        market_port: MarketDataPort,
        llm_port: LLMPort,
        query_log_port: QueryLogPort,
        cache: ExpiringCache,
    ):
        self.dex = dex_port
        self.market = market_port
        self.llm = llm_port
        self.query_log = query_log_port
        self.cache = cache

    # ==================== 按地址 ====================

    async def get_token_by_address(self, address: str, context: MessageContext) -> Optional[Token]:
        """
        按合约地址获取代币（含 LLM 解读）

        Raises:
            ValidationError: 地址格式无效
            DataUnavailableError: 数据源不可用
        """
        address = TokenInputValidator.validate_address(address)

        cache_key = CacheKeys.token_address(address)
        token = self.cache.get(cache_key)
        if token is not None:
            logger.info(f"代币数据缓存命中: {cache_key}", extra={'cache_key': cache_key})
        else:
            dex_token = await self.dex.get_token_by_address(address)
            if dex_token is None:
                return None

            gecko_token = await self._optional_price(dex_token.symbol)
            analysis = await self.analyze_token(dex_token, gecko_token)
            token = self._merge_address_token(dex_token, gecko_token, analysis)

            if analysis.succeeded:
                self.cache.set(cache_key, token, CACHE_TTLS[CacheNamespace.TOKEN_ADDRESS])

        await self.log_query(self._entry(
            context,
            CommandKind.ANALYZE,
            response={"insight": token.insight, "safety_score": token.safety_score},
            token=token,
            token_address=address,
        ))
        return token

    async def _optional_price(self, symbol: str) -> Optional[CoinGeckoToken]:
        """CoinGecko 只是补充数据：没有或失败都不阻断地址分析"""
        if not symbol:
            return None
        try:
            return await self.market.get_token_price(symbol)
        except DataUnavailableError as e:
            logger.warning(f"CoinGecko 补充数据不可用 {symbol}: {e}")
            return None

    @staticmethod
    def _merge_address_token(
        dex_token: DexScreenerToken,
        gecko_token: Optional[CoinGeckoToken],
        analysis: TokenAnalysis,
    ) -> Token:
        return Token(
            name=dex_token.name,
            symbol=dex_token.symbol,
            chain=dex_token.chain,
            price=gecko_token.price if gecko_token else dex_token.price,
            liquidity=dex_token.liquidity,
            volume_24h=gecko_token.volume_24h if gecko_token else dex_token.volume_24h,
            address=dex_token.address,
            txns_24h=dex_token.txns_24h,
            fdv=dex_token.fdv,
            market_cap=gecko_token.market_cap if gecko_token else None,
            insight=analysis.insight,
            safety_score=analysis.safety_score,
        )

    async def analyze_token(
        self,
        dex_token: DexScreenerToken,
        gecko_token: Optional[CoinGeckoToken],
    ) -> TokenAnalysis:
        """LLM 安全解读与评分；失败时返回固定文本"""
        fields = {
            "name": dex_token.name,
            "symbol": dex_token.symbol,
            "chain": dex_token.chain,
            "price": gecko_token.price if gecko_token else dex_token.price,
            "liquidity": dex_token.liquidity,
            "volume": gecko_token.volume_24h if gecko_token else dex_token.volume_24h,
            "txns": dex_token.txns_24h,
            "fdv": dex_token.fdv if dex_token.fdv is not None else "N/A",
        }
        try:
            insight = await self.llm.complete(self.INSIGHT_PROMPT.format(**fields))
            safety_score = await self.llm.complete(self.SAFETY_SCORE_PROMPT.format(**fields))
        except LLMUnavailableError as e:
            logger.error(f"代币解读失败 {dex_token.symbol}: {e}")
            return TokenAnalysis(
                insight=ANALYSIS_FAILED_INSIGHT,
                safety_score=ANALYSIS_FAILED_SCORE,
                succeeded=False,
            )

        return TokenAnalysis(
            insight=clean_markdown_formatting(insight),
            safety_score=clean_markdown_formatting(safety_score),
        )

    # ==================== 按符号 ====================

    async def get_token_by_symbol(self, symbol: str, context: MessageContext) -> Optional[Token]:
        """
        按符号获取价格数据

        Raises:
            ValidationError: 符号格式无效
            DataUnavailableError: CoinGecko 不可用
        """
        symbol = TokenInputValidator.validate_symbol(symbol)

        cache_key = CacheKeys.token_symbol(symbol)
        token = self.cache.get(cache_key)
        if token is not None:
            logger.info(f"代币数据缓存命中: {cache_key}", extra={'cache_key': cache_key})
        else:
            gecko_token = await self.market.get_token_price(symbol)
            if gecko_token is None:
                return None

            dex_token = await self._optional_dex(symbol)
            token = Token(
                name=gecko_token.name,
                symbol=gecko_token.symbol,
                chain=dex_token.chain if dex_token else None,
                price=gecko_token.price,
                liquidity=dex_token.liquidity if dex_token else 0.0,
                volume_24h=gecko_token.volume_24h,
                address=dex_token.address if dex_token else "",
                txns_24h=dex_token.txns_24h if dex_token else None,
                fdv=dex_token.fdv if dex_token else None,
                market_cap=gecko_token.market_cap,
            )
            self.cache.set(cache_key, token, CACHE_TTLS[CacheNamespace.TOKEN_SYMBOL])

        await self.log_query(self._entry(
            context,
            CommandKind.PRICE,
            response={
                "price": token.price,
                "volume_24h": token.volume_24h,
                "market_cap": token.market_cap,
                "liquidity": token.liquidity,
            },
            token=token,
            token_address=token.address or None,
        ))
        return token

    async def _optional_dex(self, symbol: str) -> Optional[DexScreenerToken]:
        try:
            return await self.dex.get_token_by_symbol(symbol)
        except DataUnavailableError as e:
            logger.warning(f"DexScreener 补充数据不可用 {symbol}: {e}")
            return None

    # ==================== 多代币 ====================

    async def get_known_symbols(self) -> List[str]:
        """已知符号列表；获取失败时返回空列表（仅作提示用）"""
        cache_key = CacheKeys.token_list()
        symbols = self.cache.get(cache_key)
        if symbols is not None:
            return symbols

        try:
            symbols = await self.market.get_token_list()
        except DataUnavailableError as e:
            logger.warning(f"已知代币列表不可用: {e}")
            return []

        self.cache.set(cache_key, symbols, CACHE_TTLS[CacheNamespace.TOKEN_LIST])
        return symbols

    async def get_token_snapshot(self, symbol: str) -> TokenSnapshot:
        """并发获取单个代币在两个数据源中的数据，单源失败记为缺失"""
        snapshot, _ = await self._fetch_snapshot(symbol)
        return snapshot

    async def get_token_snapshots(self, symbols: List[str]) -> Dict[str, TokenSnapshot]:
        """
        批量快照，只保留至少一个数据源有数据的代币

        Raises:
            DataUnavailableError: 没有任何代币有数据，且有数据源传输失败
        """
        results = await asyncio.gather(*(self._fetch_snapshot(s) for s in symbols))

        snapshots = {snapshot.symbol: snapshot for snapshot, _ in results if snapshot.has_data}
        failures = [error for _, errors in results for error in errors]
        if not snapshots and failures:
            raise failures[0]
        return snapshots

    async def _fetch_snapshot(self, symbol: str) -> Tuple[TokenSnapshot, List[DataUnavailableError]]:
        dex_result, gecko_result = await asyncio.gather(
            self.dex.get_token_by_symbol(symbol),
            self.market.get_token_price(symbol),
            return_exceptions=True,
        )
        snapshot = TokenSnapshot(
            symbol=symbol,
            dex_screener=self._unwrap(dex_result, symbol, "DexScreener"),
            coin_gecko=self._unwrap(gecko_result, symbol, "CoinGecko"),
        )
        failures = [r for r in (dex_result, gecko_result) if isinstance(r, DataUnavailableError)]
        return snapshot, failures

    @staticmethod
    def _unwrap(result, symbol: str, source: str):
        if isinstance(result, DataUnavailableError):
            logger.warning(f"{source} 数据不可用 {symbol}: {result}")
            return None
        if isinstance(result, BaseException):
            raise result
        return result

    # ==================== 查询日志 ====================

    @async_error_boundary(context="写入查询日志")
    async def log_query(self, entry: Optional[QueryLogEntry]) -> None:
        """写入查询日志；失败只记录本地日志"""
        if entry is None:
            return
        await self.query_log.log_query(entry)

    @staticmethod
    def _entry(
        context: MessageContext,
        command: CommandKind,
        response: dict,
        token: Token,
        token_address: Optional[str],
    ) -> Optional[QueryLogEntry]:
        if not context.user_id:
            return None
        return QueryLogEntry(
            user_id=context.user_id,
            command=command,
            response=response,
            token_address=token_address,
            chain_id=token.chain,
            token_id=token.symbol,
            token_name=token.name,
        )
