"""
CoinGecko 适配器 - 实现 MarketDataPort

提供价格、热门代币、已知代币列表和全市场概览。
"""

from typing import Any, Dict, List, Optional

import httpx

from cryptosight.adapters.http_adapter import AsyncHttpAdapter, to_float
from cryptosight.domain.models import CoinGeckoToken, MarketOverview, TrendingToken
from cryptosight.ports.interfaces import DataUnavailableError, MarketDataPort


class CoinGeckoAdapter(AsyncHttpAdapter, MarketDataPort):
    """
    CoinGecko 数据适配器

    使用公开 API（无需密钥），计价货币固定为 USD。
    """

    source = "CoinGecko"
    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(self, timeout: float = 15.0, client: Optional[httpx.AsyncClient] = None):
        super().__init__(self.BASE_URL, timeout=timeout, client=client)

    async def get_token_price(self, symbol: str) -> Optional[CoinGeckoToken]:
        """按符号获取行情，取市值排名最靠前的一条"""
        data = await self._get_json(
            "/coins/markets",
            params={"vs_currency": "usd", "symbols": symbol.lower()},
        )
        if not isinstance(data, list) or not data:
            return None

        result = data[0]
        return CoinGeckoToken(
            name=result.get("name") or "",
            symbol=(result.get("symbol") or symbol).upper(),
            price=to_float(result.get("current_price")),
            volume_24h=to_float(result.get("total_volume")),
            market_cap=to_float(result["market_cap"]) if result.get("market_cap") is not None else None,
        )

    async def get_trending_tokens(self) -> List[TrendingToken]:
        """获取热门代币"""
        data = await self._get_json("/search/trending")
        coins = data.get("coins") if isinstance(data, dict) else None
        return [self._parse_trending(coin.get("item") or {}) for coin in coins or []]

    @staticmethod
    def _parse_trending(item: Dict[str, Any]) -> TrendingToken:
        details = item.get("data") or {}
        price = details.get("price")
        change = (details.get("price_change_percentage_24h") or {}).get("usd")
        return TrendingToken(
            name=item.get("name") or "",
            symbol=(item.get("symbol") or "").upper(),
            market_cap_rank=item.get("market_cap_rank"),
            price_usd=to_float(price) if price is not None else None,
            price_change_24h=to_float(change) if change is not None else None,
        )

    async def get_token_list(self) -> List[str]:
        """获取已知代币符号（大写、去重、保持原顺序）"""
        data = await self._get_json("/coins/list")
        if not isinstance(data, list):
            raise DataUnavailableError("代币列表格式无效", source=self.source)

        symbols = (str(coin.get("symbol") or "").upper() for coin in data)
        return list(dict.fromkeys(s for s in symbols if s))

    async def get_market_overview(self) -> MarketOverview:
        """获取全市场概览"""
        data = await self._get_json("/global")
        overview = data.get("data") if isinstance(data, dict) else None
        if not overview:
            raise DataUnavailableError("全市场数据为空", source=self.source)

        dominance = overview.get("market_cap_percentage") or {}
        return MarketOverview(
            total_market_cap_usd=to_float((overview.get("total_market_cap") or {}).get("usd")),
            total_volume_usd=to_float((overview.get("total_volume") or {}).get("usd")),
            market_cap_change_24h=to_float(overview.get("market_cap_change_percentage_24h_usd")),
            btc_dominance=dominance.get("btc"),
            eth_dominance=dominance.get("eth"),
            active_cryptocurrencies=overview.get("active_cryptocurrencies"),
        )
