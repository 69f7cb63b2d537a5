"""
DexScreener 适配器 - 实现 DexDataPort

从 DexScreener 获取代币的链、价格、流动性、成交量和交易笔数。
"""

from typing import Any, Dict, Optional

import httpx

from cryptosight.adapters.http_adapter import AsyncHttpAdapter, to_float
from cryptosight.domain.models import DexScreenerToken
from cryptosight.ports.interfaces import DexDataPort


class DexScreenerAdapter(AsyncHttpAdapter, DexDataPort):
    """
    DexScreener 数据适配器

    两个查询都取返回的第一个交易对；没有交易对视为未找到。
    """

    source = "DexScreener"
    BASE_URL = "https://api.dexscreener.com"

    def __init__(self, timeout: float = 15.0, client: Optional[httpx.AsyncClient] = None):
        super().__init__(self.BASE_URL, timeout=timeout, client=client)

    async def get_token_by_address(self, address: str) -> Optional[DexScreenerToken]:
        """按合约地址查询代币"""
        data = await self._get_json(f"/latest/dex/tokens/{address}")
        return self._first_pair(data)

    async def get_token_by_symbol(self, symbol: str) -> Optional[DexScreenerToken]:
        """按符号搜索代币"""
        data = await self._get_json("/latest/dex/search", params={"q": symbol})
        return self._first_pair(data)

    def _first_pair(self, data: Any) -> Optional[DexScreenerToken]:
        pairs = data.get("pairs") if isinstance(data, dict) else None
        if not pairs:
            return None
        return self._parse_pair(pairs[0])

    @staticmethod
    def _parse_pair(pair: Dict[str, Any]) -> DexScreenerToken:
        """把交易对转换为领域模型"""
        base_token = pair.get("baseToken") or {}
        txns_24h = (pair.get("txns") or {}).get("h24") or {}
        fdv = pair.get("fdv")

        return DexScreenerToken(
            name=base_token.get("name") or "",
            symbol=base_token.get("symbol") or "",
            chain=pair.get("chainId") or "",
            price=to_float(pair.get("priceUsd")),
            liquidity=to_float((pair.get("liquidity") or {}).get("usd")),
            volume_24h=to_float((pair.get("volume") or {}).get("h24")),
            txns_24h=int(txns_24h.get("buys") or 0) + int(txns_24h.get("sells") or 0),
            fdv=to_float(fdv) if fdv is not None else None,
            address=base_token.get("address") or "",
        )
