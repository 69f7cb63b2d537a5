"""
测试配置 - pytest 配置和公共 fixtures
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, Mock

from cryptosight.domain.models import (
    CoinGeckoToken,
    DexScreenerToken,
    MarketOverview,
    MessageContext,
    TrendingToken,
)
from cryptosight.infrastructure.cache import ExpiringCache


PEPE_ADDRESS = "0x6982508145454Ce325dDbE47a25d4ec3d2311933"


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ==================== Fixtures ====================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """使用模拟时钟的缓存"""
    return ExpiringCache(clock=clock)


@pytest.fixture
def message_context():
    """模拟聊天消息上下文"""
    return MessageContext(
        text="What's the price of $PEPE?",
        user_id="42",
        chat_id=42,
        received_at=datetime(2024, 5, 1, 12, 0, 0),
    )


@pytest.fixture
def pepe_dex_token():
    """模拟 DexScreener 交易对"""
    return DexScreenerToken(
        name="Pepe",
        symbol="PEPE",
        chain="ethereum",
        price=0.00001234,
        liquidity=35_000_000.0,
        volume_24h=12_500_000.0,
        txns_24h=8123,
        fdv=5_200_000_000.0,
        address=PEPE_ADDRESS,
    )


@pytest.fixture
def pepe_gecko_token():
    """模拟 CoinGecko 行情"""
    return CoinGeckoToken(
        name="Pepe",
        symbol="PEPE",
        price=0.0000125,
        volume_24h=480_000_000.0,
        market_cap=5_250_000_000.0,
    )


@pytest.fixture
def trending_tokens():
    """模拟热门代币"""
    return [
        TrendingToken(name="Pepe", symbol="PEPE", market_cap_rank=24, price_usd=0.0000125, price_change_24h=5.2),
        TrendingToken(name="Bonk", symbol="BONK", market_cap_rank=56, price_usd=0.000021, price_change_24h=-1.4),
    ]


@pytest.fixture
def market_overview():
    """模拟全市场概览"""
    return MarketOverview(
        total_market_cap_usd=2.45e12,
        total_volume_usd=9.8e10,
        market_cap_change_24h=1.7,
        btc_dominance=52.3,
        eth_dominance=16.9,
        active_cryptocurrencies=12000,
    )


@pytest.fixture
def mock_dex_port(pepe_dex_token):
    """模拟 DexScreener 端口"""
    port = Mock()
    port.get_token_by_address = AsyncMock(return_value=pepe_dex_token)
    port.get_token_by_symbol = AsyncMock(return_value=pepe_dex_token)
    return port


@pytest.fixture
def mock_market_data_port(pepe_gecko_token, trending_tokens, market_overview):
    """模拟 CoinGecko 端口"""
    port = Mock()
    port.get_token_price = AsyncMock(return_value=pepe_gecko_token)
    port.get_trending_tokens = AsyncMock(return_value=trending_tokens)
    port.get_token_list = AsyncMock(return_value=["BTC", "ETH", "PEPE", "BONK"])
    port.get_market_overview = AsyncMock(return_value=market_overview)
    return port


@pytest.fixture
def mock_llm_port():
    """模拟 LLM 端口"""
    port = Mock()
    port.complete = AsyncMock(return_value="LLM answer")
    return port


@pytest.fixture
def mock_query_log_port():
    """模拟查询日志端口"""
    port = Mock()
    port.log_query = AsyncMock(return_value=None)
    port.get_recent_queries = AsyncMock(return_value=[])
    return port


@pytest.fixture
def mock_time_port():
    """模拟时间端口"""
    port = Mock()
    port.get_current_datetime.return_value = datetime(2024, 5, 1, 12, 0, 0)
    port.get_date.return_value = "2024-05-01"
    return port
