"""
适配器层 - 端口接口的具体实现

将外部服务（DexScreener, CoinGecko, LiteLLM 等）
适配为标准的端口接口。

包含：
- DexScreenerAdapter: 链上流动性数据适配器
- CoinGeckoAdapter: 行情数据适配器
- LiteLLMAdapter: LiteLLM 服务适配器
- JsonlQueryLogAdapter: 查询日志存储适配器
- SystemTimeAdapter: 系统时间适配器
"""

from cryptosight.adapters.dexscreener_adapter import DexScreenerAdapter
from cryptosight.adapters.coingecko_adapter import CoinGeckoAdapter
from cryptosight.adapters.llm_adapter import LiteLLMAdapter
from cryptosight.adapters.query_log_adapter import JsonlQueryLogAdapter
from cryptosight.adapters.system_time_adapter import SystemTimeAdapter

__all__ = [
    "DexScreenerAdapter",
    "CoinGeckoAdapter",
    "LiteLLMAdapter",
    "JsonlQueryLogAdapter",
    "SystemTimeAdapter",
]
