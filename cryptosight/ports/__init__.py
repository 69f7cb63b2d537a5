"""
端口层 - 定义与外部世界交互的接口

遵循依赖倒置原则，用例层只依赖这些抽象接口，
具体实现由适配器层提供。

包含：
- DexDataPort: 链上流动性数据接口
- MarketDataPort: 行情数据接口
- LLMPort: LLM 服务接口
- QueryLogPort: 查询日志接口
- TimePort: 时间服务接口
"""

from cryptosight.ports.interfaces import (
    DataUnavailableError,
    DexDataPort,
    LLMPort,
    LLMUnavailableError,
    MarketDataPort,
    PortError,
    QueryLogPort,
    TimePort,
)

__all__ = [
    "DataUnavailableError",
    "DexDataPort",
    "LLMPort",
    "LLMUnavailableError",
    "MarketDataPort",
    "PortError",
    "QueryLogPort",
    "TimePort",
]
