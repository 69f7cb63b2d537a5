"""
CryptoSight - 加密货币聊天助手

基于 Clean/Hex 六边形架构构建，提供：
- 合约地址分析（LLM 解读 + 安全评分）
- 代币价格查询
- 代币推荐与对比
- 市场趋势总结
- 通用加密货币问答

架构层次：
- domain: 核心领域模型
- ports: 端口接口定义
- adapters: 外部服务适配器
- services: 数据聚合与 LLM 解读
- use_cases: 每种意图一个回复用例
- orchestrator: 意图路由、符号提取与分发
- presentation: 回复文本
- infrastructure: 基础设施（日志、缓存、配置）
- transport: Telegram 通道
- api: FastAPI 路由

快速开始：
```python
from cryptosight import create_app

app = create_app()
```
"""

__version__ = "1.0.0"

# 核心领域模型
from cryptosight.domain.models import (
    BotReply,
    Intent,
    MessageContext,
    RouteDecision,
)

# 编排器
from cryptosight.orchestrator import (
    IntentRouter,
    Orchestrator,
    SymbolExtractor,
    create_orchestrator,
)

# API 应用
from cryptosight.api import create_app

__all__ = [
    "__version__",
    "BotReply",
    "Intent",
    "MessageContext",
    "RouteDecision",
    "IntentRouter",
    "Orchestrator",
    "SymbolExtractor",
    "create_orchestrator",
    "create_app",
]
