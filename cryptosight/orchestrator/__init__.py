"""
编排层 - 消息路由与用例调度

负责：
1. 意图识别与路由
2. 代币符号提取
3. 用例调度

包含：
- IntentRouter: LLM 分类 + 固定兜底
- SymbolExtractor: 代币符号提取
- Orchestrator: 统一编排器
- create_orchestrator: 工厂函数
"""

from cryptosight.orchestrator.router import IntentRouter
from cryptosight.orchestrator.symbol_extractor import SymbolExtractor, normalize_symbols
from cryptosight.orchestrator.orchestrator import Orchestrator, create_orchestrator

__all__ = [
    "IntentRouter",
    "SymbolExtractor",
    "normalize_symbols",
    "Orchestrator",
    "create_orchestrator",
]
