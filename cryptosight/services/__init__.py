"""
服务层 - 用例共享的数据聚合与 LLM 解读
"""

from cryptosight.services.token_service import TokenService
from cryptosight.services.insight_service import InsightService

__all__ = [
    "TokenService",
    "InsightService",
]
