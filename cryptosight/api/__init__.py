"""
API 层 - FastAPI HTTP 接口

包含：
- create_app: 应用工厂
- ServiceContainer: 服务容器
"""

from cryptosight.api.dependencies import ServiceContainer, get_service_container
from cryptosight.api.main import create_app

__all__ = [
    "ServiceContainer",
    "create_app",
    "get_service_container",
]
