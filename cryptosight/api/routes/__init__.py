"""
路由包初始化
"""

from cryptosight.api.routes.health import router as health_router
from cryptosight.api.routes.queries import router as queries_router

__all__ = [
    "health_router",
    "queries_router",
]
