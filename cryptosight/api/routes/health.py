"""
健康检查路由 - 系统状态监控 API
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from cryptosight.api.dependencies import ServiceContainer, get_container
from cryptosight.api.schemas import HealthResponse


router = APIRouter(tags=["Health"])


@router.get(
    "/",
    summary="API 根节点",
    description="服务存活即返回 OK"
)
async def root():
    """API 根节点"""
    return {"status": "OK"}


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="健康检查",
    description="检查服务及其组件的状态，附带缓存统计"
)
async def health_check(container: ServiceContainer = Depends(get_container)) -> HealthResponse:
    """健康检查"""
    components = {}

    # 检查时间服务
    try:
        container.time_adapter.get_current_datetime()
        components["time_service"] = "healthy"
    except Exception:
        components["time_service"] = "unhealthy"

    components["telegram"] = "running" if container.bot.running else "disabled"

    overall_status = "healthy" if components["time_service"] == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(),
        version=container.settings.APP_VERSION,
        components=components,
        cache=container.cache.get_stats_dict(),
    )


@router.get(
    "/ready",
    summary="就绪检查",
    description="检查服务是否准备好接收请求（用于 Kubernetes 就绪探针）"
)
async def readiness_check():
    """就绪检查"""
    return {"ready": True}


@router.get(
    "/live",
    summary="存活检查",
    description="检查服务是否存活（用于 Kubernetes 存活探针）"
)
async def liveness_check():
    """存活检查"""
    return {"alive": True}
