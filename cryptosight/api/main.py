"""
CryptoSight API - 主应用入口

HTTP 服务与 Telegram 机器人运行在同一进程：
- 查询日志只读接口（/analyze、/price）
- 健康检查与缓存统计
- 生命周期内启动缓存清理与 Telegram 长轮询
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cryptosight.api.dependencies import ServiceContainer, get_service_container
from cryptosight.api.routes import health_router, queries_router
from cryptosight.api.schemas import ErrorResponse
from cryptosight.infrastructure.security import SecurityHeadersMiddleware


logger = logging.getLogger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    创建 FastAPI 应用实例

    Args:
        container: 服务容器（测试时注入，默认使用进程单例）
    """
    container = container or get_service_container()
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        logger.info(f"{settings.APP_NAME} 正在启动...")
        await container.startup()

        yield

        logger.info(f"{settings.APP_NAME} 正在关闭...")
        await container.shutdown()

    app = FastAPI(
        title=settings.APP_NAME,
        description="加密货币聊天机器人的查询日志 API",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.container = container

    # CORS 中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # 安全头中间件
    app.add_middleware(SecurityHeadersMiddleware)

    # 请求日志中间件
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{request_id}] 错误 - {duration:.2f}ms - {e}")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"[{request_id}] 完成 {response.status_code} - {duration:.2f}ms",
            extra={'request_id': request_id, 'duration_ms': duration},
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.2f}ms"
        return response

    # 全局异常处理
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"未处理的异常: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal Server Error").model_dump(),
        )

    # 注册路由
    app.include_router(health_router)
    app.include_router(queries_router)

    return app
