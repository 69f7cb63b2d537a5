"""
依赖注入 - FastAPI 依赖配置

集中管理所有服务的创建和注入，
确保单一实例和正确的生命周期管理。
"""

from functools import lru_cache
from typing import Optional
import logging

from fastapi import Request

from cryptosight.adapters import (
    CoinGeckoAdapter,
    DexScreenerAdapter,
    JsonlQueryLogAdapter,
    LiteLLMAdapter,
    SystemTimeAdapter,
)
from cryptosight.infrastructure.cache import CacheConfig, CacheSweeper, ExpiringCache
from cryptosight.infrastructure.config import Settings, get_settings
from cryptosight.orchestrator import Orchestrator, create_orchestrator
from cryptosight.ports.interfaces import QueryLogPort
from cryptosight.transport.telegram import TelegramBotClient


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    服务容器 - 管理所有服务实例

    进程内只有一个缓存实例，由容器创建并注入编排器。
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[ExpiringCache] = None,
        query_log: Optional[QueryLogPort] = None,
    ):
        self.settings = settings

        self._cache = cache or ExpiringCache(CacheConfig(
            max_size=settings.CACHE_MAX_SIZE,
            sweep_interval=settings.CACHE_SWEEP_INTERVAL,
        ))
        self._sweeper = CacheSweeper(self._cache)

        # 初始化适配器
        self._dex = DexScreenerAdapter(timeout=settings.HTTP_TIMEOUT)
        self._market_data = CoinGeckoAdapter(timeout=settings.HTTP_TIMEOUT)
        self._llm = LiteLLMAdapter(
            model=settings.llm_model_route,
            api_key=settings.LLM_API_KEY,
            api_base=settings.LLM_API_BASE,
            temperature=settings.LLM_TEMPERATURE,
            timeout=settings.LLM_TIMEOUT,
        )
        self._query_log = query_log or JsonlQueryLogAdapter(settings.QUERY_LOG_PATH)
        self._time = SystemTimeAdapter()

        # 初始化编排器
        self._orchestrator = create_orchestrator(
            dex_port=self._dex,
            market_data_port=self._market_data,
            llm_port=self._llm,
            query_log_port=self._query_log,
            time_port=self._time,
            cache=self._cache,
        )

        self._bot = TelegramBotClient(settings.TELEGRAM_BOT_TOKEN, self._orchestrator)

    @property
    def cache(self) -> ExpiringCache:
        return self._cache

    @property
    def query_log(self) -> QueryLogPort:
        return self._query_log

    @property
    def orchestrator(self) -> Orchestrator:
        return self._orchestrator

    @property
    def time_adapter(self) -> SystemTimeAdapter:
        return self._time

    @property
    def bot(self) -> TelegramBotClient:
        return self._bot

    async def startup(self) -> None:
        """启动缓存清理与聊天长轮询"""
        self.settings.validate()
        self._sweeper.start()
        if self.settings.TELEGRAM_BOT_TOKEN:
            await self._bot.start()
        else:
            logger.warning("未配置 TELEGRAM_BOT_TOKEN，仅启动 HTTP 服务")

    async def shutdown(self) -> None:
        """停止后台任务并关闭 HTTP 客户端"""
        await self._bot.stop()
        await self._sweeper.stop()
        await self._dex.aclose()
        await self._market_data.aclose()


@lru_cache()
def get_service_container() -> ServiceContainer:
    """
    获取服务容器单例

    使用 lru_cache 确保只创建一次
    """
    return ServiceContainer(get_settings())


def get_container(request: Request) -> ServiceContainer:
    """FastAPI 依赖：当前应用的服务容器"""
    return request.app.state.container


def get_query_log(request: Request) -> QueryLogPort:
    """FastAPI 依赖：查询日志"""
    return get_container(request).query_log


def get_cache(request: Request) -> ExpiringCache:
    """FastAPI 依赖：进程内缓存"""
    return get_container(request).cache


def get_app_settings(request: Request) -> Settings:
    """FastAPI 依赖：应用配置"""
    return get_container(request).settings
