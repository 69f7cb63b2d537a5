"""
应用配置 - 从环境变量读取

启动时加载 .env，缺少凭据只产生警告，不阻止进程启动。
"""

from functools import lru_cache
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """应用配置"""

    def __init__(self):
        # 基本配置
        self.APP_NAME: str = "CryptoSight"
        self.APP_VERSION: str = "1.0.0"
        self.DEBUG: bool = _env_bool('DEBUG')

        # 服务配置
        self.HOST: str = os.getenv('HOST', '0.0.0.0')
        self.PORT: int = int(os.getenv('PORT', '3000'))
        self.CORS_ORIGINS: List[str] = os.getenv('CORS_ORIGINS', '*').split(',')

        # 日志
        self.LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_JSON: bool = _env_bool('LOG_JSON')

        # 聊天通道
        self.TELEGRAM_BOT_TOKEN: Optional[str] = os.getenv('TELEGRAM_BOT_TOKEN') or None

        # LLM 配置
        self.LLM_PROVIDER: str = os.getenv('LLM_PROVIDER', 'gemini')
        self.LLM_MODEL: str = os.getenv('LLM_MODEL', 'gemini-1.5-flash')
        self.LLM_API_KEY: Optional[str] = (
            os.getenv('LLM_API_KEY') or os.getenv('GEMINI_API_KEY') or None
        )
        self.LLM_API_BASE: Optional[str] = os.getenv('LLM_API_BASE') or None
        self.LLM_TEMPERATURE: float = float(os.getenv('LLM_TEMPERATURE', '0.2'))

        # 超时配置（秒）
        self.LLM_TIMEOUT: float = float(os.getenv('LLM_TIMEOUT', '30'))
        self.HTTP_TIMEOUT: float = float(os.getenv('HTTP_TIMEOUT', '15'))

        # 存储与缓存
        self.QUERY_LOG_PATH: str = os.getenv('QUERY_LOG_PATH', 'data/query_log.jsonl')
        self.CACHE_SWEEP_INTERVAL: float = float(os.getenv('CACHE_SWEEP_INTERVAL', '60'))
        self.CACHE_MAX_SIZE: int = int(os.getenv('CACHE_MAX_SIZE', '10000'))

    @property
    def llm_model_route(self) -> str:
        """LiteLLM 模型路由，如 gemini/gemini-1.5-flash"""
        if self.LLM_PROVIDER:
            return f"{self.LLM_PROVIDER}/{self.LLM_MODEL}"
        return self.LLM_MODEL

    def validate(self) -> List[str]:
        """检查必要配置，返回警告列表"""
        warnings = []
        if not self.TELEGRAM_BOT_TOKEN:
            warnings.append("TELEGRAM_BOT_TOKEN 未配置，聊天机器人不会启动")
        if not self.LLM_API_KEY:
            warnings.append("GEMINI_API_KEY / LLM_API_KEY 未配置，LLM 调用将失败并走兜底逻辑")
        for warning in warnings:
            logger.warning(f"环境配置警告: {warning}")
        return warnings


@lru_cache()
def get_settings() -> Settings:
    """获取应用配置"""
    return Settings()
