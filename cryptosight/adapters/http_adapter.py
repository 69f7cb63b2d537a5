"""
HTTP 适配器基类

封装 httpx.AsyncClient：统一超时、错误转换和 JSON 解析。
"""

from typing import Any, Dict, Optional
import logging

import httpx

from cryptosight.ports.interfaces import DataUnavailableError


logger = logging.getLogger(__name__)


class AsyncHttpAdapter:
    """
    异步 HTTP 适配器基类

    子类设置 source 名称并通过 _get_json 访问数据源。
    传输错误、非 2xx 状态和非 JSON 响应统一转换为 DataUnavailableError。
    """

    source = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        初始化适配器

        Args:
            base_url: 数据源根地址
            timeout: 单次请求超时（秒）
            client: 外部注入的 httpx 客户端（测试用）
        """
        self.base_url = base_url
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET 并解析 JSON"""
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise DataUnavailableError(f"请求 {path} 超时: {e}", source=self.source)
        except httpx.HTTPError as e:
            raise DataUnavailableError(f"请求 {path} 失败: {e}", source=self.source)
        except ValueError as e:
            raise DataUnavailableError(f"{path} 返回了无效 JSON: {e}", source=self.source)

    async def aclose(self) -> None:
        """关闭底层连接池"""
        await self._client.aclose()


def to_float(value: Any, default: float = 0.0) -> float:
    """把数据源返回的数字或数字字符串转为 float"""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
