"""
LLM 适配器 - 实现 LLMPort

使用 LiteLLM 调用托管模型（默认 Gemini）。
提示词由调用方（路由器、提取器、用例）负责，这里只负责传输。
"""

import asyncio
from typing import Optional

from litellm import acompletion

from cryptosight.infrastructure.logging import log_async_performance
from cryptosight.ports.interfaces import LLMPort, LLMUnavailableError


class LiteLLMAdapter(LLMPort):
    """
    LiteLLM 适配器

    每次调用都有独立超时；任何失败都转换为 LLMUnavailableError。
    """

    def __init__(
        self,
        model: str = "gemini/gemini-1.5-flash",
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        temperature: float = 0.2,
        timeout: float = 30.0,
    ):
        """
        初始化适配器

        Args:
            model: LiteLLM 模型路由（provider/model）
            api_key: API 密钥
            api_base: API 基础 URL（可选）
            temperature: 默认温度
            timeout: 单次调用超时（秒）
        """
        self.model = model
        self.api_key = api_key
        self.api_base = api_base
        self.temperature = temperature
        self.timeout = timeout

    @log_async_performance()
    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """调用 LLM 并返回文本"""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await asyncio.wait_for(
                acompletion(
                    model=self.model,
                    messages=messages,
                    temperature=self.temperature if temperature is None else temperature,
                    api_key=self.api_key,
                    api_base=self.api_base,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise LLMUnavailableError(f"LLM 调用超时（{self.timeout}秒）", source=self.model)
        except Exception as e:
            raise LLMUnavailableError(f"LLM 调用失败: {e}", source=self.model)

        content = response.choices[0].message.content
        if not content:
            raise LLMUnavailableError("LLM 返回了空内容", source=self.model)
        return content
