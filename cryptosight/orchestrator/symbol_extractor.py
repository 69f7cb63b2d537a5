"""
代币符号提取器 - 从自由文本中识别提到的代币

远程调用返回字符串列表，规范化后得到去重的大写符号集合。
已知符号列表只作为消歧提示，不做硬过滤。
"""

import logging
from typing import Iterable, List, Optional, Sequence

from pydantic import StrictStr, TypeAdapter, ValidationError

from cryptosight.domain.models import SymbolSet
from cryptosight.ports.interfaces import LLMPort
from cryptosight.presentation.formatters import clean_json_block


logger = logging.getLogger(__name__)

_SYMBOL_LIST = TypeAdapter(List[StrictStr])

EMPTY_SYMBOLS: SymbolSet = frozenset()


def normalize_symbols(raw_symbols: Iterable[str]) -> SymbolSet:
    """去掉 $ 前缀、转大写、丢弃空串"""
    symbols = (s.strip().lstrip("$").strip().upper() for s in raw_symbols)
    return frozenset(s for s in symbols if s)


class SymbolExtractor:
    """
    代币符号提取器

    extract() 对任意输入都返回集合：远程失败或响应无效时返回空集合。
    """

    # 提示词中最多附带的参考符号数量
    MAX_REFERENCE_SYMBOLS = 500

    SYSTEM_PROMPT = "You extract cryptocurrency ticker symbols from user messages."

    EXTRACTION_PROMPT = """List every cryptocurrency token the message mentions, as ticker symbols.

Known symbols (for disambiguation; you may also recognize tokens not listed): {known}

Respond ONLY with a raw JSON array of uppercase symbols without the "$" sign, for example ["BTC", "ETH"].
Respond with [] if no token is mentioned.

Message: {message}"""

    def __init__(self, llm_port: LLMPort):
        self.llm = llm_port

    async def extract(self, text: str, known_symbols: Optional[Sequence[str]] = None) -> SymbolSet:
        """
        提取消息中的代币符号

        Args:
            text: 用户消息
            known_symbols: 已知符号列表（提示用）

        Returns:
            SymbolSet: 规范化后的符号集合，可能为空
        """
        message = (text or "").strip()
        if not message:
            return EMPTY_SYMBOLS

        known = ", ".join(list(known_symbols or [])[:self.MAX_REFERENCE_SYMBOLS]) or "(none)"

        try:
            raw = await self.llm.complete(
                self.EXTRACTION_PROMPT.format(known=known, message=message),
                system=self.SYSTEM_PROMPT,
                temperature=0.0,
            )
        except Exception as e:
            logger.warning(f"符号提取调用失败，返回空集合: {e}")
            return EMPTY_SYMBOLS

        symbols = self.parse_response(raw)
        if symbols is None:
            logger.warning(f"符号提取响应无效，返回空集合: {raw!r:.200}")
            return EMPTY_SYMBOLS

        logger.debug(f"提取到符号: {sorted(symbols)}")
        return symbols

    @staticmethod
    def parse_response(raw: Optional[str]) -> Optional[SymbolSet]:
        """解码为规范化的符号集合；结构不符时返回 None"""
        if not raw or not isinstance(raw, str):
            return None
        try:
            return normalize_symbols(_SYMBOL_LIST.validate_json(clean_json_block(raw)))
        except ValidationError:
            return None
