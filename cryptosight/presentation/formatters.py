"""
文本格式化工具

- 金额格式化
- 清理 LLM 输出中的 Markdown 标记（Telegram 以纯文本发送）
- 去掉 LLM 包裹在 JSON 外面的代码块
"""

import re
from typing import Optional


_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def format_currency(value: Optional[float]) -> str:
    """
    格式化美元金额

    >= 1 保留两位小数并加千分位；< 1 的小币价保留 4 位有效数字。
    """
    if value is None:
        return "N/A"
    if value == 0:
        return "$0.00"
    if abs(value) >= 1:
        return f"${value:,.2f}"
    return f"${value:.4g}" if abs(value) >= 1e-4 else f"${value:.4e}"


def format_compact(value: Optional[float]) -> str:
    """大额金额的紧凑写法，如 $1.23B"""
    if value is None:
        return "N/A"
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            return f"${value / threshold:.2f}{suffix}"
    return format_currency(value)


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:+.2f}%"


def clean_json_block(raw: str) -> str:
    """去掉 ```json ... ``` 包裹"""
    cleaned = _FENCE_OPEN.sub("", raw.strip())
    return _FENCE_CLOSE.sub("", cleaned).strip()


def clean_markdown_formatting(text: str) -> str:
    """去掉粗体、斜体、标题、代码块与列表标记"""
    cleaned = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    cleaned = re.sub(r"\*(.*?)\*", r"\1", cleaned)
    cleaned = re.sub(r"#{1,6}\s+", "", cleaned)
    cleaned = re.sub(r"```[\s\S]*?```", "", cleaned)
    cleaned = re.sub(r"`(.*?)`", r"\1", cleaned)
    cleaned = re.sub(r"^\s*[-*+]\s+", "", cleaned, flags=re.MULTILINE)
    cleaned = re.sub(r"^\s*\d+\.\s+", "", cleaned, flags=re.MULTILINE)
    return cleaned.strip()
