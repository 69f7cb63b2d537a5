"""
表现层 - 回复文本与格式化

负责把代币数据和 LLM 输出转换为聊天回复。

包含：
- formatters: 金额格式化、Markdown/代码块清理
- messages: 固定提示语与代币数据模板
"""

from cryptosight.presentation.formatters import (
    clean_json_block,
    clean_markdown_formatting,
    format_compact,
    format_currency,
    format_percent,
)
from cryptosight.presentation.messages import (
    HELP_MESSAGE,
    WELCOME_MESSAGE,
    render_address_reply,
    render_price_reply,
)

__all__ = [
    "clean_json_block",
    "clean_markdown_formatting",
    "format_compact",
    "format_currency",
    "format_percent",
    "HELP_MESSAGE",
    "WELCOME_MESSAGE",
    "render_address_reply",
    "render_price_reply",
]
