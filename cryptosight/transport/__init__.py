"""
通道层 - 聊天平台接入
"""

from cryptosight.transport.telegram import TelegramBotClient, build_router, message_context

__all__ = [
    "TelegramBotClient",
    "build_router",
    "message_context",
]
