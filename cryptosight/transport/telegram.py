"""
Telegram 通道 - aiogram 3 长轮询

消息流程：文本消息 -> "正在输入" -> Orchestrator -> 回复。
"""

import asyncio
import logging
from typing import Optional

from aiogram import Bot, Dispatcher, F, Router
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from cryptosight.domain.models import MessageContext
from cryptosight.infrastructure.errors import ConfigurationError
from cryptosight.orchestrator.orchestrator import Orchestrator
from cryptosight.presentation.messages import HELP_MESSAGE, PROCESSING_FAILED, WELCOME_MESSAGE


logger = logging.getLogger(__name__)


def message_context(message: Message) -> MessageContext:
    """aiogram 消息 -> 领域消息上下文"""
    return MessageContext(
        text=message.text or "",
        user_id=str(message.from_user.id) if message.from_user else None,
        chat_id=message.chat.id,
        received_at=message.date,
    )


def build_router(orchestrator: Orchestrator) -> Router:
    """注册 /start、/help 与文本消息处理"""
    router = Router(name="cryptosight")

    @router.message(CommandStart())
    async def handle_start(message: Message) -> None:
        await message.answer(WELCOME_MESSAGE)

    @router.message(Command("help"))
    async def handle_help(message: Message) -> None:
        await message.answer(HELP_MESSAGE)

    @router.message(F.text)
    async def handle_text(message: Message) -> None:
        try:
            await message.bot.send_chat_action(message.chat.id, ChatAction.TYPING)
        except TelegramAPIError as e:
            logger.debug(f"发送输入状态失败: {e}")

        try:
            reply = await orchestrator.handle_message(message_context(message))
            await message.answer(reply.text)
        except Exception as e:
            logger.error(f"处理 Telegram 消息失败: {e}", exc_info=True)
            await message.answer(PROCESSING_FAILED)

    return router


class TelegramBotClient:
    """
    Telegram 机器人客户端

    start() 在后台任务中开始长轮询，stop() 停止轮询并关闭会话。
    """

    def __init__(self, token: Optional[str], orchestrator: Orchestrator):
        self.token = token
        self.dispatcher = Dispatcher()
        self.dispatcher.include_router(build_router(orchestrator))
        self.bot: Optional[Bot] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """
        启动长轮询

        Raises:
            ConfigurationError: 未配置 TELEGRAM_BOT_TOKEN
        """
        if not self.token:
            raise ConfigurationError("未配置 Telegram 机器人令牌", setting="TELEGRAM_BOT_TOKEN")
        if self.running:
            return

        self.bot = Bot(token=self.token)
        self._task = asyncio.create_task(
            self.dispatcher.start_polling(self.bot, handle_signals=False)
        )
        logger.info("Telegram 长轮询已启动")

    async def stop(self) -> None:
        """停止长轮询并关闭 HTTP 会话"""
        if self._task is not None:
            if self.running:
                try:
                    await self.dispatcher.stop_polling()
                except RuntimeError as e:
                    # 轮询尚未真正开始，直接取消任务
                    logger.debug(f"停止轮询失败，取消任务: {e}")
                    self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.warning(f"Telegram 轮询任务退出异常: {e}")
            self._task = None

        if self.bot is not None:
            await self.bot.session.close()
            self.bot = None
            logger.info("Telegram 长轮询已停止")
