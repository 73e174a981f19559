"""Log unhandled update errors and notify the administrator."""

from __future__ import annotations

import traceback

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update

from aursearch.bot.utils.telegram import bot_send_with_retry
from aursearch.config import BotSettings
from aursearch.logging import logger

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 2400
_UPDATE_FIELDS = ("inline_query", "message", "chosen_inline_result", "callback_query")


class ErrorMonitor:
    """``handle_error`` is registered on the aiogram error observer."""

    def __init__(self, settings: BotSettings) -> None:
        self._settings = settings

    async def handle_error(self, event: ErrorEvent, bot: Bot):
        update_type, actor_id = self._describe_update(event.update)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=getattr(event.update, "update_id", None),
            update_type=update_type,
            user_id=actor_id,
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        try:
            await bot_send_with_retry(
                bot,
                chat_id=admin_id,
                text=self._build_message(event, update_type, actor_id),
                parse_mode=None,
            )
        except Exception:
            logger.exception(
                "error_monitor_notification_failed",
                update_id=getattr(event.update, "update_id", None),
            )
        return UNHANDLED

    def _build_message(self, event: ErrorEvent, update_type: str, actor_id: int | None) -> str:
        exception = event.exception
        lines = [
            "BOT ERROR DETECTED",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(event.update, 'update_id', 'unknown')}",
            f"Update Type: {update_type}",
            f"User: {actor_id if actor_id is not None else 'unknown'}",
        ]
        inline_query = getattr(event.update, "inline_query", None)
        if inline_query is not None:
            lines.append(f"Query: {inline_query.query!r} (offset {inline_query.offset!r})")

        trace = "".join(
            traceback.format_exception(exception.__class__, exception, exception.__traceback__)
        ).strip()
        if trace:
            lines.extend(["", "Traceback:", self._truncate(trace, TRACEBACK_CHAR_LIMIT)])
        return self._truncate("\n".join(lines), TELEGRAM_MESSAGE_LIMIT)

    @staticmethod
    def _describe_update(update: Update | None) -> tuple[str, int | None]:
        if update is None:
            return "unknown", None
        for field in _UPDATE_FIELDS:
            value = getattr(update, field, None)
            if value is not None:
                user = getattr(value, "from_user", None)
                return field, getattr(user, "id", None)
        return "unknown", None

    @staticmethod
    def _truncate(value: str, limit: int) -> str:
        value = value.strip()
        if len(value) <= limit:
            return value
        return f"{value[: limit - 15].rstrip()}\n...[truncated]"


__all__ = ["ErrorMonitor"]
