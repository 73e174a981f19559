"""Private chat commands."""

from __future__ import annotations

from aiogram import Router
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandStart
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, LinkPreviewOptions, Message

from aursearch.bot.utils.telegram import answer_with_retry
from aursearch.domain.models import MAINTAINER_PREFIX
from aursearch.i18n import I18nService

router = Router(name="commands")


def _locale(message: Message) -> str | None:
    return message.from_user.language_code if message.from_user else None


def start_keyboard(i18n: I18nService, locale: str | None) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text=i18n.gettext("start.button.packages", locale=locale),
                    switch_inline_query_current_chat="",
                ),
                InlineKeyboardButton(
                    text=i18n.gettext("start.button.maintainer", locale=locale),
                    switch_inline_query_current_chat=f"{MAINTAINER_PREFIX} ",
                ),
            ]
        ]
    )


@router.message(CommandStart())
async def handle_start(message: Message, i18n: I18nService) -> None:
    locale = _locale(message)
    await answer_with_retry(
        message,
        i18n.gettext("start.greeting", locale=locale),
        parse_mode=ParseMode.HTML,
        link_preview_options=LinkPreviewOptions(is_disabled=True),
        reply_markup=start_keyboard(i18n, locale),
    )


@router.message(Command("help"))
async def handle_help(message: Message, i18n: I18nService) -> None:
    await answer_with_retry(
        message,
        i18n.gettext("help.text", locale=_locale(message)),
        parse_mode=None,
    )


__all__ = ["handle_help", "handle_start", "router", "start_keyboard"]
