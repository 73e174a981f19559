"""Telegram inline query handlers."""

from __future__ import annotations

from aiogram import Router
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    InlineQuery,
    InlineQueryResultArticle,
    InlineQueryResultsButton,
    InputTextMessageContent,
    LinkPreviewOptions,
)

from aursearch.bot.utils.telegram import answer_inline_with_retry
from aursearch.domain.models import InlineResultEntry, ResultBatch, SearchQuery
from aursearch.logging import logger
from aursearch.services.inline_search import InlineSearchHandler

router = Router(name="inline")
START_PARAMETER = "start"
PACKAGE_PAGE_BUTTON_TEXT = "Open on AUR"


@router.inline_query()
async def handle_inline_query(
    inline_query: InlineQuery,
    search_handler: InlineSearchHandler,
) -> None:
    query = SearchQuery.parse(
        inline_query.query,
        requester_id=inline_query.from_user.id,
        received_at=search_handler.clock(),
        offset=inline_query.offset,
        language_code=inline_query.from_user.language_code,
    )
    batch = await search_handler.handle(query)
    if batch is None:
        return

    button = None
    if batch.button_text:
        button = InlineQueryResultsButton(text=batch.button_text, start_parameter=START_PARAMETER)
    try:
        await answer_inline_with_retry(
            inline_query,
            build_results(batch),
            cache_time=batch.cache_time,
            next_offset=batch.next_offset,
            button=button,
        )
    except TelegramBadRequest as exc:
        # Usually "query is too old": the user moved on before we answered.
        logger.warning(
            "inline_answer_rejected",
            inline_query_id=inline_query.id,
            term=query.term,
            error=str(exc),
        )


def build_results(batch: ResultBatch) -> list[InlineQueryResultArticle]:
    return [_build_article(entry, placeholder=batch.placeholder) for entry in batch.entries]


def _build_article(entry: InlineResultEntry, *, placeholder: bool) -> InlineQueryResultArticle:
    reply_markup = None
    if entry.page_url:
        reply_markup = InlineKeyboardMarkup(
            inline_keyboard=[[InlineKeyboardButton(text=PACKAGE_PAGE_BUTTON_TEXT, url=entry.page_url)]]
        )
    return InlineQueryResultArticle(
        id=entry.id,
        title=entry.title,
        description=entry.description or None,
        input_message_content=InputTextMessageContent(
            message_text=entry.payload,
            parse_mode=None if placeholder else ParseMode.HTML,
            link_preview_options=LinkPreviewOptions(is_disabled=True),
        ),
        reply_markup=reply_markup,
    )


__all__ = ["build_results", "handle_inline_query", "router"]
