"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode
from pydantic import ValidationError

from aursearch.bot.routers import setup_routers
from aursearch.config import BotSettings, get_settings
from aursearch.i18n import I18nService
from aursearch.logging import configure_logging, logger
from aursearch.services.aur import AurClient
from aursearch.services.debounce import QueryDebouncer
from aursearch.services.error_monitor import ErrorMonitor
from aursearch.services.inline_search import InlineSearchHandler
from aursearch.services.mapper import ResultMapper


def build_search_handler(
    settings: BotSettings,
    http_client: httpx.AsyncClient,
    i18n: I18nService,
) -> InlineSearchHandler:
    inline = settings.inline
    return InlineSearchHandler(
        AurClient(http_client, settings=settings.aur),
        ResultMapper(
            base_url=str(settings.aur.base_url),
            description_limit=inline.description_limit,
            page_size=inline.page_size,
            cache_time=inline.cache_time_seconds,
        ),
        QueryDebouncer(
            interval=inline.debounce_interval_seconds,
            ttl=inline.debounce_ttl_seconds,
            max_entries=inline.debounce_max_entries,
        ),
        i18n=i18n,
        error_message_limit=inline.error_message_limit,
        placeholder_cache_time=inline.placeholder_cache_time_seconds,
    )


async def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("settings_invalid", error=str(exc))
        raise SystemExit(1) from exc
    configure_logging(settings.log_level)

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(
        token=settings.telegram_token.get_secret_value(),
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        session=session,
    )
    dp = Dispatcher()
    dp.include_router(setup_routers())
    error_monitor = ErrorMonitor(settings=settings)
    dp.errors.register(error_monitor.handle_error)

    i18n = I18nService(default_locale=settings.default_language)
    async with httpx.AsyncClient(
        headers={"User-Agent": settings.aur.user_agent},
        timeout=settings.aur.request_timeout_seconds,
    ) as http_client:
        search_handler = build_search_handler(settings, http_client, i18n)
        logger.info("bot_starting", environment=settings.environment)
        await dp.start_polling(bot, search_handler=search_handler, i18n=i18n)


if __name__ == "__main__":
    asyncio.run(main())
