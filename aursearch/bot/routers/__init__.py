from aiogram import Router

from aursearch.bot.routers import commands, inline


def setup_routers() -> Router:
    router = Router()
    router.include_router(commands.router)
    router.include_router(inline.router)
    return router


__all__ = ["setup_routers"]
