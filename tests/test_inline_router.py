"""Tests for the aiogram inline query entrypoint."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.methods import AnswerInlineQuery

from aursearch.bot.routers import inline as inline_router
from aursearch.bot.routers.inline import build_results, handle_inline_query
from aursearch.domain.models import InlineResultEntry, ResultBatch


class DummyInlineQuery:
    def __init__(self, query: str = "vim", offset: str = "", user_id: int = 7) -> None:
        self.id = "iq-1"
        self.query = query
        self.offset = offset
        self.from_user = SimpleNamespace(id=user_id, language_code="en")
        self.answers: list[tuple[list, dict]] = []

    async def answer(self, results, **kwargs):
        self.answers.append((results, kwargs))
        return True


class RecordingSearchHandler:
    def __init__(self, batch: ResultBatch | None) -> None:
        self.batch = batch
        self.queries = []

    def clock(self) -> float:
        return 12.5

    async def handle(self, query):
        self.queries.append(query)
        return self.batch


def _batch() -> ResultBatch:
    entry = InlineResultEntry(
        id="abc",
        title="vim 9.1",
        description="Vi Improved",
        payload="<b>vim</b>",
        url="https://www.vim.org",
        page_url="https://aur.archlinux.org/packages/vim",
        position=0,
    )
    return ResultBatch(entries=(entry,), next_offset="50", cache_time=300, total=60)


@pytest.mark.asyncio
async def test_inline_query_answers_with_batch():
    inline_query = DummyInlineQuery(query="!m alice", offset="50")
    search_handler = RecordingSearchHandler(_batch())

    await handle_inline_query(inline_query, search_handler)

    query = search_handler.queries[0]
    assert query.term == "alice"
    assert query.mode == "maintainer"
    assert query.offset == 50
    assert query.requester_id == 7
    assert query.received_at == 12.5

    results, kwargs = inline_query.answers[0]
    assert kwargs["cache_time"] == 300
    assert kwargs["next_offset"] == "50"
    assert kwargs["button"] is None
    assert results[0].id == "abc"
    assert results[0].title == "vim 9.1"


@pytest.mark.asyncio
async def test_inline_query_without_batch_is_not_answered():
    inline_query = DummyInlineQuery()

    await handle_inline_query(inline_query, RecordingSearchHandler(None))

    assert inline_query.answers == []


@pytest.mark.asyncio
async def test_placeholder_with_button():
    inline_query = DummyInlineQuery(query="")
    batch = ResultBatch.placeholder_for("Type to search", cache_time=5, button_text="Type to search")

    await handle_inline_query(inline_query, RecordingSearchHandler(batch))

    results, kwargs = inline_query.answers[0]
    assert kwargs["button"].text == "Type to search"
    assert kwargs["button"].start_parameter == "start"
    assert kwargs["next_offset"] == ""
    assert results[0].input_message_content.parse_mode is None
    assert results[0].reply_markup is None


@pytest.mark.asyncio
async def test_rejected_answer_is_logged_not_raised(monkeypatch):
    inline_query = DummyInlineQuery()

    async def failing_answer(results, **kwargs):
        raise TelegramBadRequest(
            method=AnswerInlineQuery(inline_query_id="iq-1", results=[]),
            message="query is too old and response timeout expired",
        )

    inline_query.answer = failing_answer
    events = []
    monkeypatch.setattr(
        inline_router,
        "logger",
        SimpleNamespace(warning=lambda event, **kw: events.append((event, kw))),
    )

    await handle_inline_query(inline_query, RecordingSearchHandler(_batch()))

    assert events and events[0][0] == "inline_answer_rejected"


def test_build_results_renders_articles():
    (article,) = build_results(_batch())

    assert article.description == "Vi Improved"
    assert article.input_message_content.message_text == "<b>vim</b>"
    assert article.input_message_content.parse_mode == ParseMode.HTML
    assert article.input_message_content.link_preview_options.is_disabled is True
    button = article.reply_markup.inline_keyboard[0][0]
    assert button.url == "https://aur.archlinux.org/packages/vim"
