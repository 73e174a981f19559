"""Inline query pipeline: debounce, AUR lookup, mapping, placeholders."""

from __future__ import annotations

from time import perf_counter
from typing import Sequence

from aursearch.domain.models import PackageRecord, ResultBatch, SearchQuery
from aursearch.i18n import I18nService
from aursearch.logging import logger
from aursearch.services.aur import AurClient
from aursearch.services.debounce import QueryDebouncer
from aursearch.services.exceptions import ApiError, UpstreamError
from aursearch.services.mapper import ResultMapper
from aursearch.utils.text import sanitize_message


class InlineSearchHandler:
    """Answer one inline query with a result page or a placeholder.

    ``handle`` returns ``None`` when nothing should be sent: the query was
    debounced, or a newer query from the same requester superseded it while
    the lookup was in flight. Every other outcome, failures included, is a
    ``ResultBatch``.
    """

    def __init__(
        self,
        client: AurClient,
        mapper: ResultMapper,
        debouncer: QueryDebouncer,
        *,
        i18n: I18nService | None = None,
        error_message_limit: int = 120,
        placeholder_cache_time: int = 5,
    ) -> None:
        self._client = client
        self._mapper = mapper
        self._debouncer = debouncer
        self.clock = debouncer.clock
        self._i18n = i18n or I18nService()
        self.error_message_limit = error_message_limit
        self.placeholder_cache_time = placeholder_cache_time

    async def handle(self, query: SearchQuery) -> ResultBatch | None:
        if not query.term:
            return self._placeholder(
                "inline.type_to_search",
                query,
                button_text=self._i18n.gettext("inline.type_to_search", locale=query.language_code),
            )

        key = query.dispatch_key
        if not self._debouncer.should_dispatch(query.requester_id, key, query.received_at):
            logger.debug(
                "inline_query_debounced",
                requester_id=query.requester_id,
                term=query.term,
            )
            return None

        started = perf_counter()
        outcome = await self._search(query)

        if not self._debouncer.is_latest(query.requester_id, key, query.received_at):
            logger.info(
                "stale_result_discarded",
                requester_id=query.requester_id,
                term=query.term,
            )
            return None
        if isinstance(outcome, ResultBatch):
            return outcome

        try:
            batch = self._mapper.map(outcome, query)
        except Exception:
            logger.exception(
                "inline_result_mapping_failed",
                requester_id=query.requester_id,
                term=query.term,
                records=len(outcome),
            )
            return self._placeholder("inline.internal_error", query)

        if batch.no_results:
            return self._placeholder("inline.no_results", query, term=query.term)

        logger.info(
            "inline_query_answered",
            term=query.term,
            mode=query.mode,
            total=batch.total,
            offset=query.offset,
            returned=len(batch.entries),
            elapsed_ms=int((perf_counter() - started) * 1000),
        )
        return batch

    async def _search(self, query: SearchQuery) -> Sequence[PackageRecord] | ResultBatch:
        try:
            return await self._client.search(query.term, by=query.mode)
        except UpstreamError as exc:
            logger.warning(
                "aur_search_failed",
                term=query.term,
                mode=query.mode,
                error=str(exc),
            )
            return self._placeholder("inline.unavailable", query)
        except ApiError as exc:
            logger.warning(
                "aur_api_error",
                term=query.term,
                mode=query.mode,
                error=exc.message,
            )
            message = sanitize_message(exc.message, self.error_message_limit)
            if not message:
                return self._placeholder("inline.unavailable", query)
            return ResultBatch.placeholder_for(
                message,
                message=self._i18n.gettext(
                    "inline.api_error.message",
                    locale=query.language_code,
                    error=message,
                ),
                cache_time=self.placeholder_cache_time,
            )
        except Exception:
            logger.exception(
                "inline_query_failed",
                requester_id=query.requester_id,
                term=query.term,
            )
            return self._placeholder("inline.internal_error", query)

    def _placeholder(
        self,
        key: str,
        query: SearchQuery,
        *,
        button_text: str | None = None,
        **kwargs,
    ) -> ResultBatch:
        locale = query.language_code
        return ResultBatch.placeholder_for(
            self._i18n.gettext(key, locale=locale, **kwargs),
            message=self._i18n.gettext(f"{key}.message", locale=locale, **kwargs),
            cache_time=self.placeholder_cache_time,
            button_text=button_text,
        )


__all__ = ["InlineSearchHandler"]
