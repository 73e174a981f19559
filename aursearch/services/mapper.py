"""Turn AUR package records into inline result entries."""

from __future__ import annotations

import hashlib
from html import escape
from typing import Sequence

from aursearch.domain.models import InlineResultEntry, PackageRecord, ResultBatch, SearchQuery
from aursearch.utils.datetime import format_timestamp
from aursearch.utils.text import collapse_whitespace, truncate

DEFAULT_AUR_BASE_URL = "https://aur.archlinux.org"
NO_URL_TEXT = "no URL available"
NO_DESCRIPTION_TEXT = "No description"
OUT_OF_DATE_MARK = "[out of date] "


def entry_id(name: str) -> str:
    return hashlib.sha1(name.encode("utf-8")).hexdigest()


class ResultMapper:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_AUR_BASE_URL,
        description_limit: int = 100,
        page_size: int = 50,
        cache_time: int = 300,
    ) -> None:
        self._base_url = str(base_url).rstrip("/")
        self.description_limit = description_limit
        self.page_size = page_size
        self.cache_time = cache_time

    def map(self, records: Sequence[PackageRecord], query: SearchQuery) -> ResultBatch:
        """Build the page of entries starting at ``query.offset``.

        Upstream order is kept as-is; ``next_offset`` is empty on the last page.
        """

        if not records:
            return ResultBatch(cache_time=self.cache_time, no_results=True)

        start = min(query.offset, len(records))
        end = min(start + self.page_size, len(records))
        entries = tuple(
            self.map_record(record, position)
            for position, record in enumerate(records[start:end], start=start)
        )
        next_offset = str(end) if end < len(records) else ""
        return ResultBatch(
            entries=entries,
            next_offset=next_offset,
            cache_time=self.cache_time,
            total=len(records),
        )

    def map_record(self, record: PackageRecord, position: int = 0) -> InlineResultEntry:
        title = f"{record.name} {record.version}".strip()
        return InlineResultEntry(
            id=entry_id(record.name),
            title=title,
            description=self._describe(record),
            payload=self.render_details(record),
            url=record.url,
            page_url=self.package_page_url(record.name),
            position=position,
        )

    def package_page_url(self, name: str) -> str:
        return f"{self._base_url}/packages/{name}"

    def git_clone_url(self, record: PackageRecord) -> str:
        return f"{self._base_url}/{record.package_base or record.name}.git"

    def render_details(self, record: PackageRecord) -> str:
        """HTML message sent to the chat when the entry is picked."""

        lines = [
            f"Package Details: <b>{escape(record.name)} <i>{escape(record.version)}</i></b>",
            "",
            f"<b>Git Clone URL:</b> {escape(self.git_clone_url(record))}",
            "",
            f"<b>Description</b>: <i>{escape(record.description or NO_DESCRIPTION_TEXT)}</i>",
            f"<b>Upstream URL</b>: {escape(record.url or NO_URL_TEXT)}",
            f"<b>Maintainer</b>: <i>{escape(record.maintainer or 'orphan')}</i>",
            f"<b>Votes</b>: <i>{record.num_votes}</i>",
            f"<b>Popularity</b>: <i>{record.popularity:.6g}</i>",
            f"<b>First Submitted</b>: <i>{format_timestamp(record.first_submitted)}</i>",
            f"<b>Last Updated</b>: <i>{format_timestamp(record.last_modified)}</i>",
        ]
        if record.out_of_date:
            lines.append(
                f"<b>Flagged Out-of-date</b>: <i>{format_timestamp(record.out_of_date)}</i>"
            )
        return "\n".join(lines)

    def _describe(self, record: PackageRecord) -> str:
        text = collapse_whitespace(record.description or NO_DESCRIPTION_TEXT)
        if record.out_of_date:
            text = f"{OUT_OF_DATE_MARK}{text}"
        return truncate(text, self.description_limit)


__all__ = ["ResultMapper", "entry_id"]
