"""Pydantic models shared across the search pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SearchMode = Literal["name", "maintainer"]

MAINTAINER_PREFIX = "!m"
_COMMAND_PREFIX = "!"


class SearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    term: str
    mode: SearchMode = "name"
    requester_id: int
    received_at: float
    offset: int = 0
    language_code: str | None = None

    @property
    def dispatch_key(self) -> str:
        """Term as seen by the debouncer; maintainer searches keep their prefix."""

        if self.mode == "maintainer":
            return f"{MAINTAINER_PREFIX} {self.term}"
        return self.term

    @classmethod
    def parse(
        cls,
        text: str,
        *,
        requester_id: int,
        received_at: float,
        offset: str | int | None = None,
        language_code: str | None = None,
    ) -> "SearchQuery":
        """Split raw inline text into the search term and mode.

        ``!m foo`` searches by maintainer; a bare ``!`` or ``!m`` yields an
        empty term.
        """

        raw = text or ""
        stripped = raw.strip()
        mode: SearchMode = "name"
        if stripped.startswith(MAINTAINER_PREFIX) and (
            len(stripped) == len(MAINTAINER_PREFIX) or stripped[len(MAINTAINER_PREFIX)].isspace()
        ):
            mode = "maintainer"
            stripped = stripped[len(MAINTAINER_PREFIX):].strip()
        elif stripped == _COMMAND_PREFIX:
            stripped = ""
        return cls(
            text=raw,
            term=stripped,
            mode=mode,
            requester_id=requester_id,
            received_at=received_at,
            offset=parse_offset(offset),
            language_code=language_code,
        )


def parse_offset(value: str | int | None) -> int:
    if value is None or value == "":
        return 0
    try:
        offset = int(value)
    except (TypeError, ValueError):
        return 0
    return max(offset, 0)


class PackageRecord(BaseModel):
    """One package object from the AUR RPC ``results`` array."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(alias="Name", min_length=1)
    version: str = Field(default="", alias="Version")
    description: str | None = Field(default=None, alias="Description")
    url: str | None = Field(default=None, alias="URL")
    num_votes: int = Field(default=0, alias="NumVotes")
    popularity: float = Field(default=0.0, alias="Popularity")
    maintainer: str | None = Field(default=None, alias="Maintainer")
    package_base: str | None = Field(default=None, alias="PackageBase")
    out_of_date: int | None = Field(default=None, alias="OutOfDate")
    first_submitted: int | None = Field(default=None, alias="FirstSubmitted")
    last_modified: int | None = Field(default=None, alias="LastModified")

    @field_validator("version", mode="before")
    @classmethod
    def _null_version(cls, value):
        return "" if value is None else value

    @field_validator("num_votes", "popularity", mode="before")
    @classmethod
    def _null_metric(cls, value):
        return 0 if value is None else value

    @field_validator("description", "url", "maintainer", "package_base", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class InlineResultEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    payload: str
    url: str | None = None
    page_url: str | None = None
    position: int = 0


class ResultBatch(BaseModel):
    """Ordered entries for one inline answer plus paging and cache hints."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[InlineResultEntry, ...] = ()
    next_offset: str = ""
    cache_time: int = 0
    total: int = 0
    no_results: bool = False
    placeholder: bool = False
    button_text: str | None = None

    @classmethod
    def placeholder_for(
        cls,
        title: str,
        *,
        message: str | None = None,
        cache_time: int = 0,
        button_text: str | None = None,
    ) -> "ResultBatch":
        entry = InlineResultEntry(
            id="placeholder",
            title=title,
            description="",
            payload=message or title,
        )
        return cls(
            entries=(entry,),
            cache_time=cache_time,
            placeholder=True,
            button_text=button_text,
        )


__all__ = [
    "InlineResultEntry",
    "PackageRecord",
    "ResultBatch",
    "SearchMode",
    "SearchQuery",
    "parse_offset",
]
