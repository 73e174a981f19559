"""Tests for mapping AUR records to inline result entries."""

from __future__ import annotations

from aursearch.domain.models import PackageRecord
from aursearch.services.mapper import ResultMapper, entry_id
from aursearch.utils.text import ELLIPSIS
from conftest import package_payload


def _records(*names: str, **overrides) -> list[PackageRecord]:
    return [PackageRecord.model_validate(package_payload(name, **overrides)) for name in names]


def test_map_preserves_upstream_order(make_query):
    records = _records("vim", "neovim", "gvim", "vim-airline")
    batch = ResultMapper().map(records, make_query("vim"))

    assert [entry.title.split()[0] for entry in batch.entries] == [
        "vim",
        "neovim",
        "gvim",
        "vim-airline",
    ]
    assert [entry.position for entry in batch.entries] == [0, 1, 2, 3]
    assert batch.no_results is False
    assert batch.placeholder is False
    assert batch.next_offset == ""
    assert batch.total == 4


def test_map_is_idempotent(make_query):
    records = _records("vim", "neovim")
    mapper = ResultMapper()
    first = mapper.map(records, make_query("vim"))
    second = mapper.map(records, make_query("vim"))

    assert first == second
    assert [entry.id for entry in first.entries] == [entry_id("vim"), entry_id("neovim")]


def test_entry_id_is_stable_and_fits_telegram_limit():
    assert entry_id("firefox") == entry_id("firefox")
    assert entry_id("firefox") != entry_id("firefox-nightly")
    assert len(entry_id("x" * 300).encode()) <= 64


def test_entry_content(make_query):
    (record,) = _records("vim", Version="9.1.0-1", Description="Vi Improved")
    entry = ResultMapper().map([record], make_query("vim")).entries[0]

    assert entry.title == "vim 9.1.0-1"
    assert entry.description == "Vi Improved"
    assert entry.page_url == "https://aur.archlinux.org/packages/vim"
    assert entry.url == "https://example.org/vim"
    assert "https://aur.archlinux.org/vim.git" in entry.payload
    assert "<b>Upstream URL</b>: https://example.org/vim" in entry.payload
    assert "2017-07-14 02:40" in entry.payload


def test_missing_url_falls_back_to_text_payload(make_query):
    (record,) = _records("orphan-pkg", URL=None, Maintainer=None, Description=None)
    batch = ResultMapper().map([record], make_query("orphan"))

    assert len(batch.entries) == 1
    entry = batch.entries[0]
    assert entry.url is None
    assert "no URL available" in entry.payload
    assert "orphan" in entry.payload
    assert entry.description == "No description"


def test_payload_escapes_html(make_query):
    (record,) = _records("pkg", Description="<script>alert(1)</script> & more")
    entry = ResultMapper().map([record], make_query("pkg")).entries[0]

    assert "<script>" not in entry.payload
    assert "&lt;script&gt;" in entry.payload
    assert "&amp; more" in entry.payload


def test_long_description_is_truncated_with_ellipsis(make_query):
    description = "ü" * 80 + "日本語のパッケージ説明" * 10
    (record,) = _records("pkg", Description=description)
    entry = ResultMapper(description_limit=100).map([record], make_query("pkg")).entries[0]

    assert len(entry.description) <= 100
    assert entry.description.endswith(ELLIPSIS)
    assert description.startswith(entry.description[: -len(ELLIPSIS)])
    entry.description.encode("utf-8")


def test_out_of_date_flag_in_description(make_query):
    (record,) = _records("stale", OutOfDate=1_700_000_000)
    entry = ResultMapper().map([record], make_query("stale")).entries[0]

    assert entry.description.startswith("[out of date]")
    assert "Flagged Out-of-date" in entry.payload


def test_empty_records_sets_no_results_marker(make_query):
    batch = ResultMapper().map([], make_query("zzzznotapackage"))

    assert batch.entries == ()
    assert batch.no_results is True


def test_pagination_by_offset(make_query):
    records = _records(*(f"pkg{i}" for i in range(25)))
    mapper = ResultMapper(page_size=10)

    first = mapper.map(records, make_query("pkg"))
    assert [entry.position for entry in first.entries] == list(range(10))
    assert first.next_offset == "10"

    last = mapper.map(records, make_query("pkg", offset="20"))
    assert [entry.title.split()[0] for entry in last.entries] == [f"pkg{i}" for i in range(20, 25)]
    assert last.next_offset == ""


def test_offset_past_end_yields_empty_page(make_query):
    records = _records("a", "b")
    batch = ResultMapper().map(records, make_query("x", offset="99"))

    assert batch.entries == ()
    assert batch.no_results is False
    assert batch.next_offset == ""


def test_out_of_range_timestamp_keeps_sibling_entries(make_query):
    records = [
        PackageRecord.model_validate(package_payload("vim")),
        PackageRecord.model_validate(package_payload("gvim", LastModified=10**20, OutOfDate=-(10**20))),
        PackageRecord.model_validate(package_payload("neovim")),
    ]
    batch = ResultMapper().map(records, make_query("vim"))

    assert [entry.title.split()[0] for entry in batch.entries] == ["vim", "gvim", "neovim"]
    assert "<b>Last Updated</b>: <i>unknown</i>" in batch.entries[1].payload
    assert "2017-07-14 02:40" in batch.entries[1].payload
