"""Tests for directory listings: conversion, counts, sorting, limits."""

import os
from datetime import datetime, timedelta, timezone

import pytest

from dirserve.services.file_info import FileInfo, get_file_info
from dirserve.services.listing import (
    Listing,
    directory_listing,
    handle_sort_order,
    load_directory_contents,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _listing() -> Listing:
    return Listing(
        name="mixed",
        path="mixed",
        items=[
            FileInfo(path="mixed/b.txt", name="b.txt", size=30, mod_time=T0 + timedelta(hours=1)),
            FileInfo(path="mixed/Zeta", name="Zeta/", is_dir=True, size=4096, mod_time=T0),
            FileInfo(path="mixed/a.txt", name="a.txt", size=10, mod_time=T0 + timedelta(hours=3)),
            FileInfo(path="mixed/docs", name="docs/", is_dir=True, size=4096, mod_time=T0 + timedelta(hours=2)),
        ],
        num_dirs=2,
        num_files=2,
    )


def _names(listing: Listing) -> list[str]:
    return [fi.name for fi in listing.items]


class TestDirectoryListing:
    def test_photos_scenario(self, settings):
        info = get_file_info("/files/photos/", settings)
        listing = load_directory_contents(info, settings)

        assert listing.name == "photos"
        assert listing.path == "photos"
        assert listing.num_dirs == 1
        assert listing.num_files == 1
        by_name = {fi.name: fi for fi in listing.items}
        assert set(by_name) == {"raw/", "a.jpg"}
        assert by_name["raw/"].url == "./raw/"
        assert by_name["raw/"].is_dir is True
        assert by_name["raw/"].path == "photos/raw"
        assert by_name["a.jpg"].url == "./a.jpg"
        assert by_name["a.jpg"].size == 4
        assert by_name["a.jpg"].mod_time.tzinfo is not None

    def test_counts_match_items(self, tmp_path):
        for i in range(5):
            (tmp_path / f"f{i}.bin").write_bytes(b"x" * i)
        for i in range(3):
            (tmp_path / f"d{i}").mkdir()

        with os.scandir(tmp_path) as entries:
            listing = directory_listing(entries, ".")

        assert listing.num_files == 5
        assert listing.num_dirs == 3
        assert listing.num_dirs + listing.num_files == len(listing.items)
        assert sorted(fi.name for fi in listing.items) == sorted(
            [f"f{i}.bin" for i in range(5)] + [f"d{i}/" for i in range(3)]
        )
        assert listing.name == "/"

    def test_special_names_are_quoted(self, tmp_path):
        (tmp_path / "a:b.txt").write_text("x")
        (tmp_path / "with space.txt").write_text("x")

        with os.scandir(tmp_path) as entries:
            listing = directory_listing(entries, "dir")

        urls = sorted(fi.url for fi in listing.items)
        assert urls == ["./a%3Ab.txt", "./with%20space.txt"]
        assert all(url.startswith("./") for url in urls)

    def test_empty_directory(self, tmp_path):
        with os.scandir(tmp_path) as entries:
            listing = directory_listing(entries, "empty")
        assert listing.items == []
        assert listing.num_dirs == listing.num_files == 0

    def test_load_missing_directory(self, settings):
        info = FileInfo(path="gone", name="gone", is_dir=True)
        with pytest.raises(FileNotFoundError):
            load_directory_contents(info, settings)

    def test_load_file_as_directory(self, settings):
        info = FileInfo(path="notes.txt", name="notes.txt", is_dir=True)
        with pytest.raises(NotADirectoryError):
            load_directory_contents(info, settings)


class TestApplySort:
    def test_name(self):
        listing = _listing()
        listing.sort, listing.order = "name", "asc"
        listing.apply_sort()
        assert _names(listing) == ["a.txt", "b.txt", "docs/", "Zeta/"]

    def test_name_desc(self):
        listing = _listing()
        listing.sort, listing.order = "name", "desc"
        listing.apply_sort()
        assert _names(listing) == ["Zeta/", "docs/", "b.txt", "a.txt"]

    def test_name_dir_first(self):
        listing = _listing()
        listing.sort, listing.order = "namedirfirst", "asc"
        listing.apply_sort()
        assert _names(listing) == ["docs/", "Zeta/", "a.txt", "b.txt"]

    def test_size_dirs_first(self):
        listing = _listing()
        listing.sort, listing.order = "size", "asc"
        listing.apply_sort()
        assert _names(listing) == ["Zeta/", "docs/", "a.txt", "b.txt"]

    def test_time(self):
        listing = _listing()
        listing.sort, listing.order = "time", "asc"
        listing.apply_sort()
        assert _names(listing) == ["Zeta/", "b.txt", "docs/", "a.txt"]

    def test_time_desc(self):
        listing = _listing()
        listing.sort, listing.order = "time", "desc"
        listing.apply_sort()
        assert _names(listing) == ["a.txt", "docs/", "b.txt", "Zeta/"]


class TestApplyLimit:
    def test_truncates(self):
        listing = _listing()
        listing.apply_limit(2)
        assert len(listing.items) == 2
        assert listing.items_limited_to == 2

    def test_limit_equal_to_count(self):
        listing = _listing()
        listing.apply_limit(4)
        assert len(listing.items) == 4
        assert listing.items_limited_to == 4

    @pytest.mark.parametrize("limit", [0, -1, 10])
    def test_ignored(self, limit):
        listing = _listing()
        listing.apply_limit(limit)
        assert len(listing.items) == 4
        assert listing.items_limited_to == 0


class TestHandleSortOrder:
    def test_defaults(self):
        opts = handle_sort_order({}, {})
        assert (opts.sort, opts.order, opts.limit) == ("namedirfirst", "asc", 0)
        assert opts.cookies == {}

    def test_explicit_values_are_remembered(self):
        opts = handle_sort_order({"sort": "size", "order": "desc", "limit": "5"}, {})
        assert (opts.sort, opts.order, opts.limit) == ("size", "desc", 5)
        assert opts.cookies == {"sort": "size", "order": "desc"}

    def test_cookie_fallback(self):
        opts = handle_sort_order({}, {"sort": "time", "order": "desc"})
        assert (opts.sort, opts.order) == ("time", "desc")
        assert opts.cookies == {}

    def test_bad_cookie_falls_back_to_default(self):
        opts = handle_sort_order({}, {"sort": "bogus", "order": "sideways"})
        assert (opts.sort, opts.order) == ("namedirfirst", "asc")

    @pytest.mark.parametrize(
        "query",
        [{"sort": "bogus"}, {"order": "sideways"}, {"limit": "ten"}, {"limit": "1.5"}],
    )
    def test_malformed_query(self, query):
        with pytest.raises(ValueError):
            handle_sort_order(query, {})
