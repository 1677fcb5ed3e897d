# Tests for files/normalizer.py
# Created: 2026-10-19

import locale

import pytest
from pydantic import ValidationError

from peanutfm.files.models import DirectoryEntry, EntryKind
from peanutfm.files.normalizer import (
    classify_mime,
    collation_key,
    configure_collation,
    format_modified,
    format_size,
    normalize_listing,
)


def _entry(name, type_="file", size=None, modified="2024-01-01"):
    return DirectoryEntry(name=name, type=type_, size=size, last_modified=modified)


# ---------------------------------------------------------------------------
# format_size
# ---------------------------------------------------------------------------


class TestFormatSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (500, "500 B"),
            (999, "999 B"),
            (1000, "1.0 KB"),
            (2400, "2.4 KB"),
            (999_949, "999.9 KB"),
            (999_950, "1.0 MB"),
            (999_999, "1.0 MB"),
            (1_000_000, "1.0 MB"),
            (2_400_000, "2.4 MB"),
            (999_950_000, "1.0 GB"),
            (1_000_000_000, "1.0 GB"),
            (5_500_000_000_000, "5500.0 GB"),
        ],
    )
    def test_tiers(self, size, expected):
        assert format_size(size) == expected

    def test_none_is_placeholder(self):
        assert format_size(None) == "-"

    def test_monotonic_within_tier(self):
        for lo, hi, unit in ((1000, 1_000_000, "KB"), (1_000_000, 1_000_000_000, "MB")):
            values = []
            for size in range(lo, hi, (hi - lo) // 97):
                label = format_size(size)
                assert label.endswith(unit)
                values.append(float(label.split()[0]))
            assert values == sorted(values)


# ---------------------------------------------------------------------------
# classify_mime
# ---------------------------------------------------------------------------


class TestClassifyMime:
    def test_image(self):
        assert classify_mime("图片.jpg", EntryKind.FILE) == ("image/jpeg", "image")

    def test_extension_is_case_insensitive(self):
        assert classify_mime("CAT.PNG", EntryKind.FILE) == ("image/png", "image")

    def test_text(self):
        assert classify_mime("notes.txt", EntryKind.FILE) == ("text/plain", "text")

    def test_unknown_extension(self):
        assert classify_mime("data.xyz", EntryKind.FILE) == ("", "unknown")

    def test_no_extension(self):
        assert classify_mime("Makefile", EntryKind.FILE) == ("", "unknown")

    def test_dotfile_is_not_an_extension(self):
        assert classify_mime(".txt", EntryKind.FILE) == ("", "unknown")

    def test_directory_ignores_name(self):
        assert classify_mime("photos.jpg", EntryKind.DIRECTORY) == ("", "directory")

    def test_deterministic(self):
        assert classify_mime("a.pdf", EntryKind.FILE) == classify_mime("a.pdf", EntryKind.FILE)


# ---------------------------------------------------------------------------
# format_modified
# ---------------------------------------------------------------------------


class TestFormatModified:
    def test_date(self):
        assert format_modified("2024-03-15") == "2024-03-15"

    def test_timestamp(self):
        assert format_modified("2024-03-15T08:30:12Z") == "2024-03-15 08:30"

    def test_passthrough(self):
        assert format_modified("yesterday") == "yesterday"

    def test_empty(self):
        assert format_modified("") == ""


# ---------------------------------------------------------------------------
# normalize_listing
# ---------------------------------------------------------------------------


class TestNormalizeListing:
    def test_docs_scenario(self):
        rows = normalize_listing(
            [
                _entry("a.txt", size=500),
                _entry("sub", type_="directory"),
            ]
        )
        assert [(r.name, r.kind, r.size_label) for r in rows] == [
            ("sub", EntryKind.DIRECTORY, "-"),
            ("a.txt", EntryKind.FILE, "500 B"),
        ]
        assert rows[0].mime_class == "directory"
        assert rows[1].mime_class == "text"
        assert rows[1].id == "a.txt"
        assert rows[1].modified_label == "2024-01-01"

    def test_directory_size_is_ignored(self):
        rows = normalize_listing([_entry("big", type_="directory", size=10_000)])
        assert rows[0].size_label == "-"

    def test_directories_first_then_collation_order(self):
        rows = normalize_listing(
            [
                _entry("zeta.txt", size=1),
                _entry("beta", type_="directory"),
                _entry("alpha.txt", size=1),
                _entry("Alpha", type_="directory"),
                _entry("mid.png", size=1),
            ]
        )
        kinds = [r.kind for r in rows]
        first_file = kinds.index(EntryKind.FILE)
        assert all(k is EntryKind.DIRECTORY for k in kinds[:first_file])
        assert all(k is EntryKind.FILE for k in kinds[first_file:])
        for group in (rows[:first_file], rows[first_file:]):
            keys = [collation_key(r.name) for r in group]
            assert keys == sorted(keys)

    def test_duplicate_names_keep_first(self):
        rows = normalize_listing([_entry("a.txt", size=1), _entry("a.txt", size=2)])
        assert len(rows) == 1
        assert rows[0].size_label == "1 B"

    def test_file_without_size(self):
        rows = normalize_listing([_entry("x.bin")])
        assert rows[0].size_label == "-"

    def test_fresh_list_each_call(self):
        raw = [_entry("a.txt", size=1)]
        assert normalize_listing(raw) is not normalize_listing(raw)
        assert normalize_listing(raw) == normalize_listing(raw)


class TestCollation:
    def test_empty_locale_is_noop(self):
        assert configure_collation("") is True

    def test_missing_locale_keeps_current(self):
        before = locale.setlocale(locale.LC_COLLATE)
        assert configure_collation("xx_NOPE.UTF-8") is False
        assert locale.setlocale(locale.LC_COLLATE) == before

    def test_key_breaks_ties_with_raw_name(self):
        assert collation_key("a")[1] == "a"


class TestDirectoryEntry:
    @pytest.mark.parametrize("name", [".", "..", "../x.txt", "a/b", "a\x00b"])
    def test_rejects_names_that_are_not_plain(self, name):
        with pytest.raises(ValidationError):
            DirectoryEntry(name=name, type="file")

    def test_accepts_dotfiles_and_dots_inside(self):
        assert DirectoryEntry(name=".bashrc", type="file").name == ".bashrc"
        assert DirectoryEntry(name="a..b", type="file").name == "a..b"
