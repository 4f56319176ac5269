"""
Tests for entry formatting.
"""

import stat
from datetime import datetime
from types import SimpleNamespace

import pytest

from lsx.formatting import format_entry, format_long, human_readable_size
from lsx.fs import Entry
from lsx.options import Options

MTIME = 1600000000


def make_entry(name="report.txt", size=1536, mode=stat.S_IFREG | 0o644, path=None):
    st = SimpleNamespace(st_mode=mode, st_size=size, st_mtime=MTIME)
    return Entry.from_stat(path or f"/data/{name}", st)


class TestHumanReadableSize:
    """Tests for human-readable size scaling."""

    @pytest.mark.parametrize("size, expected", [
        (0, "0B"),
        (1023, "1023B"),
        (1024, "1.0K"),
        (1536, "1.5K"),
        (1048576, "1.0M"),
        (5 * 1024 ** 3, "5.0G"),
        (1024 ** 4, "1.0T"),
        (1024 ** 5, "1.0P"),
        (1024 ** 6, "1.0E"),
    ])
    def test_values(self, size, expected):
        assert human_readable_size(size) == expected

    def test_beyond_largest_unit(self):
        assert human_readable_size(2048 * 1024 ** 6) == "2048.0E"


class TestEntry:
    """Tests for building entries from stat results."""

    def test_from_stat(self):
        entry = make_entry(path="/data/dir/", mode=stat.S_IFDIR | 0o755, size=4096)

        assert entry.name == "dir"
        assert entry.path == "/data/dir/"
        assert entry.is_dir
        assert entry.size == 4096
        assert entry.mod_time == MTIME

    def test_root_keeps_path_as_name(self):
        entry = make_entry(path="/", mode=stat.S_IFDIR | 0o755)

        assert entry.name == "/"


class TestFormatting:
    """Tests for short and long lines."""

    def test_short_format(self):
        assert format_entry(make_entry(), Options()) == "report.txt"

    def test_long_format(self):
        expected_time = datetime.fromtimestamp(MTIME).strftime("%Y-%m-%d %H:%M:%S")

        line = format_entry(make_entry(), Options(long_format=True))

        assert line == f"-rw-r--r--       1536 {expected_time} report.txt"

    def test_long_format_human_readable(self):
        line = format_entry(make_entry(), Options(long_format=True, human_readable=True))

        assert line.startswith("-rw-r--r--       1.5K ")
        assert line.endswith(" report.txt")

    def test_human_readable_needs_long_format(self):
        assert format_entry(make_entry(), Options(human_readable=True)) == "report.txt"

    def test_directory_mode(self):
        entry = make_entry(name="src", mode=stat.S_IFDIR | 0o755, size=4096)

        assert format_long(entry).startswith("drwxr-xr-x       4096 ")
