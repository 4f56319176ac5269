"""
Directory lister for lsx.

This module resolves paths, enumerates directories, filters hidden entries,
sorts them and writes one formatted line per entry.
"""

import os
import stat
import sys
from functools import cmp_to_key
from typing import Any, FrozenSet, List, Optional, Sequence, TextIO, Tuple

from lsx.expand import expand_patterns
from lsx.formatting import format_entry
from lsx.fs import Entry, LocalFileSystem
from lsx.options import Options, SortBy
from lsx.output import write_line

# How often (in entries or comparisons) long loops look at the cancel token
FILTER_CHECK_INTERVAL = 1000
PRINT_CHECK_INTERVAL = 100
SORT_CHECK_INTERVAL = 1000


class ListingCancelled(Exception):
    """Raised when the cancel token is set while a listing is in progress."""


def describe_error(error: Exception) -> str:
    """Return the short description used in diagnostic lines."""
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


def name_key(name: str) -> Tuple[str, str]:
    """Sort key for names: leading dots are ignored, the full name breaks ties."""
    return (name.lstrip("."), name)


class Lister:
    """Lists files and directories.

    Args:
        options: Listing options. Defaults to ``Options()``.
        fs: Filesystem collaborator providing ``stat`` and ``read_dir``.
        stdout: Stream receiving listing lines.
        stderr: Stream receiving ``ls: <path>: <error>`` diagnostics.
        cancel: Optional token with an ``is_set()`` method, usually a
            ``threading.Event``. Once set, the listing stops at the next
            check point by raising ``ListingCancelled``.
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        fs: Optional[Any] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        cancel: Optional[Any] = None,
    ):
        self.options = options if options is not None else Options()
        self.fs = fs if fs is not None else LocalFileSystem()
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.cancel = cancel
        self.errors = 0

    def run(self, patterns: Optional[Sequence[str]] = None) -> int:
        """List every path matched by ``patterns``.

        Args:
            patterns: Path patterns. Defaults to the current directory.

        Returns:
            int: Number of errors reported on the diagnostic stream.

        Raises:
            PatternError: If a pattern has malformed glob syntax.
            ListingCancelled: If the cancel token was set.
        """
        self.errors = 0
        self.check_cancelled()

        patterns = list(patterns or []) or ["."]
        if self.options.expand_patterns:
            paths = expand_patterns(patterns)
        else:
            paths = patterns

        for i, path in enumerate(paths):
            self.check_cancelled()

            if len(paths) > 1:
                if i > 0:
                    write_line(self.stdout)
                write_line(self.stdout, f"{path}:")

            self.list_path(path)

        return self.errors

    def list_path(self, path: str) -> None:
        """List a single resolved path, a file or a directory."""
        self.check_cancelled()

        try:
            st = self.fs.stat(path)
        except OSError as e:
            self.report(path, e)
            return

        if not stat.S_ISDIR(st.st_mode):
            self.emit(Entry.from_stat(path, st))
            return

        self._list_directory(path, st, 0, frozenset())

    def _list_directory(
        self,
        path: str,
        st: os.stat_result,
        depth: int,
        ancestors: FrozenSet[Tuple[int, int]],
    ) -> None:
        ancestors = ancestors | {(st.st_dev, st.st_ino)}

        self.check_cancelled()
        try:
            children = self.fs.read_dir(path)
        except OSError as e:
            self.report(path, e)
            return
        self.check_cancelled()

        visible = []
        for i, child in enumerate(children):
            if i % FILTER_CHECK_INTERVAL == 0:
                self.check_cancelled()
            if not self.options.all_files and child.name.startswith("."):
                continue
            visible.append(child)

        visible = self.sort_entries(visible)
        self.check_cancelled()

        for i, child in enumerate(visible):
            if i % PRINT_CHECK_INTERVAL == 0:
                self.check_cancelled()

            child_path = os.path.join(path, child.name)
            try:
                child_st = child.stat(follow_symlinks=False)
            except OSError as e:
                self.report(child_path, e)
                continue

            entry = Entry.from_stat(child_path, child_st)
            self.emit(entry)

            if self.options.recursive and entry.is_dir:
                self._descend(child_path, child_st, depth + 1, ancestors)

    def _descend(
        self,
        path: str,
        st: os.stat_result,
        depth: int,
        ancestors: FrozenSet[Tuple[int, int]],
    ) -> None:
        max_depth = self.options.max_depth
        if max_depth is not None and depth > max_depth:
            return

        if st.st_ino and (st.st_dev, st.st_ino) in ancestors:
            self.report(path, "not listing already-listed directory")
            return

        write_line(self.stdout)
        write_line(self.stdout, f"{path}:")
        self._list_directory(path, st, depth, ancestors)

    def sort_entries(self, entries: List[Any]) -> List[Any]:
        """Sort the directory entries of one directory.

        Names sort ascending with leading dots ignored (the full name breaks
        ties), times most recent first, sizes largest first. Metadata is
        read without following symlinks.
        ``reverse`` negates the comparison. When metadata of either entry in
        a comparison cannot be read, that pair is compared by name.

        Raises:
            ListingCancelled: If the cancel token is set before or during
                the sort.
        """
        self.check_cancelled()

        reverse = self.options.reverse
        comparisons = 0

        def compare(a, b):
            nonlocal comparisons
            comparisons += 1
            if comparisons % SORT_CHECK_INTERVAL == 0:
                self.check_cancelled()
            result = self._compare(a, b)
            return -result if reverse else result

        return sorted(entries, key=cmp_to_key(compare))

    def _compare(self, a: Any, b: Any) -> int:
        sort_by = self.options.sort_by

        if sort_by in (SortBy.TIME, SortBy.SIZE):
            field = "st_mtime" if sort_by == SortBy.TIME else "st_size"
            try:
                value_a = getattr(a.stat(follow_symlinks=False), field)
                value_b = getattr(b.stat(follow_symlinks=False), field)
            except OSError:
                value_a = value_b = None
            if value_a != value_b:
                return -1 if value_a > value_b else 1

        key_a, key_b = name_key(a.name), name_key(b.name)
        if key_a == key_b:
            return 0
        return -1 if key_a < key_b else 1

    def emit(self, entry: Entry) -> None:
        """Write the formatted line for one entry."""
        write_line(self.stdout, format_entry(entry, self.options))

    def report(self, path: str, error: Any) -> None:
        """Write a diagnostic line for ``path`` and count it."""
        if isinstance(error, Exception):
            error = describe_error(error)
        write_line(self.stderr, f"ls: {path}: {error}")
        self.errors += 1

    def check_cancelled(self) -> None:
        """Raise ``ListingCancelled`` when the cancel token is set."""
        if self.cancel is not None and self.cancel.is_set():
            raise ListingCancelled()
