"""
Entry formatting for lsx.

This module renders a single entry as a short (name only) or long line.
"""

import stat
from datetime import datetime

from lsx.fs import Entry
from lsx.options import Options

# Width of the right-aligned size column in long format
SIZE_WIDTH = 10

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

SIZE_UNITS = ["K", "M", "G", "T", "P", "E"]


def human_readable_size(size: int) -> str:
    """Format a byte count with base-1024 scaling.

    Args:
        size: Size in bytes.

    Returns:
        str: ``"<n>B"`` below 1024 bytes, otherwise one fractional digit
            and a unit suffix, e.g. ``"1.5K"``.
    """
    unit = 1024
    if size < unit:
        return f"{size}B"

    div, exp = unit, 0
    n = size // unit
    while n >= unit and exp < len(SIZE_UNITS) - 1:
        div *= unit
        exp += 1
        n //= unit

    return f"{size / div:.1f}{SIZE_UNITS[exp]}"


def format_long(entry: Entry, human_readable: bool = False) -> str:
    """Format an entry as ``<mode> <size> <mtime> <name>``."""
    size_str = human_readable_size(entry.size) if human_readable else str(entry.size)
    mod_time = datetime.fromtimestamp(entry.mod_time).strftime(TIME_FORMAT)
    return f"{stat.filemode(entry.mode)} {size_str:>{SIZE_WIDTH}} {mod_time} {entry.name}"


def format_entry(entry: Entry, options: Options) -> str:
    """Format an entry according to the listing options."""
    if options.long_format:
        return format_long(entry, options.human_readable)
    return entry.name
