"""
Listing options for lsx.

This module defines the immutable option set handed to the lister.
"""

from enum import Enum
from typing import NamedTuple, Optional


class SortBy(str, Enum):
    """Sort key for directory entries."""

    NAME = "name"
    TIME = "time"
    SIZE = "size"


class Options(NamedTuple):
    """Options resolved once per invocation.

    Sorting by time lists the most recently modified entry first, and
    sorting by size lists the largest entry first. ``reverse`` inverts
    whichever order was chosen.
    """

    long_format: bool = False
    all_files: bool = False
    human_readable: bool = False
    recursive: bool = False
    reverse: bool = False
    sort_by: SortBy = SortBy.NAME
    expand_patterns: bool = True
    max_depth: Optional[int] = None
