"""
Pattern expansion for lsx.

This module expands brace groups (``{a,b}``, ``{1..3}``, ``{a..e}``) and
shell-style globs in command-line arguments before anything is listed.
"""

import glob
import re
from typing import List, Sequence

_INT_RE = re.compile(r"^[+-]?\d+$")


class PatternError(ValueError):
    """Raised when a glob pattern is malformed."""


def expand_braces(pattern: str) -> List[str]:
    """Expand the brace groups of a pattern, left to right.

    Args:
        pattern: Raw pattern, e.g. ``"file{1..3}.txt"``.

    Returns:
        list: Expanded strings in order. A pattern without a balanced brace
            group is returned as a single-element list.
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    # Find the matching closing brace
    depth = 0
    end = -1
    for i in range(start, len(pattern)):
        if pattern[i] == "{":
            depth += 1
        elif pattern[i] == "}":
            depth -= 1
            if depth == 0:
                end = i
                break

    if end == -1:
        return [pattern]

    prefix = pattern[:start]
    content = pattern[start + 1:end]
    suffix = pattern[end + 1:]

    expansions = []
    if ".." in content:
        parts = content.split("..")
        if len(parts) == 2:
            expansions = expand_range(parts[0].strip(), parts[1].strip())

    if not expansions:
        expansions = [item.strip() for item in split_top_level(content)]

    result = []
    for item in expansions:
        result.extend(expand_braces(prefix + item + suffix))
    return result


def expand_range(start: str, end: str) -> List[str]:
    """Expand an inclusive numeric or single-character range.

    Ranges run downwards when ``start`` is greater than ``end``. When the
    bounds are neither two integers nor two single characters, both bounds
    are returned as literal items.
    """
    if _INT_RE.match(start) and _INT_RE.match(end):
        s, e = int(start), int(end)
        step = 1 if s <= e else -1
        return [str(i) for i in range(s, e + step, step)]

    if len(start) == 1 and len(end) == 1:
        s, e = ord(start), ord(end)
        step = 1 if s <= e else -1
        return [chr(c) for c in range(s, e + step, step)]

    return [start, end]


def split_top_level(content: str) -> List[str]:
    """Split brace content on commas that are not inside a nested group."""
    items = []
    depth = 0
    current = []
    for ch in content:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            items.append("".join(current))
            current = []
            continue
        current.append(ch)
    items.append("".join(current))
    return items


def check_pattern(pattern: str) -> None:
    """Validate glob syntax.

    Raises:
        PatternError: If a character class is never closed.
    """
    i = 0
    n = len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            # A leading ']' is a literal member of the class
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise PatternError(f"invalid pattern {pattern}: unterminated character class")
            i = j
        i += 1


def expand_glob(pattern: str) -> List[str]:
    """Return the sorted paths matching a glob pattern.

    Raises:
        PatternError: If the pattern is malformed.
    """
    check_pattern(pattern)
    return sorted(glob.glob(pattern))


def expand_patterns(patterns: Sequence[str]) -> List[str]:
    """Expand braces and globs for every pattern.

    A glob without matches keeps its literal text so that listing it later
    reports a clear "not found" error. Duplicates are dropped, first
    occurrence wins.

    Args:
        patterns: Raw command-line patterns.

    Returns:
        list: Concrete paths, or the original patterns when expansion
            produced nothing at all.

    Raises:
        PatternError: If any expanded pattern has malformed glob syntax.
    """
    result = []
    seen = set()

    for pattern in patterns:
        for expanded in expand_braces(pattern):
            matches = expand_glob(expanded) or [expanded]
            for match in matches:
                if match not in seen:
                    seen.add(match)
                    result.append(match)

    if not result:
        return list(patterns)
    return result
