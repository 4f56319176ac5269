"""
Stream helpers for lsx.
"""

from typing import TextIO


def safe_write(stream: TextIO, text: str) -> None:
    """Safely write text to a stream, handling encoding errors.

    File names that cannot be encoded (e.g. undecodable bytes surfaced as
    surrogates) are written with replacement characters.

    Args:
        stream: Output stream (stdout/stderr).
        text: Text to write.
    """
    try:
        stream.write(text)
    except UnicodeEncodeError:
        encoding = getattr(stream, "encoding", None) or "ascii"
        stream.write(text.encode(encoding, "replace").decode(encoding))


def write_line(stream: TextIO, line: str = "") -> None:
    """Write one line followed by a newline."""
    safe_write(stream, line + "\n")
