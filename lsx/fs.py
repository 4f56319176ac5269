"""
Filesystem access for lsx.

The lister only talks to the filesystem through this module so tests can
substitute their own collaborator.
"""

import os
import stat
from typing import List, NamedTuple


class Entry(NamedTuple):
    """One filesystem object, alive for the duration of one output line."""

    path: str
    name: str
    is_dir: bool
    size: int
    mod_time: float
    mode: int

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "Entry":
        return cls(
            path=path,
            name=os.path.basename(os.path.normpath(path)) or path,
            is_dir=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            mod_time=st.st_mtime,
            mode=st.st_mode,
        )


class LocalFileSystem:
    """Reads metadata and directory contents from the local disk."""

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def read_dir(self, path: str) -> List[os.DirEntry]:
        """Return the immediate children of ``path``.

        Raises:
            OSError: If the directory cannot be opened or read.
        """
        with os.scandir(path) as entries:
            return list(entries)
