"""
Timestamp-based staleness checks.

An output is stale when the newest of its candidate inputs was modified after
the output itself. Nothing here is cached: every call reads the filesystem.
"""

import os
from typing import Iterable


def get_mtime(path) -> float:
    """Return the modification time of path, or 0 if it does not exist."""
    try:
        return os.stat(path).st_mtime
    except (FileNotFoundError, NotADirectoryError):
        return 0


def latest_mtime(paths: Iterable) -> float:
    """Newest modification time among paths. Missing files count as 0."""
    return max((get_mtime(p) for p in paths), default=0)


def is_stale(output_path, candidate_paths: Iterable) -> bool:
    """
    Decide whether output_path needs regenerating.

    Equal timestamps are not stale. With no candidates, only a missing output
    is stale.
    """
    output_time = get_mtime(output_path)
    if output_time == 0:
        return True
    return latest_mtime(candidate_paths) > output_time


def list_files(directory, extensions=None):
    """
    Recursively list regular files under directory, sorted.

    Dotfiles and anything inside dot-directories are skipped. An absent
    directory yields an empty list.
    """
    found = []
    if not os.path.isdir(directory):
        return found
    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith('.')]
        for name in files:
            if name.startswith('.'):
                continue
            if extensions and not name.lower().endswith(tuple(extensions)):
                continue
            found.append(os.path.join(root, name))
    return sorted(found)
