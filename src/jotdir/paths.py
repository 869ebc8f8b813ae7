"""Turns user-supplied titles and groups into safe filesystem paths.

Groups are matched against existing folders case-insensitively, and the existing folder's casing is reused,
so ``work`` and ``Work`` always refer to the same folder even on case-sensitive filesystems.
"""

import logging
import os
import os.path
import re
import threading
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

UNSAFE_TITLE_RE = re.compile(r'[/\\?%*:|"<>]')
UNSAFE_SEGMENT_RE = re.compile(r'[/\\?%*:|"<>.]')
SEPARATOR_RE = re.compile(r'[/\\]')


def sanitize_title(title: str) -> str:
    """Trims whitespace and replaces each of the characters ``/ \\ ? % * : | " < >`` with a dash.

    Returns the empty string if nothing usable is left; callers must treat that as an invalid title.
    """
    return UNSAFE_TITLE_RE.sub('-', (title or '').strip())


def sanitize_group(group: str) -> List[str]:
    """Splits a group on slashes or backslashes and makes each segment safe to use as a folder name.

    The same characters as in :func:`sanitize_title` are replaced with dashes, and so are periods, which means
    segments like ``..`` cannot escape the notes directory. Empty segments are dropped.

    For example, ``a//b.c\\\\d`` becomes ``['a', 'b-c', 'd']``.
    """
    segments = (UNSAFE_SEGMENT_RE.sub('-', s) for s in SEPARATOR_RE.split(group or ''))
    return [s for s in segments if s]


def is_reserved(segments: List[str], reserved_name: str) -> bool:
    """True if the first segment names the reserved top-level folder, ignoring case."""
    return bool(segments) and segments[0].lower() == reserved_name.lower()


class GroupResolver:
    """Resolves group segments beneath a root folder, reusing the casing of folders that already exist.

    Folder listings are read at most once per instance, so create a new instance for each batch of work.
    Segments that did not match an existing folder are remembered as if the folder existed, so that later
    lookups in the same batch agree on a single casing even before the folder is created.

    Instances may be shared between threads.
    """
    def __init__(self, root: str):
        self.root = root
        self._listings: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def resolve(self, segments: List[str]) -> Tuple[str, List[str]]:
        """Returns the folder path for the given sanitized segments, and the segments actually used.

        The folder may not exist yet.
        """
        path = self.root
        resolved = []
        with self._lock:
            for segment in segments:
                names = self._listing(path)
                name = names.setdefault(segment.lower(), segment)
                resolved.append(name)
                path = os.path.join(path, name)
        return path, resolved

    def _listing(self, path: str) -> Dict[str, str]:
        if path not in self._listings:
            names = {}
            try:
                with os.scandir(path) as entries:
                    for entry in entries:
                        if entry.is_dir():
                            names.setdefault(entry.name.lower(), entry.name)
            except FileNotFoundError:
                pass
            except OSError:
                logger.warning('Could not read directory %s', path, exc_info=True)
            self._listings[path] = names
        return self._listings[path]


def resolve_group(root: str, segments: List[str]) -> Tuple[str, List[str]]:
    """Convenience function for resolving a single group with a fresh :class:`GroupResolver`."""
    return GroupResolver(root).resolve(segments)
