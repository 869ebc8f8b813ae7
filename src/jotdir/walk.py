"""Recursive traversal of note folders: finding notes, counting items, measuring sizes, and finding empty folders.

Every function takes a ``base`` folder and an optional collection of ``exclude`` names. A folder is skipped when
its name is in ``exclude`` *and* it is directly inside ``base``; folders with the same name deeper in the tree
are traversed normally. Symlinks are never followed.
"""

from collections import namedtuple
import logging
import os
import os.path
from typing import Callable, Collection, Iterator, List, Optional

logger = logging.getLogger(__name__)

NOTE_SUFFIX = '.json'

WalkEntry = namedtuple('WalkEntry', ['path', 'group', 'relative_path'])
"""A note file found by :func:`walk_notes`.

``group`` and ``relative_path`` are relative to the base folder and always use ``/`` as the separator.
``group`` is the empty string for files directly inside the base folder.
"""

ItemPredicate = Callable[[str, str, bool], bool]
"""Called with the name, full path, and whether the item is a directory."""


def is_note_file(name: str, suffix: str = NOTE_SUFFIX) -> bool:
    return name.lower().endswith(suffix)


def _relative(path: str, base: str) -> str:
    rel = os.path.relpath(path, base)
    return '' if rel == '.' else rel.replace(os.sep, '/')


def _is_base(path: str, base: str) -> bool:
    return os.path.normpath(path) == os.path.normpath(base)


def _entries(path: str) -> List[os.DirEntry]:
    with os.scandir(path) as entries:
        return sorted(entries, key=lambda e: e.name)


def _skip(entry: os.DirEntry, at_base: bool, exclude: Collection[str]) -> bool:
    return at_base and entry.name in exclude and entry.is_dir(follow_symlinks=False)


def walk_notes(start: str, base: str, exclude: Collection[str] = (), suffix: str = NOTE_SUFFIX)\
        -> Iterator[WalkEntry]:
    """Yields every note file beneath ``start``, depth first.

    Raises :exc:`FileNotFoundError` if ``start`` does not exist.
    """
    yield from _walk_notes(start, base, exclude, suffix, _is_base(start, base))


def _walk_notes(dirpath: str, base: str, exclude: Collection[str], suffix: str, at_base: bool)\
        -> Iterator[WalkEntry]:
    for entry in _entries(dirpath):
        if entry.is_symlink() or _skip(entry, at_base, exclude):
            continue
        if entry.is_dir():
            yield from _walk_notes(entry.path, base, exclude, suffix, False)
        elif entry.is_file() and is_note_file(entry.name, suffix):
            yield WalkEntry(entry.path, _relative(dirpath, base), _relative(entry.path, base))


def count_items(dirpath: str, base: str, kind: str = 'file', predicate: Optional[ItemPredicate] = None,
                exclude: Collection[str] = ()) -> int:
    """Counts files (``kind='file'``) or folders (``kind='directory'``) beneath ``dirpath``, recursively.

    If ``predicate`` is given, only items for which it returns True are counted, though folders are
    descended into regardless.

    Returns 0 if ``dirpath`` does not exist. Other errors are raised.
    """
    if kind not in ('file', 'directory'):
        raise ValueError(f'Unknown kind of item: {kind}')
    return _count_items(dirpath, base, kind, predicate, exclude, _is_base(dirpath, base))


def _count_items(dirpath, base, kind, predicate, exclude, at_base) -> int:
    try:
        entries = _entries(dirpath)
    except FileNotFoundError:
        return 0
    count = 0
    for entry in entries:
        if entry.is_symlink() or _skip(entry, at_base, exclude):
            continue
        is_dir = entry.is_dir()
        if (is_dir and kind == 'directory') or (entry.is_file() and kind == 'file'):
            if not predicate or predicate(entry.name, entry.path, is_dir):
                count += 1
        if is_dir:
            count += _count_items(entry.path, base, kind, predicate, exclude, False)
    return count


def total_size(dirpath: str) -> int:
    """Returns the total size in bytes of all files beneath ``dirpath``.

    Returns 0 if ``dirpath`` does not exist. Files whose size cannot be read are skipped.
    """
    try:
        entries = _entries(dirpath)
    except FileNotFoundError:
        return 0
    size = 0
    for entry in entries:
        if entry.is_symlink():
            continue
        if entry.is_dir():
            size += total_size(entry.path)
        elif entry.is_file():
            try:
                size += entry.stat().st_size
            except OSError as e:
                logger.warning('Could not get size of file %s: %s', entry.path, e)
    return size


def find_empty_dirs(dirpath: str, base: str, exclude: Collection[str] = ()) -> List[str]:
    """Returns the paths, relative to ``base``, of folders beneath ``dirpath`` that contain no files.

    A folder containing only (recursively) empty folders is itself considered empty, and both it and its
    subfolders are included. ``base`` itself is never included. Returns an empty list if ``dirpath``
    does not exist.
    """
    result = []
    if not os.path.isdir(dirpath):
        return result
    _find_empty_dirs(dirpath, base, exclude, _is_base(dirpath, base), result)
    return result


def _find_empty_dirs(dirpath, base, exclude, at_base, result) -> bool:
    try:
        entries = _entries(dirpath)
    except FileNotFoundError:
        return True
    empty = True
    for entry in entries:
        if _skip(entry, at_base, exclude):
            continue
        if entry.is_dir(follow_symlinks=False):
            if not _find_empty_dirs(entry.path, base, exclude, False, result):
                empty = False
        else:
            empty = False
    if empty and not at_base:
        result.append(_relative(dirpath, base))
    return empty
