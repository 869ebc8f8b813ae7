"""Moves notes into the trash, removes empty groups, and permanently deletes the trash.

These functions block; :class:`jotdir.api.Jotdir` runs them in worker threads.
"""

import logging
import os
import os.path
import shutil

from jotdir.conf import JotdirConf
from jotdir.errors import InvalidInputError, NotEmptyError, NotFoundError
from jotdir.paths import resolve_group, sanitize_group, sanitize_title
from jotdir.walk import count_items, is_note_file

logger = logging.getLogger(__name__)


def move_to_trash(conf: JotdirConf, title: str, group: str = '') -> str:
    """Moves a note into the same group within the trash, creating folders there as needed.

    The group is resolved the same way as when creating notes, so its casing does not matter. Any note already
    in the trash with the same title and group is replaced. Folders left empty in the notes tree are kept.

    Returns the note's new path. Raises :exc:`jotdir.errors.InvalidInputError` if the title is empty after
    sanitizing, and :exc:`jotdir.errors.NotFoundError` if the note does not exist.
    """
    safe_title = sanitize_title(title)
    if not safe_title:
        raise InvalidInputError('Invalid title provided for deletion.')
    dirpath, segments = resolve_group(conf.notes_path, sanitize_group(group))
    filename = safe_title + conf.note_suffix
    src = os.path.join(dirpath, filename)
    if not os.path.isfile(src):
        raise NotFoundError(f'Note with title "{title}" in group "{group or ""}" not found.')

    dest_dir = os.path.join(conf.trash_path, *segments)
    os.makedirs(dest_dir, exist_ok=True)
    dest = os.path.join(dest_dir, filename)
    os.replace(src, dest)
    logger.info('Moved note "%s" from group "%s" to trash', safe_title, '/'.join(segments))
    return dest


def delete_empty_group(conf: JotdirConf, group: str) -> str:
    """Deletes a group's folder if it contains nothing at all, not even empty subfolders.

    The group is matched ignoring case. Returns the path of the deleted folder.

    Raises :exc:`jotdir.errors.InvalidInputError` if the group is empty after sanitizing,
    :exc:`jotdir.errors.NotFoundError` if the folder does not exist, and :exc:`jotdir.errors.NotEmptyError`
    if it has any contents.
    """
    segments = sanitize_group(group)
    if not segments:
        raise InvalidInputError('Invalid group provided for deletion.')
    path, segments = resolve_group(conf.notes_path, segments)
    try:
        entries = os.listdir(path)
    except (FileNotFoundError, NotADirectoryError):
        raise NotFoundError(f'Group "{group}" not found.') from None
    if entries:
        raise NotEmptyError(f'Group "{group}" is not empty and cannot be deleted.')
    os.rmdir(path)
    logger.info('Deleted empty group %s', '/'.join(segments))
    return path


def empty_trash(conf: JotdirConf) -> int:
    """Permanently deletes the trash folder and everything in it.

    Returns the number of note files that were in the trash, counted just before deleting it. It is not an
    error for the trash folder to be missing; 0 is returned in that case.
    """
    trash = conf.trash_path
    if not os.path.exists(trash):
        logger.info('Trash directory does not exist. Nothing to empty.')
        return 0
    count = count_items(trash, trash, 'file', lambda name, path, is_dir: is_note_file(name, conf.note_suffix))
    shutil.rmtree(trash)
    logger.info('Emptied trash. Deleted %d note files.', count)
    return count
