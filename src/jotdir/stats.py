"""Collects counts and sizes across the notes and trash trees."""

import asyncio

from jotdir.conf import JotdirConf
from jotdir.models import Stats
from jotdir.walk import count_items, find_empty_dirs, is_note_file, total_size


async def collect_stats(conf: JotdirConf) -> Stats:
    """Counts notes and groups and measures both trees.

    The reserved top-level folder is excluded from everything measured in the notes tree except
    :attr:`Stats.notes_size`. Missing folders count as empty. Any other error is raised.
    """
    notes, trash = conf.notes_path, conf.trash_path
    exclude = (conf.reserved_name,)

    def is_note(name, path, is_dir):
        return is_note_file(name, conf.note_suffix)

    results = await asyncio.gather(
        asyncio.to_thread(count_items, notes, notes, 'file', is_note, exclude),
        asyncio.to_thread(count_items, notes, notes, 'directory', None, exclude),
        asyncio.to_thread(find_empty_dirs, notes, notes, exclude),
        asyncio.to_thread(count_items, trash, trash, 'file', is_note),
        asyncio.to_thread(total_size, notes),
        asyncio.to_thread(total_size, trash),
    )
    return Stats(*results)
