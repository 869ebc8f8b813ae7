"""Provides :class:`FSStore`, which lists, creates, and updates note documents on the filesystem."""

import asyncio
import logging
import os
import os.path
from typing import Iterable, List, Optional

from jotdir.accessor import DocumentAccessor, ParseError
from jotdir.conf import JotdirConf
from jotdir.errors import NotFoundError
from jotdir.models import CreatedNote, CreateResult, NoteInfo, NoteInput, NoteQuery, NoteQueryIsh, utc_now_iso
from jotdir.paths import GroupResolver, is_reserved, sanitize_group, sanitize_title
from jotdir.walk import WalkEntry, walk_notes

logger = logging.getLogger(__name__)


class FSStore:
    """Reads and writes note documents beneath the folders named in a :class:`jotdir.conf.JotdirConf`.

    Work on individual files runs in worker threads, and the files of one call are processed concurrently.

    Nothing prevents two concurrent writes to the same note from interfering: if two :meth:`create` calls
    (or two notes in the same call) resolve to the same file, both read the same prior version history, and
    whichever write lands last wins, silently dropping the other's new version. jotdir assumes a single user.

    .. attribute:: conf
       :type: JotdirConf
    """
    def __init__(self, conf: JotdirConf):
        self.conf = conf

    def _root(self, trash: bool) -> str:
        return self.conf.trash_path if trash else self.conf.notes_path

    async def query(self, query: NoteQueryIsh = None, *, trash: bool = False) -> List[NoteInfo]:
        """Returns the current state of every note matching the query, sorted by group and title.

        If ``trash`` is True, notes in the trash are listed instead of live notes.

        Files that cannot be parsed are logged and left out. Raises :exc:`jotdir.errors.NotFoundError`
        if the folder being listed does not exist, and :exc:`jotdir.errors.InvalidDateError` if the query
        contains an invalid date.
        """
        query = NoteQuery.parse(query)
        root = self._root(trash)
        exclude = () if trash else (self.conf.reserved_name,)
        try:
            entries = await asyncio.to_thread(
                lambda: list(walk_notes(root, root, exclude, self.conf.note_suffix)))
        except FileNotFoundError:
            raise NotFoundError(f'{"Trash" if trash else "Notes"} directory not found: {root}') from None
        infos = await asyncio.gather(*(asyncio.to_thread(self._read_info, e) for e in entries))
        result = list(query.apply_filtering(infos))
        result.sort(key=lambda i: (i.group.lower(), i.title.lower()))
        return result

    @staticmethod
    def _read_info(entry: WalkEntry) -> Optional[NoteInfo]:
        try:
            return DocumentAccessor(entry.path).info(entry.group)
        except ParseError as e:
            logger.warning('Skipping corrupt note file %s: %s', entry.path, e.cause)
        except OSError as e:
            logger.warning('Skipping unreadable note file %s: %s', entry.path, e)
        return None

    async def create(self, notes: Iterable[NoteInput]) -> CreateResult:
        """Writes each note, adding a new version if a note with the same title already exists in its group.

        Titles and groups are sanitized (see :mod:`jotdir.paths`), and groups reuse the casing of existing
        folders. Notes are skipped if their title is empty after sanitizing, if their group starts with the
        reserved name, or if writing them fails; skipping one note does not affect the others.

        Every version written by one call gets the same timestamp.
        """
        notes = list(notes)
        resolver = GroupResolver(self.conf.notes_path)
        now = utc_now_iso()
        written = await asyncio.gather(*(asyncio.to_thread(self._write_note, n, resolver, now) for n in notes))
        result = CreateResult()
        for note, created in zip(notes, written):
            if created:
                result.processed.append(created)
            else:
                result.skipped.append(note)
        return result

    def _write_note(self, note: NoteInput, resolver: GroupResolver, now: str) -> Optional[CreatedNote]:
        title = sanitize_title(note.title)
        if not title:
            logger.warning('Skipping note with empty or invalid title.')
            return None
        segments = sanitize_group(note.group)
        if is_reserved(segments, self.conf.reserved_name):
            logger.warning('Skipping note "%s" in disallowed group: %s', title, note.group)
            return None

        try:
            dirpath, segments = resolver.resolve(segments)
            group = '/'.join(segments)
            path = os.path.join(dirpath, title + self.conf.note_suffix)
            os.makedirs(dirpath, exist_ok=True)

            acc = DocumentAccessor(path)
            try:
                acc.load()
            except FileNotFoundError:
                acc.start(title, now)
            except ParseError as e:
                logger.warning('Replacing corrupt note file %s: %s', path, e.cause)
                acc.start(title, now)
            acc.add_version(note.content, now, title=title, group=group,
                            relative_path='/'.join(segments + [title + self.conf.note_suffix]))
            acc.save()
        except OSError:
            logger.exception('Failed to write note "%s" in group "%s"', note.title, note.group)
            return None

        logger.info('Wrote note "%s" in group "%s"', title, group)
        return CreatedNote(title, group)
