"""Provides the main entry point for using the library, :class:`Jotdir`"""

from __future__ import annotations
import asyncio
from typing import Iterable, List

from jotdir import trash
from jotdir.conf import JotdirConf
from jotdir.models import CreateResult, EmptyTrashResult, NoteInfo, NoteInput, NoteInputIsh, NoteQuery,\
    NoteQueryIsh, Stats
from jotdir.stats import collect_stats
from jotdir.store import FSStore


class Jotdir:
    """Main entry point for working programmatically with your notes.

    Generally, you should get an instance using :meth:`Jotdir.for_user`, or by calling
    :meth:`jotdir.conf.JotdirConf.instantiate`. All operations are coroutines. Failures are reported by raising
    subclasses of :exc:`jotdir.errors.Error`, or :exc:`OSError` for unexpected filesystem problems.

    .. attribute:: conf
       :type: jotdir.conf.JotdirConf

    .. attribute:: store
       :type: jotdir.store.FSStore

    Here's an example that moves every note mentioning "draft" in its title to the trash:

    .. code-block:: python

       import asyncio
       from jotdir.api import Jotdir

       async def main():
           jd = Jotdir.for_user()
           for note in await jd.list_notes({'titles': ['draft']}):
               await jd.delete_note(note.title, note.group)

       asyncio.run(main())
    """

    @staticmethod
    def for_user() -> Jotdir:
        """Creates an instance using the user's ``~/.jotdir.conf.py`` file.

        Raises :exc:`Exception` if it does not exist or does not define configuration.
        """
        return JotdirConf.for_user().instantiate()

    def __init__(self, conf: JotdirConf):
        self.conf = conf
        self.store = FSStore(conf)

    async def list_notes(self, filters: NoteQueryIsh = None, view_trash: bool = False) -> List[NoteInfo]:
        """Lists live notes, or notes in the trash if ``view_trash`` is True.

        ``filters`` may be anything accepted by :meth:`jotdir.models.NoteQuery.parse`.
        """
        return await self.store.query(NoteQuery.parse(filters), trash=view_trash)

    async def create_notes(self, notes: Iterable[NoteInputIsh]) -> CreateResult:
        """Creates notes, or adds versions to existing ones. Each note may be a dict or a :class:`NoteInput`.

        Raises :exc:`jotdir.errors.InvalidInputError` if any item is not a note at all; otherwise problems
        with individual notes are reported in :attr:`CreateResult.skipped`.
        """
        return await self.store.create([NoteInput.parse(n) for n in notes])

    async def delete_note(self, title: str, group: str = None) -> str:
        """Moves a note to the trash. See :func:`jotdir.trash.move_to_trash`."""
        return await asyncio.to_thread(trash.move_to_trash, self.conf, title, group or '')

    async def delete_group(self, group: str) -> str:
        """Deletes an empty group. See :func:`jotdir.trash.delete_empty_group`."""
        return await asyncio.to_thread(trash.delete_empty_group, self.conf, group)

    async def empty_trash(self) -> EmptyTrashResult:
        """Permanently deletes everything in the trash. See :func:`jotdir.trash.empty_trash`."""
        return EmptyTrashResult(await asyncio.to_thread(trash.empty_trash, self.conf))

    async def stats(self) -> Stats:
        return await collect_stats(self.conf)
