"""Provides :class:`DocumentAccessor`, which reads and writes individual note files."""

import json
import logging
from typing import Optional

from jotdir.models import NoteDoc, NoteInfo

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a note file is not valid JSON or does not have the shape of a note document."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause


class DocumentAccessor:
    """Reads and writes a single note file, specified to the constructor.

    .. attribute:: path
       :type: str

    .. attribute:: doc
       :type: Optional[NoteDoc]

       The loaded or newly started document, or None if neither :meth:`load` nor :meth:`start` has succeeded.

    .. attribute:: edited
       :type: bool

       If True, indicates the instance has unsaved changes to the document.
    """
    def __init__(self, path: str):
        self.path = path
        self.doc: Optional[NoteDoc] = None
        self.edited = False

    def load(self) -> NoteDoc:
        """Reads and parses the file.

        Raises :exc:`ParseError` if the file is corrupt, or an IO-related exception such as
        :exc:`FileNotFoundError` if it cannot be read.
        """
        with open(self.path, 'rb') as file:
            raw = file.read()
        try:
            self.doc = NoteDoc.from_json(json.loads(raw.decode('utf-8')))
        except ValueError as e:
            self.doc = None
            raise ParseError(f'Could not parse note file {self.path}: {e}', self.path, e) from e
        self.edited = False
        return self.doc

    def info(self, group: str) -> NoteInfo:
        """Returns the current state of the note, loading the file if necessary.

        May raise the same exceptions as :meth:`load`.
        """
        if self.doc is None:
            self.load()
        return self.doc.info(group)

    def start(self, title: str, created: str) -> NoteDoc:
        """Replaces any loaded document with a new, empty one, to be written over whatever is in the file."""
        self.doc = NoteDoc(title=title, created=created)
        self.edited = True
        return self.doc

    def add_version(self, content: str, created: str, *, title: str, group: str, relative_path: str) -> None:
        """Makes ``content`` the note's current content and records where the note now lives.

        The document's own creation date is left alone.
        """
        if self.doc is None:
            raise ValueError(f'No document has been loaded or started for {self.path}')
        self.doc.add_version(content, created)
        self.doc.title = title
        self.doc.group = group
        self.doc.relative_path = relative_path
        self.edited = True

    def save(self) -> bool:
        """Writes the document to the file as indented JSON, if there are unsaved changes.

        Returns True if there were changes to save, and False if there were none.
        This may overwrite changes on disk that were made since the data was loaded.
        """
        if not self.edited:
            return False
        text = json.dumps(self.doc.as_json(), indent=2, ensure_ascii=False)
        with open(self.path, 'w', encoding='utf-8') as file:
            file.write(text)
        self.edited = False
        logger.debug('Wrote note file %s', self.path)
        return True
