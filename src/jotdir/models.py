"""Defines classes for representing note documents, listing results, queries, and operation results.

The most important classes are :class:`NoteDoc`, :class:`NoteInfo`, and :class:`NoteQuery`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
import re
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Union
from urllib.parse import unquote_plus

from jotdir.errors import InvalidDateError, InvalidInputError

DATE_ONLY_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
GROUP_SEPARATOR_RE = re.compile(r'[\\/]+')


def utc_now_iso() -> str:
    """Returns the current time in the format used for note timestamps, e.g. ``2024-05-06T07:08:09.123Z``."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_date(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Converts a date filter value to a timezone-aware datetime.

    ``YYYY-MM-DD`` is interpreted as midnight UTC. Anything else must be an ISO 8601 timestamp; a trailing ``Z``
    is accepted, and timestamps without an offset are assumed to be UTC.

    Parsing relies on :meth:`datetime.datetime.fromisoformat`, so before Python 3.11 only the extended format
    with 0, 3 or 6 fractional digits is accepted; inputs like ``20240101T000000Z`` or ``...T00:00:00.5Z``
    are reported as invalid there.

    Returns None for None or the empty string. Raises :exc:`jotdir.errors.InvalidDateError` for anything else
    that cannot be parsed.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str):
        raise InvalidDateError(str(value))
    text = value.strip()
    if DATE_ONLY_RE.match(text):
        text += 'T00:00:00+00:00'
    elif text[-1:] in ('Z', 'z'):
        text = text[:-1] + '+00:00'
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        raise InvalidDateError(value) from None


def _as_utc(value: datetime) -> datetime:
    if not value.tzinfo:
        return value.replace(tzinfo=timezone.utc)
    return value


def _stored_date(value: Optional[str]) -> Optional[datetime]:
    try:
        return parse_date(value) if isinstance(value, str) else None
    except InvalidDateError:
        return None


def normalize_group(group: str) -> str:
    """Converts backslashes to slashes and drops empty path segments, e.g. ``a\\\\b//c/`` becomes ``a/b/c``."""
    return '/'.join(part for part in GROUP_SEPARATOR_RE.split(group or '') if part)


@dataclass
class Version:
    """One snapshot of a note's content."""

    content: str = ''

    created: Optional[str] = None
    """When this snapshot was written, as an ISO 8601 string."""

    @classmethod
    def from_json(cls, data: Any) -> Version:
        if not isinstance(data, dict):
            raise ValueError(f'Version must be an object, not {type(data).__name__}')
        content = data.get('content')
        if content is None:
            content = ''
        elif not isinstance(content, str):
            raise ValueError(f'Version content must be a string, not {type(content).__name__}')
        return cls(content=content, created=data.get('createdDate'))

    def as_json(self) -> dict:
        return {'content': self.content, 'createdDate': self.created}


@dataclass
class NoteDoc:
    """The full contents of a note file, including its version history.

    Versions are ordered newest first, so ``versions[0]`` holds the note's current content.
    """

    title: str

    group: str = ''
    """Slash-separated group path, or the empty string for notes at the top of the tree."""

    relative_path: Optional[str] = None
    """Path of the file relative to the root of the tree it was written to."""

    created: Optional[str] = None
    """When the note was first written. This is never changed by later updates."""

    versions: List[Version] = field(default_factory=list)

    extra: Dict[str, Any] = field(default_factory=dict)
    """Any other keys found in the file, which are written back unchanged."""

    @classmethod
    def from_json(cls, data: Any) -> NoteDoc:
        """Builds an instance from parsed JSON.

        Raises :exc:`ValueError` if the data does not have the shape of a note document. A missing or
        non-list ``versions`` value is treated as an empty history.
        """
        if not isinstance(data, dict):
            raise ValueError(f'Document must be an object, not {type(data).__name__}')
        data = dict(data)
        title = data.pop('title', None)
        if not isinstance(title, str):
            raise ValueError('Document has no title')
        versions = data.pop('versions', None)
        if not isinstance(versions, list):
            versions = []
        return cls(
            title=title,
            group=data.pop('group', None) or '',
            relative_path=data.pop('relativePath', None),
            created=data.pop('createdDate', None),
            versions=[Version.from_json(v) for v in versions],
            extra=data,
        )

    def as_json(self) -> dict:
        result = {
            'title': self.title,
            'group': self.group,
            'relativePath': self.relative_path,
            'createdDate': self.created,
            'versions': [v.as_json() for v in self.versions],
        }
        for k, v in self.extra.items():
            result.setdefault(k, v)
        return result

    def latest(self) -> Optional[Version]:
        return self.versions[0] if self.versions else None

    def add_version(self, content: str, created: str) -> None:
        """Makes the given content the current version, keeping older versions after it."""
        self.versions.insert(0, Version(content, created))

    def info(self, group: str) -> NoteInfo:
        """Projects the document to its current state.

        ``group`` is the group the file was actually found in, which takes precedence over the
        group recorded inside the document.
        """
        latest = self.latest()
        return NoteInfo(
            title=self.title,
            content=latest.content if latest else '',
            group=group,
            created=self.created,
            modified=latest.created if latest else None,
            relative_path=self.relative_path,
        )


@dataclass
class NoteInfo:
    """The current state of a note, as returned by listings."""

    title: str
    content: str
    group: str
    created: Optional[str] = None
    modified: Optional[str] = None
    relative_path: Optional[str] = None

    def as_json(self) -> dict:
        return {
            'title': self.title,
            'content': self.content,
            'group': self.group,
            'createdDate': self.created,
            'modifiedDate': self.modified,
            'relativePath': self.relative_path,
        }


@dataclass
class NoteInput:
    """A request to create a note, or to add a new version to an existing one."""

    title: str
    content: str = ''
    group: str = ''

    @classmethod
    def parse(cls, val: NoteInputIsh) -> NoteInput:
        """Converts the parameter to a NoteInput, if it isn't one already.

        Dicts may have the keys ``title``, ``content`` and ``group``; missing or null values become
        empty strings. Raises :exc:`jotdir.errors.InvalidInputError` for anything else.
        """
        if isinstance(val, NoteInput):
            return val
        if not isinstance(val, dict):
            raise InvalidInputError(f'Expected a note object, not {type(val).__name__}')
        values = {k: val.get(k) or '' for k in ('title', 'content', 'group')}
        for k, v in values.items():
            if not isinstance(v, str):
                raise InvalidInputError(f'Note {k} must be a string')
        return cls(**values)

    def as_json(self) -> dict:
        return {'title': self.title, 'group': self.group}


NoteInputIsh = Union[dict, NoteInput]


@dataclass
class CreatedNote:
    """Identifies a note that was written, using its sanitized title and resolved group."""

    title: str
    group: str

    def as_json(self) -> dict:
        return {'title': self.title, 'group': self.group}


@dataclass
class CreateResult:
    processed: List[CreatedNote] = field(default_factory=list)

    skipped: List[NoteInput] = field(default_factory=list)
    """The inputs that were not written, exactly as they were supplied."""

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    @property
    def message(self) -> str:
        return f'{len(self.processed)} note(s) processed successfully. {len(self.skipped)} skipped.'

    def as_json(self) -> dict:
        return {
            'message': self.message,
            'processedCount': self.processed_count,
            'processed': [n.as_json() for n in self.processed],
            'skipped': [n.as_json() for n in self.skipped],
        }


@dataclass
class EmptyTrashResult:
    deleted_count: int = 0

    @property
    def message(self) -> str:
        if not self.deleted_count:
            return 'Trash is already empty.'
        return f'Trash emptied successfully. {self.deleted_count} note(s) permanently deleted.'

    def as_json(self) -> dict:
        return {'message': self.message, 'deletedCount': self.deleted_count}


@dataclass
class Stats:
    note_count: int = 0
    group_count: int = 0
    empty_groups: List[str] = field(default_factory=list)
    trash_count: int = 0
    notes_size: int = 0
    """Total size in bytes of every file under the notes directory."""
    trash_size: int = 0
    """Total size in bytes of every file under the trash directory."""

    def as_json(self) -> dict:
        return {
            'noteCount': self.note_count,
            'groupCount': self.group_count,
            'emptyGroups': list(self.empty_groups),
            'trashCount': self.trash_count,
            'notesSize': self.notes_size,
            'trashSize': self.trash_size,
        }


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    text = text.lower()
    return any(n.lower() in text for n in needles)


def _in_range(value: Optional[str], before: Optional[datetime], after: Optional[datetime]) -> bool:
    if not (before or after):
        return True
    date = _stored_date(value)
    if not date:
        return False
    if before and date >= before:
        return False
    if after and date <= after:
        return False
    return True


@dataclass
class NoteQuery:
    """Represents criteria for listing notes.

    Some methods that take a NoteQuery parameter also accept strings or dicts as a convenience, which they
    pass to :meth:`parse`.

    All criteria are optional. If multiple criteria are specified, only notes that satisfy *all* of them match.
    Date bounds are exclusive, and when any bound on a date is set, notes lacking a valid value for that date
    do not match.
    """

    groups: Set[str] = field(default_factory=set)
    """If non-empty, notes must be in exactly one of these groups. The empty string means the top level."""

    titles: List[str] = field(default_factory=list)
    """If non-empty, note titles must contain at least one of these strings, ignoring case."""

    contents: List[str] = field(default_factory=list)
    """If non-empty, note content must contain at least one of these strings, ignoring case."""

    created_before: Optional[datetime] = None
    created_after: Optional[datetime] = None
    modified_before: Optional[datetime] = None
    modified_after: Optional[datetime] = None

    DATE_KEYS = {
        'createdBefore': 'created_before',
        'createdAfter': 'created_after',
        'modifiedBefore': 'modified_before',
        'modifiedAfter': 'modified_after',
    }

    STR_DATE_KEYS = {
        'created-before': 'created_before',
        'created-after': 'created_after',
        'modified-before': 'modified_before',
        'modified-after': 'modified_after',
    }

    @classmethod
    def parse(cls, val: NoteQueryIsh) -> NoteQuery:
        """Converts the parameter to a NoteQuery, if it isn't one already.

        A dict may use the keys ``groups``, ``titles``, ``contents`` (each a list of strings or a single string),
        and ``createdBefore``, ``createdAfter``, ``modifiedBefore``, ``modifiedAfter``.

        Query strings are split on spaces. Each part can be one of the following:

        * ``group:GROUP1,GROUP2`` - notes must be in one of the groups (``group:`` alone means the top level)
        * ``title:TEXT1,TEXT2`` - titles must contain one of the strings
        * ``content:TEXT1,TEXT2`` - content must contain one of the strings
        * ``created-before:DATE``, ``created-after:DATE``, ``modified-before:DATE``, ``modified-after:DATE``
        * any other word without a colon is treated like ``title:WORD``

        Values are percent-decoded, so ``group:My%20Group`` matches a group with a space in its name.

        Raises :exc:`jotdir.errors.InvalidDateError` if any date cannot be parsed.
        """
        if isinstance(val, NoteQuery):
            return val
        if not val:
            return cls()
        if isinstance(val, str):
            return cls._parse_str(val)
        query = cls(
            groups={normalize_group(g) for g in _as_list(val.get('groups'))},
            titles=_as_list(val.get('titles')),
            contents=_as_list(val.get('contents')),
        )
        for key, attr in cls.DATE_KEYS.items():
            setattr(query, attr, parse_date(val.get(key)))
        return query

    @classmethod
    def _parse_str(cls, strquery: str) -> NoteQuery:
        query = cls()
        for term in strquery.split():
            key, sep, value = term.partition(':')
            key = key.lower()
            if not sep:
                query.titles.append(unquote_plus(term))
            elif key == 'group':
                query.groups.update(normalize_group(unquote_plus(g)) for g in value.split(','))
            elif key == 'title':
                query.titles.extend(unquote_plus(t) for t in value.split(',') if t)
            elif key == 'content':
                query.contents.extend(unquote_plus(t) for t in value.split(',') if t)
            elif key in cls.STR_DATE_KEYS:
                setattr(query, cls.STR_DATE_KEYS[key], parse_date(unquote_plus(value)))
        return query

    def matches(self, info: NoteInfo) -> bool:
        if self.groups and info.group not in self.groups:
            return False
        if self.titles and not _contains_any(info.title, self.titles):
            return False
        if self.contents and not _contains_any(info.content, self.contents):
            return False
        return (_in_range(info.created, self.created_before, self.created_after)
                and _in_range(info.modified, self.modified_before, self.modified_after))

    def apply_filtering(self, infos: Iterable[NoteInfo]) -> Iterator[NoteInfo]:
        """Yields the entries from the given iterable which match the criteria of this query."""
        for info in infos:
            if info and self.matches(info):
                yield info


def _as_list(val) -> List[str]:
    if not val:
        return []
    if isinstance(val, str):
        return [val]
    return [v for v in val if isinstance(v, str)]


NoteQueryIsh = Union[str, dict, NoteQuery, None]
