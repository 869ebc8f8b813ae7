"""Command-line interface for jotdir."""


import argparse
import asyncio
import json
import logging
import sys
from terminaltables import AsciiTable
from jotdir.api import Jotdir
from jotdir.conf import JotdirConf
from jotdir.errors import Error
from jotdir.models import NoteInfo


def _print_note(info: NoteInfo) -> None:
    print(f'title: {info.title}')
    print(f'group: {info.group}')
    print(f'created: {info.created or ""}')
    print(f'modified: {info.modified or ""}')
    print(info.content)


async def _ls(args, jd: Jotdir) -> int:
    infos = await jd.list_notes(args.query or '', view_trash=args.trash)
    if args.json:
        print(json.dumps([i.as_json() for i in infos]))
    elif args.table:
        data = [('Group', 'Title', 'Created', 'Modified')]
        data.extend((i.group, i.title, i.created or '', i.modified or '') for i in infos)
        print(AsciiTable(data).table)
    else:
        for info in infos:
            print('--------------------')
            _print_note(info)
    return 0


async def _add(args, jd: Jotdir) -> int:
    content = args.content or ''
    if content == '-':
        content = sys.stdin.read()
    return await _create(args, jd, [{'title': args.title[0], 'group': args.group, 'content': content}])


async def _import(args, jd: Jotdir) -> int:
    with open(args.file[0], 'r', encoding='utf-8') as file:
        notes = json.load(file)
    if not isinstance(notes, list):
        notes = [notes]
    return await _create(args, jd, notes)


async def _create(args, jd: Jotdir, notes: list) -> int:
    result = await jd.create_notes(notes)
    if args.json:
        print(json.dumps(result.as_json()))
    else:
        for note in result.processed:
            print(f'Saved {"/".join(filter(None, [note.group, note.title]))}')
        for note in result.skipped:
            print(f'Skipped {note.title!r} in group {note.group!r}', file=sys.stderr)
    return 0 if not result.skipped else 1


async def _rm(args, jd: Jotdir) -> int:
    path = await jd.delete_note(args.title[0], args.group)
    print(f'Moved to {path}')
    return 0


async def _rmgroup(args, jd: Jotdir) -> int:
    await jd.delete_group(args.group[0])
    print(f'Deleted group {args.group[0]}')
    return 0


async def _empty_trash(args, jd: Jotdir) -> int:
    result = await jd.empty_trash()
    print(result.message)
    return 0


async def _stats(args, jd: Jotdir) -> int:
    stats = await jd.stats()
    if args.json:
        print(json.dumps(stats.as_json()))
    else:
        data = [
            ('Statistic', 'Value'),
            ('Notes', stats.note_count),
            ('Groups', stats.group_count),
            ('Notes in trash', stats.trash_count),
            ('Notes size (bytes)', stats.notes_size),
            ('Trash size (bytes)', stats.trash_size),
            ('Empty groups', '\n'.join(stats.empty_groups)),
        ]
        table = AsciiTable(data)
        table.justify_columns[1] = 'right'
        print(table.table)
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.set_defaults(func=None)
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log more details to stderr. Repeat for even more.')
    parser.add_argument('-r', '--root',
                        help='Folder containing the "notes" and "trash" folders. If omitted, the configuration '
                             'in ~/.jotdir.conf.py (or the file named by $JOTDIR_CONF) is used.')

    subs = parser.add_subparsers(title='Commands')

    p_ls = subs.add_parser(
        'ls',
        help='List notes. For full query syntax, see the documentation of jotdir.models.NoteQuery.parse - '
             'an example query is "group:work title:meeting created-after:2024-01-01".')
    p_ls.add_argument('query', nargs='?', help='Query string. If omitted, all notes are listed.')
    p_ls.add_argument('--trash', action='store_true', help='List notes in the trash instead.')
    p_ls_formats = p_ls.add_mutually_exclusive_group()
    p_ls_formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_ls_formats.add_argument('-t', '--table', action='store_true', help='Format output as a table.')
    p_ls.set_defaults(func=_ls)

    p_add = subs.add_parser(
        'add',
        help='Create a note, or save a new version of it if a note with the same title already exists '
             'in the group.')
    p_add.add_argument('title', nargs=1)
    p_add.add_argument('-g', '--group', default='', help='Group path, such as "work/meetings".')
    p_add.add_argument('-c', '--content', help='Note content. Use "-" to read it from stdin.')
    p_add.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_add.set_defaults(func=_add)

    p_import = subs.add_parser(
        'import',
        help='Create notes from a JSON file containing an array of objects with "title", "content", and '
             '"group" keys.')
    p_import.add_argument('file', nargs=1)
    p_import.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_import.set_defaults(func=_import)

    p_rm = subs.add_parser('rm', help='Move a note to the trash.')
    p_rm.add_argument('title', nargs=1)
    p_rm.add_argument('-g', '--group', default='', help='Group containing the note.')
    p_rm.set_defaults(func=_rm)

    p_rmgroup = subs.add_parser('rmgroup', help='Delete a group. Only empty groups can be deleted.')
    p_rmgroup.add_argument('group', nargs=1)
    p_rmgroup.set_defaults(func=_rmgroup)

    p_empty = subs.add_parser('empty-trash', help='Permanently delete all notes in the trash.')
    p_empty.set_defaults(func=_empty_trash)

    p_stats = subs.add_parser('stats', help='Show counts and sizes of notes, groups, and the trash.')
    p_stats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_stats.set_defaults(func=_stats)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    logging.basicConfig(level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)],
                        format='%(levelname)s %(name)s: %(message)s')
    jd = JotdirConf.under(args.root).instantiate() if args.root else Jotdir.for_user()
    try:
        return asyncio.run(args.func(args, jd))
    except Error as e:
        print(e.message, file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
