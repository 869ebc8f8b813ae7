import io
import json
import os
from pathlib import Path
from freezegun import freeze_time
from jotdir import cli


def test_add_and_ls(fs, capsys):
    with freeze_time('2024-06-01T10:00:00Z'):
        assert cli.main(['--root', '/data', 'add', 'Standup', '-g', 'work/meetings', '-c', 'notes']) == 0
    out, err = capsys.readouterr()
    assert out == 'Saved work/meetings/Standup\n'

    assert cli.main(['--root', '/data', 'ls', '-j']) == 0
    out, err = capsys.readouterr()
    assert json.loads(out) == [{
        'title': 'Standup',
        'content': 'notes',
        'group': 'work/meetings',
        'createdDate': '2024-06-01T10:00:00.000Z',
        'modifiedDate': '2024-06-01T10:00:00.000Z',
        'relativePath': 'work/meetings/Standup.json',
    }]

    assert cli.main(['--root', '/data', 'ls']) == 0
    out, err = capsys.readouterr()
    assert out == """--------------------
title: Standup
group: work/meetings
created: 2024-06-01T10:00:00.000Z
modified: 2024-06-01T10:00:00.000Z
notes
"""


def test_ls_query_and_table(fs, capsys):
    cli.main(['--root', '/data', 'add', 'Alpha', '-g', 'a'])
    cli.main(['--root', '/data', 'add', 'Beta', '-g', 'b'])
    capsys.readouterr()
    assert cli.main(['--root', '/data', 'ls', '-t', 'group:b']) == 0
    out, err = capsys.readouterr()
    assert 'Beta' in out
    assert 'Alpha' not in out
    assert out.splitlines()[1].split('|')[1].strip() == 'Group'


def test_add_from_stdin(fs, capsys, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO('from stdin'))
    assert cli.main(['--root', '/data', 'add', 'Piped', '-c', '-', '-j']) == 0
    out, err = capsys.readouterr()
    assert json.loads(out) == {
        'message': '1 note(s) processed successfully. 0 skipped.',
        'processedCount': 1,
        'processed': [{'title': 'Piped', 'group': ''}],
        'skipped': [],
    }
    data = json.loads(Path('/data/notes/Piped.json').read_text())
    assert data['versions'][0]['content'] == 'from stdin'


def test_add_skipped(fs, capsys):
    assert cli.main(['--root', '/data', 'add', 'x', '-g', 'trash']) == 1
    out, err = capsys.readouterr()
    assert out == ''
    assert err == "Skipped 'x' in group 'trash'\n"


def test_import(fs, capsys):
    fs.create_file('/in.json', contents=json.dumps([
        {'title': 'One', 'content': '1'},
        {'title': 'Two', 'content': '2', 'group': 'nums'},
    ]))
    assert cli.main(['--root', '/data', 'import', '/in.json']) == 0
    out, err = capsys.readouterr()
    assert out == 'Saved One\nSaved nums/Two\n'
    assert os.path.isfile('/data/notes/nums/Two.json')


def test_import_invalid(fs, capsys):
    fs.create_file('/in.json', contents='[1, 2]')
    assert cli.main(['--root', '/data', 'import', '/in.json']) == 1
    out, err = capsys.readouterr()
    assert err.strip() != ''
    assert not os.path.exists('/data/notes')


def test_rm_and_trash(fs, capsys):
    cli.main(['--root', '/data', 'add', 'Old', '-g', 'Archive'])
    capsys.readouterr()
    assert cli.main(['--root', '/data', 'rm', 'Old', '-g', 'archive']) == 0
    out, err = capsys.readouterr()
    assert out == 'Moved to /data/trash/Archive/Old.json\n'

    assert cli.main(['--root', '/data', 'ls', '--trash', '-j']) == 0
    out, err = capsys.readouterr()
    assert [n['title'] for n in json.loads(out)] == ['Old']

    assert cli.main(['--root', '/data', 'rmgroup', 'archive']) == 0
    out, err = capsys.readouterr()
    assert out == 'Deleted group archive\n'
    assert not os.path.exists('/data/notes/Archive')

    assert cli.main(['--root', '/data', 'empty-trash']) == 0
    out, err = capsys.readouterr()
    assert out == 'Trash emptied successfully. 1 note(s) permanently deleted.\n'
    assert cli.main(['--root', '/data', 'empty-trash']) == 0
    out, err = capsys.readouterr()
    assert out == 'Trash is already empty.\n'


def test_errors(fs, capsys):
    assert cli.main(['--root', '/data', 'ls']) == 1
    out, err = capsys.readouterr()
    assert out == ''
    assert err != ''
    assert cli.main(['--root', '/data', 'rm', 'missing']) == 1
    out, err = capsys.readouterr()
    assert err == 'Note with title "missing" in group "" not found.\n'
    fs.create_file('/data/notes/full/n.json', contents='{"title": "n"}')
    assert cli.main(['--root', '/data', 'rmgroup', 'full']) == 1
    out, err = capsys.readouterr()
    assert err == 'Group "full" is not empty and cannot be deleted.\n'


def test_stats(fs, capsys):
    cli.main(['--root', '/data', 'add', 'A', '-g', 'g'])
    fs.create_dir('/data/notes/empty')
    capsys.readouterr()
    assert cli.main(['--root', '/data', 'stats', '-j']) == 0
    out, err = capsys.readouterr()
    stats = json.loads(out)
    assert stats['noteCount'] == 1
    assert stats['groupCount'] == 2
    assert stats['emptyGroups'] == ['empty']
    assert stats['trashCount'] == 0
    assert stats['trashSize'] == 0
    assert stats['notesSize'] == os.path.getsize('/data/notes/g/A.json')

    assert cli.main(['--root', '/data', 'stats']) == 0
    out, err = capsys.readouterr()
    assert 'Notes in trash' in out


def test_user_conf(fs, capsys, monkeypatch):
    monkeypatch.delenv('JOTDIR_CONF', raising=False)
    fs.create_file(os.path.expanduser('~/.jotdir.conf.py'), contents="""
from jotdir.conf import *
conf = JotdirConf.under('/mine')
""")
    assert cli.main(['add', 'Mine']) == 0
    assert os.path.isfile('/mine/notes/Mine.json')


def test_no_command(fs, capsys):
    assert cli.main([]) == 1
