import json
from pathlib import Path
import pytest
from jotdir.accessor import DocumentAccessor, ParseError
from jotdir.models import NoteInfo


def test_load_and_info(fs, write_doc):
    write_doc('/data/notes/g/T.json', 'T', content='hello', modified='2024-02-01T00:00:00.000Z')
    acc = DocumentAccessor('/data/notes/g/T.json')
    assert acc.info('g') == NoteInfo('T', 'hello', 'g', '2024-01-01T00:00:00.000Z', '2024-02-01T00:00:00.000Z',
                                     'g/T.json')
    assert not acc.edited


def test_load_missing(fs):
    with pytest.raises(FileNotFoundError):
        DocumentAccessor('/nope.json').load()


@pytest.mark.parametrize('contents', ['not json', '[1, 2]', '{"versions": []}', '{"title": 3}', '\udcff'])
def test_load_corrupt(fs, contents):
    fs.create_file('/bad.json', contents=contents.encode('utf-8', 'surrogateescape'))
    acc = DocumentAccessor('/bad.json')
    with pytest.raises(ParseError) as exc_info:
        acc.load()
    assert exc_info.value.path == '/bad.json'
    assert acc.doc is None


def test_start_and_save(fs):
    fs.create_dir('/data')
    acc = DocumentAccessor('/data/New.json')
    acc.start('New', '2024-01-01T00:00:00.000Z')
    acc.add_version('body', '2024-01-01T00:00:00.000Z', title='New', group='', relative_path='New.json')
    assert acc.save()
    assert not acc.save()
    text = Path('/data/New.json').read_text()
    assert text.startswith('{\n  "title": "New",')
    assert json.loads(text) == {
        'title': 'New',
        'group': '',
        'relativePath': 'New.json',
        'createdDate': '2024-01-01T00:00:00.000Z',
        'versions': [{'content': 'body', 'createdDate': '2024-01-01T00:00:00.000Z'}],
    }


def test_add_version_keeps_created_and_extra_keys(fs, write_doc):
    write_doc('/data/notes/old/T.json', 'T', content='v1', color='blue')
    acc = DocumentAccessor('/data/notes/old/T.json')
    acc.load()
    acc.add_version('v2', '2024-03-01T00:00:00.000Z', title='T', group='Old', relative_path='Old/T.json')
    acc.save()
    data = json.loads(Path('/data/notes/old/T.json').read_text())
    assert data['createdDate'] == '2024-01-01T00:00:00.000Z'
    assert data['group'] == 'Old'
    assert data['relativePath'] == 'Old/T.json'
    assert data['color'] == 'blue'
    assert [v['content'] for v in data['versions']] == ['v2', 'v1']


def test_add_version_requires_document(fs):
    with pytest.raises(ValueError):
        DocumentAccessor('/x.json').add_version('c', 'now', title='x', group='', relative_path='x.json')


def test_save_keeps_unicode(fs):
    fs.create_dir('/data')
    acc = DocumentAccessor('/data/Café.json')
    acc.start('Café', '2024-01-01T00:00:00.000Z')
    acc.add_version('naïve ✓', '2024-01-01T00:00:00.000Z', title='Café', group='', relative_path='Café.json')
    acc.save()
    assert 'naïve ✓' in Path('/data/Café.json').read_text(encoding='utf-8')
