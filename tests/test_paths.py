import os.path
from jotdir.paths import GroupResolver, is_reserved, resolve_group, sanitize_group, sanitize_title


def test_sanitize_title():
    assert sanitize_title('  Hello World  ') == 'Hello World'
    assert sanitize_title('Note /\\?*:|"<> Title') == 'Note --------- Title'
    assert sanitize_title('100%') == '100-'
    assert sanitize_title('v1.2') == 'v1.2'
    assert sanitize_title('') == ''
    assert sanitize_title('   ') == ''
    assert sanitize_title(None) == ''


def test_sanitize_title_is_idempotent():
    for title in ['a/b\\c', 'What? Why: "this"', '<tag>|pipe*', 'plain']:
        once = sanitize_title(title)
        assert sanitize_title(once) == once


def test_sanitize_group():
    assert sanitize_group('') == []
    assert sanitize_group(None) == []
    assert sanitize_group('work') == ['work']
    assert sanitize_group('work/meetings') == ['work', 'meetings']
    assert sanitize_group('work\\meetings') == ['work', 'meetings']
    assert sanitize_group('//work///meetings/') == ['work', 'meetings']
    assert sanitize_group('Group /\\?*:|"<>.') == ['Group ', '--------']
    assert sanitize_group('../../etc') == ['--', '--', 'etc']
    assert sanitize_group('v1.2/notes') == ['v1-2', 'notes']


def test_sanitize_group_is_idempotent():
    for group in ['a/b.c\\d', '../x', 'What?/Why:']:
        once = sanitize_group(group)
        assert sanitize_group('/'.join(once)) == once


def test_is_reserved():
    assert is_reserved(['trash'], 'trash')
    assert is_reserved(['Trash', 'old'], 'trash')
    assert not is_reserved([], 'trash')
    assert not is_reserved(['work', 'trash'], 'trash')
    assert not is_reserved(['trashcan'], 'trash')


def test_resolve_group_reuses_existing_casing(fs):
    fs.create_dir('/notes/Work/Meetings')
    path, segments = resolve_group('/notes', ['work', 'MEETINGS', 'Daily'])
    assert segments == ['Work', 'Meetings', 'Daily']
    assert path == os.path.join('/notes', 'Work', 'Meetings', 'Daily')


def test_resolve_group_ignores_files(fs):
    fs.create_file('/notes/work')
    path, segments = resolve_group('/notes', ['Work'])
    assert segments == ['Work']


def test_resolve_group_missing_root(fs):
    path, segments = resolve_group('/nowhere', ['a', 'b'])
    assert segments == ['a', 'b']
    assert path == '/nowhere/a/b'


def test_resolve_group_empty(fs):
    assert resolve_group('/notes', []) == ('/notes', [])


def test_resolver_agrees_on_new_folders(fs):
    fs.create_dir('/notes')
    resolver = GroupResolver('/notes')
    assert resolver.resolve(['Projects', 'Alpha'])[1] == ['Projects', 'Alpha']
    assert resolver.resolve(['projects', 'ALPHA'])[1] == ['Projects', 'Alpha']
    assert not os.path.exists('/notes/Projects')


def test_resolver_caches_listings(fs):
    fs.create_dir('/notes')
    resolver = GroupResolver('/notes')
    resolver.resolve(['x'])
    fs.create_dir('/notes/Y')
    # the listing of /notes was read before Y existed
    assert resolver.resolve(['y'])[1] == ['y']
    assert GroupResolver('/notes').resolve(['y'])[1] == ['Y']
