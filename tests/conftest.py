import json
import os.path
import pytest
from jotdir.conf import JotdirConf


@pytest.fixture
def conf(fs):
    return JotdirConf.under('/data')


@pytest.fixture
def write_doc(fs):
    """Returns a function that writes a note document with a single version."""
    def write(path, title, created='2024-01-01T00:00:00.000Z', content='', modified=None, **extra):
        doc = {
            'title': title,
            'group': os.path.dirname(os.path.relpath(path, '/data/notes')),
            'relativePath': os.path.relpath(path, '/data/notes'),
            'createdDate': created,
            'versions': [{'content': content, 'createdDate': modified or created}],
        }
        doc.update(extra)
        fs.create_file(path, contents=json.dumps(doc))
        return doc
    return write
