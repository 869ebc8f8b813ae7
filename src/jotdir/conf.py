from __future__ import annotations
from dataclasses import dataclass, replace
import os
import os.path

CONF_ENV_VAR = 'JOTDIR_CONF'


@dataclass
class JotdirConf:
    """Tells jotdir where notes live.

    The notes tree and the trash tree are separate folders. Usually they are siblings, which :meth:`under`
    sets up for you, but they can be anywhere.
    """

    notes_path: str
    """The folder holding live notes. Each subfolder beneath it is a group."""

    trash_path: str
    """The folder that deleted notes are moved into, mirroring their groups.

    Emptying the trash deletes this whole folder.
    """

    reserved_name: str = 'trash'
    """A group name that cannot be used at the top level of the notes tree.

    Creating notes in a group whose first segment matches this (ignoring case) is refused, and a folder with
    exactly this name directly inside :attr:`notes_path` is left out of listings and statistics.
    """

    note_suffix: str = '.json'
    """The file extension of note files. Other files in the notes tree are ignored when listing."""

    @classmethod
    def under(cls, root: str, **kwargs) -> JotdirConf:
        """Returns a config using ``<root>/notes`` and ``<root>/trash``."""
        return cls(notes_path=os.path.join(root, 'notes'), trash_path=os.path.join(root, 'trash'), **kwargs)

    @classmethod
    def for_user(cls) -> JotdirConf:
        """Loads the config from ``~/.jotdir.conf.py``, or from the file named by ``$JOTDIR_CONF``.

        The file is executed as Python and must assign an instance of this class to the variable ``conf``.
        """
        path = os.environ.get(CONF_ENV_VAR) or os.path.expanduser(os.path.join('~', '.jotdir.conf.py'))
        if not os.path.exists(path):
            raise Exception(f'You need to create the config file: {path}')
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of JotdirConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self) -> JotdirConf:
        return replace(
            self,
            notes_path=os.path.realpath(self.notes_path),
            trash_path=os.path.realpath(self.trash_path),
        )

    def instantiate(self):
        from jotdir.api import Jotdir
        return Jotdir(self.standardize())
