"""Keeps short notes as versioned JSON files in a folder hierarchy, with a trash folder for deleted notes.

If you installed via ``pip``, run ``jotdir -h`` to get help.
Or, run ``python3 -m jotdir.cli -h``.

To use the Python API, look at :class:`jotdir.api.Jotdir`
"""
