"""
Directory chain building.

Every call to extend_and_fill adds one directory below the current one and
fills it with single byte files. Entries that already exist are left alone,
so running against a tree that is already there is harmless.
"""

import os
from pathlib import Path

from .errors import DirectoryCreationError, InodeCreationError

WORKDIR = "defendertest_data"
CONTENT = b"X"


def make_dir(path: Path) -> Path:
    if not os.path.lexists(path):
        try:
            path.mkdir()
        except OSError as ex:
            raise DirectoryCreationError(path) from ex
    return path


def make_workdir(root) -> Path:
    """create the data folder all runs write into, if missing"""
    return make_dir(Path(root) / WORKDIR)


def make_inode(path: Path) -> bool:
    """write one byte file at path, returns False if something is
    already there
    """
    try:
        f = open(path, "xb", buffering=0)
    except FileExistsError:
        return False
    except OSError as ex:
        raise InodeCreationError(path, "create") from ex
    with f:
        try:
            f.write(CONTENT)
        except OSError as ex:
            raise InodeCreationError(path, "write") from ex
    return True


def extend_and_fill(current_dir, inode_count: int, names, progress=None) -> Path:
    """
    Create a new subdirectory of current_dir and put inode_count files in it.

    Params:
    current_dir - directory the new level goes into
    inode_count - files to create in the new level
    names - NameSupplier, the file name scope is reset here
    progress - optional callable, called with 1 after every file

    Returns the new directory so the next level can be chained below it.
    """
    new_dir = make_dir(Path(current_dir) / names.next_dir_name())

    names.reset()
    for _ in range(inode_count):
        make_inode(new_dir / names.next_unique_name())
        if progress:
            progress(1)

    return new_dir
