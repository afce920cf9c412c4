import os

import pytest

import defendertest.tree as tree
from defendertest.errors import DirectoryCreationError, InodeCreationError
from defendertest.names import NameSupplier
from defendertest.tree import WORKDIR, extend_and_fill, make_inode, make_workdir


def test_extend_and_fill_creates_one_level(tmp_path):
    calls = []
    new_dir = extend_and_fill(tmp_path, 10, NameSupplier(1), calls.append)
    assert new_dir.parent == tmp_path
    assert new_dir.is_dir()
    files = list(new_dir.iterdir())
    assert len(files) == 10
    assert calls == [1] * 10
    for f in files:
        assert f.read_bytes() == b"X"


def test_extend_and_fill_resets_file_scope(tmp_path):
    names = NameSupplier(2)
    d1 = extend_and_fill(tmp_path, 3, names)
    d2 = extend_and_fill(d1, 3, names)
    assert names.issued == {p.name for p in d2.iterdir()}


def test_zero_inodes_makes_empty_dir(tmp_path):
    new_dir = extend_and_fill(tmp_path, 0, NameSupplier(3))
    assert new_dir.is_dir()
    assert list(new_dir.iterdir()) == []


def test_existing_tree_is_not_overwritten(tmp_path):
    d = extend_and_fill(tmp_path, 5, NameSupplier(4))
    victim = next(d.iterdir())
    victim.write_bytes(b"keep me")
    again = extend_and_fill(tmp_path, 5, NameSupplier(4))
    assert again == d
    assert victim.read_bytes() == b"keep me"
    assert len(list(d.iterdir())) == 5


def test_make_inode_skips_existing(tmp_path):
    p = tmp_path / "x"
    assert make_inode(p) is True
    assert os.path.getsize(p) == 1
    assert make_inode(p) is False


def test_make_workdir_is_idempotent(tmp_path):
    w = make_workdir(tmp_path)
    assert w == tmp_path / WORKDIR
    assert make_workdir(tmp_path) == w
    assert w.is_dir()


def test_directory_creation_error(tmp_path):
    missing = tmp_path / "missing"
    with pytest.raises(DirectoryCreationError) as info:
        extend_and_fill(missing, 1, NameSupplier(5))
    assert str(missing) in str(info.value)
    assert isinstance(info.value.__cause__, OSError)


def test_inode_create_error(tmp_path, monkeypatch):
    def broken_open(*args, **kwargs):
        raise PermissionError("denied")
    monkeypatch.setattr(tree, "open", broken_open, raising=False)
    with pytest.raises(InodeCreationError) as info:
        make_inode(tmp_path / "f")
    assert info.value.stage == "create"
    assert info.value.path == tmp_path / "f"
    assert "create" in str(info.value)


def test_inode_write_error(tmp_path, monkeypatch):
    class Broken:
        def write(self, data):
            raise OSError(28, "No space left on device")

        def __enter__(self):
            return self

        def __exit__(self, *args):
            return False

    monkeypatch.setattr(tree, "open", lambda *a, **k: Broken(), raising=False)
    with pytest.raises(InodeCreationError) as info:
        make_inode(tmp_path / "f")
    assert info.value.stage == "write"
    assert "write" in str(info.value)


def test_failure_keeps_earlier_files(tmp_path, monkeypatch):
    real = tree.make_inode
    count = []

    def flaky(path):
        if len(count) == 3:
            raise InodeCreationError(path, "create")
        count.append(path)
        return real(path)

    monkeypatch.setattr(tree, "make_inode", flaky)
    with pytest.raises(InodeCreationError):
        extend_and_fill(tmp_path, 10, NameSupplier(6))
    d = next(tmp_path.iterdir())
    assert len(list(d.iterdir())) == 3


def test_make_inode_never_truncates(tmp_path, monkeypatch):
    # something shows up after any earlier existence check
    p = tmp_path / "late"
    p.write_bytes(b"other writer")
    monkeypatch.setattr(tree.os.path, "lexists", lambda path: False)
    assert make_inode(p) is False
    assert p.read_bytes() == b"other writer"
