# tests/test_file_operations.py

import pytest

from smart_sorter.core.file_operations import DuplicateStrategy, ensure_directory, safe_copy


@pytest.fixture
def temp_dirs(tmp_path):
    source_dir = tmp_path / "source"
    dest_dir = tmp_path / "destination"
    source_dir.mkdir()
    (source_dir / "photo.jpg").write_text("new")
    return source_dir, dest_dir


def test_safe_copy_creates_folder_and_keeps_source(temp_dirs):
    source_dir, dest_dir = temp_dirs
    source = source_dir / "photo.jpg"

    status, final_path = safe_copy(source, dest_dir)

    assert status == "COPIED"
    assert final_path == dest_dir / "photo.jpg"
    assert final_path.read_text() == "new"
    assert source.exists()


def test_safe_copy_replaces_by_default(temp_dirs):
    source_dir, dest_dir = temp_dirs
    dest_dir.mkdir()
    (dest_dir / "photo.jpg").write_text("old")

    status, final_path = safe_copy(source_dir / "photo.jpg", dest_dir)

    assert status == "COPIED"
    assert final_path.read_text() == "new"
    assert len(list(dest_dir.iterdir())) == 1


def test_safe_copy_duplicate_skip(temp_dirs):
    source_dir, dest_dir = temp_dirs
    dest_dir.mkdir()
    (dest_dir / "photo.jpg").write_text("old")

    status, final_path = safe_copy(source_dir / "photo.jpg", dest_dir, DuplicateStrategy.SKIP)

    assert status == "SKIPPED"
    assert final_path.read_text() == "old"


def test_safe_copy_duplicate_append(temp_dirs):
    source_dir, dest_dir = temp_dirs
    dest_dir.mkdir()
    (dest_dir / "photo.jpg").write_text("old")
    (dest_dir / "photo_1.jpg").write_text("older")

    status, final_path = safe_copy(source_dir / "photo.jpg", dest_dir, DuplicateStrategy.APPEND_NUMBER)

    assert status == "COPIED"
    assert final_path.name == "photo_2.jpg"
    assert (dest_dir / "photo.jpg").read_text() == "old"


def test_safe_copy_missing_source_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        safe_copy(tmp_path / "gone.jpg", tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_ensure_directory_is_idempotent(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_directory(target) == target
    assert ensure_directory(target) == target
    assert target.is_dir()
