"""
Unit tests for FileSystemClient.
"""

import shutil

from wasmedgeup.filesystem import FileSystemClient


class TestFileSystemClient:
    """Tests for the basic FileSystemClient operations."""

    def test_exists_and_is_dir(self, tmp_path):
        client = FileSystemClient()
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")

        assert client.exists(file_path)
        assert not client.is_dir(file_path)
        assert client.is_dir(tmp_path)
        assert not client.exists(tmp_path / "missing")

    def test_mkdir_and_size(self, tmp_path):
        client = FileSystemClient()
        nested = tmp_path / "a" / "b"
        client.mkdir(nested, parents=True, exist_ok=True)
        (nested / "f").write_bytes(b"12345")

        assert client.size(nested / "f") == 5
        assert [p.name for p in client.iterdir(nested)] == ["f"]

    def test_rmtree(self, tmp_path):
        client = FileSystemClient()
        (tmp_path / "d" / "e").mkdir(parents=True)

        client.rmtree(tmp_path / "d")

        assert not (tmp_path / "d").exists()


class TestCopyTree:
    """Tests for FileSystemClient.copy_tree."""

    def test_copies_relative_layout(self, tmp_path):
        source = tmp_path / "src"
        (source / "bin").mkdir(parents=True)
        (source / "lib64").mkdir()
        (source / "bin" / "wasmedge").write_bytes(b"bin")
        (source / "lib64" / "libwasmedge.so").write_bytes(b"lib")
        (source / "env").write_text("export PATH")
        dest = tmp_path / "dest"

        copied = FileSystemClient().copy_tree(source, dest)

        assert copied == 3
        assert (dest / "bin" / "wasmedge").read_bytes() == b"bin"
        assert (dest / "lib64" / "libwasmedge.so").read_bytes() == b"lib"
        assert (dest / "env").read_text() == "export PATH"

    def test_overwrites_and_keeps_other_files(self, tmp_path):
        source = tmp_path / "src"
        source.mkdir()
        (source / "version").write_text("0.14.1")
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "version").write_text("0.13.5")
        (dest / "unrelated").write_text("keep")

        FileSystemClient().copy_tree(source, dest)

        assert (dest / "version").read_text() == "0.14.1"
        assert (dest / "unrelated").read_text() == "keep"

    def test_empty_directories_not_copied(self, tmp_path):
        source = tmp_path / "src"
        (source / "empty").mkdir(parents=True)

        assert FileSystemClient().copy_tree(source, tmp_path / "dest") == 0
        assert not (tmp_path / "dest" / "empty").exists()

    def test_failed_copy_is_skipped(self, tmp_path, mocker, caplog):
        source = tmp_path / "src"
        source.mkdir()
        (source / "bad").write_text("bad")
        (source / "good").write_text("good")
        dest = tmp_path / "dest"
        real_copy2 = shutil.copy2

        def copy2(src, dst, *args, **kwargs):
            if src.name == "bad":
                raise PermissionError("denied")
            return real_copy2(src, dst, *args, **kwargs)

        mocker.patch("wasmedgeup.filesystem.shutil.copy2", side_effect=copy2)

        with caplog.at_level("WARNING", logger="wasmedgeup.filesystem"):
            copied = FileSystemClient().copy_tree(source, dest)

        assert copied == 1
        assert (dest / "good").read_text() == "good"
        assert not (dest / "bad").exists()
        assert "Failed to copy" in caplog.text

    def test_failed_directory_creation_is_skipped(self, tmp_path, caplog):
        source = tmp_path / "src"
        (source / "conflict").mkdir(parents=True)
        (source / "conflict" / "file").write_text("x")
        (source / "other").write_text("y")
        dest = tmp_path / "dest"
        dest.mkdir()
        # A regular file where a directory is needed
        (dest / "conflict").write_text("not a directory")

        with caplog.at_level("WARNING", logger="wasmedgeup.filesystem"):
            copied = FileSystemClient().copy_tree(source, dest)

        assert copied == 1
        assert (dest / "other").read_text() == "y"
        assert "Failed to create directory" in caplog.text
