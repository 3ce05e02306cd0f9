# tests/test_files.py
import pytest

from smbuilder.utils.files import OutputFile, OutputFiles, atomic_write
from smbuilder.utils.result import ExitCode, WriteError


def test_written_files_read_back_identically(tmp_path):
    content = "int x;\r\n// café\n\tno trailing newline"
    files = OutputFiles(tmp_path)
    files.add_file("a.h", content)
    files.add_file("a.c", "")

    result = files.write()

    assert result.unwrap() == f"The files have been written to {tmp_path}."
    assert (tmp_path / "a.h").read_bytes() == content.encode("utf-8")
    assert (tmp_path / "a.c").read_bytes() == b""


def test_existing_files_are_overwritten(tmp_path):
    (tmp_path / "m.c").write_text("old content that is longer than the new one")
    files = OutputFiles(tmp_path)
    files.add_file("m.c", "new")

    assert files.write().is_ok()
    assert (tmp_path / "m.c").read_text() == "new"


def test_output_directory_is_created(tmp_path):
    target = tmp_path / "nested" / "out"
    files = OutputFiles(target)
    files.add_file("m.h", "// m\n")

    assert files.write().is_ok()
    assert (target / "m.h").exists()


def test_files_are_kept_in_insertion_order(tmp_path):
    files = OutputFiles(tmp_path)
    files.add_file("b.h", "")
    files.add_file("a.c", "")

    assert files.names == ["b.h", "a.c"]
    assert files.files[0] == OutputFile(name="b.h", content="")


def test_no_temporary_files_are_left(tmp_path):
    files = OutputFiles(tmp_path)
    files.add_file("m.h", "x")
    files.write()

    assert [p.name for p in tmp_path.iterdir()] == ["m.h"]


def test_directory_that_is_a_file_fails(tmp_path):
    blocker = tmp_path / "out"
    blocker.write_text("not a directory")
    files = OutputFiles(blocker)
    files.add_file("m.h", "x")

    result = files.write()

    assert result.is_err()
    error = result.unwrap_err()
    assert isinstance(error, WriteError)
    assert error.code == ExitCode.WRITE_FAILED
    assert error.path == str(blocker)


def test_unwritable_file_fails_and_keeps_earlier_files(tmp_path):
    (tmp_path / "m.c").mkdir()
    files = OutputFiles(tmp_path)
    files.add_file("m.h", "header")
    files.add_file("m.c", "source")

    result = files.write()

    assert result.is_err()
    assert result.unwrap_err().path == str(tmp_path / "m.c")
    assert (tmp_path / "m.h").read_text() == "header"


def test_atomic_write_leaves_target_untouched_on_error(tmp_path):
    target = tmp_path / "m.h"
    target.write_text("original")

    with pytest.raises(RuntimeError):
        with atomic_write(target) as f:
            f.write(b"partial")
            raise RuntimeError("boom")

    assert target.read_text() == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["m.h"]
