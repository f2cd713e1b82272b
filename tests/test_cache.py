import pytest

from cargo_hdk.cache import out_dir_file, persist_out_dirs, read_out_dir
from cargo_hdk.cargo import DependencyOutputRecord
from cargo_hdk.errors import CacheDirCreateFailed, CacheWriteFailed


def test_out_dir_file_name(tmp_path):
    assert out_dir_file(tmp_path, "out_dir_", "mycrate") == tmp_path / "out_dir_mycrate.txt"
    assert out_dir_file(tmp_path, "", "mycrate") == tmp_path / "mycrate.txt"


def test_persist_writes_raw_path(tmp_path):
    records = [DependencyOutputRecord("mycrate", "/target/debug/build/mycrate-abc/out")]

    written = persist_out_dirs(tmp_path, "out_dir_", records)

    assert written == [tmp_path / "out_dir_mycrate.txt"]
    assert (tmp_path / "out_dir_mycrate.txt").read_text() == "/target/debug/build/mycrate-abc/out"


def test_last_record_wins(tmp_path):
    records = [
        DependencyOutputRecord("cxx", "/out/first"),
        DependencyOutputRecord("mycrate", "/out/root"),
        DependencyOutputRecord("cxx", "/out/second"),
    ]

    written = persist_out_dirs(tmp_path, "out_dir_", records)

    assert len(written) == 2
    assert read_out_dir(tmp_path, "out_dir_", "cxx") == "/out/second"
    assert read_out_dir(tmp_path, "out_dir_", "mycrate") == "/out/root"


def test_previous_run_is_overwritten(tmp_path):
    (tmp_path / "out_dir_mycrate.txt").write_text("/a/much/longer/stale/path/from/an/earlier/run")

    persist_out_dirs(tmp_path, "out_dir_", [DependencyOutputRecord("mycrate", "/new")])

    assert read_out_dir(tmp_path, "out_dir_", "mycrate") == "/new"


def test_empty_records_is_a_noop(tmp_path):
    build_dir = tmp_path / "build_debug"

    assert persist_out_dirs(build_dir, "out_dir_", []) == []
    assert not build_dir.exists()


def test_prefix_with_subdirectory_creates_parents(tmp_path):
    persist_out_dirs(tmp_path, "out_dirs/", [DependencyOutputRecord("mycrate", "/out")])

    assert (tmp_path / "out_dirs" / "mycrate.txt").read_text() == "/out"


def test_read_missing_out_dir(tmp_path):
    assert read_out_dir(tmp_path, "out_dir_", "nothing") is None


def test_parent_creation_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")

    with pytest.raises(CacheDirCreateFailed):
        persist_out_dirs(blocker, "out_dir_", [DependencyOutputRecord("mycrate", "/out")])


def test_write_failure(tmp_path):
    (tmp_path / "out_dir_mycrate.txt").mkdir()

    with pytest.raises(CacheWriteFailed):
        persist_out_dirs(tmp_path, "out_dir_", [DependencyOutputRecord("mycrate", "/out")])
