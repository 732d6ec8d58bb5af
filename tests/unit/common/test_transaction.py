from crossname.common.transaction import TransactionManager


def test_commit_writes_pending_content(tmp_path):
    path = tmp_path / "a.py"
    path.write_text("old\n", encoding="utf-8")
    tm = TransactionManager(tmp_path)

    tm.add_write(path, "new\n")
    assert tm.pending_count == 1
    assert tm.preview() == ["[WRITE] a.py"]

    result = tm.commit()

    assert result.written == [path]
    assert result.failures == []
    assert path.read_text(encoding="utf-8") == "new\n"
    assert tm.pending_count == 0


def test_reads_see_pending_writes(tmp_path):
    path = tmp_path / "a.py"
    path.write_text("old\n", encoding="utf-8")
    tm = TransactionManager(tmp_path)

    tm.add_write("a.py", "pending\n")

    assert tm.read_text(path) == "pending\n"


def test_dry_run_keeps_content_in_memory_only(tmp_path):
    path = tmp_path / "a.py"
    path.write_text("old\n", encoding="utf-8")
    tm = TransactionManager(tmp_path, dry_run=True)

    tm.add_write(path, "step one\n")
    tm.commit()

    assert path.read_text(encoding="utf-8") == "old\n"
    assert tm.read_text(path) == "step one\n"


def test_missing_file_is_a_failure_not_an_exception(tmp_path):
    present = tmp_path / "present.py"
    present.write_text("x\n", encoding="utf-8")
    tm = TransactionManager(tmp_path)

    tm.add_write(tmp_path / "gone.py", "y\n")
    tm.add_write(present, "z\n")
    result = tm.commit()

    assert [f.path.name for f in result.failures] == ["gone.py"]
    assert result.written == [present]
    assert not (tmp_path / "gone.py").exists()


def test_bytes_are_written_unchanged(tmp_path):
    path = tmp_path / "a.py"
    path.write_bytes(b"x = 1\r\n")
    tm = TransactionManager(tmp_path)

    tm.add_write(path, "y = 1\r\n")
    tm.commit()

    assert path.read_bytes() == b"y = 1\r\n"


def test_string_paths_resolve_against_root(tmp_path):
    (tmp_path / "pkg").mkdir()
    path = tmp_path / "pkg" / "a.py"
    path.write_text("old\n", encoding="utf-8")
    tm = TransactionManager(tmp_path)

    assert tm.read_text("pkg/a.py") == "old\n"
    tm.add_write("pkg/a.py", "new\n")

    assert tm.pending_paths() == [path]
    assert tm.commit().written == [path]
    assert path.read_text(encoding="utf-8") == "new\n"
