import pytest

from core.versioning.history_store import GitHistoryStore, UnknownRefError


def test_init_creates_repo_on_primary_branch(tmp_path):
    store = GitHistoryStore(tmp_path / "app")
    assert not store.exists()

    store.init("main")

    assert store.exists()
    assert store.current_branch() == "main"
    assert store.log(10) == []


def test_init_is_noop_for_existing_repo(make_store, commit_files):
    store = make_store()
    oid = commit_files(store, {"a.txt": "1"})

    store.init("other")

    assert store.current_branch() == "main"
    assert [s.oid for s in store.log(10)] == [oid]


def test_log_is_newest_first_and_bounded(make_store, commit_files):
    store = make_store()
    first = commit_files(store, {"a.txt": "1"}, "first")
    second = commit_files(store, {"a.txt": "2"}, "second")
    third = commit_files(store, {"a.txt": "3"}, "third")

    snapshots = store.log(10)
    assert [s.oid for s in snapshots] == [third, second, first]
    assert [s.message for s in snapshots] == ["third", "second", "first"]
    assert all(isinstance(s.timestamp, int) and s.timestamp > 0 for s in snapshots)

    assert [s.oid for s in store.log(2)] == [third, second]


def test_status_matrix_codes(make_store, commit_files):
    store = make_store()
    base = commit_files(store, {"a.txt": "1", "keep.txt": "k", "gone.txt": "g"})

    (store.workdir / "a.txt").write_text("2")
    (store.workdir / "new.txt").write_text("n")
    (store.workdir / "gone.txt").unlink()

    rows = {row[0]: row[1:] for row in store.status_matrix(base)}
    assert rows["keep.txt"] == (1, 1, 1)
    assert rows["a.txt"] == (1, 2, 1)
    assert rows["new.txt"] == (0, 2, 0)
    assert rows["gone.txt"] == (1, 0, 1)

    store.add_all()

    rows = {row[0]: row[1:] for row in store.status_matrix(base)}
    assert rows["a.txt"] == (1, 2, 2)
    assert rows["new.txt"] == (0, 2, 2)
    assert rows["gone.txt"] == (1, 0, 0)


def test_status_matrix_against_older_ref(make_store, commit_files):
    store = make_store()
    old = commit_files(store, {"a.txt": "1"})
    commit_files(store, {"a.txt": "2", "b.txt": "b"})

    rows = {row[0]: row[1:] for row in store.status_matrix(old)}
    # index and working tree both hold the newer content
    assert rows["a.txt"] == (1, 2, 2)
    assert rows["b.txt"] == (0, 2, 2)


def test_status_matrix_skips_ignored_untracked_files(make_store, commit_files):
    store = make_store()
    oid = commit_files(store, {".gitignore": "*.log\nnode_modules/\n", "a.txt": "1"})
    (store.workdir / "debug.log").write_text("noise")
    (store.workdir / "node_modules" / "pkg").mkdir(parents=True)
    (store.workdir / "node_modules" / "pkg" / "index.js").write_text("x")

    paths = [row[0] for row in store.status_matrix(oid)]

    assert paths == [".gitignore", "a.txt"]


def test_read_blob(make_store, commit_files):
    store = make_store()
    oid = commit_files(store, {"src/app.py": "print('hi')\n"})
    commit_files(store, {"src/app.py": "print('bye')\n"})

    assert store.read_blob(oid, "src/app.py") == b"print('hi')\n"
    with pytest.raises(UnknownRefError):
        store.read_blob(oid, "src/missing.py")


def test_unknown_ref_raises(make_store, commit_files):
    store = make_store()
    commit_files(store, {"a.txt": "1"})

    with pytest.raises(UnknownRefError):
        store.status_matrix("0" * 40)
    with pytest.raises(UnknownRefError):
        store.checkout("no-such-branch")


def test_checkout_commit_detaches_and_restores_files(make_store, commit_files, tree_of):
    store = make_store()
    first = commit_files(store, {"a.txt": "1", "dir/b.txt": "b"})
    second = commit_files(store, {"a.txt": "2", "dir/b.txt": None, "c.txt": "c"})
    (store.workdir / "a.txt").write_text("dirty")
    (store.workdir / "scratch.txt").write_text("untracked")

    store.checkout(first)

    assert store.current_branch() is None
    assert tree_of(store.workdir) == {"a.txt": "1", "dir/b.txt": "b", "scratch.txt": "untracked"}
    assert store.resolve("main") == second

    store.checkout("main")

    assert store.current_branch() == "main"
    assert tree_of(store.workdir) == {"a.txt": "2", "c.txt": "c", "scratch.txt": "untracked"}
    assert not (store.workdir / "dir").exists()


def test_remove_and_commit(make_store, commit_files):
    store = make_store()
    commit_files(store, {"a.txt": "1", "b.txt": "2"})

    (store.workdir / "b.txt").unlink()
    store.remove("b.txt")
    oid = store.commit("drop b", "Someone <someone@example.com>")

    assert store.log(1)[0].oid == oid
    assert [row[0] for row in store.status_matrix(oid)] == ["a.txt"]


def test_restore_keeps_mode_and_clears_directory_in_the_way(make_store, commit_files, tree_of):
    store = make_store()
    script = store.workdir / "a"
    script.write_text("#!/bin/sh\n")
    script.chmod(0o755)
    first = commit_files(store, {})
    script.unlink()
    script.mkdir()
    (script / "leftover.log").write_text("x")

    store.restore(first, "a")

    assert tree_of(store.workdir) == {"a": "#!/bin/sh\n"}
    assert script.stat().st_mode & 0o111
    with pytest.raises(UnknownRefError):
        store.restore(first, "missing.txt")


def test_delete_drops_file_index_entry_and_empty_dirs(make_store, commit_files):
    store = make_store()
    commit_files(store, {"keep.txt": "k", "dir/gone.txt": "g"})

    assert store.delete("dir/gone.txt") is True
    assert store.delete("dir/gone.txt") is False
    assert not (store.workdir / "dir").exists()

    oid = store.commit("drop gone", "Someone <someone@example.com>")
    assert [row[0] for row in store.status_matrix(oid)] == ["keep.txt"]
