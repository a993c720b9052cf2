"""Git history store backed by dulwich.

Uses dulwich (pure Python git implementation) for every operation, so no git
binary is required. Every call opens the repository fresh; nothing about the
working tree is cached between calls.

Status rows follow the (path, head, workdir, stage) convention:

    head     0 absent from target        1 present in target
    workdir  0 absent                    1 identical to target
             2 differs from target
    stage    0 absent                    1 identical to target
             2 identical to workdir      3 differs from both
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path

from dulwich import porcelain
from dulwich.errors import NotTreeError
from dulwich.ignore import IgnoreFilterManager
from dulwich.index import Index, index_entry_from_stat
from dulwich.objects import S_ISGITLINK, Blob, Commit
from dulwich.repo import Repo

from core.versioning.types import Snapshot

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdef")
_BRANCH_PREFIX = b"refs/heads/"
_SYMREF = b"ref: "

StatusRow = tuple[str, int, int, int]


class UnknownRefError(LookupError):
    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Unknown ref: {ref}")


class GitHistoryStore:
    """History store rooted at one working directory."""

    def __init__(self, workdir: str | Path):
        self.workdir = Path(workdir)

    def exists(self) -> bool:
        return (self.workdir / ".git").exists()

    def init(self, primary_branch: str = "main") -> None:
        """Create an empty repository whose HEAD points at primary_branch."""
        if self.exists():
            return
        self.workdir.mkdir(parents=True, exist_ok=True)
        repo = Repo.init(str(self.workdir))
        try:
            repo.refs.set_symbolic_ref(b"HEAD", _BRANCH_PREFIX + primary_branch.encode("utf-8"))
        finally:
            repo.close()
        logger.info("Initialized history store at %s on %s", self.workdir, primary_branch)

    # ── Reads ──

    def log(self, depth: int) -> list[Snapshot]:
        """Commits reachable from HEAD, newest first."""
        with self._open() as repo:
            try:
                head = repo.head()
            except KeyError:
                # HEAD points at an unborn branch: nothing committed yet
                return []
            return [
                Snapshot(
                    oid=entry.commit.id.decode("ascii"),
                    message=entry.commit.message.decode("utf-8", errors="replace"),
                    timestamp=int(entry.commit.author_time),
                )
                for entry in repo.get_walker(include=[head], max_entries=depth)
            ]

    def current_branch(self) -> str | None:
        """Short name of the checked-out branch, None when HEAD is detached."""
        with self._open() as repo:
            contents = repo.refs.read_ref(b"HEAD")
        if contents is None:
            raise UnknownRefError("HEAD")
        if not contents.startswith(_SYMREF):
            return None
        ref = contents[len(_SYMREF):].strip()
        if ref.startswith(_BRANCH_PREFIX):
            ref = ref[len(_BRANCH_PREFIX):]
        return ref.decode("utf-8")

    def resolve(self, ref: str) -> str:
        with self._open() as repo:
            commit_id, _ = self._resolve(repo, ref)
        return commit_id.decode("ascii")

    def status_matrix(self, ref: str) -> list[StatusRow]:
        """Compare ref's tree against the working tree and the index."""
        with self._open() as repo:
            commit_id, _ = self._resolve(repo, ref)
            target = {path: sha for path, (_mode, sha) in self._tree_files(repo, repo[commit_id].tree).items()}
            staged = self._index_files(repo)
            workdir = self._workdir_files(repo, set(target) | set(staged))

        rows: list[StatusRow] = []
        for path in sorted(set(target) | set(workdir)):
            target_sha = target.get(path)
            work_sha = self._hash_file(workdir[path]) if path in workdir else None
            stage_sha = staged.get(path)

            head = 1 if target_sha is not None else 0
            if work_sha is None:
                work = 0
            elif work_sha == target_sha:
                work = 1
            else:
                work = 2
            if stage_sha is None:
                stage = 0
            elif stage_sha == target_sha:
                stage = 1
            elif stage_sha == work_sha:
                stage = 2
            else:
                stage = 3
            rows.append((path, head, work, stage))
        return rows

    def read_blob(self, ref: str, path: str) -> bytes:
        with self._open() as repo:
            _mode, sha = self._lookup(repo, ref, path)
            return repo[sha].data

    # ── Writes ──

    def checkout(self, ref: str) -> None:
        """Force-checkout ref, discarding changes to tracked files.

        A branch name leaves HEAD attached to it; a commit id detaches HEAD.
        Untracked files are left in place.
        """
        with self._open() as repo:
            commit_id, branch_ref = self._resolve(repo, ref)
            target = self._tree_files(repo, repo[commit_id].tree)
            index = self._open_index(repo)

            for key in list(index):
                path = key.decode("utf-8")
                if path not in target:
                    self._unlink(path)
                del index[key]

            for path, (mode, sha) in target.items():
                full = self.workdir / path
                self._write_entry(full, mode, repo[sha].data)
                index[path.encode("utf-8")] = index_entry_from_stat(os.lstat(full), sha, mode=mode)
            index.write()

            if branch_ref is not None:
                repo.refs.set_symbolic_ref(b"HEAD", branch_ref)
            else:
                # setting HEAD through the refs container follows the symref and
                # would move the branch instead of detaching
                Path(repo.controldir(), "HEAD").write_bytes(commit_id + b"\n")
        logger.debug("Checked out %s in %s", ref, self.workdir)

    def restore(self, ref: str, path: str) -> None:
        """Write path from ref's tree into the working tree, keeping its mode."""
        with self._open() as repo:
            mode, sha = self._lookup(repo, ref, path)
            self._write_entry(self.workdir / path, mode, repo[sha].data)

    def delete(self, path: str) -> bool:
        """Remove path from the working tree and the index; False if it was already gone."""
        full = self.workdir / path
        existed = full.is_symlink() or full.exists()
        self._unlink(path)
        self.remove(path)
        return existed

    def remove(self, path: str) -> None:
        """Drop path from the index."""
        with self._open() as repo:
            index = self._open_index(repo)
            key = path.encode("utf-8")
            if key in set(index):
                del index[key]
                index.write()

    def add_all(self) -> None:
        """Stage the whole working tree, including deletions."""
        with self._open() as repo:
            index = self._open_index(repo)
            staged = {key.decode("utf-8") for key in index}
            workdir = self._workdir_files(repo, staged)
            for path, full in workdir.items():
                blob = Blob.from_string(self._read_for_blob(full))
                repo.object_store.add_object(blob)
                index[path.encode("utf-8")] = index_entry_from_stat(os.lstat(full), blob.id)
            for path in staged - set(workdir):
                del index[path.encode("utf-8")]
            index.write()

    def commit(self, message: str, author: str) -> str:
        """Commit the index on HEAD; author is "Name <email>"."""
        with self._open() as repo:
            commit_id = porcelain.commit(repo, message=message, author=author, committer=author)
        return commit_id.decode("ascii")

    # ── Helpers ──

    def _open(self) -> Repo:
        return Repo(str(self.workdir))

    @staticmethod
    def _open_index(repo: Repo) -> Index:
        index_path = repo.index_path()
        if not os.path.exists(index_path):
            return Index(index_path, read=False)
        return repo.open_index()

    @staticmethod
    def _resolve(repo: Repo, ref: str) -> tuple[bytes, bytes | None]:
        """Return (commit id, branch ref or None) for a branch name or full commit id."""
        branch_ref = _BRANCH_PREFIX + ref.encode("utf-8")
        if branch_ref in repo.refs:
            return repo.refs[branch_ref], branch_ref
        if len(ref) == 40 and set(ref) <= _HEX_DIGITS:
            try:
                obj = repo[ref.encode("ascii")]
            except KeyError as exc:
                raise UnknownRefError(ref) from exc
            if isinstance(obj, Commit):
                return obj.id, None
        raise UnknownRefError(ref)

    def _lookup(self, repo: Repo, ref: str, path: str) -> tuple[int, bytes]:
        commit_id, _ = self._resolve(repo, ref)
        tree = repo[repo[commit_id].tree]
        try:
            return tree.lookup_path(repo.__getitem__, path.encode("utf-8"))
        except (KeyError, NotTreeError) as exc:
            raise UnknownRefError(f"{ref}:{path}") from exc

    def _tree_files(self, repo: Repo, tree_id: bytes, prefix: str = "") -> dict[str, tuple[int, bytes]]:
        files: dict[str, tuple[int, bytes]] = {}
        for entry in repo[tree_id].items():
            name = entry.path.decode("utf-8")
            path = f"{prefix}/{name}" if prefix else name
            if stat.S_ISDIR(entry.mode):
                files.update(self._tree_files(repo, entry.sha, path))
            elif not S_ISGITLINK(entry.mode):
                files[path] = (entry.mode, entry.sha)
        return files

    def _index_files(self, repo: Repo) -> dict[str, bytes]:
        index = self._open_index(repo)
        result: dict[str, bytes] = {}
        for key in index:
            sha = getattr(index[key], "sha", None)
            # conflicted entries carry no single sha
            if sha is not None:
                result[key.decode("utf-8")] = sha
        return result

    def _workdir_files(self, repo: Repo, tracked: set[str]) -> dict[str, Path]:
        """Files on disk, skipping .git and ignored paths that are not tracked."""
        ignore = IgnoreFilterManager.from_repo(repo)
        tracked_dirs = {parent.as_posix() for p in tracked for parent in Path(p).parents}
        files: dict[str, Path] = {}
        for root, dirnames, filenames in os.walk(self.workdir):
            rel_root = Path(root).relative_to(self.workdir).as_posix()
            rel_root = "" if rel_root == "." else rel_root
            kept = []
            for name in dirnames:
                if name == ".git":
                    continue
                rel = f"{rel_root}/{name}" if rel_root else name
                full = Path(root) / name
                if full.is_symlink():
                    filenames.append(name)
                    continue
                if rel in tracked_dirs or not ignore.is_ignored(rel + "/"):
                    kept.append(name)
            dirnames[:] = kept
            for name in filenames:
                rel = f"{rel_root}/{name}" if rel_root else name
                if rel in tracked or not ignore.is_ignored(rel):
                    files[rel] = Path(root) / name
        return files

    @staticmethod
    def _read_for_blob(full: Path) -> bytes:
        if full.is_symlink():
            return os.fsencode(os.readlink(full))
        return full.read_bytes()

    def _hash_file(self, full: Path) -> bytes:
        return Blob.from_string(self._read_for_blob(full)).id

    @staticmethod
    def _write_entry(full: Path, mode: int, data: bytes) -> None:
        if full.is_dir() and not full.is_symlink():
            # untracked or ignored leftovers where the target has a file
            shutil.rmtree(full)
        full.parent.mkdir(parents=True, exist_ok=True)
        if full.is_symlink():
            full.unlink()
        if stat.S_ISLNK(mode):
            if full.exists():
                full.unlink()
            os.symlink(os.fsdecode(data), full)
            return
        full.write_bytes(data)
        os.chmod(full, 0o755 if mode & 0o111 else 0o644)

    def _unlink(self, path: str) -> None:
        full = self.workdir / path
        if full.is_symlink() or full.exists():
            full.unlink()
        parent = full.parent
        while parent != self.workdir and parent.is_dir() and not any(parent.iterdir()):
            parent.rmdir()
            parent = parent.parent
