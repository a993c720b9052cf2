"""Pytest configuration for Rewind tests.

Ensures the project root is in sys.path so imports work correctly, and
provides throw-away repositories and databases under tmp_path.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config.schema import RewindSettings, StorageConfig, VersioningConfig  # noqa: E402
from core.versioning.history_store import GitHistoryStore  # noqa: E402
from core.versioning.service import VersionService  # noqa: E402
from storage.container import StorageContainer  # noqa: E402

TEST_AUTHOR = "Test Author <test@example.com>"


@pytest.fixture
def settings(tmp_path: Path) -> RewindSettings:
    return RewindSettings(
        storage=StorageConfig(db_path=tmp_path / "rewind.db"),
        versioning=VersioningConfig(projects_root=tmp_path / "projects"),
    )


@pytest.fixture
def container(settings: RewindSettings) -> StorageContainer:
    return StorageContainer(main_db_path=settings.storage.db_path)


@pytest.fixture
def project_repo(container: StorageContainer):
    repo = container.project_repo()
    yield repo
    repo.close()


@pytest.fixture
def timeline_repo(container: StorageContainer):
    repo = container.timeline_repo()
    yield repo
    repo.close()


@pytest.fixture
def service(settings, project_repo, timeline_repo) -> VersionService:
    return VersionService(settings, project_repo, timeline_repo)


@pytest.fixture
def make_store(tmp_path: Path):
    """Create an initialised repository on `main` under tmp_path/<name>."""

    def _make(name: str = "app") -> GitHistoryStore:
        store = GitHistoryStore(tmp_path / name)
        store.init("main")
        return store

    return _make


@pytest.fixture
def commit_files():
    """Write (str) or delete (None) files, stage everything, commit; returns the oid."""

    def _commit(store: GitHistoryStore, files: dict[str, str | None], message: str = "change") -> str:
        for rel, content in files.items():
            path = store.workdir / rel
            if content is None:
                path.unlink()
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)
        store.add_all()
        return store.commit(message, TEST_AUTHOR)

    return _commit


def read_tree(root: Path) -> dict[str, str]:
    """Working tree contents, excluding .git."""
    return {
        p.relative_to(root).as_posix(): p.read_text()
        for p in sorted(root.rglob("*"))
        if p.is_file() and ".git" not in p.relative_to(root).parts
    }


@pytest.fixture
def tree_of():
    return read_tree
