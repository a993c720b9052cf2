from fastapi.testclient import TestClient

from backend.web.main import create_app
from core.versioning.history_store import GitHistoryStore

AUTHOR = "Test Author <test@example.com>"


def _commit(store: GitHistoryStore, files: dict[str, str], message: str) -> str:
    for rel, content in files.items():
        path = store.workdir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    store.add_all()
    return store.commit(message, AUTHOR)


def test_project_without_history(settings, tmp_path):
    (tmp_path / "plain").mkdir()
    with TestClient(create_app(settings)) as client:
        project = client.post("/api/projects", json={"name": "plain", "path": str(tmp_path / "plain")}).json()

        versions = client.get(f"/api/projects/{project['id']}/versions")
        branch = client.get(f"/api/projects/{project['id']}/branch")

    assert versions.status_code == 200
    assert versions.json() == []
    assert branch.json() == {"success": False, "data": None, "error_message": "Not a git repository"}


def test_unknown_project(settings):
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/projects/99").status_code == 404
        assert client.get("/api/projects/99/versions").status_code == 404
        assert client.get("/api/projects/99/branch").json()["error_message"] == "Project not found"
        revert = client.post("/api/projects/99/versions/revert", json={"previous_version_id": "a" * 40})
        assert revert.status_code == 404
        assert client.post("/api/projects/99/chats", json={"title": "x"}).status_code == 404
        assert client.get("/api/chats/99/messages").status_code == 404


def test_revert_checkout_and_timeline_flow(settings):
    with TestClient(create_app(settings)) as client:
        project = client.post("/api/projects", json={"name": "site", "path": "site", "init_git": True}).json()
        pid = project["id"]
        store = GitHistoryStore(settings.versioning.projects_root / "site")
        v1 = _commit(store, {"index.html": "one"}, "v1")
        v2 = _commit(store, {"index.html": "two", "extra.css": "body{}"}, "v2")

        chat = client.post(f"/api/projects/{pid}/chats", json={"title": "build"}).json()
        for content, commit in [("make one", None), ("one", v1), ("make two", None), ("two", v2)]:
            resp = client.post(
                f"/api/chats/{chat['id']}/messages",
                json={"role": "assistant", "content": content, "commit_hash": commit},
            )
            assert resp.status_code == 200

        versions = client.get(f"/api/projects/{pid}/versions").json()
        assert [v["oid"] for v in versions] == [v2, v1]
        assert versions[0]["message"] == "v2"
        assert client.get(f"/api/projects/{pid}/branch").json()["data"] == {"branch": "main"}

        checkout = client.post(f"/api/projects/{pid}/versions/checkout", json={"version_id": v1})
        assert checkout.json() == {"success": True}
        assert (store.workdir / "index.html").read_text() == "one"
        assert client.get(f"/api/projects/{pid}/branch").json()["data"] == {"branch": "<no-branch>"}
        assert len(client.get(f"/api/chats/{chat['id']}/messages").json()["messages"]) == 4

        revert = client.post(f"/api/projects/{pid}/versions/revert", json={"previous_version_id": v1})
        assert revert.json() == {"success": True}
        assert client.get(f"/api/projects/{pid}/branch").json()["data"] == {"branch": "main"}
        assert not (store.workdir / "extra.css").exists()

        versions = client.get(f"/api/projects/{pid}/versions").json()
        assert len(versions) == 3
        assert versions[0]["message"] == f"Reverted all changes back to version {v1}"

        messages = client.get(f"/api/chats/{chat['id']}/messages").json()["messages"]
        assert [m["content"] for m in messages] == ["make one", "one"]

        prune = client.post(f"/api/projects/{pid}/timeline/prune", json={"commit_hash": v1})
        assert prune.json() == {"success": True, "deleted": 0}


def test_mutation_failures_map_to_500(settings):
    with TestClient(create_app(settings)) as client:
        pid = client.post("/api/projects", json={"name": "site", "path": "site", "init_git": True}).json()["id"]
        store = GitHistoryStore(settings.versioning.projects_root / "site")
        _commit(store, {"a.txt": "1"}, "v1")

        revert = client.post(f"/api/projects/{pid}/versions/revert", json={"previous_version_id": "b" * 40})
        checkout = client.post(f"/api/projects/{pid}/versions/checkout", json={"version_id": "nope"})
        invalid = client.post(f"/api/projects/{pid}/versions/revert", json={})

    assert revert.status_code == 500
    assert revert.json()["detail"].startswith(f"Failed to revert version {'b' * 40}")
    assert checkout.status_code == 500
    assert "Failed to checkout version nope" in checkout.json()["detail"]
    assert invalid.status_code == 422


def test_list_projects(settings):
    with TestClient(create_app(settings)) as client:
        client.post("/api/projects", json={"name": "a", "path": "a"})
        client.post("/api/projects", json={"name": "b", "path": "b"})

        projects = client.get("/api/projects").json()["projects"]

    assert [p["name"] for p in projects] == ["a", "b"]
