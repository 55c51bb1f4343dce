import pytest
from fastapi.testclient import TestClient

from filetree import TreeStore
from tree_service.daemon import create_app


@pytest.fixture
def store():
    return TreeStore.from_seed()


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as client:
        yield client


def ids(response):
    return [item["id"] for item in response.json()]


def test_status(client):
    r = client.get("/status")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "nodes": 7}


def test_shutdown_without_server(client):
    r = client.post("/shutdown")
    assert r.status_code == 200


def test_list_root_children_folders_first(client):
    r = client.get("/folders/children")
    assert r.status_code == 200
    data = r.json()
    assert data[-1]["id"] == "doc3"
    assert {item["type"] for item in data[:2]} == {"folder"}
    assert data[-1]["size_bytes"] == 2621440
    assert data[0]["child_count"] is not None


def test_list_children_search_and_sort(client):
    r = client.get("/folders/children", params={"path": ["root", "documents"], "sort": "date"})
    assert ids(r) == ["doc2", "doc1"]
    r = client.get("/folders/children", params={"path": ["root", "documents"], "sort": "date", "direction": "desc"})
    assert ids(r) == ["doc1", "doc2"]
    r = client.get("/folders/children", params={"q": "報告"})
    assert ids(r) == ["documents"]


def test_list_children_invalid_path(client):
    r = client.get("/folders/children", params={"path": ["root", "doc3"]})
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"
    assert r.json()["node_id"] == "doc3"


def test_list_children_invalid_sort(client):
    r = client.get("/folders/children", params={"sort": "colour"})
    assert r.status_code == 422


def test_breadcrumbs(client):
    r = client.get("/folders/breadcrumbs", params={"path": ["root", "documents"]})
    assert r.status_code == 200
    assert r.json() == [{"id": "root", "name": "根目錄"}, {"id": "documents", "name": "文件"}]
    r = client.get("/folders/breadcrumbs", params={"path": ["root", "ghost"]})
    assert r.status_code == 404


def test_get_node(client):
    r = client.get("/nodes/doc1")
    assert r.status_code == 200
    assert r.json()["content_ref"] == "Sample document content"
    assert client.get("/nodes/ghost").status_code == 404


def test_move_then_resolve(client, store):
    r = client.post("/nodes/doc1/move", json={"target_id": "pictures"})
    assert r.status_code == 200
    assert "doc1" in ids(client.get("/folders/children", params={"path": ["root", "pictures"]}))
    assert "doc1" not in ids(client.get("/folders/children", params={"path": ["root", "documents"]}))


@pytest.mark.parametrize("source, target, status, error", [
    ("documents", "documents", 409, "invalid_target"),
    ("root", "documents", 409, "invalid_target"),
    ("doc1", "doc3", 400, "not_a_folder"),
    ("ghost", "pictures", 404, "not_found"),
    ("doc1", "ghost", 404, "not_found"),
])
def test_move_errors(client, store, source, target, status, error):
    before = store.root.model_dump()
    r = client.post(f"/nodes/{source}/move", json={"target_id": target})
    assert r.status_code == status
    assert r.json()["error"] == error
    assert store.root.model_dump() == before


def test_move_into_current_parent_is_ok(client):
    r = client.post("/nodes/doc1/move", json={"target_id": "documents"})
    assert r.status_code == 200


def test_upload(client):
    items = [
        {"name": "x.txt", "size_bytes": 10, "content_ref": "blob:x", "timestamp": "2024-03-16T10:00:00Z"},
        {"name": "x.txt", "size_bytes": 11},
    ]
    r = client.post("/folders/documents/uploads", json=items)
    assert r.status_code == 201
    new_ids = r.json()["ids"]
    assert len(new_ids) == 2
    listed = client.get("/folders/children", params={"path": ["root", "documents"]}).json()
    assert len(listed) == 4
    assert client.get(f"/nodes/{new_ids[0]}").json()["name"] == "x.txt"


def test_upload_errors(client):
    assert client.post("/folders/doc3/uploads", json=[{"name": "a", "size_bytes": 1}]).status_code == 400
    assert client.post("/folders/ghost/uploads", json=[{"name": "a", "size_bytes": 1}]).status_code == 404
    assert client.post("/folders/documents/uploads", json=[{"name": "a", "size_bytes": -1}]).status_code == 422
    assert client.post("/folders/documents/uploads", json=[{"size_bytes": 1}]).status_code == 422


def test_rename(client):
    r = client.put("/nodes/doc3", json={"name": "plan.pdf"})
    assert r.status_code == 200
    assert r.json()["name"] == "plan.pdf"
    assert client.put("/nodes/doc3", json={"name": ""}).status_code == 422
    assert client.put("/nodes/doc3", json={"name": "   "}).status_code == 422
    assert client.put("/nodes/ghost", json={"name": "x"}).status_code == 404


def test_delete(client):
    assert client.delete("/nodes/pictures").status_code == 204
    assert client.get("/nodes/pic1").status_code == 404
    assert client.delete("/nodes/pictures").status_code == 404
    assert client.delete("/nodes/root").status_code == 409
    assert client.get("/status").json()["nodes"] == 5
