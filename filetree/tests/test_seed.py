from pathlib import Path

import pytest

from filetree import TreeStore, default_seed, load_seed


def test_default_seed_shape():
    root = default_seed()
    assert root.id == "root"
    assert [node.id for node in root.walk()] == ["root", "documents", "doc1", "doc2", "pictures", "pic1", "doc3"]
    sizes = {node.id: node.size_bytes for node in root.walk() if node.type == "file"}
    assert sizes == {"doc1": 1048576, "doc2": 2621440, "pic1": 3145728, "doc3": 2621440}


def test_default_seed_is_a_fresh_copy():
    first = default_seed()
    first.children.clear()
    assert len(default_seed().children) == 3


def test_load_seed_from_yaml_file(tmp_path: Path):
    path = tmp_path / "tree.yaml"
    path.write_text(
        "id: root\n"
        "name: Home\n"
        "children:\n"
        "  - {id: music, name: Music, type: folder, modified: 2024-01-02}\n"
        "  - {id: todo, name: todo.txt, type: file, size_bytes: 12}\n",
        encoding="utf-8",
    )
    store = TreeStore.from_seed(path)
    assert store.root.name == "Home"
    assert store.resolve_path(["root", "music"]).modified.year == 2024
    assert store.get_node("todo").size_bytes == 12


def test_load_seed_from_json_text():
    root = load_seed('{"id": "root", "name": "r", "children": [{"id": "a", "name": "a", "type": "file"}]}')
    assert root.children[0].id == "a"


@pytest.mark.parametrize("payload", [
    {"id": "top", "name": "r"},
    {"id": "root", "name": "r", "children": [
        {"id": "a", "name": "a", "type": "file"},
        {"id": "d", "name": "d", "type": "folder", "children": [{"id": "a", "name": "a2", "type": "file"}]},
    ]},
    {"id": "root", "name": "r", "children": [{"id": "a", "name": "a", "type": "link"}]},
])
def test_load_seed_rejects_bad_trees(payload):
    with pytest.raises(ValueError):
        load_seed(payload)
