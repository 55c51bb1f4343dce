import pytest

from filetree import FileNode, FolderNode, TreeStore, search


@pytest.fixture
def store():
    return TreeStore.from_seed()


def ids(nodes):
    return [node.id for node in nodes]


def test_empty_query_returns_all_children(store):
    assert ids(search(store.root, "")) == ["documents", "pictures", "doc3"]


def test_folder_matches_through_descendant(store):
    # "報告" only appears inside documents
    assert ids(search(store.root, "報告")) == ["documents"]


def test_file_and_folder_matches_keep_stored_order(store):
    assert ids(search(store.root, "計劃")) == ["documents", "doc3"]
    assert ids(search(store.root, ".jpg")) == ["pictures"]


def test_folder_matches_by_own_name(store):
    assert ids(search(store.root, "圖")) == ["pictures"]


def test_case_insensitive():
    folder = FolderNode(id="root", name="root", children=[
        FileNode(id="a", name="Report.PDF"),
        FileNode(id="b", name="notes.txt"),
        FolderNode(id="c", name="Archive", children=[
            FolderNode(id="d", name="deep", children=[FileNode(id="e", name="old_REPORT.doc")]),
        ]),
    ])
    assert ids(search(folder, "report")) == ["a", "c"]
    assert ids(search(folder, "ARCHIVE")) == ["c"]
    assert ids(search(folder, "zzz")) == []


def test_results_are_direct_children_only(store):
    for query in ("pdf", "docx", "文", "x"):
        for node in search(store.root, query):
            assert any(node is child for child in store.root.children)


def test_search_does_not_mutate(store):
    before = store.root.model_dump()
    first = ids(search(store.root, "pdf"))
    second = ids(search(store.root, "pdf"))
    assert first == second
    assert store.root.model_dump() == before


def test_empty_folder_matches_only_by_name():
    folder = FolderNode(id="root", name="root", children=[FolderNode(id="empty", name="Empty")])
    assert ids(search(folder, "emp")) == ["empty"]
    assert ids(search(folder, "x")) == []
