import pytest

from filetree import FolderBrowser, NotFoundError, SortDirection, SortKey, TreeStore


@pytest.fixture
def browser():
    return FolderBrowser(TreeStore.from_seed())


def ids(nodes):
    return [node.id for node in nodes]


def test_starts_at_root(browser):
    assert browser.path == ["root"]
    assert browser.current_folder().id == "root"
    assert [crumb.id for crumb in browser.breadcrumbs()] == ["root"]


def test_enter_and_navigate_back(browser):
    browser.enter("documents")
    assert browser.current_folder().name == "文件"
    assert [crumb.name for crumb in browser.breadcrumbs()] == ["根目錄", "文件"]
    browser.navigate_to(0)
    assert browser.path == ["root"]


def test_listing_searches_then_sorts(browser):
    browser.enter("documents")
    browser.sort_key = SortKey.SIZE
    assert ids(browser.listing()) == ["doc1", "doc2"]
    browser.toggle_direction()
    assert browser.direction is SortDirection.DESC
    assert ids(browser.listing()) == ["doc2", "doc1"]
    browser.query = "PDF"
    assert ids(browser.listing()) == ["doc2"]


def test_entering_a_file_fails_late(browser):
    browser.enter("doc3")
    assert browser.path == ["root", "doc3"]
    with pytest.raises(NotFoundError):
        browser.listing()


def test_upload_goes_to_current_folder(browser):
    browser.enter("pictures")
    new_ids = browser.upload([{"name": "cat.png", "size_bytes": 2048}])
    assert ids(browser.current_folder().children) == ["pic1", *new_ids]


def test_move_then_list(browser):
    browser.move("doc1", "pictures")
    browser.enter("pictures")
    assert "doc1" in ids(browser.listing())


def test_accepts_string_options():
    browser = FolderBrowser(TreeStore.from_seed(), sort_key="date", direction="desc")
    assert browser.sort_key is SortKey.DATE
    assert browser.direction is SortDirection.DESC
