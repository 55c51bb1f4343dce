"""Navigation state of a file browser over one tree store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .models import Breadcrumb, FolderNode, NodeSummary
from .navigation import enter_folder, navigate_to
from .sorting import SortDirection, SortKey
from .tree import ROOT_ID, TreeStore


@dataclass
class FolderBrowser:
    """Current path, search query and sort options of a browsing session."""

    store: TreeStore
    path: list[str] = field(default_factory=lambda: [ROOT_ID])
    query: str = ""
    sort_key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        self.sort_key = SortKey(self.sort_key)
        self.direction = SortDirection(self.direction)

    def enter(self, child_id: str) -> list[str]:
        self.path = enter_folder(self.path, child_id)
        return self.path

    def navigate_to(self, index: int) -> list[str]:
        self.path = navigate_to(self.path, index)
        return self.path

    def current_folder(self) -> FolderNode:
        return self.store.resolve_path(self.path)

    def breadcrumbs(self) -> list[Breadcrumb]:
        return self.store.breadcrumbs(self.path)

    def listing(self) -> list[NodeSummary]:
        """Children of the current folder, searched and sorted."""
        return self.store.listing(self.path, self.query, self.sort_key, self.direction)

    def toggle_direction(self) -> SortDirection:
        self.direction = self.direction.toggled()
        return self.direction

    def move(self, source_id: str, target_folder_id: str) -> None:
        self.store.move(source_id, target_folder_id)

    def upload(self, items: Iterable[Any]) -> list[str]:
        """Insert uploads into the folder currently shown."""
        return self.store.insert(self.current_folder().id, items)


__all__ = ["FolderBrowser"]
