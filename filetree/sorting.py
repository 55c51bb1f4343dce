"""Display ordering for folder listings."""

from __future__ import annotations

import locale
from enum import Enum
from typing import Any, Callable, Iterable

from .models import FileNode, FolderNode, Node


class SortKey(str, Enum):
    NAME = "name"
    SIZE = "size"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def _name_key(node: Node) -> Any:
    # case folds first so the order holds even under the C locale
    return locale.strxfrm(node.name.casefold()), locale.strxfrm(node.name)


def _size_key(node: Node) -> Any:
    return node.size_bytes if isinstance(node, FileNode) else 0


def _date_key(node: Node) -> Any:
    return node.modified


_KEYS: dict[SortKey, Callable[[Node], Any]] = {
    SortKey.NAME: _name_key,
    SortKey.SIZE: _size_key,
    SortKey.DATE: _date_key,
}


def sort_nodes(
        items: Iterable[Node],
        key: SortKey | str = SortKey.NAME,
        direction: SortDirection | str = SortDirection.ASC,
) -> list[Node]:
    """Return ``items`` ordered for display without touching the input.

    Folders always come before files; ``direction`` only reverses the order
    inside each group. Equal keys keep their input order.
    """
    key_func = _KEYS[SortKey(key)]
    reverse = SortDirection(direction) is SortDirection.DESC
    items = list(items)
    folders = [item for item in items if isinstance(item, FolderNode)]
    files = [item for item in items if not isinstance(item, FolderNode)]
    return sorted(folders, key=key_func, reverse=reverse) + sorted(files, key=key_func, reverse=reverse)


__all__ = ["SortDirection", "SortKey", "sort_nodes"]
