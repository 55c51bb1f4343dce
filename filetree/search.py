"""Case-insensitive name search over a folder's children."""

from __future__ import annotations

import logging

from .models import FolderNode, Node

logger = logging.getLogger(__name__)


def _matches(node: Node, needle: str) -> bool:
    if isinstance(node, FolderNode):
        # descendants are evaluated before the folder's own name
        if any(_matches(child, needle) for child in node.children):
            return True
    return needle in node.name.casefold()


def search(folder: FolderNode, query: str) -> list[Node]:
    """Return the direct children of ``folder`` that match ``query``.

    A file matches when its name contains the query; a folder matches when its
    name does or when any descendant matches. An empty query returns every
    child in stored order.
    """
    if not query:
        return list(folder.children)
    needle = query.casefold()
    result = [child for child in folder.children if _matches(child, needle)]
    logger.debug(f"Search {query!r} in {folder.id!r}: {len(result)}/{len(folder.children)} match")
    return result


__all__ = ["search"]
