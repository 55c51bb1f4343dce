"""Exceptions raised by the tree store and its algorithms."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class TreeError(Exception):
    """Base error for tree store failures, optionally logged when raised."""

    kind = "tree_error"

    def __init__(self, message: str = "A tree store error occurred", node_id: str | None = None, log: bool = False):
        self.message = message
        self.node_id = node_id
        super().__init__(self.message)
        if log:
            logger.warning(message)


class NotFoundError(TreeError):
    """A path step or node id did not resolve."""

    kind = "not_found"

    def __init__(self, node_id: str, message: str | None = None, log: bool = False):
        super().__init__(message or f"Node not found: {node_id!r}", node_id=node_id, log=log)


class NotAFolderError(TreeError):
    """The operation needed a folder but the id names a file."""

    kind = "not_a_folder"

    def __init__(self, node_id: str, message: str | None = None, log: bool = False):
        super().__init__(message or f"Node is not a folder: {node_id!r}", node_id=node_id, log=log)


class InvalidTargetError(TreeError):
    """A move or delete would break the tree shape."""

    kind = "invalid_target"


__all__ = [
    "InvalidTargetError",
    "NotAFolderError",
    "NotFoundError",
    "TreeError",
]
