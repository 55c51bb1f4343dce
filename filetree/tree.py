"""In-memory tree store holding the root folder and its mutations."""

from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Sequence

from .errors import InvalidTargetError, NotAFolderError, NotFoundError
from .models import Breadcrumb, FileNode, FolderNode, Node, NodeInfo, NodeSummary, coerce_upload_item, utcnow
from .search import search
from .seed import default_seed, load_seed
from .sorting import SortDirection, SortKey, sort_nodes

logger = logging.getLogger(__name__)

ROOT_ID = "root"


class TreeStore:
    """Mutable rooted tree of folders and files.

    Mutations run under a single re-entrant lock so that a move's
    detach-then-attach and id allocation are serialized when the store is
    shared across threads (for example by the REST service's thread pool).
    """

    def __init__(self, root: FolderNode | None = None):
        if root is None:
            root = FolderNode(id=ROOT_ID, name="root")
        if root.id != ROOT_ID:
            raise ValueError(f"Root folder must have id {ROOT_ID!r}, got {root.id!r}")
        self.root = root
        self._lock = threading.RLock()

    @classmethod
    def from_seed(cls, source: Mapping[str, Any] | str | bytes | Path | None = None) -> TreeStore:
        """Build a store from seed data, or from the sample tree when omitted."""
        root = default_seed() if source is None else load_seed(source)
        return cls(root)

    # -----------------------------------------------------------------------
    # lookup

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for _ in self.root.walk())

    def __contains__(self, node_id: object) -> bool:
        if not isinstance(node_id, str):
            return False
        with self._lock:
            return self._locate(node_id) is not None

    def walk(self) -> list[Node]:
        """Snapshot of every node, root first, in pre-order."""
        with self._lock:
            return list(self.root.walk())

    def _locate(self, node_id: str) -> tuple[Node, FolderNode | None] | None:
        if self.root.id == node_id:
            return self.root, None
        stack: list[FolderNode] = [self.root]
        while stack:
            folder = stack.pop()
            for item in folder.children:
                if item.id == node_id:
                    return item, folder
                if isinstance(item, FolderNode):
                    stack.append(item)
        return None

    def locate(self, node_id: str) -> tuple[Node, FolderNode | None]:
        """Return ``(node, parent)`` for ``node_id``; the root's parent is None."""
        with self._lock:
            found = self._locate(node_id)
        if found is None:
            raise NotFoundError(node_id)
        return found

    def get_node(self, node_id: str) -> Node:
        return self.locate(node_id)[0]

    def get_folder(self, node_id: str) -> FolderNode:
        node = self.get_node(node_id)
        if not isinstance(node, FolderNode):
            raise NotAFolderError(node_id)
        return node

    def parent_of(self, node_id: str) -> FolderNode | None:
        return self.locate(node_id)[1]

    def _traverse(self, path: Sequence[str]) -> Iterator[FolderNode]:
        if not path or path[0] != self.root.id:
            raise NotFoundError(path[0] if path else "", "Path must start at the root folder")
        current = self.root
        yield current
        for step in path[1:]:
            child = current.child(step)
            if child is None:
                raise NotFoundError(step, f"No child {step!r} in folder {current.id!r}")
            if not isinstance(child, FolderNode):
                raise NotFoundError(step, f"Path step {step!r} names a file, not a folder")
            current = child
            yield current

    def resolve_path(self, path: Sequence[str]) -> FolderNode:
        """Return the folder a root-to-folder id path denotes."""
        with self._lock:
            folder = self.root
            for folder in self._traverse(path):
                pass
        logger.debug(f"Resolved path {list(path)} -> {folder.id!r}")
        return folder

    def breadcrumbs(self, path: Sequence[str]) -> list[Breadcrumb]:
        """Return the (id, name) pair of every folder along ``path``."""
        with self._lock:
            return [Breadcrumb(id=folder.id, name=folder.name) for folder in self._traverse(path)]

    def listing(
            self,
            path: Sequence[str],
            query: str = "",
            key: SortKey | str = SortKey.NAME,
            direction: SortDirection | str = SortDirection.ASC,
    ) -> list[NodeSummary]:
        """Children of the folder at ``path``, searched and sorted, as summaries."""
        with self._lock:
            folder = self.resolve_path(path)
            return [NodeSummary.from_node(item) for item in sort_nodes(search(folder, query), key, direction)]

    def info(self, node_id: str) -> NodeInfo:
        with self._lock:
            return NodeInfo.from_node(self.get_node(node_id))

    # -----------------------------------------------------------------------
    # mutations

    def _new_id(self, taken: set[str]) -> str:
        while True:
            candidate = f"file-{uuid.uuid4().hex}"
            if candidate not in taken:
                taken.add(candidate)
                return candidate

    def insert(self, parent_folder_id: str, items: Iterable[Any]) -> list[str]:
        """Append one file per upload item to a folder; return the new ids in order."""
        uploads = [coerce_upload_item(item) for item in items]
        with self._lock:
            parent = self.get_folder(parent_folder_id)
            taken = {node.id for node in self.root.walk()}
            new_nodes = [
                FileNode(
                    id=self._new_id(taken),
                    name=upload.name,
                    size_bytes=upload.size_bytes,
                    content_ref=upload.content_ref,
                    modified=upload.timestamp,
                )
                for upload in uploads
            ]
            parent.children.extend(new_nodes)
        logger.info(f"Inserted {len(new_nodes)} file(s) into {parent_folder_id!r}")
        return [node.id for node in new_nodes]

    def move(self, source_id: str, target_folder_id: str) -> None:
        """Move a node under another folder.

        Moving into the current parent is a no-op. Moving a node into itself,
        into one of its descendants, or moving the root raises
        InvalidTargetError. Nothing is changed unless every check passes.
        """
        with self._lock:
            source, source_parent = self.locate(source_id)
            if target_folder_id == source_id:
                raise InvalidTargetError(f"Cannot move {source_id!r} into itself", node_id=source_id, log=True)
            if source_parent is None:
                raise InvalidTargetError("Cannot move the root folder", node_id=source_id, log=True)
            target = self.get_folder(target_folder_id)
            if target.id == source_parent.id:
                logger.debug(f"Move of {source_id!r} into its current parent ignored")
                return
            if isinstance(source, FolderNode) and any(node.id == target.id for node in source.walk()):
                raise InvalidTargetError(
                    f"Cannot move {source_id!r} into its descendant {target_folder_id!r}",
                    node_id=target_folder_id,
                    log=True,
                )
            del source_parent.children[source_parent.index_of(source_id)]
            target.children.append(source)
        logger.info(f"Moved {source_id!r} from {source_parent.id!r} to {target_folder_id!r}")

    def delete(self, node_id: str) -> Node:
        """Detach a node, with its subtree, and return it."""
        with self._lock:
            node, parent = self.locate(node_id)
            if parent is None:
                raise InvalidTargetError("Cannot delete the root folder", node_id=node_id, log=True)
            del parent.children[parent.index_of(node_id)]
        logger.info(f"Deleted {node_id!r} from {parent.id!r}")
        return node

    def rename(self, node_id: str, new_name: str) -> Node:
        """Give a node a new display name; duplicates among siblings are allowed."""
        if not isinstance(new_name, str) or not new_name.strip():
            raise ValueError("New name must be a non-empty string")
        with self._lock:
            node = self.get_node(node_id)
            old_name = node.name
            node.name = new_name
            node.modified = utcnow()
        logger.info(f"Renamed {node_id!r}: {old_name!r} -> {new_name!r}")
        return node


__all__ = ["ROOT_ID", "TreeStore"]
