"""Pydantic models that capture the file tree domain concepts."""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Iterator, Literal, Mapping, Union

import json
import yaml
from pydantic import BaseModel, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: Any, handler: ValidatorFunctionWrapHandler) -> datetime:
    """Validate a timestamp, reading plain dates and naive datetimes as UTC."""
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    moment = handler(value)
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


class NodeBase(BaseModel):
    """Attributes shared by folders and files."""

    id: str = Field(..., min_length=1, frozen=True, description="Tree-wide unique id")
    name: str = Field(..., min_length=1, description="Display name, not unique among siblings")
    modified: datetime = Field(default_factory=utcnow, description="Last modification instant")

    @field_validator("modified", mode="wrap")
    @classmethod
    def modified_as_utc(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> datetime:
        return _as_aware(value, handler)


class FileNode(NodeBase):
    """Leaf node holding a size and an opaque reference to its payload."""

    type: Literal["file"] = "file"
    size_bytes: int = Field(0, ge=0)
    content_ref: str = Field(default="", description="Opaque handle or URI of the content")

    @property
    def is_folder(self) -> bool:
        return False


class FolderNode(NodeBase):
    """Node that exclusively owns an ordered list of children."""

    type: Literal["folder"] = "folder"
    children: list[Node] = Field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return True

    def child(self, node_id: str) -> Node | None:
        """Return the direct child with ``node_id``, if any."""
        for item in self.children:
            if item.id == node_id:
                return item
        return None

    def index_of(self, node_id: str) -> int:
        for index, item in enumerate(self.children):
            if item.id == node_id:
                return index
        return -1

    def walk(self) -> Iterator[Node]:
        """Yield this folder and every descendant in pre-order."""
        yield self
        for item in self.children:
            if isinstance(item, FolderNode):
                yield from item.walk()
            else:
                yield item


Node = Annotated[Union[FolderNode, FileNode], Field(discriminator="type")]
FolderNode.model_rebuild()


class Breadcrumb(BaseModel):
    """One (id, name) step of a navigation path."""

    id: str
    name: str


class UploadItem(BaseModel):
    """An already-read upload handed to the store by the upload source."""

    name: str = Field(..., min_length=1)
    size_bytes: int = Field(..., ge=0)
    content_ref: str = Field(default="")
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    @field_validator("timestamp", mode="wrap")
    @classmethod
    def timestamp_as_utc(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> datetime:
        return _as_aware(value, handler)


class NodeSummary(BaseModel):
    """Non-recursive view of a node, as listed in a folder."""

    id: str
    name: str
    type: Literal["folder", "file"]
    modified: datetime
    size_bytes: int | None = None
    child_count: int | None = None

    @classmethod
    def from_node(cls, node: FolderNode | FileNode) -> NodeSummary:
        if isinstance(node, FolderNode):
            return cls(id=node.id, name=node.name, type="folder", modified=node.modified,
                       child_count=len(node.children))
        return cls(id=node.id, name=node.name, type="file", modified=node.modified,
                   size_bytes=node.size_bytes)


class NodeInfo(NodeSummary):
    """Summary plus the content reference of a file."""

    content_ref: str | None = None

    @classmethod
    def from_node(cls, node: FolderNode | FileNode) -> NodeInfo:
        payload = NodeSummary.from_node(node).model_dump()
        if isinstance(node, FileNode):
            payload["content_ref"] = node.content_ref
        return cls(**payload)


# ---------------------------------------------------------------------------
# helpers


def coerce_upload_item(value: Any) -> UploadItem:
    """Normalize supported inputs into an UploadItem instance."""
    if isinstance(value, UploadItem):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, (str, bytes)):
        payload = load_text_payload(value)
    elif isinstance(value, Path):
        payload = load_text_payload(value.read_text(encoding="utf-8"))
    else:
        raise TypeError("Unsupported value for an upload item")
    try:
        return UploadItem.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid upload item: {exc.errors(include_url=False)}") from exc


def load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError:
        loaded = json.loads(text)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError("Expected a mapping at the top level")
    return loaded


__all__ = [
    "Breadcrumb",
    "FileNode",
    "FolderNode",
    "Node",
    "NodeInfo",
    "NodeSummary",
    "UploadItem",
    "coerce_upload_item",
    "load_text_payload",
    "utcnow",
]
