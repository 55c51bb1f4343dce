"""Seed data used to populate a fresh tree store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from .models import FolderNode, load_text_payload

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def _day(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


DEFAULT_SEED: dict[str, Any] = {
    "id": "root",
    "name": "根目錄",
    "type": "folder",
    "modified": _day(2024, 3, 15),
    "children": [
        {
            "id": "documents",
            "name": "文件",
            "type": "folder",
            "modified": _day(2024, 3, 15),
            "children": [
                {
                    "id": "doc1",
                    "name": "報告.docx",
                    "type": "file",
                    "size_bytes": 1 * MB,
                    "modified": _day(2024, 3, 14),
                    "content_ref": "Sample document content",
                },
                {
                    "id": "doc2",
                    "name": "計劃書.pdf",
                    "type": "file",
                    "size_bytes": int(2.5 * MB),
                    "modified": _day(2024, 3, 13),
                    "content_ref": "Sample PDF content",
                },
            ],
        },
        {
            "id": "pictures",
            "name": "圖片",
            "type": "folder",
            "modified": _day(2024, 3, 12),
            "children": [
                {
                    "id": "pic1",
                    "name": "照片.jpg",
                    "type": "file",
                    "size_bytes": 3 * MB,
                    "modified": _day(2024, 3, 11),
                    "content_ref": "Sample image content",
                },
            ],
        },
        {
            "id": "doc3",
            "name": "計劃書.pdf",
            "type": "file",
            "size_bytes": int(2.5 * MB),
            "modified": _day(2024, 3, 13),
            "content_ref": "Sample PDF content",
        },
    ],
}


def default_seed() -> FolderNode:
    """Return a fresh copy of the sample tree."""
    return load_seed(DEFAULT_SEED)


def load_seed(source: Mapping[str, Any] | str | bytes | Path) -> FolderNode:
    """Build a validated root folder from a mapping, YAML/JSON text or a file path."""
    payload: Mapping[str, Any]
    if isinstance(source, Mapping):
        payload = source
    elif isinstance(source, (str, bytes)):
        payload = load_text_payload(source)
    elif isinstance(source, Path):
        logger.info(f"Loading seed tree from {source}")
        payload = load_text_payload(source.read_text(encoding="utf-8"))
    else:
        raise TypeError("Unsupported seed source")
    payload = dict(payload)
    payload.setdefault("type", "folder")
    try:
        root = FolderNode.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid seed tree: {exc.errors(include_url=False)}") from exc
    if root.id != "root":
        raise ValueError(f"Seed root must have id 'root', got {root.id!r}")
    seen: set[str] = set()
    for node in root.walk():
        if node.id in seen:
            raise ValueError(f"Duplicate node id in seed: {node.id!r}")
        seen.add(node.id)
    logger.debug(f"Seed tree loaded with {len(seen)} nodes")
    return root


__all__ = ["DEFAULT_SEED", "default_seed", "load_seed"]
