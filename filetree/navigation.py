"""Pure helpers for root-to-folder id paths."""

from __future__ import annotations

from typing import Sequence


def enter_folder(path: Sequence[str], child_id: str) -> list[str]:
    """Return ``path`` extended by ``child_id``.

    The child is not checked here; an invalid step surfaces as NotFoundError
    the next time the path is resolved.
    """
    return [*path, child_id]


def navigate_to(path: Sequence[str], index: int) -> list[str]:
    """Return ``path`` truncated so that ``path[index]`` is the last step."""
    if not 0 <= index < len(path):
        raise IndexError(f"Path index {index} out of range for a path of length {len(path)}")
    return list(path[: index + 1])


__all__ = ["enter_folder", "navigate_to"]
