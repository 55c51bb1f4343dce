"""
Configuration shared by the tree service and its command-line client.

Settings are read from a YAML (or JSON) file, then overridden by
FILETREE_<FIELD> environment variables, then validated.
"""

from __future__ import annotations

import locale
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from filetree.models import load_text_payload
from filetree.sorting import SortDirection, SortKey

ENV_PREFIX = "FILETREE_"
CONFIG_ENV = f"{ENV_PREFIX}CONFIG"

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    app_name: str = Field(default="filetree", min_length=1)
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None, description="Log file; ~/.<app_name>/log.txt when unset")
    seed_file: Path | None = Field(default=None, description="YAML/JSON tree to serve instead of the sample tree")
    host: str = Field(default="127.0.0.1")
    port: int | None = Field(default=None, ge=0, le=65535, description="Service port, auto when unset")
    url: str = Field(default="http://127.0.0.1:8000", description="Base URL the CLI talks to")
    collation_locale: str | None = Field(default=None, description="LC_COLLATE used for name ordering")
    default_sort: SortKey = SortKey.NAME
    default_direction: SortDirection = SortDirection.ASC

    @field_validator("log_level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in Settings.model_fields:
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None and value != "":
            overrides[name] = value
    return overrides


def load_settings(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from ``path`` (or $FILETREE_CONFIG) plus environment overrides."""
    environ = os.environ if environ is None else environ
    if path is None:
        path = environ.get(CONFIG_ENV) or None
    payload: dict[str, Any] = {}
    if path is not None:
        payload = load_text_payload(Path(path).read_text(encoding="utf-8"))
    payload.update(_env_overrides(environ))
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc.errors(include_url=False)}") from exc


def apply_collation(settings: Settings) -> None:
    """Switch LC_COLLATE to the configured locale, or to the environment's one when unset."""
    name = settings.collation_locale or ""
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error:
        logger.warning(f"Collation locale {name or '(environment)'!r} unavailable, keeping current one")
    else:
        logger.info(f"Name collation set to {locale.setlocale(locale.LC_COLLATE)!r}")


__all__ = ["CONFIG_ENV", "ENV_PREFIX", "Settings", "apply_collation", "load_settings"]
