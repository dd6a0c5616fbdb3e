"""Load and expose table column configuration from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import DETAIL_COLUMNS, TABLE_COLUMNS

logger = logging.getLogger(__name__)

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {"table": list(TABLE_COLUMNS), "detail": list(DETAIL_COLUMNS)}


def load_column_sets(base_path: str | Path | None = None, *, refresh: bool = False) -> dict[str, list[str]]:
    global _CACHE
    if _CACHE is not None and not refresh and base_path is None:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "columns.yaml"
    if not yaml_path.exists():
        sets = _defaults()
    else:
        try:
            data = yaml.safe_load(yaml_path.read_text()) or {}
        except yaml.YAMLError as exc:
            logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
            data = {}
        loaded = data.get("sets", {}) if isinstance(data, dict) else {}
        sets = _defaults()
        for name in sets:
            if loaded.get(name):
                sets[name] = [str(c) for c in loaded[name]]
    if base_path is None:
        _CACHE = sets
    return sets


def get_columns(set_name: str) -> list[str]:
    sets = load_column_sets()
    return sets.get(set_name, [])
