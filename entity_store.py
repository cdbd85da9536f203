import json
import logging
from pathlib import Path
from typing import Any, Dict

import settings
from constants import empty_entities
from export_service import write_text_atomic


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logging.warning("Failed to read %s, returning empty structure: %s", path, exc)
        return empty_entities()
    if not isinstance(payload, dict):
        logging.warning("Top-level JSON in %s must be an object, returning empty structure", path)
        return empty_entities()
    return payload


def _write_json(path: Path, data: Dict[str, Any]) -> None:
    write_text_atomic(path, json.dumps(data, indent=2, ensure_ascii=False))


def read_entities() -> Dict[str, Any]:
    return _read_json(settings.ENTITIES_PATH)


def read_draft_entities() -> Dict[str, Any]:
    if not settings.ENTITIES_DRAFT_PATH.exists():
        return read_entities()
    return _read_json(settings.ENTITIES_DRAFT_PATH)


def write_entities(data: Dict[str, Any]) -> None:
    _write_json(settings.ENTITIES_PATH, data)


def write_draft_entities(data: Dict[str, Any]) -> None:
    _write_json(settings.ENTITIES_DRAFT_PATH, data)
