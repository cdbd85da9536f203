"""
Best-effort extraction of weapon stat overrides from annotated entity source.

The source is a list of enum variants annotated with block markers:

    #[entity(Weapon, Torpedo)]
    #[props(range = 1500, speed = 18)]
    Mark18,
    #[entity(Boat, Destroyer)]
    Fletcher,

Each line is classified on its own shape; there is no grammar. A properties
marker inside a Weapon block fills a pending patch, and the next identifier
line consumes it. Every identifier line clears the pending patch, so a
properties marker applies to the first identifier that follows it only.
Anything that does not parse is ignored.
"""

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

from constants import (
    ENTITY_MARKER,
    IDENTIFIER_SEPARATOR,
    OVERRIDE_KEYS,
    PROPS_CLOSE,
    PROPS_MARKER,
    WEAPON_MARKER,
)


@dataclass(frozen=True)
class OverridePatch:
    range: Optional[float] = None
    speed: Optional[float] = None
    reload: Optional[float] = None
    damage: Optional[float] = None

    def is_empty(self) -> bool:
        return all(getattr(self, key) is None for key in OVERRIDE_KEYS)


def _parse_float(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _props_payload(line: str) -> str:
    payload = line[len(PROPS_MARKER):]
    if payload.endswith(PROPS_CLOSE):
        payload = payload[: -len(PROPS_CLOSE)]
    return payload.rstrip(")")


def parse_props(payload: str, patch: OverridePatch) -> OverridePatch:
    """Merge recognised ``key = value`` pairs from a props payload into ``patch``."""
    updates: Dict[str, float] = {}
    for part in payload.split(","):
        key, sep, value = part.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key not in OVERRIDE_KEYS:
            continue
        parsed = _parse_float(value.strip())
        if parsed is not None:
            updates[key] = parsed
    return replace(patch, **updates) if updates else patch


def identifier_from_line(line: str) -> Optional[str]:
    if not line.endswith(IDENTIFIER_SEPARATOR):
        return None
    name = line[: -len(IDENTIFIER_SEPARATOR)].strip()
    if not name or not name[0].isupper():
        return None
    return name


def scan_overrides(text: str) -> Dict[str, OverridePatch]:
    overrides: Dict[str, OverridePatch] = {}
    in_weapon = False
    pending = OverridePatch()

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith(ENTITY_MARKER):
            in_weapon = line.startswith(WEAPON_MARKER)
            pending = OverridePatch()
        elif line.startswith(PROPS_MARKER):
            if in_weapon:
                pending = parse_props(_props_payload(line), pending)
        else:
            name = identifier_from_line(line)
            if name is None:
                continue
            if in_weapon and not pending.is_empty():
                overrides[name] = pending
            pending = OverridePatch()

    return overrides


def load_overrides(path: Optional[Path]) -> Dict[str, OverridePatch]:
    if path is None:
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logging.warning("Override source %s unavailable, continuing without overrides: %s", path, exc)
        return {}
    overrides = scan_overrides(text)
    logging.info("Loaded %d weapon overrides from %s", len(overrides), path)
    return overrides
