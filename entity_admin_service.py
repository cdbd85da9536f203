"""
Admin-side helpers for the entities document.

The admin editor works on a flattened projection of the exported catalog
(``ships`` / ``weapons`` / ``sprites``). This module converts the pipeline
output into that projection, validates edited documents before they are
committed and reports what changed between two revisions.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from constants import DOCUMENT_COLLECTIONS, empty_entities


# ── Validation ──────────────────────────────────────────────────────────────

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_positive(entry: Dict[str, Any], key: str, label: str, errors: List[str]) -> None:
    value = entry.get(key)
    if value is None:
        return
    if not _is_number(value):
        errors.append(f"{label} {key} must be numeric")
    elif value <= 0:
        errors.append(f"{label} {key} must be > 0")


def _collect_ids(entries: List[Any], noun: str, errors: List[str]) -> List[str]:
    seen: set[str] = set()
    ids: List[str] = []
    for entry in entries:
        if not isinstance(entry, dict):
            errors.append(f"{noun} entries must be objects")
            continue
        entry_id = str(entry.get("id") or "")
        if not entry_id:
            if noun != "sprite":
                errors.append(f"{noun} missing id")
            continue
        if entry_id in seen:
            errors.append(f"duplicate {noun} id: {entry_id}")
        seen.add(entry_id)
        ids.append(entry_id)
    return ids


def validate_entities(data: Dict[str, Any]) -> Dict[str, List[str]]:
    errors: List[str] = []
    warnings: List[str] = []

    collections: Dict[str, List[Any]] = {}
    for key in DOCUMENT_COLLECTIONS:
        value = data.get(key)
        if not isinstance(value, list):
            errors.append(f"{key} must be array")
            value = []
        collections[key] = value

    ships = collections["ships"]
    weapons = collections["weapons"]

    _collect_ids(ships, "ship", errors)
    weapon_ids = set(_collect_ids(weapons, "weapon", errors))
    _collect_ids(collections["sprites"], "sprite", errors)

    for ship in ships:
        if not isinstance(ship, dict):
            continue
        label = f"ship {ship.get('id')}"
        _check_positive(ship, "hp", label, errors)
        _check_positive(ship, "speed", label, errors)
        mounted = ship.get("weapons")
        if mounted is None:
            mounted = []
        elif not isinstance(mounted, list):
            errors.append(f"{label} weapons must be array")
            mounted = []
        for weapon_id in mounted:
            if not isinstance(weapon_id, str):
                errors.append(f"{label} weapons entries must be strings")
            elif weapon_id not in weapon_ids:
                errors.append(f"{label} references missing weapon {weapon_id}")

    for weapon in weapons:
        if not isinstance(weapon, dict):
            continue
        label = f"weapon {weapon.get('id')}"
        _check_positive(weapon, "damage", label, errors)
        _check_positive(weapon, "range", label, errors)
        _check_positive(weapon, "cooldown", label, errors)

    return {"errors": errors, "warnings": warnings}


# ── Diff ────────────────────────────────────────────────────────────────────

def _by_id(entries: Optional[List[Any]]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for entry in entries or []:
        if isinstance(entry, dict) and entry.get("id"):
            out[str(entry["id"])] = entry
    return out


def _canonical(entry: Any) -> str:
    return json.dumps(entry, sort_keys=True, separators=(",", ":"))


def diff_list(base: Optional[List[Any]], target: Optional[List[Any]]) -> Dict[str, List[str]]:
    base_map = _by_id(base)
    target_map = _by_id(target)
    added = [i for i in target_map if i not in base_map]
    removed = [i for i in base_map if i not in target_map]
    changed = [
        i for i, item in target_map.items()
        if i in base_map and _canonical(base_map[i]) != _canonical(item)
    ]
    return {"added": added, "removed": removed, "changed": changed}


def diff_entities(base: Dict[str, Any], target: Dict[str, Any]) -> Dict[str, Dict[str, List[str]]]:
    return {
        key: diff_list(base.get(key), target.get(key))
        for key in DOCUMENT_COLLECTIONS
    }


# ── Catalog -> admin projection ─────────────────────────────────────────────

def _first_number(entry: Dict[str, Any], *keys: str) -> float:
    for key in keys:
        value = entry.get(key)
        if _is_number(value):
            return float(value)
    return 0.0


def _expand_weapon_ids(armaments: Any) -> List[str]:
    out: List[str] = []
    if not isinstance(armaments, list):
        return out
    for arm in armaments:
        if not isinstance(arm, dict) or not arm.get("weapon_id"):
            continue
        count = arm.get("count")
        repeat = int(count) if _is_number(count) and count > 0 else 1
        out.extend([str(arm["weapon_id"])] * repeat)
    return out


def transform_weapon(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": raw.get("id"),
        "name": raw.get("label"),
        "kind": raw.get("kind"),
        "type": raw.get("kind"),
        "damage": raw.get("damage"),
        "cooldown": raw.get("reload"),
        "reload": raw.get("reload"),
        "speed": raw.get("speed"),
        "range": _first_number(raw, "range", "range_max", "range_min"),
        "sprite": {"id": raw.get("id")},
    }


def transform_ship(raw: Dict[str, Any]) -> Dict[str, Any]:
    level = raw.get("level")
    return {
        "id": raw.get("id"),
        "name": raw.get("label"),
        "kind": raw.get("kind"),
        "sub_kind": raw.get("sub_kind"),
        "class": raw.get("sub_kind") or raw.get("kind"),
        "hp": raw.get("health"),
        "speed": raw.get("speed"),
        "mass": raw.get("length"),
        "length": raw.get("length"),
        "draft": raw.get("draft"),
        "range": _first_number(raw, "range", "range_max", "range_min"),
        "depth": raw.get("depth"),
        "reload": raw.get("reload"),
        "anti_air": raw.get("anti_aircraft"),
        "torpedo_resistance": raw.get("torpedo_resistance"),
        "stealth": raw.get("stealth"),
        "cost": level,
        "npc": raw.get("npc"),
        "weapons": _expand_weapon_ids(raw.get("armaments")),
        "sprite": {"id": raw.get("id")},
        "description": f"kind:{raw.get('kind') or ''} level:{'' if level is None else level}",
    }


def transform_catalog(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Project an exported catalog document onto the admin editor shape."""
    out = empty_entities()
    out["weapons"] = [transform_weapon(w) for w in raw.get("weapons") or [] if isinstance(w, dict)]
    out["ships"] = [transform_ship(s) for s in raw.get("ships") or [] if isinstance(s, dict)]
    return out


def entity_counts(data: Dict[str, Any]) -> Tuple[int, int]:
    return len(data.get("ships") or []), len(data.get("weapons") or [])
