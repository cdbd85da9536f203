import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from constants import MAX_LEVEL, EntityKind
from settings import REGISTRY_PATH


class RegistryError(ValueError):
    pass


@dataclass(frozen=True)
class ArmamentRef:
    entity_type: str


@dataclass(frozen=True)
class TurretRef:
    entity_type: Optional[str] = None


@dataclass(frozen=True)
class EntityRecord:
    id: str
    kind: EntityKind
    sub_kind: str = ""
    label: str = ""
    level: int = 0
    length: float = 0.0
    draft: float = 0.0
    speed: float = 0.0
    range: float = 0.0
    depth: float = 0.0
    lifespan: float = 0.0
    reload: float = 0.0
    damage: float = 0.0
    anti_aircraft: float = 0.0
    torpedo_resistance: float = 0.0
    stealth: float = 0.0
    visual_range: float = 0.0
    npc: bool = False
    armaments: Tuple[ArmamentRef, ...] = field(default_factory=tuple)
    turrets: Tuple[TurretRef, ...] = field(default_factory=tuple)


class EntityRegistry:
    """Read-only, ordered collection of entity records.

    Enumeration order is the order the records were supplied in, so two
    runs over the same registry produce the same document.
    """

    def __init__(self, records: Iterable[EntityRecord]):
        ordered = tuple(records)
        by_id: Dict[str, EntityRecord] = {}
        for record in ordered:
            if record.id in by_id:
                raise RegistryError(f"Duplicate entity id: {record.id}")
            by_id[record.id] = record
        self._records = ordered
        self._by_id = by_id

    def iter_entities(self) -> Iterator[EntityRecord]:
        return iter(self._records)

    def __iter__(self) -> Iterator[EntityRecord]:
        return self.iter_entities()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def get(self, entity_id: str) -> Optional[EntityRecord]:
        return self._by_id.get(entity_id)


def _as_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise RegistryError(f"{field_name} must be numeric")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise RegistryError(f"{field_name} must be numeric")


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise RegistryError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RegistryError(f"{field_name} must be an integer")


def _require_str(obj: Dict[str, Any], key: str, ctx: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value.strip():
        raise RegistryError(f"{ctx}.{key} must be a non-empty string")
    return value.strip()


def _parse_kind(raw: Any) -> EntityKind:
    text = str(raw or "").strip()
    for kind in EntityKind:
        if kind.value.lower() == text.lower():
            return kind
    return EntityKind.OTHER


def _parse_armaments(raw: Any, ctx: str) -> Tuple[ArmamentRef, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise RegistryError(f"{ctx}.armaments must be an array")
    refs: List[ArmamentRef] = []
    for entry in raw:
        if isinstance(entry, str) and entry.strip():
            refs.append(ArmamentRef(entry.strip()))
        elif isinstance(entry, dict):
            refs.append(ArmamentRef(_require_str(entry, "entity_type", f"{ctx}.armaments[]")))
        else:
            raise RegistryError(f"{ctx}.armaments[] entries must be strings or objects")
    return tuple(refs)


def _parse_turrets(raw: Any, ctx: str) -> Tuple[TurretRef, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise RegistryError(f"{ctx}.turrets must be an array")
    refs: List[TurretRef] = []
    for entry in raw:
        if entry is None:
            refs.append(TurretRef(None))
        elif isinstance(entry, str):
            refs.append(TurretRef(entry.strip() or None))
        elif isinstance(entry, dict):
            target = str(entry.get("entity_type") or "").strip()
            refs.append(TurretRef(target or None))
        else:
            raise RegistryError(f"{ctx}.turrets[] entries must be strings, objects or null")
    return tuple(refs)


def entity_from_dict(entry: Dict[str, Any]) -> EntityRecord:
    if not isinstance(entry, dict):
        raise RegistryError("entities[] entries must be objects")
    entity_id = _require_str(entry, "id", "entities[]")
    ctx = f"entities[{entity_id}]"

    def num(key: str) -> float:
        return _as_float(entry.get(key, 0.0), f"{ctx}.{key}")

    level = _as_int(entry.get("level", 0), f"{ctx}.level")
    if not 0 <= level <= MAX_LEVEL:
        raise RegistryError(f"{ctx}.level must be between 0 and {MAX_LEVEL}")

    sensors = entry.get("sensors") or {}
    visual = sensors.get("visual") if isinstance(sensors, dict) else None
    visual_range = entry.get("visual_range")
    if visual_range is None and isinstance(visual, dict):
        visual_range = visual.get("range")

    return EntityRecord(
        id=entity_id,
        kind=_parse_kind(entry.get("kind")),
        sub_kind=str(entry.get("sub_kind") or "").strip(),
        label=str(entry.get("label") or entity_id),
        level=level,
        length=num("length"),
        draft=num("draft"),
        speed=num("speed"),
        range=num("range"),
        depth=num("depth"),
        lifespan=num("lifespan"),
        reload=num("reload"),
        damage=num("damage"),
        anti_aircraft=num("anti_aircraft"),
        torpedo_resistance=num("torpedo_resistance"),
        stealth=num("stealth"),
        visual_range=_as_float(visual_range if visual_range is not None else 0.0, f"{ctx}.visual_range"),
        npc=bool(entry.get("npc", False)),
        armaments=_parse_armaments(entry.get("armaments"), ctx),
        turrets=_parse_turrets(entry.get("turrets"), ctx),
    )


def registry_from_payload(raw: Any) -> EntityRegistry:
    entries = raw.get("entities") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise RegistryError("entities must be an array")
    return EntityRegistry(entity_from_dict(entry) for entry in entries)


def load_registry(path: Path = REGISTRY_PATH) -> EntityRegistry:
    if not path.exists():
        raise RegistryError(f"Registry not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise RegistryError(f"Unable to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RegistryError(f"Invalid JSON in {path}: {exc}") from exc
    return registry_from_payload(raw)
