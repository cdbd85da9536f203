import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from armament_service import RangeTable, aggregate_armaments, max_group_range
from catalog_models import ArmamentOut, CatalogDocument, ShipOut, WeaponOut
from constants import EntityKind
from entity_registry import EntityRecord, EntityRegistry, load_registry
from export_service import write_catalog
from override_scanner import OverridePatch, load_overrides
from settings import EXPORT_PATH, OVERRIDE_SOURCE_PATH, REGISTRY_PATH


def apply_override(weapon: WeaponOut, patch: Optional[OverridePatch]) -> WeaponOut:
    if patch is None:
        return weapon
    updates: Dict[str, float] = {}
    if patch.range is not None:
        updates["range"] = patch.range
    if patch.speed is not None:
        updates["speed"] = patch.speed
    if patch.reload is not None:
        updates["reload"] = patch.reload
    if patch.damage is not None:
        updates["damage"] = patch.damage
    return weapon.model_copy(update=updates) if updates else weapon


def build_weapon_output(record: EntityRecord, patch: Optional[OverridePatch] = None) -> WeaponOut:
    weapon = WeaponOut(
        id=record.id,
        label=record.label,
        kind=record.sub_kind,
        damage=record.damage,
        reload=record.reload,
        speed=record.speed,
        range=record.range,
    )
    return apply_override(weapon, patch)


def effective_range(declared_range: float, groups: Sequence[ArmamentOut], visual_range: float) -> float:
    """Declared range, else the longest armament range, else the visual sensor range."""
    if declared_range > 0.0:
        return declared_range
    weapon_range = max_group_range(groups) or 0.0
    if weapon_range > 0.0:
        return weapon_range
    return visual_range


def build_ship_output(record: EntityRecord, ranges: RangeTable) -> ShipOut:
    armaments = aggregate_armaments(record.armaments, record.turrets, ranges)
    return ShipOut(
        id=record.id,
        label=record.label,
        level=record.level,
        kind=record.kind.value,
        sub_kind=record.sub_kind,
        speed=record.speed,
        health=record.damage,
        length=record.length,
        draft=record.draft,
        range=effective_range(record.range, armaments, record.visual_range),
        depth=record.depth,
        reload=record.reload,
        anti_aircraft=record.anti_aircraft,
        torpedo_resistance=record.torpedo_resistance,
        stealth=record.stealth,
        npc=record.npc,
        armaments=armaments,
    )


def build_catalog(
    registry: EntityRegistry,
    overrides: Optional[Mapping[str, OverridePatch]] = None,
) -> CatalogDocument:
    overrides = overrides or {}
    ranges = RangeTable()

    # Weapons first so every ship sees the final range of whatever it mounts,
    # regardless of where the weapon sits in registry order.
    weapons: List[WeaponOut] = []
    for record in registry.iter_entities():
        if record.kind is not EntityKind.WEAPON:
            continue
        weapon = build_weapon_output(record, overrides.get(record.id))
        ranges.record(weapon.id, weapon.range)
        weapons.append(weapon)

    ships: List[ShipOut] = []
    for record in registry.iter_entities():
        if record.kind is EntityKind.BOAT:
            ships.append(build_ship_output(record, ranges))

    return CatalogDocument(weapons=weapons, ships=ships)


def run_pipeline(
    registry_path: Path = REGISTRY_PATH,
    override_path: Optional[Path] = OVERRIDE_SOURCE_PATH,
    output_path: Path = EXPORT_PATH,
) -> CatalogDocument:
    registry = load_registry(registry_path)
    overrides = load_overrides(override_path)
    document = build_catalog(registry, overrides)
    write_catalog(document, output_path)
    logging.info(
        "Exported %d weapons and %d ships to %s",
        len(document.weapons),
        len(document.ships),
        output_path,
    )
    return document
