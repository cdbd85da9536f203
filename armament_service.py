from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from catalog_models import ArmamentOut
from constants import MAX_ARMAMENT_COUNT
from entity_registry import ArmamentRef, TurretRef


class RangeTable:
    """Weapon id -> effective (post-override) range. Misses resolve to 0.0."""

    def __init__(self) -> None:
        self._ranges: Dict[str, float] = {}

    def record(self, weapon_id: str, weapon_range: float) -> None:
        self._ranges[weapon_id] = float(weapon_range)

    def lookup(self, weapon_id: str) -> float:
        return self._ranges.get(weapon_id, 0.0)

    def __contains__(self, weapon_id: object) -> bool:
        return weapon_id in self._ranges

    def __len__(self) -> int:
        return len(self._ranges)


def aggregate_refs(weapon_ids: Iterable[str], ranges: RangeTable) -> List[ArmamentOut]:
    groups: Dict[str, Tuple[int, float]] = {}
    for weapon_id in weapon_ids:
        weapon_range = ranges.lookup(weapon_id)
        if weapon_id in groups:
            count, best = groups[weapon_id]
            groups[weapon_id] = (min(count + 1, MAX_ARMAMENT_COUNT), max(best, weapon_range))
        else:
            groups[weapon_id] = (1, weapon_range)

    return [
        ArmamentOut(weapon_id=weapon_id, count=count, range=max(0.0, weapon_range))
        for weapon_id, (count, weapon_range) in sorted(groups.items())
    ]


def mounted_weapon_ids(
    armaments: Sequence[ArmamentRef],
    turrets: Sequence[TurretRef],
) -> List[str]:
    ids = [a.entity_type for a in armaments]
    ids.extend(t.entity_type for t in turrets if t.entity_type is not None)
    return ids


def aggregate_armaments(
    armaments: Sequence[ArmamentRef],
    turrets: Sequence[TurretRef],
    ranges: RangeTable,
) -> List[ArmamentOut]:
    """One group per weapon id across direct mounts and occupied turrets, sorted by id."""
    return aggregate_refs(mounted_weapon_ids(armaments, turrets), ranges)


def max_group_range(groups: Sequence[ArmamentOut]) -> Optional[float]:
    if not groups:
        return None
    return max(g.range for g in groups)
