from typing import List, Optional

from pydantic import BaseModel, Field

from constants import MAX_ARMAMENT_COUNT, MAX_LEVEL


class WeaponOut(BaseModel):
    id: str
    label: str
    kind: str
    damage: float
    reload: float
    speed: float
    range: float


class ArmamentOut(BaseModel):
    weapon_id: str
    count: int = Field(ge=1, le=MAX_ARMAMENT_COUNT)
    range: float = Field(ge=0.0)
    notes: Optional[str] = None


class ShipOut(BaseModel):
    id: str
    label: str
    level: int = Field(ge=0, le=MAX_LEVEL)
    kind: str
    sub_kind: str
    speed: float
    health: float
    length: float
    draft: float
    range: float
    depth: float
    reload: float
    anti_aircraft: float
    torpedo_resistance: float
    stealth: float
    npc: bool
    armaments: List[ArmamentOut] = Field(default_factory=list)


class CatalogDocument(BaseModel):
    weapons: List[WeaponOut] = Field(default_factory=list)
    ships: List[ShipOut] = Field(default_factory=list)
