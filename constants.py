"""
Shared constants for the entity catalog pipeline and the admin service.

Kept in one place so the scanner, the derivation engine and the HTTP layer
agree on marker syntax, override keys and the document shape.
"""

from enum import Enum
from typing import Any, Dict, Tuple


class EntityKind(str, Enum):
    WEAPON = "Weapon"
    BOAT = "Boat"
    OTHER = "Other"


# ---------------------------------------------------------------------------
# Override annotation syntax
# ---------------------------------------------------------------------------

ENTITY_MARKER = "#[entity("
WEAPON_MARKER = "#[entity(Weapon"
PROPS_MARKER = "#[props("
PROPS_CLOSE = ")]"
IDENTIFIER_SEPARATOR = ","

OVERRIDE_KEYS: Tuple[str, ...] = ("range", "speed", "reload", "damage")

# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

# Armament counts are carried as an unsigned byte in the exported document.
MAX_ARMAMENT_COUNT = 255
MAX_LEVEL = 255

# ---------------------------------------------------------------------------
# Admin document
# ---------------------------------------------------------------------------

DOCUMENT_COLLECTIONS: Tuple[str, ...] = ("ships", "weapons", "sprites")


def empty_entities() -> Dict[str, Any]:
    return {key: [] for key in DOCUMENT_COLLECTIONS}
