import os
from pathlib import Path

APP_DIR = Path(__file__).resolve().parent
DATA_DIR = Path(os.environ.get("CATALOG_DATA_DIR", str(APP_DIR / "data")))

REGISTRY_PATH = Path(os.environ.get("CATALOG_REGISTRY_PATH", str(DATA_DIR / "registry.json")))
OVERRIDE_SOURCE_PATH = Path(os.environ.get("CATALOG_OVERRIDE_SOURCE", str(DATA_DIR / "entity_types.rs")))
EXPORT_PATH = Path(os.environ.get("CATALOG_EXPORT_PATH", str(DATA_DIR / "entities_data.json")))

ENTITIES_PATH = Path(os.environ.get("ENTITIES_PATH", str(DATA_DIR / "entities.json")))
ENTITIES_DRAFT_PATH = Path(os.environ.get("ENTITIES_DRAFT_PATH", str(DATA_DIR / "entities.draft.json")))
