"""
Shared pytest fixtures for the entity catalog tests.

Provides:
  - A temp data directory wired in through CATALOG_DATA_DIR
  - Small in-memory registries for the pipeline tests
  - FastAPI TestClient for the admin endpoints
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# ---------------------------------------------------------------------------
# Ensure the project root is on sys.path so we can import app modules
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Point every configured path at a writable temp directory before settings is imported.
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="entity_catalog_test_")
os.environ["CATALOG_DATA_DIR"] = _TEST_DATA_DIR

SAMPLE_DATA_DIR = PROJECT_ROOT / "data"


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def torpedo_registry():
    """One torpedo and one destroyer that mounts it twice."""
    from constants import EntityKind
    from entity_registry import ArmamentRef, EntityRecord, EntityRegistry

    return EntityRegistry([
        EntityRecord(
            id="TorpedoA",
            kind=EntityKind.WEAPON,
            sub_kind="Torpedo",
            label="Torpedo A",
            range=10.0,
            speed=5.0,
            reload=2.0,
            damage=20.0,
        ),
        EntityRecord(
            id="Destroyer1",
            kind=EntityKind.BOAT,
            sub_kind="Destroyer",
            label="Destroyer 1",
            level=3,
            range=0.0,
            visual_range=50.0,
            armaments=(ArmamentRef("TorpedoA"), ArmamentRef("TorpedoA")),
        ),
    ])


# ---------------------------------------------------------------------------
# Data directory / API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def data_dir() -> Generator[Path, None, None]:
    """Empty the configured data directory before and after the test."""
    import settings

    def _clear() -> None:
        if settings.DATA_DIR.exists():
            shutil.rmtree(settings.DATA_DIR)
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)

    _clear()
    yield settings.DATA_DIR
    _clear()


@pytest.fixture()
def sample_data(data_dir: Path) -> Path:
    """data_dir seeded with the bundled sample registry and override source."""
    import settings

    shutil.copyfile(SAMPLE_DATA_DIR / "registry.json", settings.REGISTRY_PATH)
    shutil.copyfile(SAMPLE_DATA_DIR / "entity_types.rs", settings.OVERRIDE_SOURCE_PATH)
    return data_dir


@pytest.fixture()
def client(data_dir: Path):
    """Return a Starlette TestClient wired to the FastAPI app."""
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as c:
        yield c
