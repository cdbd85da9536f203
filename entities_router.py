"""
Entity admin API routes.

Handles:
  /api/health
  /api/entities
  /api/entities/draft
  /api/validate
  /api/preview
  /api/commit
  /api/import_existing
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

import catalog_service
import entity_store
import settings
from entity_admin_service import diff_entities, entity_counts, transform_catalog, validate_entities
from entity_registry import RegistryError

router = APIRouter(tags=["entities"])


# ── Pydantic models ────────────────────────────────────────

class EntitiesReq(BaseModel):
    model_config = ConfigDict(extra="allow")

    ships: Any = None
    weapons: Any = None
    sprites: Any = None

    def as_document(self) -> Dict[str, Any]:
        return self.model_dump()


# ── Routes ─────────────────────────────────────────────────

@router.get("/api/health")
def api_health() -> Dict[str, Any]:
    return {
        "ok": True,
        "service": "entity-catalog",
    }


@router.get("/api/entities")
def api_entities() -> Dict[str, Any]:
    return entity_store.read_entities()


@router.get("/api/entities/draft")
def api_entities_draft() -> Dict[str, Any]:
    return entity_store.read_draft_entities()


@router.post("/api/validate")
def api_validate(req: EntitiesReq) -> Dict[str, Any]:
    result = validate_entities(req.as_document())
    return {"ok": not result["errors"], **result}


@router.post("/api/preview")
def api_preview(req: EntitiesReq) -> Dict[str, Any]:
    payload = req.as_document()
    validation = validate_entities(payload)
    current = entity_store.read_entities()
    return {
        "ok": not validation["errors"],
        "validation": validation,
        "diff": diff_entities(current, payload),
    }


@router.post("/api/commit")
def api_commit(req: EntitiesReq, dry_run: bool = False):
    payload = req.as_document()
    validation = validate_entities(payload)
    if validation["errors"]:
        return JSONResponse(status_code=400, content={"ok": False, "validation": validation})

    current = entity_store.read_entities()
    diff = diff_entities(current, payload)
    if dry_run:
        return {"ok": True, "dry_run": True, "diff": diff}

    entity_store.write_draft_entities(payload)
    entity_store.write_entities(payload)
    return {"ok": True, "diff": diff}


@router.post("/api/import_existing")
def api_import_existing():
    try:
        document = catalog_service.run_pipeline(
            registry_path=settings.REGISTRY_PATH,
            override_path=settings.OVERRIDE_SOURCE_PATH,
            output_path=settings.EXPORT_PATH,
        )
        result = transform_catalog(document.model_dump(mode="json"))
        entity_store.write_entities(result)
        entity_store.write_draft_entities(result)
    except (RegistryError, OSError) as exc:
        logging.exception("import_existing failed")
        return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})

    ships, weapons = entity_counts(result)
    return {"ok": True, "imported": True, "counts": {"ships": ships, "weapons": weapons}}
