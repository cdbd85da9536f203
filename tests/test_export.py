"""
Exporter tests — document shape, round-trip and failure behaviour.
"""

import json
import os
import stat
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


@pytest.fixture()
def document(torpedo_registry):
    from catalog_service import build_catalog
    return build_catalog(torpedo_registry)


class TestSerialize:
    def test_top_level_collections(self, document):
        from export_service import serialize_catalog
        payload = json.loads(serialize_catalog(document))
        assert list(payload) == ["weapons", "ships"]

    def test_field_names(self, document):
        from export_service import serialize_catalog
        payload = json.loads(serialize_catalog(document))
        assert set(payload["weapons"][0]) == {"id", "label", "kind", "damage", "reload", "speed", "range"}
        assert set(payload["ships"][0]) == {
            "id", "label", "level", "kind", "sub_kind", "speed", "health", "length", "draft",
            "range", "depth", "reload", "anti_aircraft", "torpedo_resistance", "stealth", "npc",
            "armaments",
        }
        assert payload["ships"][0]["armaments"] == [
            {"weapon_id": "TorpedoA", "count": 2, "range": 10.0, "notes": None},
        ]


class TestWriteCatalog:
    def test_round_trip(self, document, tmp_path):
        from export_service import read_catalog, write_catalog
        path = tmp_path / "doc.json"
        write_catalog(document, path)
        assert read_catalog(path) == document

    def test_round_trip_keeps_float_precision(self, tmp_path):
        from catalog_models import CatalogDocument, WeaponOut
        from export_service import read_catalog, write_catalog
        doc = CatalogDocument(weapons=[
            WeaponOut(id="W", label="Wé", kind="Shell", damage=0.1 + 0.2, reload=1 / 3, speed=1e-9, range=123456.789),
        ])
        path = tmp_path / "doc.json"
        write_catalog(doc, path)
        assert read_catalog(path) == doc

    def test_creates_parent_directories(self, document, tmp_path):
        from export_service import write_catalog
        path = tmp_path / "a" / "b" / "c" / "doc.json"
        write_catalog(document, path)
        assert path.exists()

    def test_written_file_follows_umask(self, document, tmp_path):
        from export_service import write_catalog
        previous = os.umask(0o022)
        try:
            path = write_catalog(document, tmp_path / "doc.json")
        finally:
            os.umask(previous)
        mode = stat.S_IMODE(path.stat().st_mode)
        assert mode == 0o644
        assert mode & stat.S_IRGRP and mode & stat.S_IROTH

    def test_overwrites_existing(self, document, tmp_path):
        from export_service import read_catalog, write_catalog
        path = tmp_path / "doc.json"
        path.write_text("stale", encoding="utf-8")
        write_catalog(document, path)
        assert read_catalog(path) == document

    def test_unwritable_target_raises(self, document, tmp_path):
        from export_service import CatalogExportError, write_catalog
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(CatalogExportError):
            write_catalog(document, blocker / "doc.json")

    def test_failed_replace_leaves_previous_file(self, document, tmp_path, monkeypatch):
        import export_service
        from export_service import CatalogExportError, write_catalog

        path = tmp_path / "doc.json"
        path.write_text("previous", encoding="utf-8")

        def _fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(export_service.os, "replace", _fail)
        with pytest.raises(CatalogExportError):
            write_catalog(document, path)

        assert path.read_text(encoding="utf-8") == "previous"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["doc.json"]

    def test_read_rejects_wrong_shape(self, tmp_path):
        from export_service import read_catalog
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"weapons": [{"id": "W"}], "ships": []}), encoding="utf-8")
        with pytest.raises(ValueError):
            read_catalog(path)
