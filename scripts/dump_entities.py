#!/usr/bin/env python3
"""
Export the weapon and ship catalog as a single JSON document.

Reads the entity registry, applies any weapon stat overrides found in the
annotated entity source, and writes the denormalized document:

  python scripts/dump_entities.py
  python scripts/dump_entities.py --registry data/registry.json --out build/entities_data.json
  python scripts/dump_entities.py --no-overrides

Can be re-run at any time to refresh the JSON.
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from catalog_service import run_pipeline
from entity_registry import RegistryError
from export_service import CatalogExportError
from settings import EXPORT_PATH, OVERRIDE_SOURCE_PATH, REGISTRY_PATH


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Export the entity catalog to JSON.")
    parser.add_argument("--registry", type=Path, default=REGISTRY_PATH, help="entity registry JSON")
    parser.add_argument("--overrides", type=Path, default=OVERRIDE_SOURCE_PATH, help="annotated entity source")
    parser.add_argument("--no-overrides", action="store_true", help="skip override scanning")
    parser.add_argument("--out", type=Path, default=EXPORT_PATH, help="output document path")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(message)s",
    )

    override_path = None if args.no_overrides else args.overrides
    try:
        document = run_pipeline(args.registry, override_path, args.out)
    except (RegistryError, CatalogExportError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"Wrote {args.out}  ({len(document.weapons)} weapons, {len(document.ships)} ships)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
