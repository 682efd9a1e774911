#!/usr/bin/env python3
"""Generate QR labels for every wine listed in a JSON file.

The file holds a list of objects with the WineAttributes fields, e.g.

    [{"year": 2024, "appellation": "mercurey", "color": "red",
      "climat": "Champs Martin", "cru": "1er cru", "energy": "312 kJ / 75 kcal"}]

Entries with unknown vocabulary are reported and skipped; the rest still run.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter

from wineqr.core.log import configure_logging
from wineqr.schemas.wine import GenerationOptions, WineAttributes
from wineqr.services.pipeline import generate_batch

_wine_list = TypeAdapter(list[WineAttributes])


def load_wines(path: Path) -> list[WineAttributes]:
    return _wine_list.validate_python(json.loads(path.read_text(encoding="utf-8")))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("wines", type=Path, help="JSON list of wines")
    parser.add_argument("--html-dir", type=Path, default=None)
    parser.add_argument("--artifact-dir", type=Path, default=None)
    parser.add_argument("--json", action="store_true", help="Print machine-readable results")
    args = parser.parse_args(argv)
    configure_logging()

    options = GenerationOptions(html_dir=args.html_dir, artifact_dir=args.artifact_dir)
    outcomes = generate_batch(load_wines(args.wines), options)

    if args.json:
        print(json.dumps([o.model_dump(mode="json") for o in outcomes], indent=2))
    else:
        print("=" * 60)
        for outcome in outcomes:
            wine = outcome.wine
            print(f"{outcome.index}. {wine.color} {wine.appellation} {wine.year}")
            if outcome.error:
                print(outcome.error)
                continue
            result = outcome.result
            print(f"   QR:   {result.qr_path}")
            print(f"   Page: {result.html_path or 'skipped'}")
            for warning in result.warnings:
                print(f"   Warning: {warning}")
        print("=" * 60)

    failed = sum(1 for o in outcomes if o.error)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
