#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from wineqr.core.errors import VocabularyError
from wineqr.core.log import configure_logging
from wineqr.schemas.wine import SENTINEL, GenerationOptions, WineAttributes
from wineqr.services.pipeline import generate_label


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate the QR label and page for one wine lot.")
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--appellation", required=True)
    parser.add_argument("--color", required=True)
    parser.add_argument("--climat", default=SENTINEL)
    parser.add_argument("--cru", default=SENTINEL)
    parser.add_argument("--energy", default="", help='e.g. "312 kJ / 75 kcal"')
    parser.add_argument("--html-dir", type=Path, default=None)
    parser.add_argument("--artifact-dir", type=Path, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    wine = WineAttributes(
        year=args.year,
        appellation=args.appellation,
        color=args.color,
        climat=args.climat,
        cru=args.cru,
        energy=args.energy,
    )
    options = GenerationOptions(html_dir=args.html_dir, artifact_dir=args.artifact_dir)
    try:
        result = generate_label(wine, options)
    except VocabularyError as exc:
        print(exc)
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning}")
    print(f"Lot:  {result.lot_token}")
    print(f"URL:  {result.url}")
    print(f"QR:   {result.qr_path}")
    if result.html_path:
        print(f"Page: {result.html_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
