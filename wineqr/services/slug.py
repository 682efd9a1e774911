from __future__ import annotations

from wineqr.schemas.wine import WineAttributes

QR_PREFIX = "QRCODE_"


def normalize_slug(text: str) -> str:
    # Underscores and whitespace are treated alike so "Champs Martin" and
    # "champs_martin" land on the same token.
    return "_".join(text.replace("_", " ").split()).lower()


def build_slug(attrs: WineAttributes, lot_token: str) -> str:
    parts = [attrs.appellation, attrs.climat, attrs.cru, attrs.color, str(attrs.year), lot_token]
    return normalize_slug("_".join(parts))


def qr_filename(slug: str) -> str:
    return f"{QR_PREFIX}{slug}.png"


def page_filename(slug: str) -> str:
    return f"{normalize_slug(slug)}.html"
