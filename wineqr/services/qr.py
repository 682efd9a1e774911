from __future__ import annotations

import logging
from pathlib import Path

import qrcode

from wineqr.core.config import settings

logger = logging.getLogger(__name__)


def build_url(slug: str, host: str | None = None) -> str:
    return f"https://{host or settings.qr_host}/{slug}.html"


def generate_qr_image(
    url: str,
    path: Path,
    *,
    box_size: int | None = None,
    border: int | None = None,
) -> Path:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=box_size or settings.qr_box_size,
        border=settings.qr_border if border is None else border,
    )
    qr.add_data(url)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    path = Path(path)
    img.save(path)
    logger.info("Wrote QR image %s for %s", path, url)
    return path
