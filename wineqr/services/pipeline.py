from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from wineqr.core.config import settings
from wineqr.core.errors import VocabularyError
from wineqr.schemas.wine import BatchEntryResult, GenerationOptions, GenerationResult, WineAttributes
from wineqr.services.annotate import ImageBackend, annotate_image, select_backend
from wineqr.services.lot import reserve_lot_token
from wineqr.services.page import render_page
from wineqr.services.qr import build_url, generate_qr_image
from wineqr.services.slug import build_slug, qr_filename
from wineqr.services.vocabulary import validate_attributes

logger = logging.getLogger(__name__)


def _resolve_dirs(options: GenerationOptions | None) -> tuple[Path, Path]:
    options = options or GenerationOptions()
    artifact_dir = Path(options.artifact_dir or settings.artifact_dir)
    html_dir = Path(options.html_dir or settings.html_output_dir)
    return artifact_dir, html_dir


def generate_label(
    attrs: WineAttributes,
    options: GenerationOptions | None = None,
    backend: ImageBackend | None = None,
) -> GenerationResult:
    """Produce the QR image and information page for one lot.

    Raises VocabularyError before touching the filesystem when an attribute
    is unknown. A missing raster tool or HTML directory only adds a warning.
    """
    validate_attributes(attrs)
    artifact_dir, html_dir = _resolve_dirs(options)

    lot_token = reserve_lot_token(artifact_dir)
    slug = build_slug(attrs, lot_token)
    url = build_url(slug)
    qr_path = generate_qr_image(url, artifact_dir / qr_filename(slug))

    warnings: list[str] = []
    annotated = annotate_image(qr_path, attrs.energy, backend or select_backend())
    if not annotated:
        warnings.append("Raster tool not found; QR image left unlabeled.")

    html_path = render_page(attrs, slug, html_dir)
    if html_path is None:
        warnings.append(f"Directory {html_dir} does not exist; HTML page skipped.")

    return GenerationResult(
        slug=slug,
        lot_token=lot_token,
        url=url,
        qr_path=qr_path,
        html_path=html_path,
        annotated=annotated,
        warnings=warnings,
    )


def generate_batch(
    wines: Iterable[WineAttributes],
    options: GenerationOptions | None = None,
    backend: ImageBackend | None = None,
) -> list[BatchEntryResult]:
    backend = backend or select_backend()
    outcomes: list[BatchEntryResult] = []
    for index, wine in enumerate(wines, start=1):
        try:
            result = generate_label(wine, options, backend)
        except VocabularyError as exc:
            logger.warning("Skipping wine #%d (%s %s): invalid vocabulary", index, wine.appellation, wine.year)
            outcomes.append(BatchEntryResult(index=index, wine=wine, error=str(exc)))
            continue
        outcomes.append(BatchEntryResult(index=index, wine=wine, result=result))
    return outcomes
