from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from wineqr.core.config import settings
from wineqr.services.slug import normalize_slug, page_filename, qr_filename

router = APIRouter()


def _existing(path: Path) -> FileResponse:
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Label not found")
    return FileResponse(path)


@router.get("/pages/{slug}.html")
def wine_page(slug: str) -> FileResponse:
    return _existing(Path(settings.html_output_dir) / page_filename(slug))


@router.get("/qr/{slug}.png")
def qr_image(slug: str) -> FileResponse:
    return _existing(Path(settings.artifact_dir) / qr_filename(normalize_slug(slug)))
