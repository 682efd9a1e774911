from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from wineqr.schemas.wine import SENTINEL, WineAttributes
from wineqr.services.slug import page_filename

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parents[1]
TEMPLATE_DIR = PACKAGE_DIR / "templates"
LOGO_ASSET = PACKAGE_DIR / "static" / "ab.png"
PAGE_TEMPLATE = "wine_page.html"


def _or_na(value: str) -> str:
    return "n/a" if not value or value == SENTINEL else value


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["or_na"] = _or_na
    return env


_env = _build_environment()


def ensure_logo(directory: Path, asset: Path = LOGO_ASSET) -> bool:
    """Copy the organic logo into ``directory`` unless it is already there."""
    target = Path(directory) / asset.name
    if target.exists():
        return True
    if not asset.exists():
        logger.warning("Packaged logo %s is missing; pages will render without it", asset)
        return False
    tmp = target.with_name(f".{target.name}.{os.getpid()}.tmp")
    try:
        shutil.copyfile(asset, tmp)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.info("Copied logo asset to %s", target)
    return True


def render_html(attrs: WineAttributes, *, has_logo: bool) -> str:
    template = _env.get_template(PAGE_TEMPLATE)
    return template.render(wine=attrs, has_logo=has_logo, logo_name=LOGO_ASSET.name)


def render_page(attrs: WineAttributes, slug: str, html_dir: Path) -> Path | None:
    html_dir = Path(html_dir)
    if not html_dir.is_dir():
        logger.warning("Directory %s does not exist. Skipping HTML file generation.", html_dir)
        return None

    has_logo = ensure_logo(html_dir)
    output_path = html_dir / page_filename(slug)
    output_path.write_text(render_html(attrs, has_logo=has_logo), encoding="utf-8")
    logger.info("Wrote page %s", output_path)
    return output_path
