from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return default or []
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings:
    app_env: str = os.getenv("APP_ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    qr_host: str = os.getenv("QR_HOST", "qr.aubigny.wine")
    artifact_dir: str = os.getenv("ARTIFACT_DIR", ".")
    html_output_dir: str = os.getenv("HTML_OUTPUT_DIR", "/var/www/html")
    qr_box_size: int = _env_int("QR_BOX_SIZE", 10)
    qr_border: int = _env_int("QR_BORDER", 4)
    annotate_commands: list[str] = _env_list("ANNOTATE_COMMANDS", default=["magick", "convert"])
    cors_allow_origins: list[str] = _env_list(
        "CORS_ALLOW_ORIGINS",
        default=["http://127.0.0.1:8000", "http://localhost:8000"],
    )


settings = Settings()
