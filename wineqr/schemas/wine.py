from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

SENTINEL = "_"


class WineAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    appellation: str
    color: str
    climat: str = SENTINEL
    cru: str = SENTINEL
    energy: str = Field(default="", description='Formatted as "<kJ> kJ / <kcal> kcal"')


class GenerationOptions(BaseModel):
    html_dir: Path | None = Field(default=None, description="Defaults to HTML_OUTPUT_DIR")
    artifact_dir: Path | None = Field(default=None, description="Defaults to ARTIFACT_DIR")


class GenerationResult(BaseModel):
    slug: str
    lot_token: str
    url: str
    qr_path: Path
    html_path: Path | None = None
    annotated: bool = False
    warnings: list[str] = Field(default_factory=list)


class BatchEntryResult(BaseModel):
    index: int
    wine: WineAttributes
    result: GenerationResult | None = None
    error: str | None = None


class VocabularyOut(BaseModel):
    appellations: list[str]
    crus: list[str]
    climats: list[str]
    colors: list[str]


class NextLotOut(BaseModel):
    lot_token: str
    artifact_dir: str
