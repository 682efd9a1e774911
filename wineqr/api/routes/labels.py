from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter

from wineqr.core.config import settings
from wineqr.schemas.wine import GenerationResult, NextLotOut, VocabularyOut, WineAttributes
from wineqr.services.lot import scan_lot_token
from wineqr.services.pipeline import generate_label
from wineqr.services.vocabulary import vocabulary

router = APIRouter()


@router.get("/vocabulary", response_model=VocabularyOut)
def get_vocabulary() -> dict:
    return vocabulary()


@router.get("/next-lot", response_model=NextLotOut)
def preview_next_lot() -> dict:
    artifact_dir = Path(settings.artifact_dir)
    return {"lot_token": scan_lot_token(artifact_dir), "artifact_dir": str(artifact_dir)}


@router.post("", response_model=GenerationResult, status_code=201)
def create_label(payload: WineAttributes) -> GenerationResult:
    return generate_label(payload)
