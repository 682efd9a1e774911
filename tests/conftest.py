from __future__ import annotations

from pathlib import Path

import pytest

from wineqr.core.config import settings
from wineqr.schemas.wine import WineAttributes


class RecordingBackend:
    name = "recording"

    def __init__(self):
        self.calls = []

    def apply(self, operation, path: Path) -> None:
        self.calls.append((operation, Path(path)))


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def artifact_dir(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "artifacts"
    path.mkdir()
    monkeypatch.setattr(settings, "artifact_dir", str(path))
    return path


@pytest.fixture
def html_dir(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "html"
    path.mkdir()
    monkeypatch.setattr(settings, "html_output_dir", str(path))
    return path


@pytest.fixture
def mercurey() -> WineAttributes:
    return WineAttributes(
        year=2024,
        appellation="mercurey",
        color="red",
        climat="Champs Martin",
        cru="1er cru",
        energy="312 kJ / 75 kcal",
    )


def _load_script(name: str):
    import importlib.util

    script_path = Path(__file__).resolve().parents[1] / "scripts" / f"{name}.py"
    spec = importlib.util.spec_from_file_location(name, script_path)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def no_raster_tool(monkeypatch):
    from wineqr.services import pipeline
    from wineqr.services.annotate import NullBackend

    monkeypatch.setattr(pipeline, "select_backend", lambda: NullBackend(("magick", "convert")))


@pytest.fixture
def generate_qr_script(no_raster_tool):
    return _load_script("generate_qr")


@pytest.fixture
def generate_batch_script(no_raster_tool):
    return _load_script("generate_batch")
