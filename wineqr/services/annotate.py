"""Nutrition overlay for QR images.

Annotation is a list of raster operations applied in place, one external
command per operation. The backend is picked once by probing for ImageMagick;
when none is installed a no-op backend is used and the QR image stays
unlabeled but scannable.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Protocol, Union

from wineqr.core.config import settings
from wineqr.core.errors import AnnotationError

logger = logging.getLogger(__name__)

HEADER_BAND_PX = 70
FOOTER_BAND_PX = 60


@dataclass(frozen=True)
class Splice:
    gravity: str
    height: int

    def args(self) -> list[str]:
        return ["-gravity", self.gravity, "-background", "white", "-splice", f"0x{self.height}"]


@dataclass(frozen=True)
class Annotate:
    gravity: str
    offset_y: int
    pointsize: int
    text: str

    def args(self) -> list[str]:
        return [
            "-gravity",
            self.gravity,
            "-pointsize",
            str(self.pointsize),
            "-annotate",
            f"+0+{self.offset_y}",
            self.text,
        ]


Operation = Union[Splice, Annotate]


def energy_label(energy: str) -> str:
    return f"E(100ml)={''.join(energy.split())}"


def annotation_plan(energy: str) -> list[Operation]:
    plan: list[Operation] = [
        Splice("north", HEADER_BAND_PX),
        Annotate("north", 10, 24, "INGREDIENT &"),
        Annotate("north", 38, 24, "NUTRITION"),
    ]
    if energy.strip():
        plan += [
            Splice("south", FOOTER_BAND_PX),
            Annotate("south", 18, 22, energy_label(energy)),
        ]
    return plan


class ImageBackend(Protocol):
    name: str

    def apply(self, operation: Operation, path: Path) -> None: ...


class NullBackend:
    name = "none"

    def __init__(self, probed: tuple[str, ...] = ()):
        self.probed = tuple(probed)

    def apply(self, operation: Operation, path: Path) -> None:
        return None


class ImageMagickBackend:
    def __init__(self, command: str):
        self.command = command
        self.name = command

    def build_command(self, operation: Operation, path: Path) -> list[str]:
        return [self.command, str(path), *operation.args(), str(path)]

    def apply(self, operation: Operation, path: Path) -> None:
        subprocess.run(self.build_command(operation, path), check=True, capture_output=True)


def _probe(command: str) -> bool:
    try:
        result = subprocess.run([command, "-version"], capture_output=True, text=True)
    except OSError:
        return False
    return result.returncode == 0 and "ImageMagick" in result.stdout


@lru_cache(maxsize=None)
def _select_backend(candidates: tuple[str, ...]) -> ImageBackend:
    for command in candidates:
        if _probe(command):
            logger.info("Using %s for QR annotation", command)
            return ImageMagickBackend(command)
    return NullBackend(candidates)


def select_backend(candidates: tuple[str, ...] | None = None) -> ImageBackend:
    return _select_backend(tuple(candidates or settings.annotate_commands))


def annotate_image(path: Path, energy: str, backend: ImageBackend | None = None) -> bool:
    backend = backend or select_backend()
    if isinstance(backend, NullBackend):
        tried = ", ".join(backend.probed) or "nothing"
        logger.warning("ImageMagick not found (tried %s); skipping QR annotation", tried)
        return False

    path = Path(path)
    for step, operation in enumerate(annotation_plan(energy), start=1):
        try:
            backend.apply(operation, path)
        except (subprocess.CalledProcessError, OSError) as exc:
            command = exc.cmd if isinstance(exc, subprocess.CalledProcessError) else None
            raise AnnotationError(
                f"Annotation step {step} failed for {path}: {exc}", step=step, command=command
            ) from exc
    logger.info("Annotated %s with %s", path, backend.name)
    return True
