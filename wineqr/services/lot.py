from __future__ import annotations

import fcntl
import logging
import os
import re
from collections.abc import Iterable
from contextlib import contextmanager
from pathlib import Path
from threading import Lock

from wineqr.services.slug import QR_PREFIX

logger = logging.getLogger(__name__)

LOT_PREFIX = "LM"
LOT_DIGITS = 4
COUNTER_FILE = ".lot_counter"
LOCK_FILE = ".lot.lock"

_LOT_PATTERN = re.compile(rf"_{LOT_PREFIX}(\d{{{LOT_DIGITS},}})\.png$", re.IGNORECASE)
_process_lock = Lock()


def format_lot_token(number: int) -> str:
    if number < 0:
        raise ValueError(f"Lot number must be non-negative, got {number}")
    return f"{LOT_PREFIX}{number:0{LOT_DIGITS}d}"


def parse_lot_number(filename: str) -> int | None:
    if not filename.startswith(QR_PREFIX):
        return None
    match = _LOT_PATTERN.search(filename)
    if not match:
        return None
    return int(match.group(1))


def max_lot_number(filenames: Iterable[str]) -> int:
    numbers = [n for n in (parse_lot_number(name) for name in filenames) if n is not None]
    return max(numbers, default=0)


def next_lot_token(filenames: Iterable[str]) -> str:
    return format_lot_token(max_lot_number(filenames) + 1)


def _listing(directory: Path) -> list[str]:
    if not directory.is_dir():
        return []
    return [p.name for p in directory.iterdir() if p.is_file()]


def scan_lot_token(directory: Path) -> str:
    """Next token judged from the directory listing alone. Reserves nothing."""
    directory = Path(directory)
    counter = _read_counter(directory / COUNTER_FILE)
    return format_lot_token(max(counter, max_lot_number(_listing(directory))) + 1)


def _read_counter(path: Path) -> int:
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return 0
    try:
        return max(0, int(raw))
    except ValueError:
        logger.warning("Ignoring unreadable lot counter %s: %r", path, raw)
        return 0


def _write_counter(path: Path, value: int) -> None:
    tmp = path.with_name(f"{path.name}.{os.getpid()}.tmp")
    try:
        tmp.write_text(f"{value}\n", encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


@contextmanager
def _directory_lock(directory: Path):
    with _process_lock:
        with open(directory / LOCK_FILE, "a+") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def reserve_lot_token(directory: Path) -> str:
    """Allocate the next lot token for ``directory`` and persist it.

    The counter file and the QRCODE_* listing are reconciled under an
    exclusive lock, so artifacts written before the counter existed are still
    honoured and two writers never receive the same token.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    counter_path = directory / COUNTER_FILE
    with _directory_lock(directory):
        current = max(_read_counter(counter_path), max_lot_number(_listing(directory)))
        number = current + 1
        _write_counter(counter_path, number)
    token = format_lot_token(number)
    logger.info("Reserved lot %s in %s", token, directory)
    return token
