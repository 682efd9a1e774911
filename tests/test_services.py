import multiprocessing
from concurrent.futures import ThreadPoolExecutor

import pytest

from wineqr.core.errors import VocabularyError
from wineqr.schemas.wine import WineAttributes
from wineqr.services import lot
from wineqr.services.lot import (
    COUNTER_FILE,
    format_lot_token,
    max_lot_number,
    next_lot_token,
    parse_lot_number,
    reserve_lot_token,
    scan_lot_token,
)
from wineqr.services.slug import build_slug, normalize_slug, page_filename, qr_filename
from wineqr.services.vocabulary import invalid_fields, validate_attributes, vocabulary, vocabulary_error_message


def _touch_lots(directory, numbers, slug="mercurey_champs_martin_1er_cru_red_2024"):
    for n in numbers:
        (directory / f"QRCODE_{slug}_lm{n:04d}.png").write_bytes(b"")


def test_validate_attributes_accepts_known_values(mercurey):
    assert validate_attributes(mercurey) is mercurey


def test_sentinel_defaults_for_regional_wine():
    wine = WineAttributes(year=2022, appellation="bourgogne", color="white")
    assert wine.climat == "_"
    assert wine.cru == "_"
    assert validate_attributes(wine) is wine


@pytest.mark.parametrize(
    "field,value",
    [
        ("appellation", "chablis"),
        ("color", "rose"),
        ("climat", "Les Clos"),
        ("cru", "premier"),
    ],
)
def test_validate_attributes_rejects_unknown_values(mercurey, field, value):
    wine = mercurey.model_copy(update={field: value})
    assert invalid_fields(wine) == [field]
    with pytest.raises(VocabularyError) as exc:
        validate_attributes(wine)
    assert str(exc.value) == vocabulary_error_message()


def test_vocabulary_error_message_lists_every_vocabulary():
    message = vocabulary_error_message()
    assert "Valid appellations: mercurey, rully, bourgogne" in message
    assert "Valid crus: village, 1er cru, grand cru, _" in message
    assert "Valid climats: Champs Martin, Fromange, _" in message
    assert "Valid colors: red, white" in message
    assert set(vocabulary()) == {"appellations", "crus", "climats", "colors"}


def test_climat_vocabulary_is_case_sensitive(mercurey):
    wine = mercurey.model_copy(update={"climat": "champs martin"})
    assert invalid_fields(wine) == ["climat"]


def test_build_slug_end_to_end_example(mercurey):
    assert build_slug(mercurey, "LM0001") == "mercurey_champs_martin_1er_cru_red_2024_lm0001"


def test_build_slug_drops_sentinels():
    wine = WineAttributes(year=2022, appellation="bourgogne", color="white")
    assert build_slug(wine, "LM0003") == "bourgogne_white_2022_lm0003"


def test_build_slug_is_deterministic(mercurey):
    twin = WineAttributes(**mercurey.model_dump())
    assert build_slug(mercurey, "LM0042") == build_slug(twin, "LM0042")


def test_normalize_slug_collapses_mixed_separators():
    assert normalize_slug("Champs  Martin__1er\tcru") == "champs_martin_1er_cru"
    assert normalize_slug("champs_martin") == normalize_slug("Champs Martin")
    slug = normalize_slug("Rully Fromange village white 2023 LM0002")
    assert normalize_slug(slug) == slug


def test_artifact_filenames():
    assert qr_filename("rully_white_2023_lm0002") == "QRCODE_rully_white_2023_lm0002.png"
    assert page_filename("Rully White 2023 LM0002") == "rully_white_2023_lm0002.html"


def test_format_lot_token_pads_and_grows():
    assert format_lot_token(1) == "LM0001"
    assert format_lot_token(38) == "LM0038"
    assert format_lot_token(10000) == "LM10000"
    with pytest.raises(ValueError):
        format_lot_token(-1)


def test_parse_lot_number_requires_prefix_and_suffix():
    assert parse_lot_number("QRCODE_rully_white_2023_lm0012.png") == 12
    assert parse_lot_number("QRCODE_rully_white_2023_LM0012.png") == 12
    assert parse_lot_number("QRCODE_rully_white_2023_lm10001.png") == 10001
    assert parse_lot_number("rully_white_2023_lm0012.png") is None
    assert parse_lot_number("QRCODE_rully_white_2023_lm0012.html") is None
    assert parse_lot_number("QRCODE_rully_white_2023.png") is None


def test_next_lot_token_from_listing():
    names = [f"QRCODE_x_lm{n:04d}.png" for n in range(1, 38)]
    assert max_lot_number(names) == 37
    assert next_lot_token(names) == "LM0038"
    assert next_lot_token([]) == "LM0001"
    assert next_lot_token(["notes.txt", "QRCODE_legacy.png"]) == "LM0001"


def test_scan_lot_token_reads_directory(tmp_path):
    assert scan_lot_token(tmp_path) == "LM0001"
    _touch_lots(tmp_path, range(1, 38))
    assert scan_lot_token(tmp_path) == "LM0038"
    assert scan_lot_token(tmp_path / "missing") == "LM0001"


def test_scan_lot_token_does_not_reserve(tmp_path):
    assert scan_lot_token(tmp_path) == scan_lot_token(tmp_path)
    assert not (tmp_path / COUNTER_FILE).exists()


def test_reserve_lot_token_is_monotonic(tmp_path):
    assert reserve_lot_token(tmp_path) == "LM0001"
    assert reserve_lot_token(tmp_path) == "LM0002"
    assert (tmp_path / COUNTER_FILE).read_text().strip() == "2"


def test_reserve_lot_token_honours_existing_artifacts(tmp_path):
    _touch_lots(tmp_path, range(1, 38))
    assert reserve_lot_token(tmp_path) == "LM0038"


def test_reserve_lot_token_counter_ahead_of_listing(tmp_path):
    _touch_lots(tmp_path, [1, 2])
    (tmp_path / COUNTER_FILE).write_text("9\n")
    assert reserve_lot_token(tmp_path) == "LM0010"


def test_reserve_lot_token_ignores_garbled_counter(tmp_path):
    _touch_lots(tmp_path, [4])
    (tmp_path / COUNTER_FILE).write_text("not-a-number")
    assert reserve_lot_token(tmp_path) == "LM0005"


def test_reserve_lot_token_unique_across_threads(tmp_path):
    with ThreadPoolExecutor(max_workers=16) as pool:
        tokens = list(pool.map(lambda _: reserve_lot_token(tmp_path), range(200)))
    assert len(set(tokens)) == 200
    assert max(tokens) == "LM0200"
    assert (tmp_path / COUNTER_FILE).read_text().strip() == "200"


def test_reserve_lot_token_unique_across_processes(tmp_path):
    ctx = multiprocessing.get_context("spawn")
    with ctx.Pool(processes=8) as pool:
        tokens = pool.map(reserve_lot_token, [tmp_path] * 120)
    assert len(set(tokens)) == 120
    assert max(tokens) == "LM0120"


def test_write_counter_cleans_up_temp_file(tmp_path, monkeypatch):
    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(lot.os, "replace", failing_replace)
    with pytest.raises(OSError):
        reserve_lot_token(tmp_path)
    assert not list(tmp_path.glob("*.tmp"))
    assert not (tmp_path / COUNTER_FILE).exists()
