from __future__ import annotations

from wineqr.core.errors import VocabularyError
from wineqr.schemas.wine import SENTINEL, WineAttributes

APPELLATIONS = ("mercurey", "rully", "bourgogne")
CRUS = ("village", "1er cru", "grand cru", SENTINEL)
CLIMATS = ("Champs Martin", "Fromange", SENTINEL)
COLORS = ("red", "white")


def vocabulary() -> dict[str, list[str]]:
    return {
        "appellations": list(APPELLATIONS),
        "crus": list(CRUS),
        "climats": list(CLIMATS),
        "colors": list(COLORS),
    }


def vocabulary_error_message() -> str:
    return "\n".join(
        [
            "Invalid parameters. Please check the appellation, climat, cru, color, and year. "
            "They must be in the predefined lists.",
            f"Valid appellations: {', '.join(APPELLATIONS)}",
            f"Valid crus: {', '.join(CRUS)}",
            f"Valid climats: {', '.join(CLIMATS)}",
            f"Valid colors: {', '.join(COLORS)}",
        ]
    )


def invalid_fields(attrs: WineAttributes) -> list[str]:
    checks = (
        ("appellation", attrs.appellation, APPELLATIONS),
        ("color", attrs.color, COLORS),
        ("climat", attrs.climat, CLIMATS),
        ("cru", attrs.cru, CRUS),
    )
    return [name for name, value, allowed in checks if value not in allowed]


def validate_attributes(attrs: WineAttributes) -> WineAttributes:
    """Return ``attrs`` unchanged, or raise VocabularyError listing every valid value."""
    if invalid_fields(attrs):
        raise VocabularyError(vocabulary_error_message())
    return attrs
