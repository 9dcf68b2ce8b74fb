"""Localized display names from catalog payloads."""

from collections.abc import Iterable, Sequence
from typing import Any

from pokecatalog.types import LocalizedName

DEFAULT_LOCALES: tuple[str, ...] = ("pt-BR", "pt")


def localized_name(
    names: Iterable[dict[str, Any]] | None,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> str | None:
    """Pick the name for the most preferred locale present in ``names``."""
    if not names:
        return None
    records: dict[str, str] = {}
    for raw in names:
        try:
            record = LocalizedName.from_json(raw)
        except (KeyError, TypeError):
            continue
        records.setdefault(record.language, record.name)
    for locale in locales:
        if locale in records:
            return records[locale]
    return None


def display_name(
    payload: dict[str, Any] | None,
    fallback: str,
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> str:
    """Localized name of ``payload``, or ``fallback`` when it has none."""
    if not payload:
        return fallback
    return localized_name(payload.get("names"), locales) or fallback
