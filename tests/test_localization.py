"""Tests for localized display names."""

from pokecatalog import display_name, localized_name

NAMES = [
    {"name": "Pikachu", "language": {"name": "en"}},
    {"name": "Pikachu-pt", "language": {"name": "pt"}},
    {"name": "Pikachu-br", "language": {"name": "pt-BR"}},
]


def test_most_preferred_locale_wins() -> None:
    assert localized_name(NAMES, ("pt-BR", "pt")) == "Pikachu-br"
    assert localized_name(NAMES, ("pt", "pt-BR")) == "Pikachu-pt"


def test_no_match() -> None:
    assert localized_name(NAMES, ("ja",)) is None
    assert localized_name(None) is None
    assert localized_name([]) is None


def test_malformed_records_are_skipped() -> None:
    names = [{"name": "broken"}, {"name": "Ok", "language": {"name": "pt"}}]
    assert localized_name(names) == "Ok"


def test_display_name_falls_back_to_canonical() -> None:
    assert display_name({"names": NAMES}, "pikachu", ("en",)) == "Pikachu"
    assert display_name({"names": []}, "pikachu") == "pikachu"
    assert display_name(None, "pikachu") == "pikachu"
