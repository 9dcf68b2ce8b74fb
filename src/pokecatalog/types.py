"""Core types for the pokecatalog client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# Duration type alias
Duration = str | int  # "600ms", "8s", "30m" or milliseconds


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached payload with the time it was stored."""

    data: T
    stored_at: int  # Unix timestamp ms


@dataclass(frozen=True, slots=True)
class NamedResource:
    """A name/url reference as returned by the catalog list endpoints."""

    name: str
    url: str

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "NamedResource":
        return cls(name=obj["name"], url=obj["url"])


@dataclass(frozen=True, slots=True)
class Page:
    """One page of the paginated entity list."""

    count: int
    next: str | None
    previous: str | None
    results: list[NamedResource]

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "Page":
        return cls(
            count=obj.get("count", 0),
            next=obj.get("next"),
            previous=obj.get("previous"),
            results=[NamedResource.from_json(item) for item in obj["results"]],
        )


@dataclass(frozen=True, slots=True)
class StatValue:
    """A base stat of a Pokémon, referencing the stat resource."""

    stat: NamedResource
    base_stat: int


@dataclass(frozen=True, slots=True)
class Pokemon:
    """The list item shown to the presentation layer.

    Only the fields the client depends on are typed; the full upstream
    payload is kept in ``raw`` as an opaque pass-through.
    """

    id: int
    name: str
    sprite_url: str | None
    species: NamedResource | None
    types: list[NamedResource]
    abilities: list[NamedResource]
    stats: list[StatValue]
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def artwork_url(self) -> str | None:
        """Official artwork if the payload has one, else the default sprite."""
        other = (self.raw.get("sprites") or {}).get("other") or {}
        artwork = (other.get("official-artwork") or {}).get("front_default")
        return artwork or self.sprite_url

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "Pokemon":
        species = obj.get("species")
        return cls(
            id=obj["id"],
            name=obj["name"],
            sprite_url=(obj.get("sprites") or {}).get("front_default"),
            species=NamedResource.from_json(species) if species else None,
            types=[NamedResource.from_json(t["type"]) for t in obj.get("types", [])],
            abilities=[
                NamedResource.from_json(a["ability"]) for a in obj.get("abilities", [])
            ],
            stats=[
                StatValue(
                    stat=NamedResource.from_json(s["stat"]), base_stat=s["base_stat"]
                )
                for s in obj.get("stats", [])
            ],
            raw=obj,
        )


@dataclass(frozen=True, slots=True)
class LocalizedName:
    """A ``{name, language: {name}}`` record embedded in catalog payloads."""

    name: str
    language: str

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "LocalizedName":
        return cls(name=obj["name"], language=obj["language"]["name"])


@dataclass(frozen=True, slots=True)
class StatLine:
    """A stat row of the detail view."""

    name: str
    value: int


@dataclass(frozen=True, slots=True)
class PokemonDetails:
    """Aggregated, localized view of a single Pokémon."""

    id: int
    name: str
    original_name: str
    image_url: str | None
    types: list[str]
    abilities: list[str]
    stats: list[StatLine]


class Mode(str, Enum):
    """What ``ListController.load_more`` pages through."""

    BROWSING = "browsing"
    CATEGORY = "category"
    SEARCHING = "searching"


@dataclass(frozen=True, slots=True)
class ListState:
    """Snapshot of the list controller read by the presentation layer."""

    items: tuple[Pokemon, ...] = ()
    loading: bool = False
    error: str | None = None
    is_offline: bool = False
    mode: Mode = Mode.BROWSING
    selected_type: str | None = None
    query: str = ""
    types: tuple[NamedResource, ...] = ()
