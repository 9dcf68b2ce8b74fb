"""Test helpers shared across modules."""

from typing import Any

BASE_URL = "https://pokeapi.co/api/v2"


def pokemon_url(ref: int | str) -> str:
    return f"{BASE_URL}/pokemon/{ref}/"


def pokemon_payload(id: int, name: str, **extra: Any) -> dict[str, Any]:
    """A trimmed-down PokeAPI pokemon payload."""
    payload: dict[str, Any] = {
        "id": id,
        "name": name,
        "sprites": {"front_default": f"https://img.test/{id}.png"},
        "species": {"name": name, "url": f"{BASE_URL}/pokemon-species/{id}/"},
        "types": [],
        "abilities": [],
        "stats": [],
    }
    payload.update(extra)
    return payload


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Stands in for asyncio.sleep and records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
