"""Aggregated, localized detail view of a single Pokémon."""

from __future__ import annotations

from collections.abc import Sequence

from pokecatalog.batch import run_batched
from pokecatalog.cancel import CancelToken
from pokecatalog.gateway import CatalogGateway
from pokecatalog.localization import DEFAULT_LOCALES, display_name
from pokecatalog.types import PokemonDetails, StatLine


class DetailsLoader:
    """Builds ``PokemonDetails`` from a Pokémon and its related resources.

    The species, type, ability and stat resources are fetched together
    through ``run_batched``. Any failure fails the whole load.
    """

    def __init__(
        self,
        gateway: CatalogGateway,
        *,
        locales: Sequence[str] = DEFAULT_LOCALES,
        batch_size: int = 5,
    ) -> None:
        self._gateway = gateway
        self._locales = tuple(locales)
        self._batch_size = batch_size

    async def load(
        self, name_or_url: str, *, cancel: CancelToken | None = None
    ) -> PokemonDetails:
        pokemon = await self._gateway.get_pokemon(name_or_url, cancel=cancel)

        urls: list[str] = []
        if pokemon.species is not None:
            urls.append(pokemon.species.url)
        urls.extend(t.url for t in pokemon.types)
        urls.extend(a.url for a in pokemon.abilities)
        urls.extend(s.stat.url for s in pokemon.stats)

        responses = await run_batched(
            urls,
            lambda url: self._gateway.get_resource(url, cancel=cancel),
            self._batch_size,
            cancel=cancel,
        )

        index = 0
        species = None
        if pokemon.species is not None:
            species = responses[0]
            index = 1
        types = responses[index : index + len(pokemon.types)]
        index += len(pokemon.types)
        abilities = responses[index : index + len(pokemon.abilities)]
        index += len(pokemon.abilities)
        stats = responses[index:]

        return PokemonDetails(
            id=pokemon.id,
            name=display_name(species, pokemon.name, self._locales),
            original_name=pokemon.name,
            image_url=pokemon.artwork_url,
            types=[
                display_name(payload, ref.name, self._locales)
                for ref, payload in zip(pokemon.types, types)
            ],
            abilities=[
                display_name(payload, ref.name, self._locales)
                for ref, payload in zip(pokemon.abilities, abilities)
            ],
            stats=[
                StatLine(
                    name=display_name(payload, stat.stat.name, self._locales),
                    value=stat.base_stat,
                )
                for stat, payload in zip(pokemon.stats, stats)
            ],
        )
