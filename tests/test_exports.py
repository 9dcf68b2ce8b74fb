"""Tests for package exports."""


def test_public_exports_available() -> None:
    from pokecatalog import (
        CacheStore,
        CatalogGateway,
        DetailsLoader,
        ListController,
        NetworkClient,
        create_catalog,
        run_batched,
    )

    # Just verify they're importable
    assert NetworkClient is not None
    assert CacheStore is not None
    assert CatalogGateway is not None
    assert ListController is not None
    assert DetailsLoader is not None
    assert run_batched is not None
    assert create_catalog is not None


def test_adapter_exports() -> None:
    from pokecatalog.adapters import AsyncMemoryStore, DurableStore

    assert isinstance(AsyncMemoryStore(), DurableStore)
