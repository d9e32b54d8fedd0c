"""Tests for registry assembly and the public helpers."""

from __future__ import annotations

import pytest

from optionkit import (
    ErrorCode,
    MemoryCache,
    OptionException,
    OptionItem,
    Options,
    OptionService,
    fetch_option,
    get_option_label,
    get_option_sync,
    get_options,
    get_service,
    register_definitions,
    reset_service,
    set_service,
)
from optionkit.catalog import default_registry, geography


@pytest.fixture
def service(status_items, logger) -> OptionService:
    async def countries() -> list[dict[str, str]]:
        return [{"label": "台灣", "value": "TW"}]

    def districts(city: str) -> list[dict[str, str]]:
        return [{"label": f"{city} 1", "value": f"{city}-1"}]

    return OptionService(
        {"status": status_items, "countries": countries, "districts": districts},
        cache=MemoryCache(),
        logger=logger,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Assembly
# ─────────────────────────────────────────────────────────────────────────────


def test_options_namespace(service) -> None:
    options = service.options

    assert isinstance(options, Options)
    assert service.options is options
    assert options.status is options["status"]
    assert "status" in options
    assert "missing" not in options
    assert list(options) == ["status", "countries", "districts"]
    assert len(options) == 3
    assert options.keys() == ["status", "countries", "districts"]


def test_assembly_does_not_resolve(service) -> None:
    service.options

    assert all(not r.states for r in (service.resolver(k) for k in service.registry))
    assert service.assembled


def test_unknown_key_is_inert(service, capture) -> None:
    missing = service.options.missing

    assert list(missing) == []
    assert missing.label("X") == "X"
    assert missing.with_all == [OptionItem(label="全部", value="")]
    assert service.options["missing"] is missing
    assert capture.events("warning").count("unknown option key") == 1


def test_registry_frozen_after_assembly(service) -> None:
    service.register({"yes_no": [{"label": "是", "value": "Y"}]})
    assert "yes_no" in service.registry

    service.options
    with pytest.raises(OptionException) as exc_info:
        service.register({"gender": []})
    assert exc_info.value.error.code is ErrorCode.REGISTRY_FROZEN


def test_method_named_keys_by_item(status_items) -> None:
    options = OptionService({"keys": status_items, "to_json": []}, cache=MemoryCache()).options

    assert options["keys"].label("ACTIVE") == "啟用"
    assert options.keys() == ["keys", "to_json"]
    assert options["to_json"].key == "to_json"


def test_options_to_json(status_items) -> None:
    options = OptionService({"status": status_items}, cache=MemoryCache()).options
    assert options.to_json() == {"status": status_items}


def test_repr(service) -> None:
    assert repr(service) == "OptionService(keys=3, assembled=False)"
    assert repr(service.options) == "Options(status, countries, districts)"


# ─────────────────────────────────────────────────────────────────────────────
# Uncached helpers
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_fetch_option(service) -> None:
    assert [o.value for o in await service.fetch_option("countries")] == ["TW"]
    assert [o.value for o in await service.fetch_option("status")] == ["ACTIVE", "INACTIVE"]
    assert [o.value for o in await service.fetch_option("districts", "TPE")] == ["TPE-1"]
    assert await service.fetch_option("missing") == []


@pytest.mark.asyncio
async def test_fetch_option_bypasses_state() -> None:
    calls: list[int] = []

    async def countries() -> list[dict[str, str]]:
        calls.append(1)
        return [{"label": "台灣", "value": "TW"}]

    service = OptionService({"countries": countries}, cache=MemoryCache())
    await service.fetch_option("countries")
    await service.fetch_option("countries")

    assert calls == [1, 1]
    assert not service.resolver("countries").states


@pytest.mark.asyncio
async def test_fetch_option_failure() -> None:
    async def broken() -> list[dict[str, str]]:
        raise PermissionError("forbidden")

    service = OptionService({"broken": broken, "bad": lambda: [{"value": 1}]}, cache=MemoryCache())

    with pytest.raises(OptionException) as exc_info:
        await service.fetch_option("broken")
    assert exc_info.value.error.cause is ErrorCode.PERMISSION_DENIED

    with pytest.raises(OptionException) as exc_info:
        await service.fetch_option("bad")
    assert exc_info.value.error.code is ErrorCode.INVALID_ITEMS


def test_get_option_sync(service) -> None:
    assert [o.value for o in service.get_option_sync("status")] == ["ACTIVE", "INACTIVE"]
    assert service.get_option_sync("countries") == []
    assert service.get_option_sync("districts") == []
    assert service.get_option_sync("missing") == []


def test_get_option_sync_returns_copy(service) -> None:
    service.get_option_sync("status").clear()
    assert len(service.get_option_sync("status")) == 2


def test_get_option_label(service) -> None:
    assert service.get_option_label("status", "ACTIVE") == "啟用"
    assert service.get_option_label("status", "PAUSED") == "PAUSED"
    assert service.get_option_label("countries", "TW") == "TW"
    assert service.get_option_label("missing", 3) == "3"


# ─────────────────────────────────────────────────────────────────────────────
# Default service
# ─────────────────────────────────────────────────────────────────────────────


def test_default_service_lifecycle(status_items) -> None:
    register_definitions({"status": status_items})
    register_definitions({"yes_no": [{"label": "是", "value": "Y"}]})

    options = get_options()
    assert options.yes_no.values == ["Y"]
    assert get_option_label("status", "INACTIVE") == "停用"
    assert [o.value for o in get_option_sync("status")] == ["ACTIVE", "INACTIVE"]

    with pytest.raises(OptionException):
        register_definitions({"gender": []})

    reset_service()
    assert "status" not in get_options()


def test_set_service(service) -> None:
    set_service(service)
    assert get_service() is service
    assert get_options() is service.options


@pytest.mark.asyncio
async def test_module_fetch_option(status_items) -> None:
    register_definitions({"status": status_items})
    assert len(await fetch_option("status")) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────────────────────


def test_catalog_registry() -> None:
    registry = default_registry()

    assert {"gender", "status", "cities", "city", "vocabularies", "countries", "townships"} <= set(registry)
    assert type(registry["countries"]).__name__ == "AsyncFunction"
    assert type(registry["vocabularies"]).__name__ == "ReactiveSource"


def test_catalog_static_lists() -> None:
    options = OptionService(default_registry(), cache=MemoryCache()).options

    assert options.cities.values[:2] == ["TPE", "NTPC"]
    assert options.city.label("KHH") == "高雄市"
    assert options.status.find_by_value("ACTIVE").color == "green"
    assert options.vocabularies.values == ["apple", "banana"]


@pytest.mark.asyncio
async def test_catalog_townships(monkeypatch) -> None:
    monkeypatch.setattr(geography, "TOWNSHIP_DELAY", 0)
    options = OptionService(default_registry(), cache=MemoryCache()).options

    tpe = await options.townships("TPE")
    khh = await options.townships("KHH")

    assert [o.label for o in tpe] == ["中正區", "大同區", "中山區"]
    assert [o.label for o in khh] == ["新興區", "前金區", "苓雅區"]
    assert await options.townships == []
    assert await options.countries != []
