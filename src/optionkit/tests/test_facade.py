"""Tests for the OptionArray facade and its extensions."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import orjson
import pytest

from optionkit import (
    ErrorCode,
    MemoryCache,
    OptionArray,
    OptionException,
    OptionItem,
    OptionResolver,
    OptionService,
    StaticList,
    register_extension,
    unregister_extension,
)
from optionkit.facade import same_value


@pytest.fixture
def calls() -> dict[str, int]:
    return {"countries": 0}


@pytest.fixture
def service(status_items, calls) -> OptionService:
    async def countries() -> list[dict[str, str]]:
        calls["countries"] += 1
        await asyncio.sleep(0.01)
        return [{"label": "台灣", "value": "TW"}, {"label": "日本", "value": "JP"}]

    async def townships(city_id: str | None = None) -> list[dict[str, str]]:
        await asyncio.sleep(0)
        return [{"label": f"{city_id}-區", "value": f"{city_id}-1"}] if city_id else []

    return OptionService(
        {
            "status": status_items,
            "flags": [{"label": "一", "value": 1}, {"label": "真", "value": True}],
            "countries": countries,
            "townships": townships,
        },
        cache=MemoryCache(),
    )


@pytest.fixture
def options(service):
    return service.options


# ─────────────────────────────────────────────────────────────────────────────
# Sequence shape
# ─────────────────────────────────────────────────────────────────────────────


def test_status_scenario(options) -> None:
    status = options.status

    assert status.label("ACTIVE") == "啟用"
    assert status.with_all[0] == OptionItem(label="全部", value="")
    assert len(status.with_all) == 3
    assert [o.value for o in status.exclude(["INACTIVE"])] == ["ACTIVE"]
    assert len(status) == 2


def test_sequence_protocol(options) -> None:
    status = options.status

    assert isinstance(status, Sequence)
    assert [o.value for o in status] == ["ACTIVE", "INACTIVE"]
    assert status[0].label == "啟用"
    assert [o.value for o in status[1:]] == ["INACTIVE"]
    assert OptionItem(label="啟用", value="ACTIVE") in status
    assert [o.value for o in reversed(status)] == ["INACTIVE", "ACTIVE"]
    assert bool(status)
    assert status == [OptionItem(label="啟用", value="ACTIVE"), OptionItem(label="停用", value="INACTIVE")]


def test_iteration_is_snapshot(options) -> None:
    status = options.status
    iterator = iter(status)
    status.items.append(OptionItem(label="暫停", value="PAUSED"))

    assert len(list(iterator)) == 2
    assert len(status) == 3


def test_reads_share_backing_list(options) -> None:
    assert options.status.items is options.status.items
    assert options.status.items is options["status"].items


def test_list_members_forwarded(options) -> None:
    status = options.status

    assert status.index(OptionItem(label="停用", value="INACTIVE")) == 1
    assert status.count(OptionItem(label="啟用", value="ACTIVE")) == 1
    with pytest.raises(AttributeError, match="has no attribute"):
        status.not_a_list_method


def test_extensions_do_not_mutate(options) -> None:
    status = options.status
    before = list(status)

    status.with_all
    status.other
    status.exclude(["ACTIVE"])
    status.only(["ACTIVE"])
    status.label("ACTIVE")
    status.find_by_value("ACTIVE")

    assert list(status) == before


def test_value_views(options) -> None:
    status = options.status

    assert status.values == ["ACTIVE", "INACTIVE"]
    assert status.other[-1] == OptionItem(label="其他", value="other")
    assert status.find_by_value("INACTIVE").label == "停用"
    assert status.find_by_value("PAUSED") is None
    assert status.label("PAUSED") == "PAUSED"
    assert [o.value for o in status.only(["INACTIVE"])] == ["INACTIVE"]


def test_bare_string_is_one_value(options) -> None:
    status = options.status

    assert [o.value for o in status.exclude("ACTIVE")] == ["INACTIVE"]
    assert [o.value for o in status.only("ACTIVE")] == ["ACTIVE"]
    assert [o.value for o in status.exclude(("ACTIVE", "INACTIVE"))] == []


def test_none_value_item() -> None:
    options = OptionService(
        {"reason": [{"label": "無", "value": None}, {"label": "其他", "value": "other"}]},
        cache=MemoryCache(),
    ).options

    assert options.reason.values == [None, "other"]
    assert options.reason.label(None) == "無"
    assert options.reason.error is None
    assert options.reason.to_json()[0] == {"label": "無", "value": None}


def test_strict_value_comparison(options) -> None:
    flags = options.flags

    assert flags.label(1) == "一"
    assert flags.label(True) == "真"
    assert flags.label("1") == "1"
    assert flags.find_by_value(True).label == "真"
    assert same_value(0, False) is False
    assert same_value(1.0, 1) is True


def test_sentinels_follow_settings(monkeypatch, status_items) -> None:
    from optionkit import clear_settings_cache

    monkeypatch.setenv("OPTIONKIT_SENTINEL_ALL_LABEL", "All")
    clear_settings_cache()
    options = OptionService({"status": status_items}, cache=MemoryCache()).options

    assert options.status.with_all[0] == OptionItem(label="All", value="")


# ─────────────────────────────────────────────────────────────────────────────
# Serialization
# ─────────────────────────────────────────────────────────────────────────────


def test_to_json(options) -> None:
    assert options.status.to_json() == [
        {"label": "啟用", "value": "ACTIVE"},
        {"label": "停用", "value": "INACTIVE"},
    ]


def test_str_is_json(options) -> None:
    assert orjson.loads(str(options.status)) == options.status.to_json()
    assert "\n" in str(options.status)


def test_repr(options) -> None:
    assert repr(options.status).startswith("OptionArray(key='status', items=[")
    assert "args=('TPE',)" in repr(options.townships("TPE"))


# ─────────────────────────────────────────────────────────────────────────────
# Invocation
# ─────────────────────────────────────────────────────────────────────────────


def test_call_returns_bound_facade(options) -> None:
    townships = options.townships
    tpe = townships("TPE")

    assert isinstance(tpe, OptionArray)
    assert tpe is not townships
    assert tpe.args == ("TPE",)
    assert townships.args == ()
    assert townships.bind(city_id="KHH").kwargs == {"city_id": "KHH"}


def test_construction_is_lazy(service, calls) -> None:
    facade = service.options.countries("TPE")

    assert calls["countries"] == 0
    assert facade.state.is_loaded is False


@pytest.mark.asyncio
async def test_countries_single_flight(service, calls) -> None:
    options = service.options

    first = options.countries
    assert first.is_loading
    assert list(first) == []
    second = options.countries
    assert second.is_loading

    items = await second
    assert [o.value for o in items] == ["TW", "JP"]
    assert first.is_loaded and not first.is_loading
    assert calls["countries"] == 1
    assert first.label("JP") == "日本"


@pytest.mark.asyncio
async def test_argument_isolation(options) -> None:
    tpe, khh = options.townships("TPE"), options.townships("KHH")
    assert tpe.is_loading and khh.is_loading
    await tpe
    await khh
    await options.townships

    assert tpe.values == ["TPE-1"]
    assert khh.values == ["KHH-1"]
    assert options.townships.values == []
    assert options.townships.is_loaded


@pytest.mark.asyncio
async def test_reload(service, calls) -> None:
    options = service.options
    countries = await options.countries

    assert await options.countries.reload() is countries
    assert calls["countries"] == 2


@pytest.mark.asyncio
async def test_reload_static_is_idempotent(options) -> None:
    before = options.status.to_json()
    await options.status.reload()
    await options.status.reload()

    assert options.status.to_json() == before


@pytest.mark.asyncio
async def test_reload_failure() -> None:
    async def broken() -> list[dict[str, str]]:
        raise TimeoutError("gateway timeout")

    options = OptionService({"broken": broken}, cache=MemoryCache()).options

    assert await options.broken == []
    assert options.broken.error.cause is ErrorCode.TIMEOUT
    with pytest.raises(OptionException, match="RESOLUTION_FAILED"):
        await options.broken.reload()


# ─────────────────────────────────────────────────────────────────────────────
# Custom extensions
# ─────────────────────────────────────────────────────────────────────────────


def test_register_extension(options) -> None:
    register_extension("labels", lambda ctx: [o.label for o in ctx.items])
    try:
        assert options.status.labels == ["啟用", "停用"]
        assert "labels" in dir(options.status)
    finally:
        assert unregister_extension("labels")


def test_register_extension_with_arguments(options) -> None:
    def colored(ctx):
        return lambda color: [o for o in ctx.items if getattr(o, "color", None) == color]

    register_extension("colored", colored)
    try:
        assert options.status.colored("green") == []
    finally:
        unregister_extension("colored")


def test_register_extension_rejects_reserved_names() -> None:
    with pytest.raises(ValueError, match="shadowed"):
        register_extension("bind", lambda ctx: None)
    with pytest.raises(ValueError, match="public identifier"):
        register_extension("_private", lambda ctx: None)


def test_facade_without_service(status_items) -> None:
    resolver = OptionResolver("status", StaticList.of(status_items), cache=MemoryCache())
    facade = OptionArray(resolver)

    assert facade.key == "status"
    assert facade.label("INACTIVE") == "停用"
    assert facade.with_all[0].label == "全部"
