"""Geography option lists backed by (simulated) remote calls."""

from __future__ import annotations

import asyncio

from optionkit.foundation.registry import OptionItem

__all__ = ["countries", "currencies", "townships"]

# Simulated latency of the township endpoint, seconds
TOWNSHIP_DELAY: float = 1.0

_TOWNSHIPS: dict[str, list[OptionItem]] = {
    "TPE": [
        OptionItem(label="中正區", value="100"),
        OptionItem(label="大同區", value="103"),
        OptionItem(label="中山區", value="104"),
    ],
    "KHH": [
        OptionItem(label="新興區", value="800"),
        OptionItem(label="前金區", value="801"),
        OptionItem(label="苓雅區", value="802"),
    ],
}


async def countries() -> list[OptionItem]:
    return [
        OptionItem(label="台灣", value="TW"),
        OptionItem(label="日本", value="JP"),
        OptionItem(label="美國", value="US"),
        OptionItem(label="韓國", value="KR"),
    ]


async def currencies() -> list[OptionItem]:
    return [
        OptionItem(label="新台幣 (TWD)", value="TWD"),
        OptionItem(label="美元 (USD)", value="USD"),
        OptionItem(label="日圓 (JPY)", value="JPY"),
        OptionItem(label="歐元 (EUR)", value="EUR"),
    ]


async def townships(city_id: str | None = None) -> list[OptionItem]:
    """Districts of a city; empty without a city."""
    if not city_id:
        return []
    await asyncio.sleep(TOWNSHIP_DELAY)
    return list(_TOWNSHIPS.get(city_id, []))
