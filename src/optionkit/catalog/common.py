"""Shared static option lists."""

from __future__ import annotations

from optionkit.foundation.registry import Computed, OptionItem

__all__ = [
    "gender", "gender_extended", "yes_no", "status", "op_status",
    "cities", "city", "job", "interest", "vocabularies",
]

gender: list[OptionItem] = [
    OptionItem(label="男", value="MALE"),
    OptionItem(label="女", value="FEMALE"),
]

gender_extended: list[OptionItem] = [*gender, OptionItem(label="未知", value="UNKNOWN")]

yes_no: list[OptionItem] = [
    OptionItem(label="是", value="Y"),
    OptionItem(label="否", value="N"),
]

status: list[OptionItem] = [
    OptionItem(label="啟用", value="ACTIVE", color="green"),
    OptionItem(label="停用", value="INACTIVE", color="red"),
]

# Document lifecycle
op_status: list[OptionItem] = [
    OptionItem(label="草稿", value="DRAFT", color="grey"),
    OptionItem(label="生效", value="EFFECTIVE", color="green"),
    OptionItem(label="生效編輯中", value="EFF_EDIT", color="orange"),
    OptionItem(label="失效", value="INACTIVE", color="red"),
    OptionItem(label="待生效", value="PENDING", color="blue"),
]

cities: list[OptionItem] = [
    OptionItem(label="台北市", value="TPE"),
    OptionItem(label="新北市", value="NTPC"),
    OptionItem(label="桃園市", value="TYC"),
    OptionItem(label="台中市", value="TXG"),
    OptionItem(label="台南市", value="TNN"),
    OptionItem(label="高雄市", value="KHH"),
]

city = cities

job: list[OptionItem] = [
    OptionItem(label="前端工程師", value="frontend"),
    OptionItem(label="後端工程師", value="backend"),
    OptionItem(label="全端工程師", value="fullstack"),
    OptionItem(label="設計師", value="design"),
]

interest: list[OptionItem] = [
    OptionItem(label="寫程式", value="coding"),
    OptionItem(label="看書", value="reading"),
    OptionItem(label="打電動", value="gaming"),
]

vocabularies: Computed[list[OptionItem]] = Computed(lambda: [
    OptionItem(label="蘋果", value="apple"),
    OptionItem(label="香蕉", value="banana"),
])
