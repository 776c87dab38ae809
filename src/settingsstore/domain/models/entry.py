"""
配置项模型

顶层每个 key 对应的值只有两种形态：
- Leaf：字符串值，例如 properties["debug"] = "1"
- Group：name -> value 的有序映射，例如 properties["region"] = {"timezone": "+10:00"}

同一个 key 在其生命周期内只能是其中一种（不能先当 group 再当 leaf，反之亦然）。
"""

from __future__ import annotations

from typing import Dict, Literal, Mapping, Union

Leaf = str
Group = Dict[str, str]
Entry = Union[Leaf, Group]
Properties = Dict[str, Entry]

EntryKind = Literal["leaf", "group"]


def entry_kind(entry: object) -> EntryKind:
    """Return the kind of a stored top-level entry."""
    if isinstance(entry, Mapping):
        return "group"
    return "leaf"


def is_group(entry: object) -> bool:
    return entry_kind(entry) == "group"
