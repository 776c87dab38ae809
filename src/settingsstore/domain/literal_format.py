"""
配置字面量格式（持久化文本）

输出示例（行尾为 CRLF，缩进为 tab）：

    {


    		###### GENERAL ######
    		'general': {
    			'sitename': 'My Site',
    			'empty-key': None,
    		},
    		########
    	}

文本本身就是合法的 Python dict 字面量，可以直接交给 `ast.literal_eval` 读回。
"""

from __future__ import annotations

import ast
from typing import Any, Mapping

from settingsstore.domain.escaping import escape_literal
from settingsstore.domain.exceptions import LiteralFormatError
from settingsstore.domain.models.entry import Properties, is_group

NEWLINE = "\r\n"
NULL_MARKER = "None"
BANNER_EDGE = "######"
BANNER_CLOSE = "########"


def _render_key(key: str) -> str:
    return f"'{escape_literal(key)}'"


def _render_value(value: str) -> str:
    # 空字符串写成 None，读回时再还原为 ""
    if len(value) > 0:
        return f"'{escape_literal(value)}'"
    return NULL_MARKER


def render(properties: Properties) -> str:
    """
    按插入顺序把 properties 渲染为字面量文本。

    - group：先输出大写的横幅注释，再逐行输出 name/value
    - 顶层 leaf：直接输出一行 `'name': 'value',`，不带横幅
    """
    lines = ["{"]
    for key, entry in properties.items():
        if is_group(entry):
            lines.append("")
            lines.append("")
            lines.append(f"\t\t{BANNER_EDGE} {escape_literal(key).upper()} {BANNER_EDGE}")
            lines.append(f"\t\t{_render_key(key)}: {{")
            for name, value in entry.items():
                lines.append(f"\t\t\t{_render_key(name)}: {_render_value(value)},")
            lines.append("\t\t},")
            lines.append(f"\t\t{BANNER_CLOSE}")
        else:
            lines.append(f"\t\t{_render_key(key)}: {_render_value(entry)},")
    lines.append("\t}")
    return NEWLINE.join(lines)


def _normalize_leaf(value: Any, *, label: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise LiteralFormatError(f"{label} 必须是字符串或 None，实际为 {type(value).__name__}")


def _normalize_group(value: Mapping[Any, Any], *, label: str) -> dict[str, str]:
    group: dict[str, str] = {}
    for name, item in value.items():
        if not isinstance(name, str):
            raise LiteralFormatError(f"{label} 包含非法键：{name!r}")
        group[name] = _normalize_leaf(item, label=f"{label}.{name}")
    return group


def parse(text: str) -> Properties:
    """
    解析字面量文本。

    Returns:
        与 `render` 输入等价的 properties（None 还原为 ""）

    Raises:
        LiteralFormatError: 文本不是合法字面量，或结构不是两层字符串映射
    """
    if not str(text or "").strip():
        return {}

    try:
        data = ast.literal_eval(text)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as e:
        raise LiteralFormatError(f"配置文本不是合法的字面量：{e}") from e

    if not isinstance(data, dict):
        raise LiteralFormatError("配置文本根节点必须是 dict")

    properties: Properties = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise LiteralFormatError(f"配置包含非法顶层键：{key!r}")
        if isinstance(value, dict):
            properties[key] = _normalize_group(value, label=key)
        else:
            properties[key] = _normalize_leaf(value, label=key)
    return properties
