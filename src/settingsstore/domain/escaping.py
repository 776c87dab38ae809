"""
配置值的转义 / 反转义

- 写入：上游的文本读取层会给值加上一层反斜杠转义，存储前用 `unescape` 去掉
- 输出：`escape_literal` 把值转义成可以放进单引号 Python 字面量的形式，
  `ast.literal_eval` 读回后得到原值
"""

from __future__ import annotations

from typing import Any, Mapping

_LITERAL_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "'": "\\'",
        "\0": "\\x00",
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }
)


def unescape(value: Any) -> str:
    """
    去掉一层反斜杠转义。

    规则：
    - `\\x` -> `x`（任意字符），因此 `\\\\` -> `\\`
    - `\\0` -> NUL
    - 末尾孤立的反斜杠被丢弃
    - None 视为空字符串，其他非字符串值先转成 str
    """
    if value is None:
        return ""

    raw = value if isinstance(value, str) else str(value)
    if "\\" not in raw:
        return raw

    out: list[str] = []
    i = 0
    length = len(raw)
    while i < length:
        ch = raw[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        i += 1
        if i < length:
            nxt = raw[i]
            out.append("\0" if nxt == "0" else nxt)
            i += 1

    return "".join(out)


def unescape_recursive(entries: Mapping[Any, Any]) -> dict[str, Any]:
    """Apply `unescape` to every leaf of a nested mapping, returning a new dict."""
    result: dict[str, Any] = {}
    for key, value in entries.items():
        if isinstance(value, Mapping):
            result[str(key)] = unescape_recursive(value)
        else:
            result[str(key)] = unescape(value)
    return result


def escape_literal(value: str) -> str:
    """
    转义为单引号字面量内部的文本（不含两侧引号）。

    Example:
        "it's" -> "it\\'s"
    """
    return str(value).translate(_LITERAL_ESCAPES)
