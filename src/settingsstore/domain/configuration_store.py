"""
配置存储（property => value）

ConfigurationStore 保存应用使用的配置项，可以按 group 分组：

    properties = {
        "region": {"timezone": "+10:00"},   # group
        "debug": "1",                       # leaf
    }

`serialize()` 生成可持久化的字面量文本（见 literal_format），进程启动时读回，
配置变更时重新写出。读写文件不在本模块职责内（见 ConfigFileManager）。
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from settingsstore.domain import literal_format
from settingsstore.domain.escaping import unescape, unescape_recursive
from settingsstore.domain.exceptions import PropertyKindError, UnencodableTextError
from settingsstore.domain.models.entry import Entry, Group, Properties, entry_kind, is_group
from settingsstore.shared.constants import CONFIG_FILE_ENCODING

logger = logging.getLogger(__name__)


class ConfigurationStore:
    """
    分组的配置项存储

    - 保持插入顺序（序列化顺序由插入顺序决定）
    - force_lower_case=True 时，所有 group/name 在读写删前统一转为小写
    - 值以去转义后的形式保存，序列化时再转义
    """

    def __init__(self, force_lower_case: bool = False):
        """
        Args:
            force_lower_case: 默认 False（大小写敏感）；为 True 时所有 group 和 name 都转为小写
        """
        self._force_lower_case = bool(force_lower_case)
        self._properties: Properties = {}

    @property
    def force_lower_case(self) -> bool:
        return self._force_lower_case

    def _normalize(self, key: Optional[str]) -> str:
        # None 与空字符串等价（未分组 / 空 key）
        key = "" if key is None else str(key)
        return key.lower() if self._force_lower_case else key

    @staticmethod
    def _writable(text: str) -> str:
        """写入前确认文本可以用 UTF-8 落盘，否则 serialize 后无法读回"""
        try:
            text.encode(CONFIG_FILE_ENCODING)
        except UnicodeEncodeError as e:
            raise UnencodableTextError(
                f"配置项 {text!r} 包含无法以 {CONFIG_FILE_ENCODING} 保存的字符"
            ) from e
        return text

    def _ensure_kind(self, key: str, expected: str) -> None:
        if key not in self._properties:
            return
        actual = entry_kind(self._properties[key])
        if actual != expected:
            raise PropertyKindError(
                f"配置项 {key!r} 已经是 {actual}，不能再作为 {expected} 使用"
            )

    # ==================== 写入 ====================

    def set(self, name: str, value: Any, group: Optional[str] = None) -> None:
        """
        设置单个配置项。

        Args:
            name: 配置项名称，例如 'timezone'
            value: 配置值，例如 '+10:00'（会先去掉一层反斜杠转义）
            group: 所属分组，例如 'region'；为空时直接存放在顶层

        Raises:
            PropertyKindError: name/group 与已有条目的类型（group/leaf）冲突
            UnencodableTextError: name/group/value 无法以 UTF-8 保存
        """
        name = self._writable(self._normalize(name))
        group = self._writable(self._normalize(group))
        value = self._writable(unescape(value))

        if group:
            self._ensure_kind(group, "group")
            self._properties.setdefault(group, {})[name] = value
        else:
            self._ensure_kind(name, "leaf")
            self._properties[name] = value

    def set_array(self, entries: Mapping[str, Any]) -> None:
        """
        批量设置配置项。

        entries 可以同时包含 'name' => 'value' 与 'group' => {'name': 'value'}。
        顶层浅合并：entries 中出现的顶层 key 整体覆盖已有条目（group 不做逐项合并）。
        """
        self._merge(unescape_recursive(entries))

    def load_text(self, text: str) -> None:
        """
        合并一段由 `serialize()` 生成的字面量文本。

        字面量求值已经还原了转义，这里不再做第二次去转义。
        """
        self._merge(literal_format.parse(text))

    def _merge(self, entries: Mapping[str, Any]) -> None:
        incoming: Properties = {}
        for raw_key, raw_entry in entries.items():
            key = self._writable(self._normalize(raw_key))
            entry: Entry
            if is_group(raw_entry):
                entry = self._normalize_group(raw_entry)
            else:
                entry = self._writable(raw_entry)
            if key in incoming and entry_kind(incoming[key]) != entry_kind(entry):
                raise PropertyKindError(f"批量配置中 {key!r} 同时以 group 和 leaf 出现")
            incoming[key] = entry

        for key, entry in incoming.items():
            self._ensure_kind(key, entry_kind(entry))

        # dict.update：已有 key 保持原位置，新 key 追加到末尾
        self._properties.update(incoming)
        logger.debug(f"批量合并 {len(incoming)} 个顶层配置项")

    def _normalize_group(self, raw_group: Mapping[str, Any]) -> Group:
        group: Group = {}
        for name, value in raw_group.items():
            if isinstance(value, Mapping):
                raise PropertyKindError(f"group 内的配置项 {name!r} 不能再嵌套 group")
            group[self._writable(self._normalize(name))] = self._writable(value)
        return group

    # ==================== 读取 ====================

    def get(
        self, name: Optional[str] = None, group: Optional[str] = None
    ) -> Union[Properties, Entry, None]:
        """
        读取配置项。

        Args:
            name: 配置项名称
            group: 所属分组

        Returns:
            - name 和 group 都为空：返回完整的 properties（同一个对象，调用方不应直接修改）
            - 指定 group：返回 properties[group][name]，不存在时返回 None
            - 仅指定 name：返回 properties[name]，不存在时返回 None
        """
        if not name and not group:
            return self._properties

        name = self._normalize(name)
        group = self._normalize(group)

        if group:
            entry = self._properties.get(group)
            if not is_group(entry):
                return None
            return entry.get(name)

        return self._properties.get(name)

    # ==================== 删除 ====================

    def remove(self, name: str, group: Optional[str] = None) -> None:
        """
        删除配置项。

        传入 group 且该 group 下存在 name 时，只删除这一项（group 本身保留，可能变为空）；
        否则若顶层存在 name 则删除它。把 group 名当作 name 传入即可删除整个 group。
        """
        name = self._normalize(name)
        group = self._normalize(group)

        entry = self._properties.get(group) if group else None
        if is_group(entry) and name in entry:
            del entry[name]
        elif name in self._properties:
            del self._properties[name]

    def flush(self) -> None:
        """清空所有配置项（大小写策略不变）"""
        self._properties = {}

    # ==================== 序列化 ====================

    def serialize(self) -> str:
        """
        生成 properties 的字面量文本表示，可写入配置文件并在之后读回。

        所有值在输出时都会重新转义；空字符串输出为 None。
        """
        return literal_format.render(self._properties)

    to_text = serialize

    def __len__(self) -> int:
        return len(self._properties)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self._normalize(name) in self._properties

    def __repr__(self) -> str:
        return (
            f"ConfigurationStore(force_lower_case={self._force_lower_case!r}, "
            f"entries={len(self._properties)})"
        )
