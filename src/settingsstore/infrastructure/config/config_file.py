"""
配置文件管理器

负责把 ConfigurationStore 写入磁盘 / 从磁盘读回：
- 主格式：`serialize()` 生成的字面量文本（默认路径见 shared.constants.CONFIG_FILE）
- 辅助格式：YAML 镜像，方便手工编辑后再导入
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from settingsstore.domain import literal_format
from settingsstore.domain.configuration_store import ConfigurationStore
from settingsstore.domain.exceptions import ConfigurationError, LiteralFormatError
from settingsstore.shared.constants import CONFIG_FILE, CONFIG_FILE_ENCODING

logger = logging.getLogger(__name__)


class ConfigFileError(ConfigurationError):
    """Config file error with user-facing message in args[0]."""


class ConfigFileManager:
    """
    配置文件管理器

    配置文件结构示例：
    ```
    {


    		###### REGION ######
    		'region': {
    			'timezone': '+10:00',
    		},
    		########
    	}
    ```
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        初始化配置文件管理器

        Args:
            config_path: 配置文件路径，默认为 SETTINGSSTORE_CONFIG_FILE 或项目根目录的 settings.literal
        """
        if config_path is None:
            self.config_path = CONFIG_FILE
        else:
            self.config_path = Path(config_path)

    def config_exists(self) -> bool:
        """
        检查配置文件是否存在

        Returns:
            配置文件是否存在
        """
        return self.config_path.exists()

    # ==================== 字面量格式 ====================

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding=CONFIG_FILE_ENCODING)
        except Exception as e:
            logger.error(f"读取配置文件失败: {str(e)}")
            raise ConfigFileError(f"读取配置文件失败：{path}（{e}）") from e

    def _write_text(self, path: Path, text: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding=CONFIG_FILE_ENCODING, newline="")
        except Exception as e:
            logger.error(f"保存配置失败: {str(e)}")
            raise ConfigFileError(f"保存配置文件失败：{path}（{e}）") from e

        # Best-effort: restrict config file permissions (may not work on all platforms/filesystems).
        try:
            os.chmod(path, 0o600)
        except Exception as e:
            logger.debug(f"无法设置配置文件权限为 600: {str(e)}")

    def load_into(self, store: ConfigurationStore) -> ConfigurationStore:
        """
        把配置文件内容合并进 store

        Returns:
            传入的 store（便于链式调用）

        Raises:
            LiteralFormatError: 配置文件格式错误
            ConfigFileError: 读取失败
        """
        if not self.config_exists():
            logger.debug(f"配置文件不存在: {self.config_path}")
            return store

        text = self._read_text(self.config_path)
        try:
            store.load_text(text)
        except LiteralFormatError as e:
            logger.error(f"配置文件格式错误: {str(e)}")
            raise

        logger.debug(f"已从 {self.config_path} 加载 {len(store)} 个顶层配置项")
        return store

    def load(self, force_lower_case: bool = False) -> ConfigurationStore:
        """创建新的 ConfigurationStore 并加载配置文件"""
        return self.load_into(ConfigurationStore(force_lower_case=force_lower_case))

    def save(self, store: ConfigurationStore) -> None:
        """
        保存 store 到配置文件

        Raises:
            ConfigFileError: 保存失败
        """
        self._write_text(self.config_path, store.serialize())
        logger.info(f"配置已保存到 {self.config_path}")

    def delete(self) -> bool:
        """
        删除配置文件

        Returns:
            是否删除成功（文件本来就不存在也视为成功）
        """
        try:
            if not self.config_exists():
                logger.warning(f"配置文件 {self.config_path} 不存在")
                return True
            self.config_path.unlink()
            logger.info(f"配置文件 {self.config_path} 已删除")
            return True
        except Exception as e:
            logger.error(f"删除配置文件 {self.config_path} 失败: {str(e)}")
            return False

    # ==================== YAML 镜像 ====================

    def export_yaml(self, store: ConfigurationStore, path: Path) -> None:
        """
        以 YAML 导出 store（顺序与 store 一致）

        Raises:
            ConfigFileError: 保存失败
        """
        data: Dict[str, Any] = dict(store.get())
        text = yaml.dump(
            data, default_flow_style=False, allow_unicode=True, sort_keys=False
        )
        self._write_text(Path(path), text)
        logger.info(f"配置已导出到 {path}")

    def import_yaml(self, path: Path, store: ConfigurationStore) -> ConfigurationStore:
        """
        从 YAML 文件导入并合并进 store

        YAML 中的值按原样保存（不做反斜杠去转义），null 视为空字符串。

        Raises:
            ConfigFileError: 文件不存在、YAML 格式错误或结构不合法
        """
        path = Path(path)
        if not path.exists():
            raise ConfigFileError(f"未找到 YAML 配置文件：{path}")

        try:
            data = yaml.safe_load(self._read_text(path))
        except yaml.YAMLError as e:
            logger.error(f"YAML 文件格式错误: {str(e)}")
            raise ConfigFileError(f"YAML 文件格式错误：{e}") from e

        if data is None:
            return store

        if not isinstance(data, dict):
            raise ConfigFileError("YAML 配置根节点必须是 mapping（dict）")

        store.load_text(_to_literal(data))
        logger.info(f"已从 {path} 导入 {len(data)} 个顶层配置项")
        return store


def _scalar_to_str(value: Any, *, label: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigFileError(f"{label} 必须是标量值")
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _to_literal(data: Dict[Any, Any]) -> str:
    """YAML 数据转成字面量文本，之后与配置文件走同一条合并路径"""
    properties: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key)
        if isinstance(value, dict):
            properties[key] = {
                str(name): _scalar_to_str(item, label=f"{key}.{name}")
                for name, item in value.items()
            }
        else:
            properties[key] = _scalar_to_str(value, label=key)
    return literal_format.render(properties)
