"""
全局常量定义

存储项目级别的常量，供所有模块使用
"""

import os
from pathlib import Path

# 项目根目录路径（src/settingsstore/shared -> 项目根目录）
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_path_from_env(env_var: str, default: Path) -> Path:
    """
    从环境变量获取路径，如果未设置则使用默认值

    Args:
        env_var: 环境变量名称
        default: 默认路径

    Returns:
        Path: 配置的路径
    """
    env_value = os.getenv(env_var)
    if env_value:
        return Path(env_value)
    return default


# 配置文件路径（字面量格式，由 ConfigFileManager 读写）
CONFIG_FILE_ENV = "SETTINGSSTORE_CONFIG_FILE"
CONFIG_FILE = get_path_from_env(CONFIG_FILE_ENV, PROJECT_ROOT / "settings.literal")

# 日志级别
LOG_LEVEL_ENV = "SETTINGSSTORE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# 配置文件编码
CONFIG_FILE_ENCODING = "utf-8"
