import logging
import os
from typing import Optional, Union

from settingsstore.shared.constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_from_env() -> str:
    """读取 SETTINGSSTORE_LOG_LEVEL，未设置或非法时返回默认级别"""
    raw = str(os.getenv(LOG_LEVEL_ENV, "") or "").strip().upper()
    if raw and isinstance(getattr(logging, raw, None), int):
        return raw
    return DEFAULT_LOG_LEVEL


def set_global_log_level(level: Optional[Union[str, int]] = None) -> int:
    """
    设置根日志器及其处理器的级别

    Args:
        level: 'DEBUG' / 'info' 等字符串或 logging 级别常量；为 None 时取 SETTINGSSTORE_LOG_LEVEL

    Returns:
        实际生效的数值级别
    """
    if level is None:
        level = level_from_env()
    if isinstance(level, str):
        level = getattr(logging, level.strip().upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # 首次调用时补一个控制台处理器
    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)

    for handler in root_logger.handlers:
        handler.setLevel(level)

    return level
