"""
Settings service (use-case / app layer).

Goal:
- Wire one explicitly constructed ConfigurationStore to its ConfigFileManager.
- Load once at start-up, persist on settings change.
- No module-level singleton: callers construct the service and pass it around.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from settingsstore.domain.configuration_store import ConfigurationStore
from settingsstore.infrastructure.config.config_file import ConfigFileManager
from settingsstore.shared.logger import set_global_log_level

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(
        self,
        store: Optional[ConfigurationStore] = None,
        file_manager: Optional[ConfigFileManager] = None,
    ):
        self.store = store if store is not None else ConfigurationStore()
        self.file_manager = file_manager if file_manager is not None else ConfigFileManager()

    @classmethod
    def open(
        cls,
        file_manager: Optional[ConfigFileManager] = None,
        *,
        force_lower_case: bool = False,
        log_level: Optional[Union[str, int]] = None,
    ) -> "SettingsService":
        """
        Create a service and load the persisted file (missing file -> empty store).

        `log_level` is applied to the root logger first; None falls back to
        SETTINGSSTORE_LOG_LEVEL (default INFO).
        """
        set_global_log_level(log_level)
        service = cls(ConfigurationStore(force_lower_case=force_lower_case), file_manager)
        service.reload()
        return service

    def get(self, name: Optional[str] = None, group: Optional[str] = None) -> Any:
        return self.store.get(name, group)

    def update(
        self, name: str, value: Any, group: Optional[str] = None, *, persist: bool = True
    ) -> None:
        self.store.set(name, value, group)
        if persist:
            self.save()

    def update_many(self, entries: Mapping[str, Any], *, persist: bool = True) -> None:
        self.store.set_array(entries)
        if persist:
            self.save()

    def remove(self, name: str, group: Optional[str] = None, *, persist: bool = True) -> None:
        self.store.remove(name, group)
        if persist:
            self.save()

    def reload(self) -> None:
        """Discard in-memory values and re-read the persisted file."""
        self.store.flush()
        self.file_manager.load_into(self.store)
        logger.debug(f"Settings reloaded from {self.file_manager.config_path}")

    def save(self) -> None:
        self.file_manager.save(self.store)
