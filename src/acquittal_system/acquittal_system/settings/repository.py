from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import SettingsScope


class SettingsRepository(Protocol):
    """Raw JSON storage for app-wide settings and per-user preferences."""

    def get_scope(self, scope: SettingsScope) -> Optional[dict]:
        raise NotImplementedError

    def save_scope(self, scope: SettingsScope, data: dict) -> None:
        raise NotImplementedError

    def get_preferences(self, user_id: int) -> Optional[dict]:
        raise NotImplementedError

    def save_preferences(self, user_id: int, data: dict) -> None:
        raise NotImplementedError
