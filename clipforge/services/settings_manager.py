"""Settings manager for application preferences."""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from clipforge.utils.config import AUTOSAVE_DELAY_MS, DEFAULT_PROJECT_DIR, DEFAULT_QUALITY


class SettingsManager:
    """Wrapper around QSettings for type-safe preference management."""

    def __init__(self):
        self._settings = QSettings()

    # ---------------------------------------------------- Project

    def get_project_dir(self) -> Path:
        """Get the project directory (default: ~/.clipforge/project)."""
        path = self._settings.value("project/dir", "", str)
        return Path(path) if path else DEFAULT_PROJECT_DIR

    def set_project_dir(self, path: Optional[Path]) -> None:
        """Set the project directory (None for default)."""
        self._settings.setValue("project/dir", str(path) if path else "")

    def get_autosave_delay_ms(self) -> int:
        """Get the autosave debounce window in ms (default: 1000)."""
        return self._settings.value("autosave/delay_ms", AUTOSAVE_DELAY_MS, int)

    def set_autosave_delay_ms(self, ms: int) -> None:
        """Set the autosave debounce window in ms."""
        self._settings.setValue("autosave/delay_ms", ms)

    # ---------------------------------------------------- Export

    def get_export_quality(self) -> str:
        """Get the default export quality preset name (default: medium)."""
        return self._settings.value("export/quality", DEFAULT_QUALITY, str)

    def set_export_quality(self, quality: str) -> None:
        """Set the default export quality preset name."""
        self._settings.setValue("export/quality", quality)

    # ---------------------------------------------------- Advanced

    def get_ffmpeg_path(self) -> Optional[str]:
        """Get the custom FFmpeg path (None for auto-detect)."""
        path = self._settings.value("advanced/ffmpeg_path", "", str)
        return path if path else None

    def set_ffmpeg_path(self, path: Optional[str]) -> None:
        """Set the custom FFmpeg path (None for auto-detect)."""
        self._settings.setValue("advanced/ffmpeg_path", path or "")

    # ---------------------------------------------------- General Methods

    def reset_to_defaults(self) -> None:
        """Reset all settings to default values."""
        self._settings.clear()
