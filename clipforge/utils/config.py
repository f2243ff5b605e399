"""Application configuration constants."""

from __future__ import annotations

import sys
from pathlib import Path

APP_NAME = "ClipForge"
APP_VERSION = "0.1.0"
ORG_NAME = "ClipForge"

# FFmpeg
if sys.platform == "darwin":
    FFMPEG_PATH = "/opt/homebrew/bin/ffmpeg"
else:
    FFMPEG_PATH = "ffmpeg"

# Storage
APP_DATA_DIR = Path.home() / ".clipforge"
DEFAULT_PROJECT_DIR = APP_DATA_DIR / "project"
PROJECT_FILE_NAME = "project.json"
MEDIA_DIR_NAME = "media"

# Supported video formats
VIDEO_EXTENSIONS = [".mp4", ".mov", ".avi", ".mkv", ".webm", ".flv", ".wmv"]

# Editing
AUTOSAVE_DELAY_MS = 1000   # Debounce window for project saves
SEEK_TOLERANCE_MS = 100    # Player/model drift ignored below this

# Export
DEFAULT_QUALITY = "medium"
EXPORT_VIDEO_CODEC = "libx264"
EXPORT_AUDIO_CODEC = "aac"
EXPORT_AUDIO_BITRATE = "192k"
