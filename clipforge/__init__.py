"""ClipForge: non-linear video timeline editing core."""

from clipforge.utils.config import APP_VERSION as __version__

__all__ = ["__version__"]
