"""Export quality presets (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QualityPreset:
    """x264 tuning for the per-clip re-encode."""

    name: str
    crf: int        # Constant Rate Factor (lower is better quality)
    preset: str     # Encoder speed preset
    label: str = ""


QUALITY_PRESETS: dict[str, QualityPreset] = {
    "high": QualityPreset("high", 18, "slow", "High (larger file, slower)"),
    "medium": QualityPreset("medium", 23, "medium", "Medium (balanced)"),
    "low": QualityPreset("low", 28, "veryfast", "Low (smaller file, faster)"),
}


def get_quality_preset(name: str) -> QualityPreset:
    """Look up a preset by name; raises ValueError for unknown names."""
    try:
        return QUALITY_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown quality preset '{name}' (expected one of: {', '.join(QUALITY_PRESETS)})"
        ) from None
