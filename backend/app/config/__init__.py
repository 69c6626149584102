"""Config package exporting loader helpers."""

from .loader import EntryRules, Settings, TimelineConfig, load_settings

__all__ = ["EntryRules", "Settings", "TimelineConfig", "load_settings"]
