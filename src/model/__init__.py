from .setting import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings", "get_settings", "reload_settings",
]
