# post_arch/config/__init__.py

from .models import InvocationSettings, load_settings, DEFAULT_SETTINGS_PATH

__all__ = [
    "InvocationSettings",
    "load_settings",
    "DEFAULT_SETTINGS_PATH",
]
