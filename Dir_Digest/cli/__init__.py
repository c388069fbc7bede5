# Auto-generated __init__.py

from . import digest
from .digest import main
from . import settings
from .settings import apply_overrides
from .settings import load_settings

__all__ = [
    "digest",
    "settings",
    "apply_overrides",
    "load_settings",
    "main",
]
