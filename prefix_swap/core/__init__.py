"""Core configuration, errors and factory components."""

from prefix_swap.core.config import Settings, get_settings
from prefix_swap.core.factory import ComponentFactory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
]
