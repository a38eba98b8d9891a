"""
Configuration hooks.

Process-wide settings shared by the engine, the session services and the UI.
"""

from .config import PandaLogConfig, set_config, get_config

__all__ = [
    "PandaLogConfig",
    "set_config",
    "get_config",
]
