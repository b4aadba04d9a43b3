"""
Utilities Module

Configuration loading/validation and per-module logging for the engine.
"""

from .config_loader import ConfigLoader, load_config
from .logger import Logger, get_logger

__all__ = [
    'ConfigLoader',
    'load_config',
    'Logger',
    'get_logger',
]
