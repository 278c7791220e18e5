"""Utility functions and configuration."""

from .config_loader import load_config, ServerConfig, SceneConfig
from .logging_utils import setup_logger, get_logger

__all__ = [
    "load_config",
    "ServerConfig",
    "SceneConfig",
    "setup_logger",
    "get_logger",
]
