"""Common utilities for the developer portal."""

from .logger import setup_logger, get_logger
from .config import load_config, load_configs

__all__ = ["get_logger", "load_config", "load_configs", "setup_logger"]
