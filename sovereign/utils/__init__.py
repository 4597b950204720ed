"""
Utilities Module
================

Common utilities shared across the runtime core:
- logger: Context-aware logging with levels
- config: Environment-driven configuration
"""

from sovereign.utils.logger import Logger, logger
from sovereign.utils.config import get_config, reset_config, Config

__all__ = ["Logger", "logger", "get_config", "reset_config", "Config"]
