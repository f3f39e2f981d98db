"""
Configuration Loader.

This module initializes the global configuration object (`config`) used
throughout the package. The tree is defined in `skillhub.core_config`.

Usage:
    from skillhub.config import config
    print(config.API.BASE_URL)
"""

from skillhub.core_config import get_cfg_defaults

config = get_cfg_defaults()

# Freeze config to prevent accidental changes during runtime.
config.freeze()
