"""
Gafpack v0.1.0

Configuration management for Gafpack.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

from .schema import (
    DEFAULT_CONFIG,
    load_config,
    build_template,
    save_config_template,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "build_template",
    "save_config_template",
    "validate_config",
]
