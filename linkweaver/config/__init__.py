"""
LinkWeaver v0.1.0

Configuration management for LinkWeaver.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .schema import (
    DEFAULT_CONFIG,
    ConfigValidationError,
    LinkParams,
    load_config,
    save_config_template,
    validate_config,
    parse_multiplicity_range,
    default_base_name,
    graph_file_name,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigValidationError",
    "LinkParams",
    "load_config",
    "save_config_template",
    "validate_config",
    "parse_multiplicity_range",
    "default_base_name",
    "graph_file_name",
]
