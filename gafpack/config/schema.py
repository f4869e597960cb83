"""
Gafpack v0.1.0

Configuration schema for Gafpack.

Defines all available configuration parameters with defaults and validation.

Author: Gafpack Development Team
License: Dual License (Academic/Commercial)
"""

import copy
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml

from ..errors import ConfigValidationError


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Coverage Accumulation
    # ========================================================================
    'coverage': {
        'len_scale': False,  # Divide node coverage by node length
        'weight_queries': False,  # Divide by records per query (two passes)
        'query_key': 'name',  # 'name', 'name-span'
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'coverage_column': False,  # One value per line instead of one row
        'node_label_prefix': 'node.',

        # Logging
        'logging': {
            'level': 'WARNING',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,
        },
    },
}

VALID_QUERY_KEYS = ['name', 'name-span']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

TEMPLATES = ['default', 'scaled', 'weighted', 'genotyping']


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        ConfigValidationError: If the file is not valid YAML or not a mapping
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"invalid YAML: {e}", source=str(config_path)) from e

        if user_config is None:
            return config
        if not isinstance(user_config, dict):
            raise ConfigValidationError("top level must be a mapping", source=str(config_path))

        # Deep merge user config into defaults
        config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def build_template(template: str = 'default') -> Dict[str, Any]:
    """
    Build a configuration template.

    Args:
        template: Template type ('default', 'scaled', 'weighted', 'genotyping')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template: {template} (expected one of {TEMPLATES})")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'scaled':
        config['coverage']['len_scale'] = True

    elif template == 'weighted':
        config['coverage']['weight_queries'] = True

    elif template == 'genotyping':
        # Mean depth per node, multi-mapped reads split, one column per sample
        config['coverage']['len_scale'] = True
        config['coverage']['weight_queries'] = True
        config['output']['coverage_column'] = True

    return config


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'scaled', 'weighted', 'genotyping')
    """
    config = build_template(template)

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    # Unknown sections are most likely typos
    for section in config:
        if section not in DEFAULT_CONFIG:
            errors.append(f"Unknown configuration section: {section}")

    coverage = config.get('coverage', {})
    output = config.get('output', {})
    if not isinstance(coverage, dict) or not isinstance(output, dict):
        errors.append("Sections 'coverage' and 'output' must be mappings")
        return errors

    # Boolean switches
    for section_name, section, key in [
        ('coverage', coverage, 'len_scale'),
        ('coverage', coverage, 'weight_queries'),
        ('output', output, 'coverage_column'),
    ]:
        value = section.get(key, False)
        if not isinstance(value, bool):
            errors.append(f"{section_name}.{key} must be true or false, got {value!r}")

    query_key = coverage.get('query_key', 'name')
    if query_key not in VALID_QUERY_KEYS:
        errors.append(f"Invalid coverage.query_key: {query_key} (expected one of {VALID_QUERY_KEYS})")

    prefix = output.get('node_label_prefix', 'node.')
    if not isinstance(prefix, str) or any(c in prefix for c in '\t\n'):
        errors.append("output.node_label_prefix must be a string without tabs or newlines")

    # Validate logging
    logging_config = output.get('logging', {}) or {}
    level = str(logging_config.get('level', 'WARNING')).upper()
    if level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid output.logging.level: {level}")

    return errors

# Gafpack v0.1.0
# Any usage is subject to this software's license.
