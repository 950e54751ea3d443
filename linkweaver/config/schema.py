"""
LinkWeaver v0.1.0

Configuration schema for LinkWeaver.

Defines all available configuration parameters with defaults and validation.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional, List, Tuple, Union
from pathlib import Path
import yaml


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Alignment Filtering
    # ========================================================================
    'alignment': {
        'min_identity': 98,  # Minimum percent identity of each mate
        'min_mapq': 1,  # Both mates need nonzero mapping quality
    },

    # ========================================================================
    # Barcode Linking
    # ========================================================================
    'linking': {
        'min_reads': 5,  # Read pairs per barcode before a head/tail call
        'min_size': 500,  # Minimum scaffold length considered
        'end_length': 0,  # Head/tail region length (0 = half the scaffold)
        'min_multiplicity': 50,
        'max_multiplicity': 10000,
        'error_percent': 0.05,  # Maximum p-value for head/tail and orientation calls
    },

    # ========================================================================
    # Graph Construction
    # ========================================================================
    'graph': {
        'min_links': 0,  # Minimum barcodes supporting an edge
        'max_degree': 0,  # Remove nodes above this degree (0 = keep all)
    },

    # ========================================================================
    # Runtime
    # ========================================================================
    'runtime': {
        'threads': 1,  # Alignment files linked in parallel
        'verbose': 0,
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'base_name': None,  # Derived from the sequence file and parameters if unset

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,  # Log to stderr only when unset
        },
    },
}

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


@dataclass
class LinkParams:
    """
    Parameters controlling a linking run.

    Passed explicitly to every pipeline stage.
    """
    min_identity: float = 98
    min_mapq: int = 1
    min_reads: int = 5
    min_links: int = 0
    min_size: int = 500
    min_multiplicity: int = 50
    max_multiplicity: int = 10000
    max_degree: int = 0
    end_length: int = 0
    error_percent: float = 0.05

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'LinkParams':
        """
        Build parameters from a configuration dictionary.

        Raises:
            ConfigValidationError: If the configuration is invalid
        """
        errors = validate_config(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))

        alignment = config['alignment']
        linking = config['linking']
        graph = config['graph']
        return cls(
            min_identity=alignment['min_identity'],
            min_mapq=alignment['min_mapq'],
            min_reads=linking['min_reads'],
            min_links=graph['min_links'],
            min_size=linking['min_size'],
            min_multiplicity=linking['min_multiplicity'],
            max_multiplicity=linking['max_multiplicity'],
            max_degree=graph['max_degree'],
            end_length=linking['end_length'],
            error_percent=linking['error_percent'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_path is given but missing
        ConfigValidationError: If the YAML cannot be parsed
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
            raise ConfigValidationError(
                f"Invalid YAML in config file {config_path}: {e}"
            )

        if user_config:
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


def save_config_template(output_path: Path):
    """
    Save the default configuration to a YAML file.

    Args:
        output_path: Output file path
    """
    with open(output_path, 'w') as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for section in ('alignment', 'linking', 'graph', 'runtime', 'output'):
        if not isinstance(config.get(section), dict):
            errors.append(f"Missing configuration section: {section}")
    if not errors and not isinstance(config['output'].get('logging'), dict):
        errors.append("Missing configuration section: output.logging")
    if errors:
        return errors

    alignment = config['alignment']
    linking = config['linking']
    graph = config['graph']
    runtime = config['runtime']

    identity = alignment.get('min_identity')
    if not isinstance(identity, (int, float)) or not 0 <= identity <= 100:
        errors.append(f"min_identity must be between 0 and 100, got {identity}")

    integer_settings = [
        ('alignment', 'min_mapq', alignment),
        ('linking', 'min_reads', linking),
        ('linking', 'min_size', linking),
        ('linking', 'end_length', linking),
        ('linking', 'min_multiplicity', linking),
        ('linking', 'max_multiplicity', linking),
        ('graph', 'min_links', graph),
        ('graph', 'max_degree', graph),
    ]
    for section, key, values in integer_settings:
        value = values.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            errors.append(f"{section}.{key} must be a non-negative integer, got {value}")

    min_mult = linking.get('min_multiplicity')
    max_mult = linking.get('max_multiplicity')
    if isinstance(min_mult, int) and isinstance(max_mult, int) and min_mult > max_mult:
        errors.append(
            f"Invalid multiplicity range: min ({min_mult}) exceeds max ({max_mult})"
        )

    error_percent = linking.get('error_percent')
    if not isinstance(error_percent, (int, float)) or not 0 < error_percent <= 1:
        errors.append(f"error_percent must be in (0, 1], got {error_percent}")

    threads = runtime.get('threads')
    if not isinstance(threads, int) or threads < 1:
        errors.append(f"threads must be a positive integer, got {threads}")

    level = config['output']['logging'].get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors


def parse_multiplicity_range(value: str) -> Tuple[int, int]:
    """
    Parse a barcode multiplicity range given as 'min-max'.

    Raises:
        ConfigValidationError: If the range is malformed or inverted
    """
    first, sep, second = value.partition('-')
    if not sep:
        raise ConfigValidationError(
            f"Invalid multiplicity range '{value}': expected the form min-max"
        )
    try:
        low, high = int(first), int(second)
    except ValueError:
        raise ConfigValidationError(
            f"Invalid multiplicity range '{value}': bounds must be integers"
        )
    if low < 0 or low > high:
        raise ConfigValidationError(
            f"Invalid multiplicity range '{value}': need 0 <= min <= max"
        )
    return low, high


def default_base_name(sequence_file: Union[str, Path], params: LinkParams) -> str:
    """Derive an output base name from the sequence file and key parameters."""
    return (
        f"{sequence_file}.scaff"
        f"_s{params.min_identity:g}"
        f"_c{params.min_reads}"
        f"_l{params.min_links}"
        f"_d{params.max_degree}"
        f"_e{params.end_length}"
        f"_r{params.error_percent:g}"
    )


def graph_file_name(base_name: str) -> str:
    """Graph output path for a base name."""
    return f"{base_name}_original.gv"
