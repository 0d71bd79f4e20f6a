"""
Codec Configuration Loading

Loads YAML configuration files and turns them into configured VectorCodec
instances.

Expected layout:

    codec:
      bits_per_value: 8
      lower_bound: -100.0
      upper_bound: 100.0
      mapping: gray          # natural | gray
      vector_length: 10      # optional
"""

import yaml
from typing import Dict, List, Any, Union
from pathlib import Path

from .data_models import MIN_BITS, MAX_BITS, ConfigurationError, MappingVariant
from .codec import VectorCodec


def load_codec_config(config_path: Union[str, Path] = "codec_config.yaml") -> Dict[str, Any]:
    """
    Load codec configuration from YAML file.

    Args:
        config_path: Path to configuration YAML file

    Returns:
        Dictionary containing configuration

    Raises:
        ConfigurationError: If the file is missing, empty or not valid YAML
    """
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigurationError("Configuration file is empty")
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a mapping")

    return config


def _codec_section(config: Dict[str, Any]) -> Dict[str, Any]:
    # Accept both {"codec": {...}} and a bare codec mapping
    section = config.get("codec", config)
    if not isinstance(section, dict):
        raise ConfigurationError("'codec' must be a dictionary")
    return section


def _finite_span(lower, upper) -> bool:
    # same rule as CodecConfig: the span itself must not overflow
    try:
        return float(upper) - float(lower) != float("inf")
    except OverflowError:
        return False


def validate_codec_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    try:
        codec_config = _codec_section(config)
    except ConfigurationError as e:
        return [str(e)]

    for key in ["bits_per_value", "lower_bound", "upper_bound"]:
        if key not in codec_config:
            issues.append(f"Missing required field: '{key}'")

    bits = codec_config.get("bits_per_value")
    if bits is not None:
        if isinstance(bits, bool) or not isinstance(bits, int):
            issues.append(f"bits_per_value must be an integer, got {bits!r}")
        elif not MIN_BITS <= bits <= MAX_BITS:
            issues.append(f"bits_per_value must be in [{MIN_BITS}, {MAX_BITS}], got {bits}")

    lower = codec_config.get("lower_bound")
    upper = codec_config.get("upper_bound")
    bounds_numeric = True
    for name, value in [("lower_bound", lower), ("upper_bound", upper)]:
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            issues.append(f"{name} must be a number, got {value!r}")
            bounds_numeric = False
    if bounds_numeric and lower is not None and upper is not None:
        if not lower < upper:
            issues.append(f"lower_bound ({lower}) must be less than upper_bound ({upper})")
        elif not _finite_span(lower, upper):
            issues.append(f"Bounds must be finite, got [{lower}, {upper}]")

    mapping = codec_config.get("mapping", MappingVariant.NATURAL.value)
    try:
        MappingVariant.parse(mapping)
    except ConfigurationError as e:
        issues.append(str(e))

    length = codec_config.get("vector_length")
    if length is not None and (isinstance(length, bool) or not isinstance(length, int) or length < 0):
        issues.append(f"vector_length must be a non-negative integer, got {length!r}")

    return issues


def create_codec_from_config(config: Union[str, Path, Dict[str, Any]] = "codec_config.yaml") -> VectorCodec:
    """
    Create a configured VectorCodec from YAML configuration

    Args:
        config: Path to the configuration file, or an already loaded dictionary

    Returns:
        Configured VectorCodec instance

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if not isinstance(config, dict):
        config = load_codec_config(config)

    issues = validate_codec_config(config)
    if issues:
        raise ConfigurationError("Invalid codec configuration: " + "; ".join(issues))

    codec_config = _codec_section(config)
    return VectorCodec(
        bits_per_value=codec_config["bits_per_value"],
        lower_bound=codec_config["lower_bound"],
        upper_bound=codec_config["upper_bound"],
        mapping=codec_config.get("mapping", MappingVariant.NATURAL.value),
        vector_length=codec_config.get("vector_length"),
    )


def print_codec_summary(config: Union[str, Path, Dict[str, Any]] = "codec_config.yaml"):
    """Print a summary of the codec configuration"""
    try:
        if not isinstance(config, dict):
            config = load_codec_config(config)
        codec_config = _codec_section(config)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
        return

    print("=" * 50)
    print("CODEC CONFIGURATION SUMMARY")
    print("=" * 50)

    bits = codec_config.get("bits_per_value", "N/A")
    lower = codec_config.get("lower_bound", "N/A")
    upper = codec_config.get("upper_bound", "N/A")
    length = codec_config.get("vector_length")
    print(f"Bits per value: {bits}")
    print(f"Bounds: [{lower}, {upper}]")
    print(f"Mapping: {codec_config.get('mapping', MappingVariant.NATURAL.value)}")
    print(f"Vector length: {length if length is not None else 'caller supplied'}")

    issues = validate_codec_config(config)
    if issues:
        print(f"\nValidation Issues ({len(issues)}):")
        for issue in issues:
            print(f"  - {issue}")
    else:
        codec = create_codec_from_config(config)
        print(f"Quantization step: {codec.quantization_step:.6g}")
        if length is not None:
            print(f"Chromosome size: {codec.expected_byte_length(length)} bytes")
        print("\nConfiguration is valid ✓")

    print("=" * 50)


if __name__ == "__main__":
    import sys
    print_codec_summary(sys.argv[1] if len(sys.argv) > 1 else "codec_config.yaml")
