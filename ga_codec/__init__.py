"""
Genome Codec for Genetic Algorithms

This package converts real-valued vectors into fixed-width binary genomes
(chromosomes) that genetic operators can mutate and recombine, and converts
those genomes back into approximate real values.

Key Features:
- Uniform quantization with silent clamping to [lower_bound, upper_bound]
- Natural binary and Gray (reflected binary) bit mappings
- MSB-first bit packing across byte boundaries
- Chromosomes with prototype construction and deep copy for operator code

Modules:
- data_models: CodecConfig, MappingVariant, Chromosome and error types
- quantizer: Real value <-> quantization index
- bit_mappers: Quantization index <-> bit rows (natural, gray)
- codec: VectorCodec orchestrating quantization, mapping and packing
- config: YAML codec configuration loading and validation
- io_utils: Chromosome envelopes (YAML) and population CSV files
"""

__version__ = "0.1.0"
__author__ = "GA Toolkit Team"

from .data_models import (
    MIN_BITS,
    MAX_BITS,
    Chromosome,
    CodecConfig,
    CodecError,
    ConfigurationError,
    FormatError,
    MappingVariant,
)
from .codec import VectorCodec
from .config import create_codec_from_config, load_codec_config

__all__ = [
    "MIN_BITS",
    "MAX_BITS",
    "Chromosome",
    "CodecConfig",
    "CodecError",
    "ConfigurationError",
    "FormatError",
    "MappingVariant",
    "VectorCodec",
    "create_codec_from_config",
    "load_codec_config",
]
