"""
Vector codec: real-valued vectors <-> packed binary chromosomes.

Each value is clamped to the configured bounds, quantized to a bits-wide
index, mapped to a bit row (natural or Gray), and all rows are concatenated
in vector order. The bitstream is packed MSB-first into bytes; the final byte
is zero-padded in its low-order bits.

A codec is immutable once constructed and may be shared between threads.
"""

from numbers import Integral
from typing import Optional, Union
import numpy as np

from .data_models import (
    MIN_BITS,
    MAX_BITS,
    Chromosome,
    CodecConfig,
    ConfigurationError,
    FormatError,
    MappingVariant,
)
from .bit_mappers import get_bit_mapper
from .quantizer import quantize, dequantize


class VectorCodec:
    """
    Encodes float vectors into Chromosomes and decodes them back.

    Args:
        bits_per_value: Bits used for every value (MIN_BITS..MAX_BITS)
        lower_bound: Smallest representable value
        upper_bound: Largest representable value
        mapping: Bit mapping variant, "natural" or "gray"
        vector_length: Optional fixed number of values per vector

    Raises:
        ConfigurationError: If any setting is invalid
    """

    def __init__(
        self,
        bits_per_value: int,
        lower_bound: float,
        upper_bound: float,
        mapping: Union[str, MappingVariant] = MappingVariant.NATURAL,
        vector_length: Optional[int] = None,
    ):
        self._config = CodecConfig(bits_per_value, lower_bound, upper_bound)
        self._mapping = MappingVariant.parse(mapping)
        self._to_bits, self._from_bits = get_bit_mapper(self._mapping)

        if vector_length is not None:
            if isinstance(vector_length, bool) or not isinstance(vector_length, Integral) or vector_length < 0:
                raise ConfigurationError(
                    f"vector_length must be a non-negative integer, got {vector_length!r}"
                )
            vector_length = int(vector_length)
        self._vector_length = vector_length

    @classmethod
    def from_config(
        cls,
        config: CodecConfig,
        mapping: Union[str, MappingVariant] = MappingVariant.NATURAL,
        vector_length: Optional[int] = None,
    ) -> "VectorCodec":
        return cls(
            config.bits_per_value,
            config.lower_bound,
            config.upper_bound,
            mapping=mapping,
            vector_length=vector_length,
        )

    @staticmethod
    def min_bits_per_value() -> int:
        """Smallest supported bits_per_value."""
        return MIN_BITS

    @staticmethod
    def max_bits_per_value() -> int:
        """Largest supported bits_per_value."""
        return MAX_BITS

    @property
    def config(self) -> CodecConfig:
        return self._config

    @property
    def mapping(self) -> MappingVariant:
        return self._mapping

    @property
    def vector_length(self) -> Optional[int]:
        return self._vector_length

    @property
    def bits_per_value(self) -> int:
        return self._config.bits_per_value

    @property
    def lower_bound(self) -> float:
        return self._config.lower_bound

    @property
    def upper_bound(self) -> float:
        return self._config.upper_bound

    @property
    def quantization_step(self) -> float:
        return self._config.step

    def resolve_length(self, length: Optional[int] = None) -> int:
        """
        Number of values to decode: `length`, or the configured vector_length.

        Raises:
            ConfigurationError: If neither is available or the length is not
                a non-negative integer
        """
        n = self._vector_length if length is None else length
        if n is None:
            raise ConfigurationError(
                "Vector length unknown: pass length or configure vector_length"
            )
        if isinstance(n, bool) or not isinstance(n, Integral) or n < 0:
            raise ConfigurationError(f"length must be a non-negative integer, got {n!r}")
        return int(n)

    def expected_byte_length(self, length: int) -> int:
        """Bytes needed for a vector of `length` values: ceil(length * bits / 8)."""
        return (length * self.bits_per_value + 7) // 8

    def encode(self, values) -> Chromosome:
        """
        Encode a vector of reals into a chromosome.

        Out-of-bound values are clamped to the nearest bound.

        Args:
            values: 1-D sequence of reals

        Returns:
            Populated Chromosome of expected_byte_length(len(values)) bytes

        Raises:
            FormatError: If the vector is not 1-D or its length differs from
                the configured vector_length
            ValueError: If any value is NaN
        """
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 1:
            raise FormatError(f"Expected a 1-D vector, got shape {values.shape}")
        if self._vector_length is not None and len(values) != self._vector_length:
            raise FormatError(
                f"Expected {self._vector_length} values, got {len(values)}"
            )

        cfg = self._config
        indices = np.atleast_1d(
            quantize(values, cfg.lower_bound, cfg.upper_bound, cfg.bits_per_value)
        )
        rows = self._to_bits(indices, cfg.bits_per_value)
        packed = np.packbits(rows.reshape(-1), bitorder="big")

        return Chromosome(bytearray(packed.tobytes()))

    def decode(self, chromosome: Chromosome, length: Optional[int] = None) -> np.ndarray:
        """
        Decode a chromosome back into a vector of reals.

        Args:
            chromosome: Chromosome produced by a codec with the same settings
            length: Number of encoded values; defaults to the configured
                vector_length

        Returns:
            float64 array of decoded values

        Raises:
            ConfigurationError: If no length is given or configured
            FormatError: If the chromosome size does not match the length
        """
        n = self.resolve_length(length)

        genes = bytes(chromosome)
        expected = self.expected_byte_length(n)
        if len(genes) != expected:
            raise FormatError(
                f"Chromosome has {len(genes)} bytes, expected {expected} "
                f"for {n} values of {self.bits_per_value} bits"
            )

        cfg = self._config
        bitstream = np.unpackbits(
            np.frombuffer(genes, dtype=np.uint8),
            count=n * cfg.bits_per_value,
            bitorder="big",
        )
        indices = self._from_bits(bitstream.reshape(n, cfg.bits_per_value))

        return np.atleast_1d(
            dequantize(indices, cfg.lower_bound, cfg.upper_bound, cfg.bits_per_value)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, VectorCodec):
            return NotImplemented
        return (self._config, self._mapping, self._vector_length) == (
            other._config, other._mapping, other._vector_length
        )

    def __hash__(self) -> int:
        return hash((self._config, self._mapping, self._vector_length))

    def __repr__(self) -> str:
        return (
            f"VectorCodec(bits_per_value={self.bits_per_value}, "
            f"lower_bound={self.lower_bound}, upper_bound={self.upper_bound}, "
            f"mapping={self._mapping.value!r}, vector_length={self._vector_length})"
        )
