"""
Data models for the genome codec.

Core data structures: codec configuration, mapping variants, chromosomes,
and the error types raised when either is invalid.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from numbers import Integral
from typing import Union


MIN_BITS = 1
MAX_BITS = 32


class CodecError(Exception):
    """Base class for codec errors."""
    pass


class ConfigurationError(CodecError, ValueError):
    """Raised when a codec configuration is invalid"""
    pass


class FormatError(CodecError, ValueError):
    """Raised when encoded data does not match the codec layout"""
    pass


class MappingVariant(Enum):
    """Integer-to-bitstring mapping used by a codec."""
    NATURAL = "natural"
    GRAY = "gray"

    @classmethod
    def parse(cls, value: Union[str, "MappingVariant"]) -> "MappingVariant":
        """
        Resolve a mapping variant from its name.

        Args:
            value: Variant instance or name ("natural" / "gray", case-insensitive)

        Returns:
            MappingVariant

        Raises:
            ConfigurationError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(v.value for v in cls)
            raise ConfigurationError(f"Unknown mapping variant: {value!r}. Must be one of: {valid}")


@dataclass(frozen=True)
class CodecConfig:
    """
    Quantization settings shared by every value of an encoded vector.

    Attributes:
        bits_per_value: Number of bits used for each value (MIN_BITS..MAX_BITS)
        lower_bound: Smallest representable value
        upper_bound: Largest representable value
    """
    bits_per_value: int
    lower_bound: float
    upper_bound: float

    def __post_init__(self):
        """Validate bit width and bounds."""
        bits = self.bits_per_value
        if isinstance(bits, bool) or not isinstance(bits, Integral):
            raise ConfigurationError(f"bits_per_value must be an integer, got {bits!r}")
        bits = int(bits)
        if not MIN_BITS <= bits <= MAX_BITS:
            raise ConfigurationError(
                f"bits_per_value must be in [{MIN_BITS}, {MAX_BITS}], got {bits}"
            )

        try:
            lower = float(self.lower_bound)
            upper = float(self.upper_bound)
        except (TypeError, ValueError, OverflowError):
            raise ConfigurationError(
                f"Bounds must be real numbers, got {self.lower_bound!r} and {self.upper_bound!r}"
            )
        if not lower < upper:
            raise ConfigurationError(
                f"lower_bound ({lower}) must be less than upper_bound ({upper})"
            )
        if upper - lower == float("inf"):
            raise ConfigurationError("Bounds must be finite")

        object.__setattr__(self, "bits_per_value", bits)
        object.__setattr__(self, "lower_bound", lower)
        object.__setattr__(self, "upper_bound", upper)

    @property
    def levels(self) -> int:
        """Highest quantized index, 2^bits - 1."""
        return (1 << self.bits_per_value) - 1

    @property
    def step(self) -> float:
        """Quantization step, the maximum reconstruction error."""
        return (self.upper_bound - self.lower_bound) / self.levels

    def to_dict(self) -> dict:
        return {
            "bits_per_value": self.bits_per_value,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
        }


@total_ordering
@dataclass(eq=False)
class Chromosome:
    """
    Packed-byte genome produced by a VectorCodec.

    The bytes are opaque to everything except the codec that produced them.
    Equality and ordering compare the raw bytes only; the codec configuration
    is not part of a chromosome's identity.

    Attributes:
        genes: Packed genome bytes, mutated in place by genetic operators
    """
    genes: bytearray = field(default_factory=bytearray)

    def __post_init__(self):
        """Take a private copy of the genome bytes."""
        self.genes = bytearray(self.genes)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Chromosome":
        return cls(bytearray(data))

    @classmethod
    def from_hex(cls, text: str) -> "Chromosome":
        """
        Create a chromosome from a hex string.

        Raises:
            FormatError: If the text is not valid hex
        """
        try:
            return cls(bytearray.fromhex(text))
        except (TypeError, ValueError) as e:
            raise FormatError(f"Invalid hex genome: {e}")

    def new_prototype(self) -> "Chromosome":
        """
        Create an empty chromosome of the same concrete class.

        Used by operator code that needs a blank, compatible chromosome
        without knowing which subclass it was given.

        Returns:
            New empty chromosome
        """
        return type(self)()

    def copy(self) -> "Chromosome":
        """
        Create a deep copy of this chromosome.

        Returns:
            New chromosome of the same class with its own copy of the bytes
        """
        duplicate = self.new_prototype()
        duplicate.genes = bytearray(self.genes)
        return duplicate

    @property
    def is_prototype(self) -> bool:
        """True while the chromosome holds no genome bytes."""
        return not self.genes

    @property
    def bit_count(self) -> int:
        return len(self.genes) * 8

    def to_bytes(self) -> bytes:
        return bytes(self.genes)

    def to_hex(self) -> str:
        return self.genes.hex()

    def _locate(self, position: int) -> tuple[int, int]:
        # bit 0 is the most significant bit of byte 0
        if not 0 <= position < self.bit_count:
            raise IndexError(f"Bit position {position} out of range [0, {self.bit_count})")
        return position // 8, 7 - position % 8

    def get_bit(self, position: int) -> int:
        """
        Read one bit of the genome.

        Args:
            position: Bit index, MSB-first across the byte sequence

        Returns:
            0 or 1
        """
        byte_idx, shift = self._locate(position)
        return (self.genes[byte_idx] >> shift) & 1

    def set_bit(self, position: int, value: int) -> None:
        byte_idx, shift = self._locate(position)
        if value:
            self.genes[byte_idx] |= 1 << shift
        else:
            self.genes[byte_idx] &= ~(1 << shift) & 0xFF

    def flip_bit(self, position: int) -> None:
        """Invert one bit of the genome in place."""
        byte_idx, shift = self._locate(position)
        self.genes[byte_idx] ^= 1 << shift

    def __eq__(self, other) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.genes == other.genes

    def __lt__(self, other) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.genes < other.genes

    def __len__(self) -> int:
        """Number of bytes in the genome."""
        return len(self.genes)

    def __bytes__(self) -> bytes:
        return self.to_bytes()
