"""
Bit mappers: quantization index <-> fixed-width bit rows.

Two variants share one signature so a codec can pick either at construction:

- natural: plain big-endian binary
- gray: reflected binary code, consecutive indices differ in exactly one bit

Indices are 1-D integer arrays; bit rows are uint8 arrays of shape (n, bits),
most significant bit first.
"""

from typing import Callable, Dict, Tuple
import numpy as np

from .data_models import MappingVariant


def _shifts(bits: int) -> np.ndarray:
    return np.arange(bits - 1, -1, -1, dtype=np.uint64)


def natural_to_bits(indices: np.ndarray, bits: int) -> np.ndarray:
    """
    Write indices as big-endian binary.

    Args:
        indices: 1-D array of indices, each fitting in `bits` bits
        bits: Width of each row

    Returns:
        uint8 array of shape (len(indices), bits)
    """
    indices = np.asarray(indices, dtype=np.uint64).reshape(-1)
    rows = (indices[:, None] >> _shifts(bits)) & np.uint64(1)
    return rows.astype(np.uint8)


def natural_from_bits(rows: np.ndarray) -> np.ndarray:
    """
    Parse big-endian binary rows back into indices.

    Args:
        rows: Array of shape (n, bits) holding 0/1 values

    Returns:
        uint64 array of n indices
    """
    rows = np.asarray(rows, dtype=np.uint64)
    if rows.ndim != 2:
        raise ValueError(f"Expected a 2-D array of bit rows, got shape {rows.shape}")
    weights = np.uint64(1) << _shifts(rows.shape[1])
    return (rows * weights).sum(axis=1, dtype=np.uint64)


def gray_encode(indices: np.ndarray) -> np.ndarray:
    """Reflected binary code of each index: i ^ (i >> 1)."""
    indices = np.asarray(indices, dtype=np.uint64)
    return indices ^ (indices >> np.uint64(1))


def gray_to_bits(indices: np.ndarray, bits: int) -> np.ndarray:
    """Gray-code the indices, then write them as big-endian binary."""
    return natural_to_bits(gray_encode(indices), bits)


def gray_from_bits(rows: np.ndarray) -> np.ndarray:
    """
    Parse Gray-coded rows back into indices.

    Each decoded bit is the XOR of all Gray bits from the most significant one
    down to it, i.e. index[msb] = g[msb], index[i] = index[i+1] ^ g[i].

    Args:
        rows: Array of shape (n, bits) holding Gray-coded 0/1 values

    Returns:
        uint64 array of n indices
    """
    rows = np.asarray(rows, dtype=np.uint8)
    if rows.ndim != 2:
        raise ValueError(f"Expected a 2-D array of bit rows, got shape {rows.shape}")
    binary = np.bitwise_xor.accumulate(rows, axis=1)
    return natural_from_bits(binary)


BitMapper = Tuple[Callable[[np.ndarray, int], np.ndarray], Callable[[np.ndarray], np.ndarray]]

BIT_MAPPERS: Dict[MappingVariant, BitMapper] = {
    MappingVariant.NATURAL: (natural_to_bits, natural_from_bits),
    MappingVariant.GRAY: (gray_to_bits, gray_from_bits),
}


def get_bit_mapper(variant: MappingVariant) -> BitMapper:
    """
    Look up the (to_bits, from_bits) pair for a mapping variant.

    Args:
        variant: Mapping variant or its name

    Returns:
        Tuple of (to_bits, from_bits) functions
    """
    return BIT_MAPPERS[MappingVariant.parse(variant)]


def hamming_distance(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Number of differing positions between matching bit rows."""
    return (np.asarray(a) != np.asarray(b)).sum(axis=-1)
