"""
Uniform quantization of bounded real values.

Maps values in [lo, hi] onto the 2^bits integer levels 0..2^bits-1 and back.
Values outside the bounds are clamped, never rejected. Bit-width validation
belongs to CodecConfig; these functions assume a valid width.
"""

from typing import Union
import numpy as np


ArrayLike = Union[float, int, np.ndarray, list, tuple]


def quantization_step(lo: float, hi: float, bits: int) -> float:
    """Largest distance between a clamped value and its reconstruction."""
    return (hi - lo) / ((1 << bits) - 1)


def clamp(values: ArrayLike, lo: float, hi: float) -> np.ndarray:
    """
    Clamp values to [lo, hi].

    Args:
        values: Scalar or array of reals
        lo: Lower bound
        hi: Upper bound

    Returns:
        float64 array of clamped values

    Raises:
        ValueError: If any value is NaN
    """
    values = np.asarray(values, dtype=np.float64)
    if np.isnan(values).any():
        raise ValueError("Cannot quantize NaN values")
    return np.clip(values, lo, hi)


def quantize(values: ArrayLike, lo: float, hi: float, bits: int) -> Union[int, np.ndarray]:
    """
    Map real values to quantization indices.

    index = round((clamp(v) - lo) / (hi - lo) * (2^bits - 1)), rounding half up.

    Args:
        values: Scalar or array of reals
        lo: Lower bound
        hi: Upper bound
        bits: Bits per value

    Returns:
        int for scalar input, uint64 array otherwise
    """
    levels = (1 << bits) - 1
    clamped = clamp(values, lo, hi)

    scaled = (clamped - lo) / (hi - lo) * levels
    indices = np.floor(scaled + 0.5)
    # float rounding can push the top level a hair over
    indices = np.clip(indices, 0, levels).astype(np.uint64)

    if indices.ndim == 0:
        return int(indices)
    return indices


def dequantize(indices: ArrayLike, lo: float, hi: float, bits: int) -> Union[float, np.ndarray]:
    """
    Map quantization indices back to real values.

    value = lo + index / (2^bits - 1) * (hi - lo). Index 0 yields lo and the
    top index yields hi exactly.

    Args:
        indices: Scalar or array of indices in [0, 2^bits - 1]
        lo: Lower bound
        hi: Upper bound
        bits: Bits per value

    Returns:
        float for scalar input, float64 array otherwise
    """
    levels = (1 << bits) - 1
    indices = np.asarray(indices, dtype=np.uint64)
    if (indices > levels).any():
        raise ValueError(f"Index out of range for {bits} bits")

    fractions = indices.astype(np.float64) / levels
    values = lo + fractions * (hi - lo)
    values = np.where(indices == levels, hi, values)

    if values.ndim == 0:
        return float(values)
    return values
