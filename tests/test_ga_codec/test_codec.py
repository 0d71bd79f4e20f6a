"""
Tests for the vector codec: round trips, byte layout, and error handling.
"""

import unittest
import threading
import numpy as np

from ga_codec.codec import VectorCodec
from ga_codec.data_models import (
    MIN_BITS,
    MAX_BITS,
    Chromosome,
    CodecConfig,
    ConfigurationError,
    FormatError,
    MappingVariant,
)


LOWER_BOUND = -100.0
UPPER_BOUND = 100.0
TEST_ARRAY_SIZE = 1000
OUT_OF_BOUNDS_PERC = 0.25


def _random_inputs(seed=42):
    """Inputs spread 25% beyond the bounds on each side, plus their clamped form."""
    rng = np.random.default_rng(seed)
    spread = UPPER_BOUND * (1.0 + OUT_OF_BOUNDS_PERC)
    inputs = rng.uniform(-spread, spread, size=TEST_ARRAY_SIZE)
    return inputs, np.clip(inputs, LOWER_BOUND, UPPER_BOUND)


class TestRoundTrip(unittest.TestCase):
    """Test decode(encode(v)) for every supported width and both mappings."""

    def setUp(self):
        self.inputs, self.expected = _random_inputs()

    def _check_variant(self, mapping):
        for bits in range(VectorCodec.min_bits_per_value(), VectorCodec.max_bits_per_value() + 1):
            codec = VectorCodec(bits, LOWER_BOUND, UPPER_BOUND, mapping=mapping)
            decoded = codec.decode(codec.encode(self.inputs), length=TEST_ARRAY_SIZE)

            self.assertEqual(decoded.shape, self.expected.shape)
            error = np.max(np.abs(decoded - self.expected))
            self.assertLessEqual(error, codec.quantization_step, f"bits={bits}")

    def test_natural_round_trip(self):
        """Test natural binary codec precision over all widths."""
        self._check_variant(MappingVariant.NATURAL)

    def test_gray_round_trip(self):
        """Test Gray binary codec precision over all widths."""
        self._check_variant(MappingVariant.GRAY)

    def test_boundaries_exact(self):
        """Test bounds decode exactly and out-of-bound values clamp to them."""
        for mapping in MappingVariant:
            for bits in range(MIN_BITS, MAX_BITS + 1):
                codec = VectorCodec(bits, -2.7, 13.9, mapping=mapping, vector_length=4)
                decoded = codec.decode(codec.encode([-2.7, 13.9, -1e6, 1e6]))
                self.assertEqual(decoded.tolist(), [-2.7, 13.9, -2.7, 13.9])

    def test_example_scenario(self):
        """Test the 8-bit [-100, 100] example with clamped extremes."""
        for mapping in MappingVariant:
            codec = VectorCodec(8, -100.0, 100.0, mapping=mapping, vector_length=3)
            chromosome = codec.encode([-150.0, 0.0, 150.0])
            self.assertEqual(len(chromosome), 3)

            decoded = codec.decode(chromosome)
            self.assertEqual(decoded[0], -100.0)
            self.assertEqual(decoded[2], 100.0)
            self.assertLessEqual(abs(decoded[1]), 200.0 / 255)


class TestByteLayout(unittest.TestCase):
    """Test the packed byte layout."""

    def test_packing_length(self):
        """Test encode yields ceil(n * bits / 8) bytes."""
        rng = np.random.default_rng(7)
        for bits in [1, 3, 5, 8, 11, 17, 32]:
            codec = VectorCodec(bits, 0.0, 1.0)
            for n in [0, 1, 2, 3, 7, 9, 64]:
                chromosome = codec.encode(rng.random(n))
                self.assertEqual(len(chromosome), (n * bits + 7) // 8)
                self.assertEqual(len(chromosome), codec.expected_byte_length(n))

    def test_natural_layout(self):
        """Test values are concatenated MSB-first and padded with zero bits."""
        codec = VectorCodec(3, 0.0, 7.0, mapping="natural")
        # 001 010 111 -> 00101011 1(0000000)
        self.assertEqual(codec.encode([1.0, 2.0, 7.0]).to_bytes(), bytes([0x2B, 0x80]))

    def test_gray_layout(self):
        """Test Gray codes are packed the same way."""
        codec = VectorCodec(3, 0.0, 7.0, mapping="gray")
        # gray(1)=001 gray(2)=011 gray(7)=100 -> 00101110 0(0000000)
        self.assertEqual(codec.encode([1.0, 2.0, 7.0]).to_bytes(), bytes([0x2E, 0x00]))

    def test_values_cross_byte_boundaries(self):
        """Test 12-bit values split across bytes."""
        codec = VectorCodec(12, 0.0, 4095.0)
        chromosome = codec.encode([0xABC, 0x123])
        self.assertEqual(chromosome.to_bytes(), bytes([0xAB, 0xC1, 0x23]))
        np.testing.assert_allclose(codec.decode(chromosome, length=2), [0xABC, 0x123])

    def test_padding_bits_ignored_on_decode(self):
        """Test decode reads only n * bits bits."""
        codec = VectorCodec(3, 0.0, 7.0, vector_length=3)
        chromosome = codec.encode([1.0, 2.0, 7.0])
        chromosome.genes[-1] |= 0x7F
        np.testing.assert_allclose(codec.decode(chromosome), [1.0, 2.0, 7.0])

    def test_single_bit_mutation_gray_vs_natural(self):
        """Test flipping the last Gray bit moves the value by one level."""
        gray = VectorCodec(8, 0.0, 255.0, mapping="gray", vector_length=1)
        chromosome = gray.encode([127.0])
        chromosome.flip_bit(7)
        self.assertAlmostEqual(gray.decode(chromosome)[0], 126.0)

        # 127 -> 128 needs all eight natural bits flipped
        natural = VectorCodec(8, 0.0, 255.0, mapping="natural", vector_length=1)
        a = natural.encode([127.0]).to_bytes()[0]
        b = natural.encode([128.0]).to_bytes()[0]
        self.assertEqual(bin(a ^ b).count("1"), 8)


class TestCodecConfiguration(unittest.TestCase):
    """Test codec construction and validation."""

    def test_bit_range_accessors(self):
        """Test static accessors expose the supported width range."""
        self.assertEqual(VectorCodec.min_bits_per_value(), MIN_BITS)
        self.assertEqual(VectorCodec.max_bits_per_value(), MAX_BITS)
        self.assertLess(MIN_BITS, MAX_BITS)

    def test_invalid_bits(self):
        """Test widths outside the supported range are rejected."""
        for bits in [MIN_BITS - 1, MAX_BITS + 1, -5]:
            with self.assertRaises(ConfigurationError):
                VectorCodec(bits, 0.0, 1.0)
        with self.assertRaises(ConfigurationError):
            VectorCodec(8.0, 0.0, 1.0)

    def test_invalid_bounds(self):
        """Test lower_bound must be below upper_bound."""
        with self.assertRaises(ConfigurationError):
            VectorCodec(8, 1.0, 1.0)
        with self.assertRaises(ConfigurationError):
            VectorCodec(8, 2.0, 1.0)
        with self.assertRaises(ConfigurationError):
            VectorCodec(8, float("nan"), 1.0)

    def test_invalid_mapping(self):
        """Test unknown mapping names are rejected."""
        with self.assertRaises(ConfigurationError):
            VectorCodec(8, 0.0, 1.0, mapping="johnson")

    def test_invalid_vector_length(self):
        """Test vector_length must be a non-negative integer."""
        with self.assertRaises(ConfigurationError):
            VectorCodec(8, 0.0, 1.0, vector_length=-1)

    def test_configuration_error_is_value_error(self):
        """Test configuration errors can be caught as ValueError."""
        with self.assertRaises(ValueError):
            VectorCodec(0, 0.0, 1.0)

    def test_from_config(self):
        """Test building a codec from a CodecConfig."""
        config = CodecConfig(10, -1.0, 1.0)
        codec = VectorCodec.from_config(config, mapping="gray", vector_length=5)

        self.assertEqual(codec.config, config)
        self.assertEqual(codec.mapping, MappingVariant.GRAY)
        self.assertEqual(codec.vector_length, 5)
        self.assertEqual(codec, VectorCodec(10, -1.0, 1.0, "gray", 5))
        self.assertNotEqual(codec, VectorCodec(10, -1.0, 1.0, "natural", 5))


class TestCodecErrors(unittest.TestCase):
    """Test format errors raised by encode and decode."""

    def setUp(self):
        self.codec = VectorCodec(5, 0.0, 1.0, vector_length=4)

    def test_decode_length_mismatch(self):
        """Test a wrongly sized chromosome is rejected."""
        chromosome = self.codec.encode([0.1, 0.2, 0.3, 0.4])
        chromosome.genes.append(0)
        with self.assertRaises(FormatError):
            self.codec.decode(chromosome)

        with self.assertRaises(FormatError):
            self.codec.decode(Chromosome())

    def test_decode_with_other_length(self):
        """Test an explicit length overrides the configured one."""
        codec = VectorCodec(3, 0.0, 7.0, vector_length=3)
        chromosome = codec.encode([1.0, 2.0, 7.0])
        # 9 bits and 15 bits both pack into 2 bytes, 18 bits do not
        self.assertEqual(len(codec.decode(chromosome, length=5)), 5)
        with self.assertRaises(FormatError):
            codec.decode(chromosome, length=6)

    def test_decode_rejects_non_integer_length(self):
        """Test lengths must be non-negative integers."""
        chromosome = self.codec.encode([0.1, 0.2, 0.3, 0.4])
        for length in [4.0, True, -1, "4"]:
            with self.assertRaises(ConfigurationError, msg=repr(length)):
                self.codec.decode(chromosome, length=length)
        self.assertEqual(len(self.codec.decode(chromosome, length=np.int64(4))), 4)

    def test_decode_without_length(self):
        """Test decode needs a length when none is configured."""
        codec = VectorCodec(5, 0.0, 1.0)
        chromosome = codec.encode([0.5])
        with self.assertRaises(ConfigurationError):
            codec.decode(chromosome)

    def test_encode_length_mismatch(self):
        """Test encode enforces the configured vector length."""
        with self.assertRaises(FormatError):
            self.codec.encode([0.1, 0.2])

    def test_encode_rejects_matrices(self):
        """Test encode accepts only 1-D vectors."""
        with self.assertRaises(FormatError):
            VectorCodec(5, 0.0, 1.0).encode([[0.1, 0.2], [0.3, 0.4]])

    def test_encode_rejects_nan(self):
        """Test NaN values cannot be encoded."""
        with self.assertRaises(ValueError):
            self.codec.encode([0.1, float("nan"), 0.3, 0.4])


class TestConcurrentUse(unittest.TestCase):
    """Test one codec shared between threads."""

    def test_parallel_encode_decode(self):
        """Test concurrent round trips agree with sequential ones."""
        codec = VectorCodec(13, -1.0, 1.0, mapping="gray", vector_length=200)
        rng = np.random.default_rng(3)
        vectors = [rng.uniform(-1.5, 1.5, size=200) for _ in range(8)]
        expected = [codec.decode(codec.encode(v)) for v in vectors]
        results = [None] * len(vectors)

        def worker(i):
            for _ in range(20):
                results[i] = codec.decode(codec.encode(vectors[i]))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(vectors))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for got, want in zip(results, expected):
            np.testing.assert_array_equal(got, want)


if __name__ == "__main__":
    unittest.main()
