"""
I/O utilities for the genome codec.

A chromosome's bytes do not describe themselves, so persisted genomes are
wrapped in an envelope that records the codec settings next to the payload:
YAML documents for single chromosomes, CSV files for batches sharing a codec.
"""

import csv
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from datetime import datetime
import yaml

from .data_models import Chromosome, ConfigurationError, FormatError
from .codec import VectorCodec
from .config import create_codec_from_config


def codec_to_dict(codec: VectorCodec) -> Dict[str, Any]:
    """Codec settings in the same shape the YAML config loader accepts."""
    data = codec.config.to_dict()
    data["mapping"] = codec.mapping.value
    if codec.vector_length is not None:
        data["vector_length"] = codec.vector_length
    return data


def chromosome_to_record(
    chromosome: Chromosome,
    codec: VectorCodec,
    length: Optional[int] = None
) -> Dict[str, Any]:
    """
    Wrap a chromosome and its codec settings into a serializable record.

    Args:
        chromosome: Chromosome to wrap
        codec: Codec that produced the chromosome
        length: Number of encoded values, when the codec has no fixed length

    Returns:
        Dictionary with "codec", "length" and "genome" (hex) entries

    Raises:
        ConfigurationError: If the value count cannot be determined
        FormatError: If the chromosome size does not fit the codec
    """
    n = codec.resolve_length(length)

    expected = codec.expected_byte_length(n)
    if len(chromosome) != expected:
        raise FormatError(f"Chromosome has {len(chromosome)} bytes, expected {expected}")

    return {
        "codec": codec_to_dict(codec),
        "length": n,
        "genome": chromosome.to_hex(),
    }


def record_to_chromosome(record: Dict[str, Any]) -> Tuple[VectorCodec, Chromosome, int]:
    """
    Rebuild codec and chromosome from a record.

    Args:
        record: Dictionary produced by chromosome_to_record

    Returns:
        Tuple of (codec, chromosome, length)

    Raises:
        FormatError: If the record is malformed or the genome size is wrong
        ConfigurationError: If the codec settings are invalid
    """
    if not isinstance(record, dict):
        raise FormatError("Chromosome record must be a mapping")
    for key in ["codec", "length", "genome"]:
        if key not in record:
            raise FormatError(f"Missing required field: '{key}'")

    codec = create_codec_from_config({"codec": record["codec"]})
    length = record["length"]
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise FormatError(f"length must be a non-negative integer, got {length!r}")

    chromosome = Chromosome.from_hex(str(record["genome"]))
    expected = codec.expected_byte_length(length)
    if len(chromosome) != expected:
        raise FormatError(f"Genome has {len(chromosome)} bytes, expected {expected}")

    return codec, chromosome, length


def save_chromosome(
    chromosome: Chromosome,
    codec: VectorCodec,
    output_path: Union[str, Path],
    length: Optional[int] = None,
    overwrite: bool = False
) -> Path:
    """
    Save a chromosome and its codec settings to a YAML file.

    Args:
        chromosome: Chromosome to save
        codec: Codec that produced the chromosome
        output_path: Path for output YAML
        length: Number of encoded values, when the codec has no fixed length
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    record = chromosome_to_record(chromosome, codec, length)
    record["saved_at"] = datetime.now().isoformat()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        yaml.safe_dump(record, f, sort_keys=False)

    return output_path


def load_chromosome(input_path: Union[str, Path]) -> Tuple[VectorCodec, Chromosome, int]:
    """
    Load a chromosome saved by save_chromosome.

    Returns:
        Tuple of (codec, chromosome, length)

    Raises:
        FileNotFoundError: If the file doesn't exist
        FormatError: If the file is not a valid chromosome record
    """
    input_path = Path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"Chromosome file not found: {input_path}")

    try:
        with open(input_path, 'r') as f:
            record = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise FormatError(f"Invalid YAML in chromosome file {input_path}: {e}")

    return record_to_chromosome(record)


def save_population_to_csv(
    chromosomes: Iterable[Chromosome],
    codec: VectorCodec,
    output_path: Union[str, Path],
    ids: Optional[List[str]] = None,
    overwrite: bool = False
) -> Path:
    """
    Save chromosomes produced by one codec to a CSV file.

    CSV format:
        id,genome
        ind_000,9f00ff
        ind_001,1a22c0
        ...

    The codec settings are written to a sidecar YAML file next to the CSV
    (same stem, ".codec.yaml" suffix).

    Args:
        chromosomes: Chromosomes to save
        codec: Codec shared by all chromosomes; must have a vector_length
        output_path: Path for output CSV
        ids: Optional identifiers, defaults to ind_000, ind_001, ...
        overwrite: If True, overwrite existing files

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
        ConfigurationError: If the codec has no vector_length
        ValueError: If ids do not match the chromosomes one-to-one
        FormatError: If a chromosome has the wrong size
    """
    output_path = Path(output_path)
    sidecar_path = _sidecar_path(output_path)

    if not overwrite:
        for path in [output_path, sidecar_path]:
            if path.exists():
                raise FileExistsError(f"Output file already exists: {path}")

    if codec.vector_length is None:
        raise ConfigurationError("Population files require a codec with a fixed vector_length")

    chromosomes = list(chromosomes)
    if ids is None:
        ids = [f"ind_{i:03d}" for i in range(len(chromosomes))]
    if len(ids) != len(chromosomes):
        raise ValueError(f"Got {len(ids)} ids for {len(chromosomes)} chromosomes")
    duplicates = sorted(chrom_id for chrom_id, count in Counter(ids).items() if count > 1)
    if duplicates:
        raise ValueError(f"Duplicate chromosome ids: {duplicates}")

    expected = codec.expected_byte_length(codec.vector_length)
    for chrom_id, chromosome in zip(ids, chromosomes):
        if len(chromosome) != expected:
            raise FormatError(
                f"Chromosome {chrom_id} has {len(chromosome)} bytes, expected {expected}"
            )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['id', 'genome'])
        for chrom_id, chromosome in zip(ids, chromosomes):
            writer.writerow([chrom_id, chromosome.to_hex()])

    with open(sidecar_path, 'w') as f:
        yaml.safe_dump({"codec": codec_to_dict(codec)}, f, sort_keys=False)

    return output_path


def load_population_from_csv(
    input_path: Union[str, Path]
) -> Tuple[VectorCodec, Dict[str, Chromosome]]:
    """
    Load chromosomes saved by save_population_to_csv.

    Returns:
        Tuple of (codec, {id: chromosome}) in file order

    Raises:
        FileNotFoundError: If the CSV or its codec sidecar doesn't exist
        FormatError: If the CSV format is invalid, an id repeats, or a genome
            has the wrong size
    """
    input_path = Path(input_path)
    sidecar_path = _sidecar_path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"CSV file not found: {input_path}")
    if not sidecar_path.exists():
        raise FileNotFoundError(f"Codec sidecar not found: {sidecar_path}")

    codec = create_codec_from_config(sidecar_path)
    if codec.vector_length is None:
        raise FormatError(f"Codec sidecar {sidecar_path} has no vector_length")
    expected = codec.expected_byte_length(codec.vector_length)

    population = {}
    with open(input_path, 'r') as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None or not all(col in reader.fieldnames for col in ['id', 'genome']):
            raise FormatError(f"Invalid CSV format in {input_path}. Expected columns: id,genome")

        for row in reader:
            chromosome = Chromosome.from_hex(row['genome'])
            if len(chromosome) != expected:
                raise FormatError(
                    f"Chromosome {row['id']} has {len(chromosome)} bytes, expected {expected}"
                )
            if row['id'] in population:
                raise FormatError(f"Duplicate chromosome id in {input_path}: {row['id']}")
            population[row['id']] = chromosome

    return codec, population


def _sidecar_path(csv_path: Path) -> Path:
    return csv_path.with_suffix(".codec.yaml")
