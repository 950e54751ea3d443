#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for LinkWeaver.

Consolidated module containing:
- File handling with automatic gzip detection
- Scaffold size loading from FASTA/FASTQ (Bio.SeqIO) or a samtools .fai index
- File-of-filenames parsing for alignment inputs
- Up-front input validation so that no partial run is started
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import logging
from pathlib import Path
from typing import Dict, Iterable, List, TextIO, Union

from Bio import SeqIO

logger = logging.getLogger(__name__)


# =============================================================================
# SECTION 2: FILE HANDLING
# =============================================================================

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    filepath = Path(filepath)
    return filepath.suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        File handle
    """
    filepath = Path(filepath)

    if is_gzipped(filepath):
        if 'r' in mode:
            return gzip.open(filepath, 'rt')
        else:
            return gzip.open(filepath, 'wt')
    else:
        return open(filepath, mode)


def check_input_files(paths: Iterable[Union[str, Path]]):
    """
    Verify that every input exists and can be opened before any processing
    starts.

    Raises:
        FileNotFoundError: Naming the first missing input
        OSError: If an existing input cannot be opened for reading
    """
    for path in paths:
        if not Path(path).is_file():
            raise FileNotFoundError(f"Could not open {path}")
        try:
            with open(path, 'rb'):
                pass
        except OSError as e:
            raise OSError(f"Could not open {path}: {e.strerror or e}") from e


# =============================================================================
# SECTION 3: SCAFFOLD SIZES
# =============================================================================

def _sequence_format(filepath: Path) -> str:
    """Infer 'fasta' or 'fastq' from the suffix, falling back to the first byte."""
    suffixes = [s.lower() for s in filepath.suffixes if s.lower() not in ('.gz', '.gzip')]
    if suffixes and suffixes[-1] in ('.fq', '.fastq'):
        return 'fastq'
    if suffixes and suffixes[-1] in ('.fa', '.fasta', '.fna', '.fas'):
        return 'fasta'

    with open_file(filepath, 'r') as handle:
        first = handle.read(1)
    return 'fastq' if first == '@' else 'fasta'


def read_scaffold_sizes_from_fai(filepath: Union[str, Path]) -> Dict[str, int]:
    """
    Load scaffold lengths from a samtools faidx index.

    Args:
        filepath: Path to a .fai file (name and length in the first two columns)

    Returns:
        Dict[scaffold_id] -> length
    """
    sizes: Dict[str, int] = {}
    with open(filepath, 'r') as f:
        for line_no, line in enumerate(f, 1):
            parts = line.rstrip('\n').split('\t')
            if len(parts) < 2 or not parts[0]:
                continue
            try:
                sizes[parts[0]] = int(parts[1])
            except ValueError as e:
                raise ValueError(f"FAI line {line_no}: invalid length '{parts[1]}'") from e
    return sizes


def read_scaffold_sizes(filepath: Union[str, Path]) -> Dict[str, int]:
    """
    Build the scaffold size index from a sequence collection.

    Args:
        filepath: FASTA/FASTQ file (can be gzipped) or a .fai index

    Returns:
        Dict[scaffold_id] -> sequence length

    Raises:
        FileNotFoundError: If the file does not exist
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Sequence file not found: {filepath}")

    if filepath.suffix == '.fai':
        sizes = read_scaffold_sizes_from_fai(filepath)
    else:
        sizes = {}
        with open_file(filepath, 'r') as handle:
            for record in SeqIO.parse(handle, _sequence_format(filepath)):
                sizes[record.id] = len(record.seq)

    logger.debug(f"Saw {len(sizes):,} sequences.")
    return sizes


# =============================================================================
# SECTION 4: ALIGNMENT FILE LISTS
# =============================================================================

def read_file_of_filenames(filepath: Union[str, Path]) -> List[Path]:
    """
    Read a file-of-filenames listing alignment files, one per line.

    Blank lines and '#' comments are ignored. Relative entries are resolved
    against the current working directory, as given.

    Raises:
        FileNotFoundError: If the list itself cannot be found
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Could not open {filepath}")

    paths = []
    with open(filepath, 'r') as f:
        for line in f:
            name = line.strip()
            if not name or name.startswith('#'):
                continue
            paths.append(Path(name))
    return paths


__all__ = [
    'is_gzipped',
    'open_file',
    'check_input_files',
    'read_scaffold_sizes',
    'read_scaffold_sizes_from_fai',
    'read_file_of_filenames',
]
