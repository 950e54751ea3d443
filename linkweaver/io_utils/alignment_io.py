#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Alignment I/O: record streaming from SAM, BAM and CRAM files through pysam.

Records are yielded in file order; the linker relies on the two mates of a
read pair being adjacent (name-sorted input).

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Tuple, Union

import pysam

logger = logging.getLogger(__name__)

UNMAPPED_REFERENCE = '*'
ALIGNMENT_MODES = {'.bam': 'rb', '.cram': 'rc'}


@dataclass
class AlignmentRecord:
    """
    The fields of one alignment that the linker uses.

    Attributes:
        read_name: Query name, expected as `<read>_<barcode>`
        flag: SAM bitwise flag
        reference_name: Scaffold the read aligned to ('*' if unmapped)
        position: 1-based leftmost mapping position
        mapq: Mapping quality
        cigar: CIGAR string ('*' if unavailable)
        cigartuples: CIGAR as (operation, length) pairs, pysam op codes
        sequence: Read sequence
        edit_distance: NM tag value (0 if absent)
    """
    read_name: str
    flag: int
    reference_name: str
    position: int
    mapq: int
    cigar: str = '*'
    cigartuples: List[Tuple[int, int]] = field(default_factory=list)
    sequence: str = ''
    edit_distance: int = 0


def record_from_segment(segment: pysam.AlignedSegment) -> AlignmentRecord:
    """Build an AlignmentRecord from a pysam segment."""
    return AlignmentRecord(
        read_name=segment.query_name,
        flag=segment.flag,
        reference_name=segment.reference_name or UNMAPPED_REFERENCE,
        position=segment.reference_start + 1,
        mapq=segment.mapping_quality,
        cigar=segment.cigarstring or '*',
        cigartuples=list(segment.cigartuples or []),
        sequence=segment.query_sequence or '',
        edit_distance=segment.get_tag('NM') if segment.has_tag('NM') else 0,
    )


def alignment_mode(filepath: Union[str, Path]) -> str:
    """pysam open mode for a file: 'rb' for BAM, 'rc' for CRAM, else 'r' (SAM, SAM.gz)."""
    return ALIGNMENT_MODES.get(Path(filepath).suffix.lower(), 'r')


def read_alignments(filepath: Union[str, Path]) -> Iterator[AlignmentRecord]:
    """
    Stream alignment records from a SAM, BAM or CRAM file.

    Args:
        filepath: Alignment file; the open mode is chosen by suffix

    Yields:
        AlignmentRecord objects in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If pysam finds no alignment data in the file
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Alignment file not found: {filepath}")

    mode = alignment_mode(filepath)
    logger.debug(f"Reading alignments with pysam (mode '{mode}'): {filepath}")
    return _iter_records(filepath, mode)


def _iter_records(filepath: Path, mode: str) -> Iterator[AlignmentRecord]:
    with pysam.AlignmentFile(str(filepath), mode, check_sq=False) as samfile:
        for segment in samfile.fetch(until_eof=True):
            yield record_from_segment(segment)


__all__ = [
    'AlignmentRecord',
    'record_from_segment',
    'alignment_mode',
    'read_alignments',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
