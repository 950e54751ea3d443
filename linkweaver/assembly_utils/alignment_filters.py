#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Alignment Filters: stateless checks applied to every alignment record:
barcode validation, proper-pair flag check, and percent identity from the
CIGAR operations and NM edit distance.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Iterable, Optional, Tuple

import pysam

# Mapped, paired, properly oriented first/second mates (forward/reverse)
PROPER_PAIR_FLAGS = frozenset({99, 163, 83, 147})

# CIGAR operations (M, I, =, X) that count toward aligned length
QUERY_ALIGNED_OPS = frozenset({pysam.CMATCH, pysam.CINS, pysam.CEQUAL, pysam.CDIFF})

NUCLEOTIDES = frozenset('ATGC')


def is_valid_barcode(token: str) -> bool:
    """
    Check that a barcode contains only A/T/G/C (case-insensitive).

    An empty token passes this check; callers must reject it separately.
    """
    return all(c in NUCLEOTIDES for c in token.upper())


def extract_barcode(read_name: str) -> str:
    """
    Pull the barcode from a read name of the form `<read>_<barcode>`.

    Returns:
        The text after the first underscore if it is a valid barcode,
        otherwise an empty string.
    """
    _, sep, candidate = read_name.partition('_')
    if not sep:
        return ''
    return candidate if is_valid_barcode(candidate) else ''


def is_proper_pair_flag(flag: int) -> bool:
    """True iff the SAM flag is one of the four accepted proper-pair values."""
    return flag in PROPER_PAIR_FLAGS


def aligned_query_length(cigartuples: Optional[Iterable[Tuple[int, int]]]) -> int:
    """Sum the lengths of M, I, = and X operations in pysam CIGAR tuples."""
    if not cigartuples:
        return 0
    return sum(length for op, length in cigartuples if op in QUERY_ALIGNED_OPS)


def percent_identity(
    cigartuples: Optional[Iterable[Tuple[int, int]]],
    edit_distance: int,
    sequence: str
) -> float:
    """
    Percent sequence identity of an aligned read.

    Computed as 100 * (aligned query length - edit distance) / read length.
    The value can fall below zero when the edit distance exceeds the aligned
    length; such reads simply fail any identity threshold.

    Args:
        cigartuples: CIGAR as (operation, length) pairs
        edit_distance: NM tag value
        sequence: Read sequence

    Returns:
        Identity percentage, or 0.0 when nothing aligned or the read is empty
    """
    qalen = aligned_query_length(cigartuples)
    if qalen == 0 or not sequence:
        return 0.0
    return 100.0 * (qalen - edit_distance) / len(sequence)


__all__ = [
    'PROPER_PAIR_FLAGS',
    'is_valid_barcode',
    'extract_barcode',
    'is_proper_pair_flag',
    'aligned_query_length',
    'percent_identity',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
