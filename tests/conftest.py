#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import pytest
from pathlib import Path
import tempfile
import shutil

import pysam

from linkweaver.config.schema import LinkParams
from linkweaver.io_utils.alignment_io import AlignmentRecord

READ_LENGTH = 100
CIGAR_OPS = "MIDNSHP=XB"


def _cigar_string(cigartuples):
    return "".join(f"{length}{CIGAR_OPS[op]}" for op, length in cigartuples) or "*"


def _record(name, flag, ref, pos, mapq=60, cigartuples=None,
            seq="A" * READ_LENGTH, nm=0):
    if cigartuples is None:
        cigartuples = [(pysam.CMATCH, READ_LENGTH)]
    return AlignmentRecord(
        read_name=name,
        flag=flag,
        reference_name=ref,
        position=pos,
        mapq=mapq,
        cigar=_cigar_string(cigartuples),
        cigartuples=list(cigartuples),
        sequence=seq,
        edit_distance=nm,
    )


def _pair(name, ref, pos1, pos2=None, ref2=None, flags=(99, 147), **kwargs):
    """Two adjacent mate records for one read pair."""
    pos2 = pos1 if pos2 is None else pos2
    ref2 = ref if ref2 is None else ref2
    return [
        _record(name, flags[0], ref, pos1, **kwargs),
        _record(name, flags[1], ref2, pos2, **kwargs),
    ]


def _sam_line(record: AlignmentRecord) -> str:
    fields = [
        record.read_name, str(record.flag), record.reference_name, str(record.position),
        str(record.mapq), record.cigar, "=", str(record.position), "0",
        record.sequence or "*", "I" * len(record.sequence) or "*",
        f"NM:i:{record.edit_distance}",
    ]
    return "\t".join(fields)


def _sam_header(sizes):
    return "@HD\tVN:1.6\tSO:queryname\n" + "".join(
        f"@SQ\tSN:{name}\tLN:{length}\n" for name, length in sizes.items()
    )


def _linked_records(barcodes, placements, pairs_per_scaffold=8, read_offset=0):
    """
    Name-sorted records where every barcode hits each scaffold at one position.

    Args:
        barcodes: Barcode strings
        placements: List of (scaffold_id, position)
        pairs_per_scaffold: Read pairs per barcode per scaffold
    """
    records = []
    read_no = read_offset
    for barcode in barcodes:
        for scaffold_id, position in placements:
            for _ in range(pairs_per_scaffold):
                read_no += 1
                records.extend(_pair(f"read{read_no:06d}_{barcode}", scaffold_id, position))
    return records


SCENARIO_BARCODES = [
    "ACGTACGT", "ACGTACGA", "ACGTACGC", "ACGTACGG",
    "ACGTACTT", "ACGTACTA", "ACGTACTC", "ACGTACTG",
]


@pytest.fixture
def make_record():
    """Factory for single AlignmentRecord objects."""
    return _record


@pytest.fixture
def make_pair():
    """Factory for the two mate records of a read pair."""
    return _pair


@pytest.fixture
def sam_line():
    """Render an AlignmentRecord as a SAM line."""
    return _sam_line


@pytest.fixture
def sam_header():
    """Render @HD and @SQ header lines for a scaffold size index."""
    return _sam_header


@pytest.fixture
def linked_records():
    """Factory for barcoded read pairs placed on scaffolds."""
    return _linked_records


@pytest.fixture
def scenario_params():
    """Parameters of the two-scaffold head-to-head scenario."""
    return LinkParams(
        min_identity=98,
        min_reads=5,
        min_links=0,
        min_size=500,
        min_multiplicity=1,
        max_multiplicity=100,
        max_degree=0,
        end_length=0,
        error_percent=0.05,
    )


@pytest.fixture
def scaffold_sizes():
    return {"S1": 1000, "S2": 1000, "S3": 1000, "tiny": 200}


@pytest.fixture
def linked_dataset(tmp_path):
    """
    Write FASTA, SAM and file-of-filenames inputs for the head-to-head scenario.

    Eight barcodes each carry eight read pairs in the head of S1 and eight
    in the head of S2.
    """
    fasta = tmp_path / "scaffolds.fa"
    fasta.write_text(
        ">S1\n" + "ACGT" * 250 + "\n"
        ">S2\n" + "TTGCA" * 200 + "\n"
        ">S3\n" + "G" * 1000 + "\n"
    )

    records = _linked_records(SCENARIO_BARCODES, [("S1", 100), ("S2", 100)])
    half = len(records) // 2
    sam_files = []
    for i, chunk in enumerate((records[:half], records[half:])):
        sam = tmp_path / f"aligned_{i}.sam"
        header = _sam_header({"S1": 1000, "S2": 1000})
        sam.write_text(header + "\n".join(_sam_line(r) for r in chunk) + "\n")
        sam_files.append(sam)

    fofn = tmp_path / "alignments.fof"
    fofn.write_text("\n".join(str(p) for p in sam_files) + "\n")

    return {"fasta": fasta, "sam_files": sam_files, "fofn": fofn, "dir": tmp_path}


@pytest.fixture
def reset_logging():
    """Drop root handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="linkweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
