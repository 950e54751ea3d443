#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

BarcodeLinker: paired-record state machine that turns a name-sorted stream of
alignment records into per-barcode hit counts on scaffold ends.

For each read pair whose mates are both properly paired, uniquely mapped,
above the identity threshold and on the same scaffold, the averaged mate
position is assigned to the scaffold head or tail region and counted under
the pair's barcode.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from .data_structures import BarcodeMultiplicity, IndexMap, ScaffoldEnd
from ..assembly_utils.alignment_filters import (
    extract_barcode,
    is_proper_pair_flag,
    percent_identity,
)
from ..config.schema import LinkParams
from ..io_utils.alignment_io import AlignmentRecord, read_alignments

logger = logging.getLogger(__name__)

UNPAIRED_WARNING_INTERVAL = 1_000_000
PROGRESS_INTERVAL = 10_000_000
UNMAPPED_REFERENCE = '*'


# ============================================================================
#                         DATA STRUCTURES
# ============================================================================

@dataclass
class HeldMate:
    """First mate of a read pair, waiting for its partner."""
    read_name: str
    identity: float
    flag: int
    mapq: int
    reference_name: str
    position: int


@dataclass
class PendingPair:
    """A qualified read pair waiting to be added to the index map."""
    barcode: str
    reference_name: str
    position: int


@dataclass
class LinkerStats:
    """
    Counters collected while linking one or more alignment sources.

    Attributes:
        records: Alignment records consumed
        unpaired: Records whose predecessor had no matching mate
        duplicates: Extra records sharing a name with a completed pair
        pairs_qualified: Pairs passing all per-mate filters
        head_hits: Pairs counted toward a scaffold head
        tail_hits: Pairs counted toward a scaffold tail
        ambiguous: Pairs landing between the head and tail regions
        missing_scaffold: Pairs on a scaffold absent from the size index
        short_scaffold: Pairs on a scaffold below the minimum size
    """
    records: int = 0
    unpaired: int = 0
    duplicates: int = 0
    pairs_qualified: int = 0
    head_hits: int = 0
    tail_hits: int = 0
    ambiguous: int = 0
    missing_scaffold: int = 0
    short_scaffold: int = 0

    def merge(self, other: 'LinkerStats'):
        for key, value in asdict(other).items():
            setattr(self, key, getattr(self, key) + value)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


# ============================================================================
#                         PAIRED RECORD LINKER
# ============================================================================

class PairedRecordLinker:
    """
    State machine over one name-sorted alignment source.

    Two states: awaiting a first mate, or holding one. Mates of a pair must be
    adjacent; a held mate followed by a differently named record is counted as
    unpaired and the new record becomes the first mate. A third record with
    the name of a just-completed pair discards that pair.

    A qualified pair is only added when the next read name begins (or when
    `finish` is called), so that extra records for the same name can still
    cancel it.
    """

    def __init__(
        self,
        scaffold_sizes: Dict[str, int],
        params: LinkParams,
        index_map: Optional[IndexMap] = None,
        multiplicity: Optional[BarcodeMultiplicity] = None,
        source_name: str = '<stream>'
    ):
        """
        Initialize linker.

        Args:
            scaffold_sizes: Dict[scaffold_id] -> length
            params: Run parameters
            index_map: Shared IndexMap to update (new one if None)
            multiplicity: Shared barcode multiplicity counts (new one if None)
            source_name: Label used in log messages
        """
        self.scaffold_sizes = scaffold_sizes
        self.params = params
        self.index_map = index_map if index_map is not None else IndexMap()
        self.multiplicity = multiplicity if multiplicity is not None else {}
        self.source_name = source_name
        self.stats = LinkerStats()
        self.logger = logging.getLogger(f"{__name__}.PairedRecordLinker")

        self._held: Optional[HeldMate] = None
        self._last_name: Optional[str] = None
        self._pending: Optional[PendingPair] = None

    @property
    def holding_first_mate(self) -> bool:
        return self._held is not None

    # ------------------------------------------------------------------
    # Record processing
    # ------------------------------------------------------------------

    def process(self, record: AlignmentRecord):
        """Consume one alignment record."""
        self.stats.records += 1

        barcode = extract_barcode(record.read_name)
        if barcode:
            self.multiplicity[barcode] = self.multiplicity.get(barcode, 0) + 1

        identity = percent_identity(record.cigartuples, record.edit_distance, record.sequence)

        if self._held is not None and record.read_name != self._held.read_name:
            self._report_unpaired(self._held.read_name, record.read_name)
            self._held = None

        if self._held is None:
            if record.read_name != self._last_name:
                self._flush_pending()
                self._held = HeldMate(
                    read_name=record.read_name,
                    identity=identity,
                    flag=record.flag,
                    mapq=record.mapq,
                    reference_name=record.reference_name,
                    position=record.position,
                )
                self._last_name = record.read_name
            else:
                # More than two records for one read name
                self.stats.duplicates += 1
                self._pending = None
        else:
            self._pair_with_held(record, barcode, identity)
            self._held = None

        if self.stats.records % PROGRESS_INTERVAL == 0:
            self.logger.debug(f"{self.source_name}: on record {self.stats.records:,}")

    def process_all(self, records: Iterable[AlignmentRecord]) -> LinkerStats:
        """Consume a whole source and flush the final pair."""
        for record in records:
            self.process(record)
        return self.finish()

    def finish(self) -> LinkerStats:
        """
        Flush the pair still pending at the end of the source.

        A first mate still held at this point has no partner and is dropped.
        """
        self._flush_pending()
        if self._held is not None:
            self.logger.debug(
                f"{self.source_name}: last record {self._held.read_name} has no mate"
            )
            self._held = None

        if self.stats.unpaired > 0:
            self.logger.warning(
                f"Skipped {self.stats.unpaired:,} unpaired reads in {self.source_name}. "
                "Alignment file should be sorted in order of read name."
            )
        return self.stats

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _report_unpaired(self, previous: str, current: str):
        """
        Count a held mate whose partner never followed it.

        The held mate is dropped, never paired across the gap with a later
        record. A warning names both reads on the first event and the running
        total is logged every UNPAIRED_WARNING_INTERVAL events.
        """
        if self.stats.unpaired == 0:
            self.logger.warning(
                "Skipping an unpaired read. Alignment file should be sorted in order "
                f"of read name. Prev read: {previous}; Curr read: {current}"
            )
        self.stats.unpaired += 1
        if self.stats.unpaired % UNPAIRED_WARNING_INTERVAL == 0:
            self.logger.warning(f"Skipped {self.stats.unpaired:,} unpaired reads.")

    def _mate_passes(self, flag: int, mapq: int, identity: float) -> bool:
        return (
            is_proper_pair_flag(flag)
            and mapq != 0
            and mapq >= self.params.min_mapq
            and identity >= self.params.min_identity
        )

    def _pair_with_held(self, record: AlignmentRecord, barcode: str, identity: float):
        held = self._held
        if not record.sequence:
            return
        if not (self._mate_passes(record.flag, record.mapq, identity)
                and self._mate_passes(held.flag, held.mapq, held.identity)):
            return
        reference = record.reference_name
        if held.reference_name != reference or reference in ('', UNMAPPED_REFERENCE):
            return
        if not barcode:
            return

        self.stats.pairs_qualified += 1
        self._pending = PendingPair(
            barcode=barcode,
            reference_name=reference,
            position=(held.position + record.position) // 2,
        )

    def _flush_pending(self):
        pending = self._pending
        self._pending = None
        if pending is None:
            return

        end = self.assign_end(pending.reference_name, pending.position)
        if end is not None:
            self.index_map.add_hit(pending.barcode, pending.reference_name, end)

    def assign_end(self, scaffold_id: str, position: int) -> Optional[ScaffoldEnd]:
        """
        Place a pair position in the head or tail region of a scaffold.

        Returns:
            ScaffoldEnd, or None when the scaffold is unknown, too short, or the
            position falls between the two end regions.
        """
        size = self.scaffold_sizes.get(scaffold_id)
        if size is None:
            self.stats.missing_scaffold += 1
            return None
        if size < self.params.min_size:
            self.stats.short_scaffold += 1
            return None

        cutoff = end_cutoff(size, self.params.end_length)
        if position <= cutoff:
            self.stats.head_hits += 1
            return ScaffoldEnd.HEAD
        if position > size - cutoff:
            self.stats.tail_hits += 1
            return ScaffoldEnd.TAIL

        self.stats.ambiguous += 1
        return None


def end_cutoff(size: int, end_length: int) -> int:
    """
    Length of the head/tail regions for a scaffold.

    Scaffolds no longer than twice the end length (or any scaffold when the
    end length is 0) are split in half.
    """
    if end_length == 0 or size <= end_length * 2:
        return size // 2
    return end_length


# ============================================================================
#                         FILE-LEVEL LINKING
# ============================================================================

def link_alignment_file(
    alignment_file: Union[str, Path],
    scaffold_sizes: Dict[str, int],
    params: LinkParams,
    index_map: Optional[IndexMap] = None,
    multiplicity: Optional[BarcodeMultiplicity] = None
) -> Tuple[IndexMap, BarcodeMultiplicity, LinkerStats]:
    """
    Run the paired-record state machine over one alignment file.

    Args:
        alignment_file: Name-sorted SAM/BAM/CRAM file
        scaffold_sizes: Dict[scaffold_id] -> length
        params: Run parameters
        index_map: IndexMap to update (new one if None)
        multiplicity: Multiplicity counts to update (new dict if None)

    Returns:
        (index_map, multiplicity, stats)
    """
    logger.debug(f"Reading alignments from {alignment_file}")
    linker = PairedRecordLinker(
        scaffold_sizes,
        params,
        index_map=index_map,
        multiplicity=multiplicity,
        source_name=str(alignment_file),
    )
    stats = linker.process_all(read_alignments(alignment_file))
    return linker.index_map, linker.multiplicity, stats


__all__ = [
    'PairedRecordLinker',
    'LinkerStats',
    'HeldMate',
    'PendingPair',
    'end_cutoff',
    'link_alignment_file',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
