#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

PairAggregator: reduces barcode hit counts to orientation counts per
scaffold pair.

A barcode within the multiplicity range links every pair of scaffolds it
touches, provided each scaffold has a significant head/tail bias under that
barcode. Each such barcode adds one count to the orientation (HH, HT, TH,
TT) given by the two biases.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import Dict, List, Optional, Tuple

from .data_structures import BarcodeMultiplicity, IndexMap, LinkOrientation, PairMap
from ..assembly_utils.link_statistics import head_or_tail
from ..config.schema import LinkParams

logger = logging.getLogger(__name__)


def barcode_in_range(barcode: str, multiplicity: BarcodeMultiplicity,
                     params: LinkParams) -> bool:
    """Check a barcode's total multiplicity against the configured range."""
    count = multiplicity.get(barcode, 0)
    return params.min_multiplicity <= count <= params.max_multiplicity


def classify_scaffold_ends(
    index_map: IndexMap,
    barcode: str,
    params: LinkParams
) -> List[Tuple[str, bool]]:
    """
    Head/tail calls for every scaffold under one barcode.

    Returns:
        Sorted list of (scaffold_id, is_head) for scaffolds with a
        significant call; the rest are omitted.
    """
    calls = []
    for scaffold_id in index_map.scaffolds(barcode):
        head, tail = index_map.head_tail_counts(barcode, scaffold_id)
        significant, is_head = head_or_tail(
            head, tail, params.min_reads, params.error_percent
        )
        if significant:
            calls.append((scaffold_id, is_head))
    return calls


def pair_scaffolds(
    index_map: IndexMap,
    multiplicity: BarcodeMultiplicity,
    params: LinkParams,
    pair_map: Optional[PairMap] = None
) -> PairMap:
    """
    Build the PairMap from an IndexMap.

    Args:
        index_map: Barcode hit counts from the linking phase
        multiplicity: Dict[barcode] -> total records seen
        params: Run parameters
        pair_map: PairMap to update (new one if None)

    Returns:
        PairMap keyed by canonical scaffold pairs
    """
    pair_map = pair_map if pair_map is not None else PairMap()
    barcodes_used = 0

    for barcode in index_map:
        if not barcode_in_range(barcode, multiplicity, params):
            continue
        barcodes_used += 1

        calls = classify_scaffold_ends(index_map, barcode, params)
        # calls are sorted, so scaf_a < scaf_b for every i < j
        for i, (scaf_a, a_head) in enumerate(calls):
            for scaf_b, b_head in calls[i + 1:]:
                pair_map.add_link(scaf_a, scaf_b, LinkOrientation.from_ends(a_head, b_head))

    logger.debug(
        f"{barcodes_used:,} of {len(index_map):,} barcodes within multiplicity range "
        f"{params.min_multiplicity}-{params.max_multiplicity}"
    )
    return pair_map


def orientation_summary(pair_map: PairMap) -> Dict[str, int]:
    """Total link counts per orientation label."""
    totals = {orientation.name: 0 for orientation in LinkOrientation}
    for _, counts in pair_map.items():
        for orientation in LinkOrientation:
            totals[orientation.name] += counts[orientation]
    return totals


__all__ = [
    'barcode_in_range',
    'classify_scaffold_ends',
    'pair_scaffolds',
    'orientation_summary',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
