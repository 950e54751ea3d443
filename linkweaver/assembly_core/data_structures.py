#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Core data structures for barcode-based scaffold linking.

Holds the containers that flow between the pipeline stages:
1. IndexMap - barcode -> (scaffold, end) -> read pair hits
2. BarcodeMultiplicity - barcode -> number of alignment records seen
3. PairMap - canonical scaffold pair -> orientation counts (HH, HT, TH, TT)

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Tuple


# ============================================================================
#                         ENUMERATIONS
# ============================================================================

class ScaffoldEnd(Enum):
    """
    Abstract end region of a scaffold.

    HEAD is the first `cutoff` bases and TAIL the last `cutoff` bases. The
    labels carry no strand meaning.
    """
    HEAD = "head"
    TAIL = "tail"

    @property
    def sibling(self) -> 'ScaffoldEnd':
        """Return the opposite end of the same scaffold."""
        return ScaffoldEnd.TAIL if self is ScaffoldEnd.HEAD else ScaffoldEnd.HEAD


class LinkOrientation(IntEnum):
    """Which end of each scaffold a link joins. Values index the count vector."""
    HH = 0
    HT = 1
    TH = 2
    TT = 3

    @classmethod
    def from_ends(cls, first_is_head: bool, second_is_head: bool) -> 'LinkOrientation':
        if first_is_head and second_is_head:
            return cls.HH
        if first_is_head:
            return cls.HT
        if second_is_head:
            return cls.TH
        return cls.TT


# Barcode -> number of alignment records carrying it, across all sources
BarcodeMultiplicity = Dict[str, int]


# ============================================================================
#                         INDEX MAP
# ============================================================================

@dataclass
class IndexMap:
    """
    Per-barcode hit counts on scaffold ends.

    Once either end of a scaffold is touched under a barcode, both the HEAD
    and TAIL keys exist for that scaffold (the untouched one at 0).

    Attributes:
        hits: Dict[barcode] -> Dict[(scaffold_id, ScaffoldEnd)] -> count
    """
    hits: Dict[str, Dict[Tuple[str, ScaffoldEnd], int]] = field(default_factory=dict)

    def add_hit(self, barcode: str, scaffold_id: str, end: ScaffoldEnd, count: int = 1):
        """Record `count` read pairs for `barcode` on one end of a scaffold."""
        scaf_map = self.hits.setdefault(barcode, {})
        key = (scaffold_id, end)
        scaf_map[key] = scaf_map.get(key, 0) + count
        scaf_map.setdefault((scaffold_id, end.sibling), 0)

    def head_tail_counts(self, barcode: str, scaffold_id: str) -> Tuple[int, int]:
        """Return (head, tail) counts of a scaffold under a barcode."""
        scaf_map = self.hits.get(barcode, {})
        return (
            scaf_map.get((scaffold_id, ScaffoldEnd.HEAD), 0),
            scaf_map.get((scaffold_id, ScaffoldEnd.TAIL), 0),
        )

    def scaffolds(self, barcode: str) -> List[str]:
        """Sorted distinct scaffold ids observed under a barcode."""
        return sorted({scaffold_id for scaffold_id, _ in self.hits.get(barcode, {})})

    def merge(self, other: 'IndexMap'):
        """Additively merge another IndexMap into this one."""
        for barcode, scaf_map in other.hits.items():
            for (scaffold_id, end), count in scaf_map.items():
                self.add_hit(barcode, scaffold_id, end, count)

    def __contains__(self, barcode: str) -> bool:
        return barcode in self.hits

    def __iter__(self) -> Iterator[str]:
        return iter(self.hits)

    def __len__(self) -> int:
        return len(self.hits)


def merge_multiplicity(target: BarcodeMultiplicity, other: BarcodeMultiplicity):
    """Additively merge barcode multiplicity counts into `target`."""
    for barcode, count in other.items():
        target[barcode] = target.get(barcode, 0) + count


# ============================================================================
#                         PAIR MAP
# ============================================================================

def canonical_pair(scaffold_a: str, scaffold_b: str) -> Tuple[str, str]:
    """Order a scaffold pair so the lexicographically smaller id comes first."""
    return (scaffold_a, scaffold_b) if scaffold_a < scaffold_b else (scaffold_b, scaffold_a)


@dataclass
class PairMap:
    """
    Orientation counts for every linked scaffold pair.

    Keys are canonical (first < second). Each value is a 4-element list
    indexed by LinkOrientation.

    Attributes:
        links: Dict[(scaffold_a, scaffold_b)] -> [HH, HT, TH, TT]
    """
    links: Dict[Tuple[str, str], List[int]] = field(default_factory=dict)

    def add_link(self, scaffold_a: str, scaffold_b: str,
                 orientation: LinkOrientation, count: int = 1):
        """
        Count one link between two scaffolds.

        `orientation` is read relative to (scaffold_a, scaffold_b); when the
        pair is stored reversed, HT and TH swap.
        """
        if scaffold_a == scaffold_b:
            raise ValueError(f"Cannot link scaffold {scaffold_a} to itself")

        pair = canonical_pair(scaffold_a, scaffold_b)
        if pair[0] != scaffold_a:
            orientation = reverse_orientation(orientation)

        counts = self.links.setdefault(pair, [0, 0, 0, 0])
        counts[int(orientation)] += count

    def get_counts(self, scaffold_a: str, scaffold_b: str) -> List[int]:
        return list(self.links.get(canonical_pair(scaffold_a, scaffold_b), [0, 0, 0, 0]))

    def items(self):
        return self.links.items()

    def __contains__(self, pair: Tuple[str, str]) -> bool:
        return pair in self.links

    def __len__(self) -> int:
        return len(self.links)


def reverse_orientation(orientation: LinkOrientation) -> LinkOrientation:
    if orientation == LinkOrientation.HT:
        return LinkOrientation.TH
    if orientation == LinkOrientation.TH:
        return LinkOrientation.HT
    return orientation


__all__ = [
    'ScaffoldEnd',
    'LinkOrientation',
    'BarcodeMultiplicity',
    'IndexMap',
    'PairMap',
    'canonical_pair',
    'reverse_orientation',
    'merge_multiplicity',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
