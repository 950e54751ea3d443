#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Tests for index and pair maps and scaffold pair aggregation.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from linkweaver.assembly_core.data_structures import (
    IndexMap,
    LinkOrientation,
    PairMap,
    ScaffoldEnd,
    canonical_pair,
    merge_multiplicity,
)
from linkweaver.assembly_core.pair_aggregator_module import (
    barcode_in_range,
    classify_scaffold_ends,
    orientation_summary,
    pair_scaffolds,
)
from linkweaver.config.schema import LinkParams

HEAD = ScaffoldEnd.HEAD
TAIL = ScaffoldEnd.TAIL


@pytest.fixture
def params():
    return LinkParams(min_reads=5, min_multiplicity=1, max_multiplicity=100)


def single_barcode_map(placements, barcode="ACGT"):
    """IndexMap for one barcode from (scaffold_id, end, count) tuples."""
    index_map = IndexMap()
    for scaffold_id, end, count in placements:
        index_map.add_hit(barcode, scaffold_id, end, count)
    return index_map


class TestIndexMap:
    """Test barcode hit bookkeeping."""

    def test_sibling_created_at_zero(self):
        """Test both end keys exist after one hit."""
        index_map = single_barcode_map([("S1", TAIL, 1)])
        assert index_map.hits["ACGT"] == {("S1", TAIL): 1, ("S1", HEAD): 0}

    def test_scaffolds_sorted(self):
        """Test scaffolds are listed in sorted order."""
        index_map = single_barcode_map([("S2", HEAD, 1), ("S10", TAIL, 1), ("S1", HEAD, 1)])
        assert index_map.scaffolds("ACGT") == ["S1", "S10", "S2"]

    def test_merge_is_additive(self):
        """Test merging two maps sums counts."""
        first = single_barcode_map([("S1", HEAD, 2)])
        second = single_barcode_map([("S1", HEAD, 3), ("S2", TAIL, 1)])
        first.merge(second)

        assert first.head_tail_counts("ACGT", "S1") == (5, 0)
        assert first.head_tail_counts("ACGT", "S2") == (0, 1)

    def test_merge_multiplicity(self):
        """Test multiplicity tables merge additively."""
        target = {"AC": 2}
        merge_multiplicity(target, {"AC": 3, "GT": 1})
        assert target == {"AC": 5, "GT": 1}


class TestPairMap:
    """Test orientation counts keyed by canonical scaffold pairs."""

    def test_canonical_pair(self):
        """Test the smaller id comes first."""
        assert canonical_pair("b", "a") == ("a", "b")
        assert canonical_pair("a", "b") == ("a", "b")

    def test_reversed_pair_swaps_ht_th(self):
        """Test HT given for (b, a) is stored as TH for (a, b)."""
        pair_map = PairMap()
        pair_map.add_link("b", "a", LinkOrientation.HT)
        pair_map.add_link("b", "a", LinkOrientation.HH)

        assert ("a", "b") in pair_map
        assert ("b", "a") not in pair_map
        assert pair_map.get_counts("a", "b") == [1, 0, 1, 0]

    def test_self_pair_rejected(self):
        """Test a scaffold cannot be paired with itself."""
        with pytest.raises(ValueError):
            PairMap().add_link("a", "a", LinkOrientation.HH)

    def test_unknown_pair_counts(self):
        """Test an absent pair reads as all zeros."""
        assert PairMap().get_counts("a", "b") == [0, 0, 0, 0]

    def test_orientation_from_ends(self):
        """Test the orientation index for each end combination."""
        assert LinkOrientation.from_ends(True, True) == LinkOrientation.HH
        assert LinkOrientation.from_ends(True, False) == LinkOrientation.HT
        assert LinkOrientation.from_ends(False, True) == LinkOrientation.TH
        assert LinkOrientation.from_ends(False, False) == LinkOrientation.TT


class TestClassifyEnds:
    """Test per-barcode head/tail calls."""

    def test_only_significant_calls(self, params):
        """Test balanced and sparse scaffolds are left out."""
        index_map = single_barcode_map([
            ("S1", HEAD, 8),
            ("S2", HEAD, 8), ("S2", TAIL, 8),
            ("S3", TAIL, 3),
            ("S4", TAIL, 9),
        ])
        assert classify_scaffold_ends(index_map, "ACGT", params) == [("S1", True), ("S4", False)]


class TestPairScaffolds:
    """Test aggregation of barcodes into orientation counts."""

    def test_head_to_tail(self, params):
        """Test S1 head and S2 tail give HT."""
        index_map = single_barcode_map([("S1", HEAD, 8), ("S2", TAIL, 8)])
        pair_map = pair_scaffolds(index_map, {"ACGT": 16}, params)
        assert pair_map.get_counts("S1", "S2") == [0, 1, 0, 0]

    def test_orientation_relative_to_sorted_pair(self, params):
        """Test S1 tail and S2 head give TH, whatever the hit order."""
        index_map = single_barcode_map([("S2", HEAD, 8), ("S1", TAIL, 8)])
        pair_map = pair_scaffolds(index_map, {"ACGT": 16}, params)

        assert list(pair_map.links) == [("S1", "S2")]
        assert pair_map.get_counts("S1", "S2") == [0, 0, 1, 0]

    def test_multiplicity_above_range(self, params):
        """Test an overly common barcode is ignored."""
        index_map = single_barcode_map([("S1", HEAD, 8), ("S2", HEAD, 8)])
        pair_map = pair_scaffolds(index_map, {"ACGT": 200000}, params)
        assert len(pair_map) == 0

    def test_multiplicity_below_range(self):
        """Test a rare barcode is ignored."""
        params = LinkParams(min_multiplicity=50, max_multiplicity=10000)
        index_map = single_barcode_map([("S1", HEAD, 8), ("S2", HEAD, 8)])
        assert len(pair_scaffolds(index_map, {"ACGT": 16}, params)) == 0

    def test_range_bounds_inclusive(self, params):
        """Test multiplicities equal to either bound are used."""
        assert barcode_in_range("A", {"A": 1}, params)
        assert barcode_in_range("A", {"A": 100}, params)
        assert not barcode_in_range("A", {"A": 101}, params)
        assert not barcode_in_range("A", {}, params)

    def test_insufficient_reads(self, params):
        """Test a scaffold with too few pairs links to nothing."""
        index_map = single_barcode_map([("S1", HEAD, 3), ("S2", HEAD, 8)])
        assert len(pair_scaffolds(index_map, {"ACGT": 22}, params)) == 0

    def test_balanced_scaffold(self, params):
        """Test a scaffold without end bias links to nothing."""
        index_map = single_barcode_map([("S1", HEAD, 8), ("S1", TAIL, 8), ("S2", HEAD, 8)])
        assert len(pair_scaffolds(index_map, {"ACGT": 48}, params)) == 0

    def test_three_scaffolds(self, params):
        """Test every pair of significant scaffolds is linked once."""
        index_map = single_barcode_map([("S1", HEAD, 8), ("S2", HEAD, 8), ("S3", TAIL, 8)])
        pair_map = pair_scaffolds(index_map, {"ACGT": 48}, params)

        assert len(pair_map) == 3
        assert pair_map.get_counts("S1", "S2") == [1, 0, 0, 0]
        assert pair_map.get_counts("S1", "S3") == [0, 1, 0, 0]
        assert pair_map.get_counts("S2", "S3") == [0, 1, 0, 0]

    def test_one_count_per_barcode(self, params):
        """Test each supporting barcode adds exactly one link."""
        index_map = IndexMap()
        for i, barcode in enumerate(["AAAA", "CCCC", "GGGG", "TTTT"]):
            index_map.add_hit(barcode, "S1", HEAD, 8 + i)
            index_map.add_hit(barcode, "S2", HEAD, 8)
        multiplicity = {barcode: 40 for barcode in index_map}

        pair_map = pair_scaffolds(index_map, multiplicity, params)
        assert pair_map.get_counts("S1", "S2") == [4, 0, 0, 0]

    def test_accumulates_into_existing_map(self, params):
        """Test an existing PairMap is updated in place."""
        existing = PairMap()
        existing.add_link("S1", "S2", LinkOrientation.HH, 2)
        index_map = single_barcode_map([("S1", HEAD, 8), ("S2", HEAD, 8)])

        result = pair_scaffolds(index_map, {"ACGT": 16}, params, pair_map=existing)
        assert result is existing
        assert existing.get_counts("S1", "S2") == [3, 0, 0, 0]

    def test_orientation_summary(self, params):
        """Test totals per orientation label."""
        pair_map = PairMap()
        pair_map.add_link("S1", "S2", LinkOrientation.HH, 3)
        pair_map.add_link("S1", "S3", LinkOrientation.TT, 2)
        pair_map.add_link("S3", "S2", LinkOrientation.HT, 1)

        assert orientation_summary(pair_map) == {"HH": 3, "HT": 0, "TH": 1, "TT": 2}

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
