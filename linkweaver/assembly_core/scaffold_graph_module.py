#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Scaffold Graph: undirected linkage graph built from scaffold pair
orientation counts, plus degree-based pruning.

Nodes are scaffolds and each edge carries the number of supporting barcodes
(weight) and the winning end-to-end orientation. This graph is the hand-off
to downstream scaffold ordering.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np

from .data_structures import (
    LinkOrientation,
    PairMap,
    canonical_pair,
    reverse_orientation,
)
from ..assembly_utils.link_statistics import check_significance
from ..config.schema import LinkParams

logger = logging.getLogger(__name__)


# ============================================================================
#                         DATA STRUCTURES
# ============================================================================

@dataclass
class LinkEdge:
    """
    Edge between two scaffolds.

    Attributes:
        scaffold_a: First endpoint (lexicographically smaller id)
        scaffold_b: Second endpoint
        weight: Number of barcodes supporting the winning orientation
        orientation: Which ends are joined, relative to (scaffold_a, scaffold_b)
    """
    scaffold_a: str
    scaffold_b: str
    weight: int
    orientation: LinkOrientation


class ScaffoldGraph:
    """
    Undirected simple graph keyed by scaffold id.

    Node indices are contiguous in insertion order and are recomputed by
    `renumber` after removals.
    """

    def __init__(self):
        self.nodes: Dict[str, int] = {}
        self.edges: Dict[Tuple[str, str], LinkEdge] = {}
        self._adjacency: Dict[str, Set[str]] = {}

    def add_node(self, scaffold_id: str) -> int:
        """Add a node if absent and return its index."""
        if scaffold_id not in self.nodes:
            self.nodes[scaffold_id] = len(self.nodes)
            self._adjacency[scaffold_id] = set()
        return self.nodes[scaffold_id]

    def add_edge(
        self,
        scaffold_a: str,
        scaffold_b: str,
        weight: int,
        orientation: LinkOrientation
    ) -> bool:
        """
        Add an edge, creating missing endpoints.

        Returns:
            False if the two scaffolds are already joined (nothing changes)
        """
        if scaffold_a == scaffold_b:
            raise ValueError(f"Self-loop on {scaffold_a} is not allowed")

        key = canonical_pair(scaffold_a, scaffold_b)
        if key in self.edges:
            return False
        if key[0] != scaffold_a:
            orientation = reverse_orientation(orientation)

        self.add_node(key[0])
        self.add_node(key[1])
        self.edges[key] = LinkEdge(key[0], key[1], int(weight), LinkOrientation(orientation))
        self._adjacency[key[0]].add(key[1])
        self._adjacency[key[1]].add(key[0])
        return True

    def get_edge(self, scaffold_a: str, scaffold_b: str) -> Optional[LinkEdge]:
        return self.edges.get(canonical_pair(scaffold_a, scaffold_b))

    def has_edge(self, scaffold_a: str, scaffold_b: str) -> bool:
        return canonical_pair(scaffold_a, scaffold_b) in self.edges

    def neighbors(self, scaffold_id: str) -> Set[str]:
        return set(self._adjacency.get(scaffold_id, ()))

    def degree(self, scaffold_id: str) -> int:
        return len(self._adjacency.get(scaffold_id, ()))

    def remove_node(self, scaffold_id: str):
        """Remove a node together with all its incident edges."""
        for neighbor in self._adjacency.pop(scaffold_id, set()):
            self._adjacency[neighbor].discard(scaffold_id)
            del self.edges[canonical_pair(scaffold_id, neighbor)]
        self.nodes.pop(scaffold_id, None)

    def renumber(self):
        """Make node indices contiguous again, keeping their relative order."""
        ordered = sorted(self.nodes, key=self.nodes.get)
        self.nodes = {scaffold_id: i for i, scaffold_id in enumerate(ordered)}

    def iter_edges(self) -> Iterator[LinkEdge]:
        return iter(self.edges.values())

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def degree_stats(self) -> Dict[str, float]:
        """Summary of the node degree distribution."""
        degrees = np.array([self.degree(n) for n in self.nodes], dtype=np.int64)
        if degrees.size == 0:
            return {'max_degree': 0, 'mean_degree': 0.0}
        return {
            'max_degree': int(degrees.max()),
            'mean_degree': float(degrees.mean()),
        }

    def __repr__(self) -> str:
        return f"ScaffoldGraph(nodes={self.num_nodes}, edges={self.num_edges})"


# ============================================================================
#                         GRAPH CONSTRUCTION
# ============================================================================

def get_max_value_and_index(counts: Sequence[int]) -> Tuple[int, int]:
    """
    Largest orientation count and its index; the lowest index wins ties.

    An all-zero vector yields (0, 0).
    """
    values = np.asarray(counts, dtype=np.int64)
    index = int(np.argmax(values))
    return int(values[index]), index


def get_second_value(counts: Sequence[int], max_value: int) -> int:
    """Largest count strictly below `max_value` (0 if none)."""
    values = np.asarray(counts, dtype=np.int64)
    below = values[values != max_value]
    return int(below.max()) if below.size else 0


def build_graph(pair_map: PairMap, params: LinkParams) -> ScaffoldGraph:
    """
    Create the scaffold graph from orientation counts.

    A pair becomes an edge when its best orientation has at least
    `min_links` barcodes and significantly beats the runner-up.

    Args:
        pair_map: Orientation counts per canonical scaffold pair
        params: Run parameters

    Returns:
        ScaffoldGraph with one edge per accepted pair
    """
    graph = ScaffoldGraph()
    rejected = 0

    for (scaf1, scaf2), counts in pair_map.items():
        max_count, index = get_max_value_and_index(counts)
        second = get_second_value(counts, max_count)

        if not check_significance(max_count, second, params.min_links, params.error_percent):
            rejected += 1
            continue

        graph.add_edge(scaf1, scaf2, max_count, LinkOrientation(index))

    logger.debug(f"Accepted {graph.num_edges:,} links, rejected {rejected:,}")
    return graph


# ============================================================================
#                         DEGREE PRUNING
# ============================================================================

def remove_degree_nodes(graph: ScaffoldGraph, max_degree: int) -> List[str]:
    """
    Remove every node whose degree exceeds `max_degree`.

    All nodes are flagged before any removal, so removing one node never
    changes whether another is removed. A `max_degree` of 0 disables pruning.

    Returns:
        Removed scaffold ids, in node order
    """
    if max_degree == 0:
        return []

    flagged = [node for node in graph.nodes if graph.degree(node) > max_degree]
    for node in flagged:
        graph.remove_node(node)
    graph.renumber()

    logger.debug(f"Removed {len(flagged):,} nodes with degree > {max_degree}")
    return flagged


__all__ = [
    'LinkEdge',
    'ScaffoldGraph',
    'get_max_value_and_index',
    'get_second_value',
    'build_graph',
    'remove_degree_nodes',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
