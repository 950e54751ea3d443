"""
Assembly Core module for LinkWeaver.

This module provides the barcode linking stages:
- Paired-record linking of name-sorted alignments into barcode hit counts
- Pairwise aggregation of barcode co-occurrence into orientation counts
- Significance-gated scaffold graph construction and degree pruning
"""

from .data_structures import (
    ScaffoldEnd,
    LinkOrientation,
    IndexMap,
    PairMap,
    canonical_pair,
)

from .barcode_linker_module import (
    PairedRecordLinker,
    LinkerStats,
    link_alignment_file,
)

from .pair_aggregator_module import pair_scaffolds

from .scaffold_graph_module import (
    ScaffoldGraph,
    LinkEdge,
    build_graph,
    remove_degree_nodes,
)

__all__ = [
    # Data structures
    "ScaffoldEnd",
    "LinkOrientation",
    "IndexMap",
    "PairMap",
    "canonical_pair",
    # Linking
    "PairedRecordLinker",
    "LinkerStats",
    "link_alignment_file",
    # Aggregation
    "pair_scaffolds",
    # Graph
    "ScaffoldGraph",
    "LinkEdge",
    "build_graph",
    "remove_degree_nodes",
]
