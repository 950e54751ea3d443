#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Graph Export: Graphviz DOT export and import of the scaffold linkage graph,
plus a TSV listing of links.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
import re
from pathlib import Path

from ..assembly_core.data_structures import LinkOrientation
from ..assembly_core.scaffold_graph_module import ScaffoldGraph

logger = logging.getLogger(__name__)

_NODE_RE = re.compile(r'^\s*(\d+)\s*\[\s*id\s*=\s*"((?:[^"\\]|\\.)*)"\s*\]\s*;?\s*$')
_EDGE_RE = re.compile(r'^\s*(\d+)\s*--\s*(\d+)\s*\[(.*)\]\s*;?\s*$')
_ATTR_RE = re.compile(r'(\w+)\s*=\s*("(?:[^"\\]|\\.)*"|[^,\s]+)')


def _quote(value: str) -> str:
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return re.sub(r'\\(.)', r'\1', value)


# ============================================================================
#                       DOT EXPORT / IMPORT
# ============================================================================

def write_graph_dot(graph: ScaffoldGraph, output_path: str | Path) -> None:
    """
    Write the scaffold graph in Graphviz DOT format.

    Format:
        graph G {
        0 [id="scaffold1"];
        0--1 [label=0, weight=12];
        }

    Node names are the contiguous node indices; `label` is the orientation
    (0=HH, 1=HT, 2=TH, 3=TT) relative to the edge as written.

    Args:
        graph: ScaffoldGraph to export
        output_path: Output .gv/.dot path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing graph file to {output_path}...")

    with open(output_path, 'w') as f:
        f.write("graph G {\n")
        for scaffold_id, node_id in sorted(graph.nodes.items(), key=lambda item: item[1]):
            f.write(f"{node_id} [id={_quote(scaffold_id)}];\n")
        for edge in graph.iter_edges():
            u = graph.nodes[edge.scaffold_a]
            v = graph.nodes[edge.scaffold_b]
            f.write(f"{u}--{v} [label={int(edge.orientation)}, weight={edge.weight}];\n")
        f.write("}\n")

    logger.debug(f"Wrote {graph.num_nodes:,} nodes and {graph.num_edges:,} edges")


def load_graph_from_dot(dot_path: str | Path) -> ScaffoldGraph:
    """
    Load a scaffold graph written by `write_graph_dot`.

    Args:
        dot_path: Path to the DOT file

    Returns:
        ScaffoldGraph with the same nodes, edges, weights and orientations

    Raises:
        FileNotFoundError: If dot_path does not exist
        ValueError: On malformed node or edge lines
    """
    dot_path = Path(dot_path)
    if not dot_path.exists():
        raise FileNotFoundError(f"Graph file not found: {dot_path}")

    graph = ScaffoldGraph()
    names: dict[int, str] = {}
    pending_edges = []

    with open(dot_path, 'r') as f:
        for line_no, raw_line in enumerate(f, 1):
            line = raw_line.strip()
            if not line or line.startswith('graph') or line == '}':
                continue

            node_match = _NODE_RE.match(line)
            if node_match:
                node_id = int(node_match.group(1))
                names[node_id] = _unquote('"' + node_match.group(2) + '"')
                continue

            edge_match = _EDGE_RE.match(line)
            if edge_match:
                attrs = {k: _unquote(v) for k, v in _ATTR_RE.findall(edge_match.group(3))}
                try:
                    orientation = LinkOrientation(int(attrs['label']))
                    weight = int(attrs['weight'])
                except (KeyError, ValueError) as e:
                    raise ValueError(f"DOT line {line_no}: malformed edge attributes") from e
                pending_edges.append(
                    (line_no, int(edge_match.group(1)), int(edge_match.group(2)), weight, orientation)
                )
                continue

            raise ValueError(f"DOT line {line_no}: unrecognised statement: {line}")

    for node_id in sorted(names):
        graph.add_node(names[node_id])

    for line_no, u, v, weight, orientation in pending_edges:
        if u not in names or v not in names:
            raise ValueError(f"DOT line {line_no}: edge references undefined node")
        graph.add_edge(names[u], names[v], weight, orientation)

    logger.info(f"Loaded graph: {graph.num_nodes} nodes, {graph.num_edges} edges")
    return graph


def validate_dot_file(dot_path: str | Path) -> dict[str, int]:
    """
    Count node and edge statements in a DOT file.

    Returns:
        Dict with keys: 'nodes', 'edges'
    """
    stats = {'nodes': 0, 'edges': 0}
    with open(dot_path, 'r') as f:
        for line in f:
            line = line.strip()
            if _EDGE_RE.match(line):
                stats['edges'] += 1
            elif _NODE_RE.match(line):
                stats['nodes'] += 1
    return stats


# ============================================================================
#                           TSV EXPORT
# ============================================================================

def export_links_tsv(graph: ScaffoldGraph, output_path: str | Path) -> None:
    """
    Write one row per edge: scaffold1, scaffold2, orientation, weight.

    Args:
        graph: ScaffoldGraph to export
        output_path: Output TSV path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write("scaffold1\tscaffold2\torientation\tweight\n")
        for edge in sorted(graph.iter_edges(), key=lambda e: (-e.weight, e.scaffold_a, e.scaffold_b)):
            f.write(f"{edge.scaffold_a}\t{edge.scaffold_b}\t{edge.orientation.name}\t{edge.weight}\n")

    logger.info(f"Exported {graph.num_edges:,} links to {output_path}")


__all__ = [
    'write_graph_dot',
    'load_graph_from_dot',
    'validate_dot_file',
    'export_links_tsv',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
