"""
LinkWeaver Pipeline Orchestrator.

Runs the linking stages in order, each fully consuming its predecessor:
1. Scaffold sizes from the sequence collection
2. Paired-record linking of every alignment file into one IndexMap
3. Pairwise aggregation into a PairMap
4. Significance-gated graph construction
5. Degree pruning and graph export

Alignment files can be linked in parallel worker processes; the per-file
IndexMap and multiplicity fragments are merged additively in file-list order,
which gives the same result as a sequential run.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List, Union
import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
import time

from ..assembly_core.data_structures import (
    BarcodeMultiplicity,
    IndexMap,
    PairMap,
    merge_multiplicity,
)
from ..assembly_core.barcode_linker_module import LinkerStats, link_alignment_file
from ..assembly_core.pair_aggregator_module import (
    barcode_in_range,
    orientation_summary,
    pair_scaffolds,
)
from ..assembly_core.scaffold_graph_module import (
    ScaffoldGraph,
    build_graph,
    remove_degree_nodes,
)
from ..config.schema import LinkParams
from ..io_utils.io_core import check_input_files, read_scaffold_sizes
from ..io_utils.graph_export import write_graph_dot

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[Path] = None):
    """
    Configure root logging with a stream handler and an optional log file.

    Args:
        level: Logging level name or number
        log_file: Also write log records to this file when given
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def verbosity_to_level(verbose: int, quiet: bool = False) -> int:
    """Map a CLI verbosity count to a logging level."""
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose > 0 else logging.INFO


@dataclass
class PipelineResult:
    """
    Outputs of a complete linking run.

    Attributes:
        scaffold_sizes: Dict[scaffold_id] -> length
        index_map: Barcode hit counts on scaffold ends
        multiplicity: Dict[barcode] -> records seen
        pair_map: Orientation counts per scaffold pair
        graph: Pruned scaffold graph
        removed_nodes: Scaffolds dropped by degree pruning
        linker_stats: Counters merged over all alignment files
        stats: Run summary
    """
    scaffold_sizes: Dict[str, int]
    index_map: IndexMap
    multiplicity: BarcodeMultiplicity
    pair_map: PairMap
    graph: ScaffoldGraph
    removed_nodes: List[str] = field(default_factory=list)
    linker_stats: LinkerStats = field(default_factory=LinkerStats)
    stats: Dict[str, Any] = field(default_factory=dict)


class LinkPipeline:
    """
    End-to-end barcode linking pipeline.

    Configuration is passed in explicitly; the pipeline keeps no global state.
    """

    def __init__(self, params: LinkParams, threads: int = 1):
        """
        Initialize pipeline.

        Args:
            params: Run parameters
            threads: Worker processes for linking alignment files
        """
        self.params = params
        self.threads = max(1, threads)
        self.logger = logging.getLogger(__name__)
        self.stage_times: Dict[str, float] = {}

    def _banner(self, message: str):
        self.logger.info(f"=>{message} {datetime.now().ctime()}")

    def run(
        self,
        sequence_file: Union[str, Path],
        alignment_files: List[Union[str, Path]],
        output_graph: Optional[Union[str, Path]] = None
    ) -> PipelineResult:
        """
        Execute all stages.

        Args:
            sequence_file: FASTA/FASTQ or .fai with scaffold lengths
            alignment_files: Name-sorted SAM/BAM/CRAM files, in processing order
            output_graph: Write the pruned graph here (DOT) when given

        Returns:
            PipelineResult

        Raises:
            FileNotFoundError: If any input is missing; nothing is processed
            OSError: If an input cannot be opened or decompressed
        """
        check_input_files([sequence_file, *alignment_files])

        self._banner("Getting scaffold sizes...")
        start = time.time()
        scaffold_sizes = read_scaffold_sizes(sequence_file)
        self.stage_times['scaffold_sizes'] = time.time() - start

        self._banner("Starting to read alignment files...")
        start = time.time()
        index_map, multiplicity, linker_stats = self.link_alignments(
            alignment_files, scaffold_sizes
        )
        self.stage_times['linking'] = time.time() - start

        self._banner("Starting pairing of scaffolds...")
        start = time.time()
        pair_map = pair_scaffolds(index_map, multiplicity, self.params)
        self.stage_times['pairing'] = time.time() - start

        self._banner("Starting to create graph...")
        start = time.time()
        graph = build_graph(pair_map, self.params)
        nodes_before, edges_before = graph.num_nodes, graph.num_edges
        self.stage_times['graph'] = time.time() - start

        start = time.time()
        if self.params.max_degree != 0:
            self.logger.info(f"Deleting nodes with degree > {self.params.max_degree}...")
        else:
            self.logger.info(
                "Max degree set to 0. Will not delete any vertices from graph."
            )
        removed = remove_degree_nodes(graph, self.params.max_degree)
        self.stage_times['pruning'] = time.time() - start

        if output_graph is not None:
            self._banner("Starting to write graph file...")
            write_graph_dot(graph, output_graph)

        stats = {
            'sequences': len(scaffold_sizes),
            'alignment_files': len(alignment_files),
            **linker_stats.to_dict(),
            'barcodes': len(multiplicity),
            'barcodes_with_hits': len(index_map),
            'barcodes_in_range': sum(
                1 for barcode in index_map
                if barcode_in_range(barcode, multiplicity, self.params)
            ),
            'scaffold_pairs': len(pair_map),
            'orientations': orientation_summary(pair_map),
            'nodes_before_pruning': nodes_before,
            'edges_before_pruning': edges_before,
            'nodes_removed': len(removed),
            'nodes': graph.num_nodes,
            'edges': graph.num_edges,
            **graph.degree_stats(),
            'stage_times': dict(self.stage_times),
        }

        self._banner("Done.")
        return PipelineResult(
            scaffold_sizes=scaffold_sizes,
            index_map=index_map,
            multiplicity=multiplicity,
            pair_map=pair_map,
            graph=graph,
            removed_nodes=removed,
            linker_stats=linker_stats,
            stats=stats,
        )

    def link_alignments(
        self,
        alignment_files: List[Union[str, Path]],
        scaffold_sizes: Dict[str, int]
    ) -> tuple:
        """
        Link every alignment file into one IndexMap and multiplicity table.

        Returns:
            (index_map, multiplicity, linker_stats)
        """
        index_map = IndexMap()
        multiplicity: BarcodeMultiplicity = {}
        total_stats = LinkerStats()

        if self.threads == 1 or len(alignment_files) < 2:
            for alignment_file in alignment_files:
                self.logger.debug(f"Reading alignment file {alignment_file}")
                _, _, stats = link_alignment_file(
                    alignment_file, scaffold_sizes, self.params,
                    index_map=index_map, multiplicity=multiplicity,
                )
                total_stats.merge(stats)
            return index_map, multiplicity, total_stats

        workers = min(self.threads, len(alignment_files))
        self.logger.info(f"Linking {len(alignment_files)} alignment files with {workers} workers")
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(link_alignment_file, alignment_file, scaffold_sizes, self.params)
                for alignment_file in alignment_files
            ]
            # Merge in submission order
            for alignment_file, future in zip(alignment_files, futures):
                file_map, file_mult, stats = future.result()
                index_map.merge(file_map)
                merge_multiplicity(multiplicity, file_mult)
                total_stats.merge(stats)
                self.logger.debug(f"Merged alignment file {alignment_file}")

        return index_map, multiplicity, total_stats


__all__ = [
    'LOG_FORMAT',
    'setup_logging',
    'verbosity_to_level',
    'PipelineResult',
    'LinkPipeline',
]
