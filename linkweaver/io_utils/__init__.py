"""
LinkWeaver v0.1.0

I/O Module for LinkWeaver.

Module structure:
1. io_core.py - gzip-aware file handling, scaffold sizes, file-of-filenames
2. alignment_io.py - SAM/BAM/CRAM record streaming (pysam)
3. graph_export.py - Scaffold graph export/import (DOT, TSV)
"""

# Core file I/O
from .io_core import (
    is_gzipped,
    open_file,
    check_input_files,
    read_scaffold_sizes,
    read_scaffold_sizes_from_fai,
    read_file_of_filenames,
)

# Alignment input
from .alignment_io import (
    AlignmentRecord,
    record_from_segment,
    read_alignments,
)

# Graph export
from .graph_export import (
    write_graph_dot,
    load_graph_from_dot,
    validate_dot_file,
    export_links_tsv,
)

__all__ = [
    "is_gzipped",
    "open_file",
    "check_input_files",
    "read_scaffold_sizes",
    "read_scaffold_sizes_from_fai",
    "read_file_of_filenames",
    "AlignmentRecord",
    "record_from_segment",
    "read_alignments",
    "write_graph_dot",
    "load_graph_from_dot",
    "validate_dot_file",
    "export_links_tsv",
]
