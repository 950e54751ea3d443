#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for LinkWeaver.

This module provides the main CLI entry point and all subcommands for
the LinkWeaver barcode linking pipeline.
"""

import sys
import json
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.schema import (
    ConfigValidationError,
    LinkParams,
    default_base_name,
    graph_file_name,
    load_config,
    parse_multiplicity_range,
    save_config_template,
    validate_config,
)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', count=True, help='Increase verbosity (repeatable)')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    LinkWeaver: barcode-based scaffold linkage graphs

    Infers which scaffolds are adjacent from linked-read barcodes that
    co-occur at scaffold ends, and writes a weighted, oriented graph for
    downstream scaffolding.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='linkweaver_config.yaml',
              help='Output configuration file path')
def config_init(output):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating configuration template: {output}")

    try:
        save_config_template(Path(output))
        click.echo(f"✓ Configuration file created: {output}")
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo(f"  Min identity: {config['alignment']['min_identity']}")
    click.echo(f"  Min read pairs per barcode: {config['linking']['min_reads']}")
    click.echo(f"  Min links per edge: {config['graph']['min_links']}")
    click.echo(f"  Min scaffold size: {config['linking']['min_size']}")
    click.echo(f"  Barcode multiplicity: {config['linking']['min_multiplicity']}"
               f"-{config['linking']['max_multiplicity']}")
    click.echo(f"  Max degree: {config['graph']['max_degree']}")
    click.echo(f"  End length: {config['linking']['end_length']}")
    click.echo(f"  Max p-value: {config['linking']['error_percent']}")


# ============================================================================
# Linking Pipeline
# ============================================================================

@main.command()
@click.option('--file', '-f', 'sequence_file', required=True, type=click.Path(exists=True),
              help='Scaffold sequences (FASTA/FASTQ, optionally gzipped, or a .fai index)')
@click.option('--fof-name', '-a', 'fof_name', required=True, type=click.Path(exists=True),
              help='File listing alignment files (SAM/BAM/CRAM), one per line. '
                   'Alignments must be sorted by read name and the barcode must be in '
                   'the read name as read1_barcodeA')
@click.option('--seq-id', '-s', type=float, default=None,
              help='Minimum sequence identity of each mate (default: 98)')
@click.option('--min-reads', '-c', type=int, default=None,
              help='Minimum read pairs per barcode for a head/tail call (default: 5)')
@click.option('--min-links', '-l', type=int, default=None,
              help='Minimum number of links to create an edge (default: 0)')
@click.option('--min-size', '-z', type=int, default=None,
              help='Minimum scaffold length considered (default: 500)')
@click.option('--base-name', '-b', type=str, default=None,
              help='Base name for output files')
@click.option('--index-multiplicity', '-m', type=str, default=None,
              help='Barcode multiplicity range as min-max (default: 50-10000)')
@click.option('--max-degree', '-d', type=int, default=None,
              help='Remove nodes with degree above this; 0 keeps all (default: 0)')
@click.option('--end-length', '-e', type=int, default=None,
              help='Head/tail region length in bp; 0 splits scaffolds in half (default: 0)')
@click.option('--error-percent', '-r', type=float, default=None,
              help='Maximum p-value for head/tail and orientation calls (default: 0.05)')
@click.option('--threads', '-t', type=int, default=None,
              help='Alignment files linked in parallel (default: 1)')
@click.option('--config', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file')
@click.option('--links-tsv', is_flag=True, default=False,
              help='Also write <base>_links.tsv')
@click.option('--stats-json', is_flag=True, default=False,
              help='Also write <base>_stats.json')
@click.pass_context
def run(ctx, sequence_file, fof_name, seq_id, min_reads, min_links, min_size, base_name,
        index_multiplicity, max_degree, end_length, error_percent, threads, config_file,
        links_tsv, stats_json):
    """
    Build the scaffold linkage graph from barcoded alignments.

    Examples:
        linkweaver run -f scaffolds.fa -a alignments.fof

        linkweaver run -f scaffolds.fa -a alignments.fof -m 50-10000 -d 10 -e 30000
    """
    from .io_utils.io_core import read_file_of_filenames
    from .io_utils.graph_export import export_links_tsv
    from .utils.pipeline import LinkPipeline, setup_logging, verbosity_to_level

    try:
        config = load_config(Path(config_file) if config_file else None)
        errors = validate_config(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))

        overrides = {
            ('alignment', 'min_identity'): seq_id,
            ('linking', 'min_reads'): min_reads,
            ('graph', 'min_links'): min_links,
            ('linking', 'min_size'): min_size,
            ('graph', 'max_degree'): max_degree,
            ('linking', 'end_length'): end_length,
            ('linking', 'error_percent'): error_percent,
            ('runtime', 'threads'): threads,
            ('output', 'base_name'): base_name,
        }
        if index_multiplicity is not None:
            low, high = parse_multiplicity_range(index_multiplicity)
            overrides[('linking', 'min_multiplicity')] = low
            overrides[('linking', 'max_multiplicity')] = high

        for (section, key), value in overrides.items():
            if value is not None:
                config[section][key] = value

        params = LinkParams.from_config(config)
        alignment_files = read_file_of_filenames(fof_name)
    except (ConfigValidationError, OSError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    verbose = max(ctx.obj.get('VERBOSE', 0), config['runtime'].get('verbose', 0))
    if ctx.obj.get('QUIET') or verbose:
        level = verbosity_to_level(verbose, ctx.obj.get('QUIET', False))
    else:
        level = config['output']['logging']['level']
    setup_logging(level, config['output']['logging'].get('log_file'))

    base = config['output']['base_name'] or default_base_name(sequence_file, params)
    graph_file = graph_file_name(base)

    if not ctx.obj.get('QUIET'):
        click.echo(f"{'='*60}")
        click.echo(f"LinkWeaver v{__version__}")
        click.echo(f"{'='*60}")
        click.echo(f"Sequences: {sequence_file}")
        click.echo(f"Alignment files: {len(alignment_files)} (from {fof_name})")
        for key, value in params.to_dict().items():
            click.echo(f"  {key}: {value}")
        click.echo(f"Output graph: {graph_file}")
        click.echo(f"{'='*60}\n")

    try:
        pipeline = LinkPipeline(params, threads=config['runtime']['threads'])
        result = pipeline.run(sequence_file, alignment_files, output_graph=graph_file)
    except (OSError, EOFError) as e:
        click.echo(f"❌ Error: {e} --fatal.", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"❌ Error reading input: {e}", err=True)
        sys.exit(1)

    if links_tsv:
        export_links_tsv(result.graph, f"{base}_links.tsv")
    if stats_json:
        with open(f"{base}_stats.json", 'w') as f:
            json.dump(result.stats, f, indent=2)

    if not ctx.obj.get('QUIET'):
        stats = result.stats
        click.echo(f"\n{'='*60}")
        click.echo("Linking Summary")
        click.echo(f"{'='*60}")
        click.echo(f"  Alignment records: {stats['records']:,}")
        click.echo(f"  Unpaired reads skipped: {stats['unpaired']:,}")
        click.echo(f"  Barcodes in multiplicity range: {stats['barcodes_in_range']:,}")
        click.echo(f"  Scaffold pairs: {stats['scaffold_pairs']:,}")
        click.echo(f"  Nodes removed by degree filter: {stats['nodes_removed']:,}")
        click.echo(f"  Graph: {stats['nodes']:,} nodes, {stats['edges']:,} edges")
        click.echo(f"✓ Graph written to: {graph_file}")


# ============================================================================
# Utility Commands
# ============================================================================

@main.command()
def version():
    """Show version information."""
    click.echo(f"LinkWeaver v{__version__}")
    click.echo("\nDependencies:")

    try:
        import Bio
        click.echo(f"  BioPython: {Bio.__version__}")
    except ImportError:
        click.echo("  BioPython: not installed")

    try:
        import numpy
        click.echo(f"  NumPy: {numpy.__version__}")
    except ImportError:
        click.echo("  NumPy: not installed")

    try:
        import pysam
        click.echo(f"  pysam: {pysam.__version__}")
    except ImportError:
        click.echo("  pysam: not installed")


if __name__ == '__main__':
    sys.exit(main())
