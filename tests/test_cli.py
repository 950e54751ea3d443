#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Tests for CLI command interface.

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from linkweaver.cli import main


@pytest.fixture(autouse=True)
def _isolated_logging(reset_logging):
    yield


def run_args(dataset, *extra):
    return [
        'run',
        '-f', str(dataset["fasta"]),
        '-a', str(dataset["fofn"]),
        '-m', '1-100',
        *extra,
    ]


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        """Test that --help runs without error."""
        runner = CliRunner()
        result = runner.invoke(main, ['--help'])

        assert result.exit_code == 0
        assert 'LinkWeaver' in result.output

    def test_cli_version(self):
        """Test that --version displays version."""
        runner = CliRunner()
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_version_command(self):
        """Test the version command lists dependencies."""
        runner = CliRunner()
        result = runner.invoke(main, ['version'])

        assert result.exit_code == 0
        assert 'LinkWeaver v0.1.0' in result.output
        assert 'pysam' in result.output

    def test_run_help(self):
        """Test run command help lists the short options."""
        runner = CliRunner()
        result = runner.invoke(main, ['run', '--help'])

        assert result.exit_code == 0
        for option in ('-f', '-a', '-s', '-c', '-l', '-z', '-b', '-m', '-d', '-e', '-r'):
            assert option in result.output

    def test_invalid_command(self):
        """Test that invalid commands are handled gracefully."""
        runner = CliRunner()
        result = runner.invoke(main, ['nonexistent_command'])

        assert result.exit_code != 0


class TestConfigCommands:
    """Test configuration management commands."""

    def test_config_init_command(self):
        """Test config init command."""
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(main, ['config', 'init', '--output', 'test_config.yaml'])

            assert result.exit_code == 0
            assert Path('test_config.yaml').exists()

    def test_config_validate_template(self):
        """Test a generated template validates."""
        runner = CliRunner()

        with runner.isolated_filesystem():
            runner.invoke(main, ['config', 'init', '--output', 'c.yaml'])
            result = runner.invoke(main, ['config', 'validate', 'c.yaml'])

            assert result.exit_code == 0
            assert 'Configuration is valid' in result.output

    def test_config_validate_rejects_bad_values(self):
        """Test validation failures exit non-zero."""
        runner = CliRunner()

        with runner.isolated_filesystem():
            Path('bad.yaml').write_text("runtime:\n  threads: 0\n")
            result = runner.invoke(main, ['config', 'validate', 'bad.yaml'])

            assert result.exit_code == 1
            assert 'threads' in result.output

    def test_config_show(self):
        """Test the configuration summary."""
        runner = CliRunner()

        with runner.isolated_filesystem():
            Path('c.yaml').write_text("alignment:\n  min_identity: 95\n")
            result = runner.invoke(main, ['config', 'show', 'c.yaml'])

            assert result.exit_code == 0
            assert 'Min identity: 95' in result.output
            assert 'Barcode multiplicity: 50-10000' in result.output


class TestRunCommand:
    """Test the run command end to end."""

    def test_run_writes_graph(self, linked_dataset):
        """Test a run with an explicit base name."""
        base = linked_dataset["dir"] / "sample"
        runner = CliRunner()
        result = runner.invoke(main, run_args(linked_dataset, '-b', str(base)))

        assert result.exit_code == 0, result.output
        graph_file = Path(f"{base}_original.gv")
        assert graph_file.exists()
        assert '0--1 [label=0, weight=8];' in graph_file.read_text()
        assert 'Graph written to' in result.output

    def test_default_base_name(self, linked_dataset):
        """Test the output name derived from the sequence file."""
        runner = CliRunner()
        result = runner.invoke(main, run_args(linked_dataset))

        assert result.exit_code == 0, result.output
        expected = Path(f"{linked_dataset['fasta']}.scaff_s98_c5_l0_d0_e0_r0.05_original.gv")
        assert expected.exists()

    def test_extra_outputs(self, linked_dataset):
        """Test the optional TSV and JSON outputs."""
        base = linked_dataset["dir"] / "sample"
        runner = CliRunner()
        result = runner.invoke(main, run_args(
            linked_dataset, '-b', str(base), '--links-tsv', '--stats-json', '-t', '2'
        ))

        assert result.exit_code == 0, result.output
        tsv_lines = Path(f"{base}_links.tsv").read_text().splitlines()
        assert tsv_lines[1] == "S1\tS2\tHH\t8"
        stats = json.loads(Path(f"{base}_stats.json").read_text())
        assert stats["edges"] == 1
        assert stats["alignment_files"] == 2

    def test_quiet_run(self, linked_dataset):
        """Test -q suppresses the summary."""
        base = linked_dataset["dir"] / "quiet"
        runner = CliRunner()
        result = runner.invoke(main, ['-q'] + run_args(linked_dataset, '-b', str(base)))

        assert result.exit_code == 0
        assert 'Linking Summary' not in result.output
        assert Path(f"{base}_original.gv").exists()

    def test_config_file_values(self, linked_dataset):
        """Test settings taken from a configuration file."""
        config = linked_dataset["dir"] / "run.yaml"
        config.write_text("graph:\n  min_links: 10\n")
        base = linked_dataset["dir"] / "strict"
        runner = CliRunner()
        result = runner.invoke(main, run_args(
            linked_dataset, '-b', str(base), '--config', str(config)
        ))

        assert result.exit_code == 0, result.output
        assert '--' not in Path(f"{base}_original.gv").read_text()

    def test_missing_listed_file(self, linked_dataset):
        """Test an alignment file named in the list but absent."""
        fofn = linked_dataset["dir"] / "broken.fof"
        fofn.write_text(str(linked_dataset["dir"] / "absent.sam") + "\n")
        runner = CliRunner()
        result = runner.invoke(main, [
            'run', '-f', str(linked_dataset["fasta"]), '-a', str(fofn), '-b', 'x',
        ])

        assert result.exit_code == 1
        assert 'Could not open' in result.output

    def test_sequence_file_not_gzipped(self, linked_dataset):
        """Test a plain-text file named .gz exits with a fatal error message."""
        seqs = linked_dataset["dir"] / "seqs.fa.gz"
        seqs.write_text(">S1\nACGT\n")
        runner = CliRunner()
        result = runner.invoke(main, [
            'run', '-f', str(seqs), '-a', str(linked_dataset["fofn"]), '-m', '1-100',
            '-b', str(linked_dataset["dir"] / "gz"),
        ])

        assert result.exit_code == 1
        assert '❌ Error' in result.output
        assert '--fatal.' in result.output
        assert not isinstance(result.exception, OSError)

    def test_null_output_section(self, linked_dataset):
        """Test a configuration with a null section exits cleanly."""
        config = linked_dataset["dir"] / "null.yaml"
        config.write_text("output: null\n")
        runner = CliRunner()
        result = runner.invoke(main, run_args(linked_dataset, '--config', str(config)))

        assert result.exit_code == 1
        assert 'Missing configuration section: output' in result.output
        assert not isinstance(result.exception, AttributeError)

    def test_bad_multiplicity_range(self, linked_dataset):
        """Test a malformed -m value."""
        runner = CliRunner()
        result = runner.invoke(main, [
            'run', '-f', str(linked_dataset["fasta"]), '-a', str(linked_dataset["fofn"]),
            '-m', '100-1',
        ])

        assert result.exit_code == 1
        assert 'Error' in result.output

    def test_bad_identity(self, linked_dataset):
        """Test an out-of-range -s value."""
        runner = CliRunner()
        result = runner.invoke(main, [
            'run', '-f', str(linked_dataset["fasta"]), '-a', str(linked_dataset["fofn"]),
            '-s', '120',
        ])

        assert result.exit_code == 1

    def test_missing_sequence_file(self, linked_dataset):
        """Test a sequence file that does not exist."""
        runner = CliRunner()
        result = runner.invoke(main, [
            'run', '-f', 'absent.fa', '-a', str(linked_dataset["fofn"]),
        ])

        assert result.exit_code != 0

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.
