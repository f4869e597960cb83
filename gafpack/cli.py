#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for Gafpack.

This module provides the main CLI entry point and all subcommands for
projecting GAF alignments onto GFA graph nodes.
"""

import logging
import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.schema import TEMPLATES, load_config, save_config_template, validate_config
from .errors import GafpackError
from .graph.graph_index import load_graph_index
from .io_utils.vector_export import render_coverage
from .pipeline import CoverageOptions, project_coverage, write_projection

logger = logging.getLogger(__name__)


def _configure_logging(level_name, log_file=None):
    """Route log records to stderr (and optionally a file)."""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose (debug) logging')
@click.option('--quiet', '-q', is_flag=True, help='Only log errors')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    Gafpack: GAF to graph-node coverage projection

    Converts alignments against a pangenome variation graph (GAF) into a
    per-node coverage vector over the graph's segments (GFA).
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


def _log_level(ctx, config):
    if ctx.obj.get('VERBOSE'):
        return 'DEBUG'
    if ctx.obj.get('QUIET'):
        return 'ERROR'
    return config['output']['logging'].get('level') or 'WARNING'


# ============================================================================
# Coverage Projection
# ============================================================================

@main.command()
@click.option('--gfa', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Input GFA pangenome graph (plain, .gz or .bgz)')
@click.option('--gaf', '-g', required=True, type=click.Path(exists=True, dir_okay=False, allow_dash=True),
              help="Input GAF alignments (plain, .gz or .bgz; '-' for stdin)")
@click.option('--len-scale', '-l', is_flag=True,
              help='Scale coverage values by node length')
@click.option('--coverage-column', '-c', is_flag=True,
              help='Emit graph coverage vector in a single column')
@click.option('--weight-queries', '-w', is_flag=True,
              help='Weight coverage by query group occurrences (reads the GAF twice)')
@click.option('--query-key', type=click.Choice(['name', 'name-span']), default=None,
              help="Query grouping for --weight-queries (default: name)")
@click.option('--sample', '-s', type=str, default=None,
              help='Sample label for the output (default: the GAF path)')
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default=None,
              help='Output file (default: stdout)')
@click.pass_context
def pack(ctx, gfa, gaf, len_scale, coverage_column, weight_queries, query_key, sample,
         config_file, output):
    """
    Project GAF alignments into per-node graph coverage.

    Examples:
        # Raw coverage in one row
        gafpack pack --gfa graph.gfa.gz -g sample.gaf > sample.cov.tsv

        # Mean depth per node, multi-mapped reads split evenly
        gafpack pack --gfa graph.gfa -g sample.gaf.gz -l -w -c
    """
    try:
        config = load_config(Path(config_file) if config_file else None)
        errors = validate_config(config)
        if errors:
            for error in errors:
                click.echo(f"✗ {error}", err=True)
            sys.exit(1)

        _configure_logging(_log_level(ctx, config), config['output']['logging'].get('log_file'))

        options = CoverageOptions.from_config(
            config,
            len_scale=len_scale,
            coverage_column=coverage_column,
            weight_queries=weight_queries,
            query_key=query_key,
        )
        logger.debug(f"Resolved options: {options}")

        _, vector, source_name = project_coverage(gfa, gaf, options)
        label = sample or source_name

        if output:
            write_projection(vector, label, options, output_path=Path(output))
        else:
            click.echo(render_coverage(vector, label, options.coverage_column,
                                       options.node_label_prefix), nl=False)

    except (GafpackError, FileNotFoundError) as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)


@main.command('graph-stats')
@click.argument('gfa', type=click.Path(exists=True, dir_okay=False))
def graph_stats(gfa):
    """Summarize the segments and other records of a GFA file."""
    try:
        index = load_graph_index(gfa)
    except GafpackError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)

    stats = index.summary()
    click.echo(f"Graph: {gfa}")
    click.echo("=" * 60)
    click.echo(f"  Segments: {stats['segments']:,}")
    click.echo(f"  Total length: {stats['total_length']:,} bp")
    if stats['zero_length']:
        click.echo(f"  Zero-length segments: {stats['zero_length']:,} (incompatible with --len-scale)")
    for key in ('links', 'paths', 'walks', 'edges', 'ordered_groups', 'unordered_groups'):
        if stats[key]:
            click.echo(f"  {key.replace('_', ' ').capitalize()}: {stats[key]:,}")


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='gafpack_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(TEMPLATES), default='default',
              help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except GafpackError as e:
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
    except GafpackError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    coverage = config['coverage']
    output = config['output']
    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo("\nCoverage:")
    click.echo(f"  Length scaling: {'ON' if coverage['len_scale'] else 'OFF'}")
    click.echo(f"  Query weighting: {'ON' if coverage['weight_queries'] else 'OFF'}"
               f" (key: {coverage['query_key']})")
    click.echo("\nOutput:")
    click.echo(f"  Format: {'column' if output['coverage_column'] else 'row'}")
    click.echo(f"  Node label prefix: {output['node_label_prefix']}")
    click.echo(f"  Log level: {output['logging']['level']}")


if __name__ == '__main__':
    main()
