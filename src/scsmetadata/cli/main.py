"""Command-line interface for scs-metadata."""

import click
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from ..core import Config, MetadataAggregator, MetadataError
from ..utils.output import OutputFormatter


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Setup logging configuration."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _classpath(roots: tuple, classpath: Optional[str]) -> Optional[List[Path]]:
    """Combine positional roots and a path-separated classpath string."""
    elements = list(roots)
    if classpath:
        elements.extend(Path(element) for element in classpath.split(os.pathsep) if element)
    return elements or None


def _fail(config: Config, error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    if config.output.verbose:
        import traceback
        traceback.print_exc()
    sys.exit(1)


classpath_argument = click.argument('roots', nargs=-1, type=click.Path(path_type=Path))
classpath_option = click.option('--classpath',
                                 help=f'Classpath elements separated by "{os.pathsep}"')


@click.group()
@click.version_option(version='0.1.0')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Configuration file path')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, config: Optional[Path]):
    """scs-metadata - aggregate Spring Boot configuration metadata for stream apps."""
    ctx.ensure_object(dict)

    # Setup logging
    setup_logging(verbose, quiet)

    # Load configuration
    if config:
        ctx.obj['config'] = Config.load_from_file(config)
    else:
        # Try to find config file automatically
        config_file = Config.find_config_file()
        if config_file:
            ctx.obj['config'] = Config.load_from_file(config_file)
        else:
            ctx.obj['config'] = Config.get_default_config()

    # Override config with CLI options
    if verbose:
        ctx.obj['config'].output.verbose = True
    if quiet:
        ctx.obj['config'].output.quiet = True


@cli.command()
@classpath_argument
@classpath_option
@click.option('--output-dir', '-o', 'output_directory', type=click.Path(path_type=Path),
              help='Directory receiving the artifact')
@click.option('--artifact-id', help='Artifact id used to name the jar')
@click.option('--version', 'artifact_version', help='Artifact version used to name the jar')
@click.option('--classifier', help='Artifact classifier (default: metadata)')
@click.option('--name-filter', 'name_filters', multiple=True,
              help='Property name kept in the inlined metadata (repeatable)')
@click.option('--source-type-filter', 'source_type_filters', multiple=True,
              help='Source type kept in the inlined metadata (repeatable)')
@click.option('--container-image-metadata/--no-container-image-metadata', default=None,
              help='Also write the filtered metadata as a base64 property')
@click.option('--legacy-whitelist/--no-legacy-whitelist', 'write_legacy_whitelist', default=None,
              help='Also write the whitelist at its legacy location')
@click.option('--enum-hints/--no-enum-hints', default=None,
              help='Add value hints for enum-typed properties')
@click.pass_context
def aggregate(ctx,
              roots: tuple,
              classpath: Optional[str],
              output_directory: Optional[Path],
              artifact_id: Optional[str],
              artifact_version: Optional[str],
              classifier: Optional[str],
              name_filters: tuple,
              source_type_filters: tuple,
              container_image_metadata: Optional[bool],
              write_legacy_whitelist: Optional[bool],
              enum_hints: Optional[bool]):
    """Aggregate metadata and whitelists from ROOTS into a metadata jar."""
    config = ctx.obj['config']

    cli_args = {
        'classpath': _classpath(roots, classpath),
        'output_directory': output_directory,
        'artifact_id': artifact_id,
        'version': artifact_version,
        'classifier': classifier,
        'name_filters': list(name_filters) or None,
        'source_type_filters': list(source_type_filters) or None,
        'container_image_metadata': container_image_metadata,
        'write_legacy_whitelist': write_legacy_whitelist,
        'enum_hints': enum_hints,
    }
    config = config.merge_with_cli_args(**{k: v for k, v in cli_args.items() if v is not None})

    try:
        aggregator = MetadataAggregator(config)
        report = aggregator.run()

        if not config.output.quiet:
            formatter = OutputFormatter(config.output)
            click.echo(formatter.format_summary(report.result))
            click.echo(f"Metadata artifact written to {report.artifact_path}")
            if report.encoded_metadata_path:
                click.echo(f"Encoded metadata written to {report.encoded_metadata_path}")

    except MetadataError as e:
        _fail(config, e)


@cli.command()
@classpath_argument
@classpath_option
@click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'json']),
              help='Output format')
@click.option('--filtered', is_flag=True, help='Apply the configured name/source type filter')
@click.pass_context
def inspect(ctx, roots: tuple, classpath: Optional[str], output_format: Optional[str], filtered: bool):
    """Show the merged metadata of ROOTS without writing an artifact."""
    config = ctx.obj['config']
    cli_args = {
        'classpath': _classpath(roots, classpath),
        'format': output_format,
    }
    config = config.merge_with_cli_args(**{k: v for k, v in cli_args.items() if v is not None})

    try:
        aggregator = MetadataAggregator(config)
        result = aggregator.collect()
        if filtered:
            result.metadata = aggregator.filtered_metadata(result)

        formatter = OutputFormatter(config.output)
        click.echo(formatter.format_result(result))

    except MetadataError as e:
        _fail(config, e)


@cli.command()
@classpath_argument
@classpath_option
@click.option('--readme', type=click.Path(path_type=Path), help='README to update (default: README.adoc)')
@click.pass_context
def document(ctx, roots: tuple, classpath: Optional[str], readme: Optional[Path]):
    """Regenerate the configuration properties section of a README."""
    config = ctx.obj['config']
    cli_args = {
        'classpath': _classpath(roots, classpath),
        'readme': readme,
    }
    config = config.merge_with_cli_args(**{k: v for k, v in cli_args.items() if v is not None})

    try:
        count = MetadataAggregator(config).document()
        if count is not None and not config.output.quiet:
            click.echo(f"Documented {count} configuration properties in {config.documentation.readme}")

    except MetadataError as e:
        _fail(config, e)


@cli.command()
@click.option('--output', '-o', type=click.Path(path_type=Path),
              default=Path('.scsmetadata.yaml'),
              help='Output configuration file path')
@click.pass_context
def init(ctx, output: Path):
    """Initialize a new configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                click.echo("Cancelled.")
                return

        # Create default configuration
        config = Config.get_default_config()

        # Save to file
        config.save_to_file(output)

        click.echo(f"Configuration file created: {output}")
        click.echo("Edit this file to set the classpath, artifact naming and filters.")

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
