"""CLI handling for `tzsource`."""
import logging

import click
import layer_loader

from tzsource.config import ConfigError, yaml_load, load_config
from tzsource.registry import DataSourceRegistry, registry_for_config
from tzsource.exceptions import (
    DataSourceNotFound,
    InvalidCountryCode,
    InvalidZoneinfoFile,
    InvalidZoneinfoDirectory,
    RequiredDependencyMissing,
    InvalidTimezoneIdentifier,
    ZoneinfoDirectoryNotFound,
)
from tzsource.data_source import DataSource

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@click.group()
@click.option(
    '-c',
    '--config-file',
    'config_files',
    help=(
        "Path to a config file. May be given more than once, earlier files "
        "take precedence."
    ),
    type=click.File(encoding='utf-8'),
    multiple=True,
)
@click.option(
    '--log-level',
    help="Minimum level of log messages to show.",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default='WARNING',
)
@click.pass_context
def main(ctx, config_files, log_level):
    """Look up timezone and country metadata."""
    logging.basicConfig(
        format=(
            "[%(asctime)s] [%(process)d] [%(levelname)s] "
            "[%(name)s] %(message)s"
        ),
        datefmt="%Y-%m-%d %H:%M:%S %z",
        level=getattr(logging, log_level.upper()),
    )

    if config_files:
        config_data = layer_loader.load_files(config_files, loader=yaml_load)
    else:
        config_data = {}

    try:
        ctx.obj = registry_for_config(load_config(config_data))
    except (
        ConfigError,
        InvalidZoneinfoDirectory,
        ZoneinfoDirectoryNotFound,
        RequiredDependencyMissing,
    ):
        logger.exception("Configuration Error")
        ctx.exit(1)


@main.command()
@click.pass_obj
def source(registry):
    """Show the data source in use."""
    click.echo(str(_get_data_source(registry)))


@main.command()
@click.option(
    '--data/--no-data',
    'include_data',
    help="Include timezones defined by data.",
    default=True,
)
@click.option(
    '--linked/--no-linked',
    'include_linked',
    help="Include timezones defined as links to other timezones.",
    default=True,
)
@click.pass_obj
def identifiers(registry, include_data, include_linked):
    """List the supported timezone identifiers."""
    data_source = _get_data_source(registry)

    if include_data and include_linked:
        selected = data_source.timezone_identifiers()
    elif include_data:
        selected = data_source.data_timezone_identifiers()
    elif include_linked:
        selected = data_source.linked_timezone_identifiers()
    else:
        selected = ()

    for identifier in selected:
        click.echo(identifier)


@main.command()
@click.argument('identifier')
@click.pass_obj
def validate(registry, identifier):
    """Check that IDENTIFIER is a supported timezone identifier."""
    canonical = _get_data_source(registry).valid_timezone_identifier(
        identifier,
    )

    if canonical is None:
        click.echo(
            f"{identifier} is not a valid timezone identifier",
            err=True,
        )
        click.get_current_context().exit(1)

    click.echo(canonical)


@main.command()
@click.argument('identifier')
@click.pass_obj
def lookup(registry, identifier):
    """Show the record for the timezone IDENTIFIER."""
    data_source = _get_data_source(registry)

    try:
        info = data_source.get_timezone_info(identifier)
    except InvalidTimezoneIdentifier:
        click.echo(f"Unknown timezone: {identifier}", err=True)
        click.get_current_context().exit(1)
    except InvalidZoneinfoFile:
        logger.exception(f"Unable to load {identifier}")
        click.get_current_context().exit(1)

    click.echo(repr(info))

    link_to_identifier = getattr(info, 'link_to_identifier', None)
    if link_to_identifier is not None:
        click.echo(f"Links to: {link_to_identifier}")


@main.command()
@click.pass_obj
def countries(registry):
    """List the supported country codes."""
    for code in sorted(_get_data_source(registry).country_codes()):
        click.echo(code)


@main.command()
@click.argument('code')
@click.pass_obj
def country(registry, code):
    """Show the name and timezones of the country CODE."""
    data_source = _get_data_source(registry)

    try:
        info = data_source.get_country_info(code)
    except InvalidCountryCode:
        click.echo(f"Unknown country: {code}", err=True)
        click.get_current_context().exit(1)

    click.echo(f"{info.code}: {info.name}")
    for zone in info.zones:
        click.echo(
            f"  {zone.identifier} "
            f"({zone.description_or_friendly_identifier()})",
        )


def _get_data_source(registry: DataSourceRegistry) -> DataSource:
    try:
        return registry.get()
    except DataSourceNotFound:
        logger.exception("No data source")
        click.get_current_context().exit(1)
        raise  # pragma: no cover
