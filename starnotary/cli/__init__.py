"""
starnotary/cli/__init__.py

starnotary CLI - root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    starnotary = "starnotary.cli:cli"

The chain is process-local, so the CLI is wallet-side tooling plus an
in-process demonstration. Nothing here talks to a running registry.
"""

import logging
import sys

import click
import yaml

from starnotary.cli.demo import demo_command
from starnotary.cli.wallet import address_command, keygen_command, sign_command
from starnotary.core.config import LOG_LEVELS, RegistryConfig
from starnotary.core.exceptions import StarNotaryError


@click.group()
@click.version_option(package_name="starnotary")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML registry config. Defaults to STARNOTARY_* environment overrides.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path, log_level) -> None:
    """
    starnotary - register star ownership on a hash-linked chain.

    \b
    Commands:
      keygen    Create a wallet key and print its address.
      address   Print the address of a wallet key.
      sign      Sign an ownership challenge.
      demo      Run the registration workflow in-process.
    """
    try:
        if config_path:
            config = RegistryConfig.from_yaml(config_path)
        else:
            config = RegistryConfig.from_env()
    except (StarNotaryError, yaml.YAMLError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    if log_level:
        config.log_level = log_level.upper()

    logging.basicConfig(
        level=  config.log_level,
        format= "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


cli.add_command(keygen_command)
cli.add_command(address_command)
cli.add_command(sign_command)
cli.add_command(demo_command)
