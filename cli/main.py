# cli/main.py
"""Main CLI entry point for Lockable Resources."""

import click

from lockable import __version__
from lockable.config import get_settings
from lockable.log import configure_logging


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """Lockable Resources CLI - inspect pools and check resource requirements."""
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_output=settings.log_json,
    )


def register_commands():
    """Register all CLI command groups."""
    from cli.commands.resources import resources
    cli.add_command(resources)


register_commands()


if __name__ == '__main__':
    cli()
