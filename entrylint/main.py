"""entrylint CLI - lint the entry points of JavaScript packages."""

import logging

import click

from .commands.config import config as config_group
from .commands.lint import lint_cmd

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="entrylint")
def cli():
    """entrylint - check that package.json entry points resolve consistently."""


cli.add_command(lint_cmd)
cli.add_command(config_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
