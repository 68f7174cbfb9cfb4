#!/usr/bin/env python3

import click

from portfolio import __version__
from portfolio.config import load_config, configure_logging
from portfolio.commands.build import build_handler
from portfolio.commands.repos import repos_handler
from portfolio.commands.projects import projects_cmd
from portfolio.commands.theme import theme_cmd
from portfolio.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__, prog_name="portfolio")
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """portfolio - Personal portfolio page with a live GitHub repository feed.

    Builds the page as static HTML, lists the repository feed and the
    curated projects in the terminal, and manages the saved theme.
    """
    configure_logging(load_config(), verbose)


cli.add_command(build_handler, name='build')
cli.add_command(repos_handler, name='repos')
cli.add_command(projects_cmd)
cli.add_command(theme_cmd)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
