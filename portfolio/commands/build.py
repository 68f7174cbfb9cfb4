"""
Build command for portfolio.

Starts the page the same way a browser would load it (theme, dialog,
project cards, repository feed), lets pending timers settle, and writes
the resulting document next to its stylesheet.
"""

import sys
from importlib import resources
from pathlib import Path

import click
import yaml

from ..api import Page
from ..config import load_config, merge_configs
from ..errors import ConfigError
from ..exit_codes import API_ERROR, CONFIG_ERROR, DATA_ERROR, GENERAL_ERROR
from ..page.layout import STYLESHEET


def read_stylesheet() -> str:
    return resources.files('portfolio').joinpath('data').joinpath(STYLESHEET).read_text(encoding='utf-8')


@click.command('build')
@click.option('--output', '-o', 'output_dir', type=click.Path(file_okay=False),
              help='Output directory (default: site.output_dir)')
@click.option('--username', '-u', help='GitHub account to list (default: github.username)')
@click.option('--title', help='Page title (default: site.title)')
@click.option('--strict', is_flag=True, help='Fail when the repository feed cannot be loaded')
def build_handler(output_dir, username, title, strict):
    """Render the portfolio page to static HTML.

    Writes index.html and styles.css to the output directory. If GitHub
    cannot be reached the page is still written, showing the feed's error
    panel, unless --strict is given.

    Examples:
        portfolio build
        portfolio build -o public --username octocat
        portfolio build --strict
    """
    try:
        config = load_config(strict=True)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(CONFIG_ERROR)

    overrides = {'github': {}, 'site': {}}
    if username:
        overrides['github']['username'] = username
    if title:
        overrides['site']['title'] = title
    config = merge_configs(config, overrides)

    try:
        page = Page(config=config).start()
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: could not load projects: {e}", err=True)
        sys.exit(DATA_ERROR)

    if page.feed.error:
        click.echo(f"Warning: repositories could not be loaded: {page.feed.error}", err=True)
        if strict:
            sys.exit(API_ERROR)

    target = Path(output_dir or config['site']['output_dir']).expanduser()
    try:
        target.mkdir(parents=True, exist_ok=True)
        (target / 'index.html').write_text(page.snapshot_html(), encoding='utf-8')
        (target / STYLESHEET).write_text(read_stylesheet(), encoding='utf-8')
    except OSError as e:
        click.echo(f"Error: could not write site to {target}: {e}", err=True)
        sys.exit(GENERAL_ERROR)

    click.echo(
        f"Built {target / 'index.html'} "
        f"({len(page.catalog.featured)} projects, {len(page.feed.repositories)} repositories)"
    )
