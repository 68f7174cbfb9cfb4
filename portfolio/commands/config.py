import click
import json
import sys

from portfolio.config import load_config, get_config_path, get_default_config, save_config
from portfolio.errors import ConfigError
from portfolio.exit_codes import CONFIG_ERROR


def _mask_token(config):
    token = config.get('github', {}).get('token')
    if token:
        config['github']['token'] = '***'
    return config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--show-token", is_flag=True, help="Print the GitHub token instead of masking it")
def show_config(pretty, show_token):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    """
    try:
        config = load_config(strict=True)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(CONFIG_ERROR)

    if not show_token:
        config = _mask_token(config)

    if pretty:
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        click.echo(json.dumps(config, ensure_ascii=False))


@config_cmd.command("path")
def config_path():
    """Show the config file path being used."""
    path = get_config_path()
    click.echo(json.dumps({"config_path": str(path), "exists": path.exists()}))


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
def init_config(force):
    """Write the default configuration file."""
    path = get_config_path()
    if path.exists() and not force:
        click.echo(f"Configuration already exists at {path}. Use --force to overwrite.")
        return

    try:
        written = save_config(get_default_config())
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(CONFIG_ERROR)
    click.echo(f"Configuration written to {written}")
