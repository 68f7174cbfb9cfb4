"""
Theme commands.

Read and change the saved theme the page starts with. The same store the
page uses is driven here, so the rules are identical: a saved choice wins,
otherwise the system preference applies.
"""

import json

import click

from ..config import load_config
from ..domain import Theme
from ..infra import LocalStorage
from ..page import ColorSchemeQuery, build_document
from ..render import render_theme_status
from ..services import ThemeStore


def _theme_store(config):
    settings = config['theme']
    store = ThemeStore(
        build_document(),
        LocalStorage(settings['storage_path']),
        ColorSchemeQuery.from_environment(settings.get('system_preference') or None),
        storage_key=settings['storage_key'],
    )
    store.initialize()
    return store


def _status(store):
    stored = store.stored_theme()
    return {
        'theme': store.current.value,
        'source': 'saved' if stored is not None else 'system',
        'system': 'dark' if store.system.matches else 'light',
        'storage_path': str(store.storage.path),
    }


@click.group("theme")
def theme_cmd():
    """Light/dark theme commands."""
    pass


@theme_cmd.command("show")
@click.option('--json', 'json_output', is_flag=True, help='Output as JSON')
def show_theme(json_output):
    """Show the theme the page would start with."""
    status = _status(_theme_store(load_config()))
    if json_output:
        click.echo(json.dumps(status))
    else:
        render_theme_status(status)


@theme_cmd.command("toggle")
def toggle_theme():
    """Switch between light and dark and save the choice."""
    store = _theme_store(load_config())
    theme = store.toggle()
    click.echo(f"Switched to {theme.value} mode")


@theme_cmd.command("set")
@click.argument('theme', type=click.Choice([t.value for t in Theme]))
def set_theme(theme):
    """Save an explicit theme."""
    store = _theme_store(load_config())
    store.force_set(theme)
    click.echo(f"Theme set to {store.current.value}")


@theme_cmd.command("reset")
def reset_theme():
    """Forget the saved theme and follow the system preference."""
    store = _theme_store(load_config())
    theme = store.reset_to_system()
    click.echo(f"Theme follows the system preference ({theme.value})")
