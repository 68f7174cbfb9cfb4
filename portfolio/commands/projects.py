"""
Project catalog commands.
"""

import sys

import click
import yaml

from ..config import load_config
from ..exit_codes import DATA_ERROR, USAGE_ERROR
from ..format_utils import format_output
from ..render import render_project_detail, render_projects_table
from ..services import load_projects


def _load():
    config = load_config()
    try:
        return load_projects(config['site'].get('projects_file') or None)
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: could not load projects: {e}", err=True)
        sys.exit(DATA_ERROR)


@click.group("projects")
def projects_cmd():
    """Curated project catalog commands."""
    pass


@projects_cmd.command("list")
@click.option('--all', 'show_all', is_flag=True, help='Include projects that are not featured')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json', 'jsonl', 'yaml']),
              default='table', help='Output format')
def list_projects(show_all, output_format):
    """List the projects shown on the page."""
    projects = [p for p in _load() if show_all or p.featured]

    if output_format == 'table':
        render_projects_table(projects)
        return

    for chunk in format_output((p.to_dict() for p in projects), output_format):
        click.echo(chunk)


@projects_cmd.command("show")
@click.argument('project_id')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSON')
def show_project(project_id, json_output):
    """Show the details of one project."""
    for project in _load():
        if project.id == project_id:
            break
    else:
        click.echo(f"Error: unknown project '{project_id}'", err=True)
        sys.exit(USAGE_ERROR)

    if json_output:
        for chunk in format_output(iter([project.to_dict()]), 'json'):
            click.echo(chunk)
        return

    render_project_detail(project)
