"""
Repository feed command.

Lists the same repositories the page shows: forks without enough stars
dropped, newest update first, capped, then narrowed by search text and
category.
"""

import sys

import click

from ..config import load_config
from ..domain import Repository
from ..errors import GitHubAPIError
from ..exit_codes import get_exit_code_for_exception
from ..format_utils import format_output
from ..infra import GitHubClient
from ..render import render_repositories_table
from ..repo_filter import Category, FilterState, filter_repositories, select_repositories


@click.command('repos')
@click.option('--username', '-u', help='GitHub account (default: github.username)')
@click.option('--search', '-s', default='', help='Case-insensitive match on name, description or language')
@click.option('--starred', is_flag=True, help='Only repositories above the starred threshold')
@click.option('--limit', type=int, help='Maximum repositories kept (default: feed.limit)')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json', 'jsonl', 'yaml']),
              default='table', help='Output format')
def repos_handler(username, search, starred, limit, output_format):
    """List a user's public repositories as the page shows them.

    Examples:
        portfolio repos
        portfolio repos -u octocat --search python
        portfolio repos --starred --format jsonl
    """
    config = load_config()
    github = config['github']
    feed = config['feed']
    username = username or github['username']

    client = GitHubClient(
        token=github.get('token') or None,
        api_url=github['api_url'],
        timeout=github['timeout_seconds'],
    )

    try:
        items = client.list_user_repos(username)
        repos = [Repository.from_api_response(item) for item in items]
    except (GitHubAPIError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(get_exit_code_for_exception(e))

    selected = select_repositories(
        repos,
        limit if limit is not None else feed['limit'],
        feed['fork_min_stars'],
    )
    state = FilterState(search, Category.STARRED if starred else Category.ALL)
    shown = filter_repositories(selected, state, feed['starred_min_stars'])

    if output_format == 'table':
        render_repositories_table(
            shown,
            title=f"Repositories of {username}",
            star_threshold=feed['starred_min_stars'],
        )
        return

    for chunk in format_output((repo.to_dict() for repo in shown), output_format):
        click.echo(chunk)
