"""
Tests for the portfolio command line interface.

Every test runs with an empty HOME and a theme storage file inside it, so
nothing from the real user configuration leaks in.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from portfolio import __version__
from portfolio.cli import cli
from portfolio.errors import ConfigError, GitHubAPIError
from portfolio.exit_codes import (
    API_ERROR,
    CONFIG_ERROR,
    DATA_ERROR,
    GENERAL_ERROR,
    INTERRUPTED,
    USAGE_ERROR,
    get_exit_code_for_exception,
)
from portfolio.infra import GitHubClient
from conftest import api_repo

ITEMS = [
    api_repo("alpha", "2024-05-01T00:00:00Z", stars=80, language="Python", description="Data tools"),
    api_repo("beta", "2024-05-20T00:00:00Z", language="Go", description="CLI helper"),
    api_repo("gamma", "2024-05-25T00:00:00Z", stars=1, fork=True),
]


@pytest.fixture
def home(tmp_path):
    env = {
        'HOME': str(tmp_path),
        'PORTFOLIO_THEME_STORAGE_PATH': str(tmp_path / 'storage.json'),
        'PORTFOLIO_THEME_SYSTEM_PREFERENCE': 'light',
    }
    with patch.dict(os.environ, env, clear=True):
        yield tmp_path


@pytest.fixture
def runner(home):
    return CliRunner()


def write_config(home, data):
    config_dir = home / '.portfolio'
    config_dir.mkdir(exist_ok=True)
    path = config_dir / 'config.json'
    path.write_text(json.dumps(data) if isinstance(data, dict) else data)
    return path


class TestGroup:

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for command in ('build', 'repos', 'projects', 'theme', 'config'):
            assert command in result.output


class TestConfigCommands:

    def test_path(self, runner, home):
        result = runner.invoke(cli, ['config', 'path'])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {'config_path': str(home / '.portfolio' / 'config.json'), 'exists': False}

    def test_init_then_refuse(self, runner, home):
        result = runner.invoke(cli, ['config', 'init'])
        assert result.exit_code == 0
        assert 'Configuration written to' in result.output
        path = home / '.portfolio' / 'config.json'
        assert json.loads(path.read_text())['feed']['limit'] == 12

        result = runner.invoke(cli, ['config', 'init'])
        assert 'already exists' in result.output

        result = runner.invoke(cli, ['config', 'init', '--force'])
        assert 'Configuration written to' in result.output

    def test_show_masks_token(self, runner, home):
        write_config(home, {'github': {'username': 'octocat', 'token': 'ghp_secret'}})
        result = runner.invoke(cli, ['config', 'show'])
        assert result.exit_code == 0
        config = json.loads(result.stdout)
        assert config['github']['token'] == '***'
        assert config['github']['username'] == 'octocat'
        assert 'ghp_secret' not in result.output

    def test_show_token(self, runner, home):
        write_config(home, {'github': {'token': 'ghp_secret'}})
        result = runner.invoke(cli, ['config', 'show', '--show-token', '--pretty'])
        assert json.loads(result.stdout)['github']['token'] == 'ghp_secret'

    def test_show_broken_config(self, runner, home):
        write_config(home, '{broken')
        result = runner.invoke(cli, ['config', 'show'])
        assert result.exit_code == CONFIG_ERROR


class TestProjectCommands:

    def test_list_json(self, runner):
        result = runner.invoke(cli, ['projects', 'list', '--format', 'json'])
        assert result.exit_code == 0
        assert [p['id'] for p in json.loads(result.stdout)] == ['project-2', 'project-3']

    def test_list_all_jsonl(self, runner):
        result = runner.invoke(cli, ['projects', 'list', '--all', '--format', 'jsonl'])
        lines = [json.loads(line) for line in result.stdout.splitlines() if line.strip()]
        assert [p['id'] for p in lines] == ['project-1', 'project-2', 'project-3']

    def test_list_table(self, runner):
        result = runner.invoke(cli, ['projects', 'list'])
        assert result.exit_code == 0

    def test_show_json(self, runner):
        result = runner.invoke(cli, ['projects', 'show', 'project-1', '--json'])
        assert result.exit_code == 0
        project = json.loads(result.stdout)[0]
        assert project['id'] == 'project-1'
        assert project['details']['metrics']

    def test_show_unknown(self, runner):
        result = runner.invoke(cli, ['projects', 'show', 'nope'])
        assert result.exit_code == USAGE_ERROR
        assert "unknown project 'nope'" in result.output

    def test_missing_catalog_file(self, runner, home):
        os.environ['PORTFOLIO_SITE_PROJECTS_FILE'] = str(home / 'missing.yaml')
        result = runner.invoke(cli, ['projects', 'list'])
        assert result.exit_code == DATA_ERROR


class TestThemeCommands:

    def show(self, runner):
        result = runner.invoke(cli, ['theme', 'show', '--json'])
        assert result.exit_code == 0
        return json.loads(result.stdout)

    def test_default_follows_system(self, runner, home):
        status = self.show(runner)
        assert status == {
            'theme': 'light',
            'source': 'system',
            'system': 'light',
            'storage_path': str(home / 'storage.json'),
        }

    def test_set_toggle_reset(self, runner, home):
        result = runner.invoke(cli, ['theme', 'set', 'dark'])
        assert result.output.strip() == 'Theme set to dark'
        assert self.show(runner)['source'] == 'saved'
        assert json.loads((home / 'storage.json').read_text()) == {'portfolio-theme': 'dark'}

        result = runner.invoke(cli, ['theme', 'toggle'])
        assert result.output.strip() == 'Switched to light mode'
        assert self.show(runner)['theme'] == 'light'

        result = runner.invoke(cli, ['theme', 'reset'])
        assert result.output.strip() == 'Theme follows the system preference (light)'
        assert self.show(runner)['source'] == 'system'

    def test_set_rejects_unknown_theme(self, runner):
        result = runner.invoke(cli, ['theme', 'set', 'sepia'])
        assert result.exit_code == USAGE_ERROR

    def test_show_table(self, runner):
        result = runner.invoke(cli, ['theme', 'show'])
        assert result.exit_code == 0
        assert 'light' in result.output


class TestReposCommand:

    def test_json(self, runner):
        with patch.object(GitHubClient, 'list_user_repos', return_value=ITEMS) as fetch:
            result = runner.invoke(cli, ['repos', '-u', 'octocat', '--format', 'json'])
        assert result.exit_code == 0
        fetch.assert_called_once_with('octocat')
        assert [r['name'] for r in json.loads(result.stdout)] == ['beta', 'alpha']

    def test_search_and_starred(self, runner):
        with patch.object(GitHubClient, 'list_user_repos', return_value=ITEMS):
            searched = runner.invoke(cli, ['repos', '--search', 'cli', '--format', 'json'])
            starred = runner.invoke(cli, ['repos', '--starred', '--format', 'json'])
        assert [r['name'] for r in json.loads(searched.stdout)] == ['beta']
        assert [r['name'] for r in json.loads(starred.stdout)] == ['alpha']

    def test_limit(self, runner):
        with patch.object(GitHubClient, 'list_user_repos', return_value=ITEMS):
            result = runner.invoke(cli, ['repos', '--limit', '1', '--format', 'jsonl'])
        assert [json.loads(line)['name'] for line in result.stdout.splitlines()] == ['beta']

    def test_table(self, runner):
        with patch.object(GitHubClient, 'list_user_repos', return_value=ITEMS):
            result = runner.invoke(cli, ['repos'])
        assert result.exit_code == 0

    def test_api_failure(self, runner):
        error = GitHubAPIError("GitHub API Error: 404 Not Found", status_code=404)
        with patch.object(GitHubClient, 'list_user_repos', side_effect=error):
            result = runner.invoke(cli, ['repos', '-u', 'ghost'])
        assert result.exit_code == API_ERROR
        assert '404 Not Found' in result.output

    def test_malformed_payload(self, runner):
        with patch.object(GitHubClient, 'list_user_repos', return_value=[{'name': 'x'}]):
            result = runner.invoke(cli, ['repos'])
        assert result.exit_code == DATA_ERROR


class TestBuildCommand:

    def test_build_site(self, runner, home):
        out = home / 'public'
        with patch.object(GitHubClient, 'list_user_repos', return_value=ITEMS):
            result = runner.invoke(cli, ['build', '-o', str(out), '-u', 'octocat', '--title', 'My Work'])
        assert result.exit_code == 0, result.output
        assert f"Built {out / 'index.html'} (2 projects, 2 repositories)" in result.output

        html = (out / 'index.html').read_text()
        assert html.startswith('<!DOCTYPE html>')
        assert '<title>My Work</title>' in html
        assert 'data-theme="light"' in html
        assert 'data-repo-name="beta"' in html
        assert 'data-project-id="project-3"' in html
        assert (out / 'styles.css').read_text().strip()

    def test_feed_failure_still_builds(self, runner, home):
        out = home / 'site'
        error = GitHubAPIError("Network error: connection refused")
        with patch.object(GitHubClient, 'list_user_repos', side_effect=error):
            result = runner.invoke(cli, ['build', '-o', str(out)])
        assert result.exit_code == 0
        assert 'repositories could not be loaded' in result.output
        assert 'Network error: connection refused' in (out / 'index.html').read_text()

    def test_feed_failure_strict(self, runner, home):
        out = home / 'site'
        error = GitHubAPIError("Network error: connection refused")
        with patch.object(GitHubClient, 'list_user_repos', side_effect=error):
            result = runner.invoke(cli, ['build', '-o', str(out), '--strict'])
        assert result.exit_code == API_ERROR
        assert not Path(out / 'index.html').exists()

    def test_broken_config(self, runner, home):
        write_config(home, '{broken')
        result = runner.invoke(cli, ['build', '-o', str(home / 'site')])
        assert result.exit_code == CONFIG_ERROR

    def test_missing_catalog(self, runner, home):
        os.environ['PORTFOLIO_SITE_PROJECTS_FILE'] = str(home / 'missing.yaml')
        with patch.object(GitHubClient, 'list_user_repos', return_value=ITEMS):
            result = runner.invoke(cli, ['build', '-o', str(home / 'site')])
        assert result.exit_code == DATA_ERROR


class TestExitCodes:

    @pytest.mark.parametrize("exc,code", [
        (GitHubAPIError("boom"), API_ERROR),
        (ConfigError("bad"), CONFIG_ERROR),
        (json.JSONDecodeError("x", "doc", 0), DATA_ERROR),
        (KeyboardInterrupt(), INTERRUPTED),
        (RuntimeError("other"), GENERAL_ERROR),
    ])
    def test_mapping(self, exc, code):
        assert get_exit_code_for_exception(exc) == code
