"""
Unit tests for portfolio.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

import yaml

from portfolio.config import (
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
    save_config,
)
from portfolio.errors import ConfigError


class ConfigTestCase(unittest.TestCase):
    """Runs each test with an empty HOME and no PORTFOLIO_* variables"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {'HOME': self.temp_dir}, clear=True)
        self.env.start()
        self.config_dir = Path(self.temp_dir) / '.portfolio'

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def write(self, name, text):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.config_dir / name
        path.write_text(text)
        return path


class TestDefaults(ConfigTestCase):

    def test_default_sections(self):
        config = get_default_config()
        for section in ('github', 'feed', 'theme', 'site', 'logging'):
            self.assertIn(section, config)
        self.assertEqual(config['feed']['limit'], 12)
        self.assertEqual(config['feed']['fork_min_stars'], 5)
        self.assertEqual(config['feed']['starred_min_stars'], 50)
        self.assertEqual(config['feed']['debounce_ms'], 300)
        self.assertEqual(config['theme']['storage_key'], 'portfolio-theme')

    def test_load_config_no_file(self):
        self.assertEqual(load_config(), get_default_config())

    def test_default_path(self):
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')


class TestLoading(ConfigTestCase):

    def test_json(self):
        self.write('config.json', json.dumps({'github': {'username': 'octocat'}}))
        config = load_config()
        self.assertEqual(config['github']['username'], 'octocat')
        # Untouched keys keep their defaults
        self.assertEqual(config['github']['api_url'], 'https://api.github.com')

    def test_yaml(self):
        self.write('config.yaml', 'feed:\n  limit: 6\n')
        self.assertEqual(load_config()['feed']['limit'], 6)

    def test_toml(self):
        self.write('config.toml', '[site]\ntitle = "My Work"\n')
        self.assertEqual(load_config()['site']['title'], 'My Work')

    def test_env_path_wins(self):
        self.write('config.json', json.dumps({'site': {'title': 'home'}}))
        other = Path(self.temp_dir) / 'other.yaml'
        other.write_text('site:\n  title: elsewhere\n')
        os.environ['PORTFOLIO_CONFIG'] = str(other)
        self.assertEqual(get_config_path(), other)
        self.assertEqual(load_config()['site']['title'], 'elsewhere')

    def test_invalid_file_falls_back_to_defaults(self):
        self.write('config.json', '{not json')
        with self.assertLogs('portfolio', level='ERROR'):
            config = load_config()
        self.assertEqual(config['feed']['limit'], 12)

    def test_invalid_file_strict(self):
        self.write('config.json', '{not json')
        with self.assertRaises(ConfigError):
            load_config(strict=True)

    def test_non_mapping_strict(self):
        self.write('config.yaml', '- just\n- a list\n')
        with self.assertRaises(ConfigError):
            load_config(strict=True)


class TestEnvironment(ConfigTestCase):

    def test_overrides(self):
        os.environ['PORTFOLIO_FEED_DEBOUNCE_MS'] = '150'
        os.environ['PORTFOLIO_THEME_STORAGE_PATH'] = '/tmp/storage.json'
        os.environ['PORTFOLIO_GITHUB_USERNAME'] = 'octocat'
        config = load_config()
        self.assertEqual(config['feed']['debounce_ms'], 150)
        self.assertEqual(config['theme']['storage_path'], '/tmp/storage.json')
        self.assertEqual(config['github']['username'], 'octocat')

    def test_value_types(self):
        config = {'a': {'flag': False, 'count': 0, 'name': ''}}
        with patch.dict(os.environ, {
            'PORTFOLIO_A_FLAG': 'yes',
            'PORTFOLIO_A_COUNT': '1',
            'PORTFOLIO_A_NAME': 'off-white',
        }):
            apply_env_overrides(config)
        self.assertIs(config['a']['flag'], True)
        self.assertEqual(config['a']['count'], 1)
        self.assertEqual(config['a']['name'], 'off-white')

    def test_unknown_keys_ignored(self):
        os.environ['PORTFOLIO_NOPE_KEY'] = 'x'
        self.assertNotIn('nope', load_config())

    def test_token_from_github_token(self):
        os.environ['GITHUB_TOKEN'] = 'ghp_fallback'
        self.assertEqual(load_config()['github']['token'], 'ghp_fallback')

    def test_portfolio_token_preferred(self):
        os.environ['GITHUB_TOKEN'] = 'ghp_fallback'
        os.environ['PORTFOLIO_GITHUB_TOKEN'] = 'ghp_specific'
        self.assertEqual(load_config()['github']['token'], 'ghp_specific')

    def test_file_token_wins(self):
        self.write('config.json', json.dumps({'github': {'token': 'from-file'}}))
        os.environ['GITHUB_TOKEN'] = 'ghp_fallback'
        self.assertEqual(load_config()['github']['token'], 'from-file')


class TestSaving(ConfigTestCase):

    def test_save_and_reload(self):
        config = get_default_config()
        config['github']['username'] = 'octocat'
        path = save_config(config)
        self.assertEqual(path, self.config_dir / 'config.json')
        self.assertEqual(json.loads(path.read_text())['github']['username'], 'octocat')
        self.assertEqual(load_config()['github']['username'], 'octocat')

    def test_save_yaml(self):
        self.write('config.yaml', 'site:\n  title: old\n')
        config = load_config()
        config['site']['title'] = 'new'
        path = save_config(config)
        self.assertEqual(yaml.safe_load(path.read_text())['site']['title'], 'new')

    def test_toml_saved_as_json(self):
        self.write('config.toml', '[site]\ntitle = "x"\n')
        with self.assertLogs('portfolio', level='WARNING'):
            path = save_config(get_default_config())
        self.assertEqual(path.suffix, '.json')

    def test_unwritable_location(self):
        with patch('portfolio.config.open', side_effect=PermissionError('denied'), create=True):
            with self.assertRaises(ConfigError):
                save_config(get_default_config())


class TestHelpers(unittest.TestCase):

    def test_merge_configs_nested(self):
        merged = merge_configs({'a': {'x': 1, 'y': 2}, 'b': 1}, {'a': {'y': 3}, 'c': 4})
        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})

    def test_configure_logging(self):
        self.assertEqual(configure_logging({'logging': {'level': 'warning'}}), logging.WARNING)
        self.assertEqual(configure_logging({'logging': {'level': 'WARNING'}}, verbose=True), logging.DEBUG)

    def test_configure_logging_unknown_level(self):
        with self.assertLogs('portfolio', level='WARNING'):
            self.assertEqual(configure_logging({'logging': {'level': 'chatty'}}), logging.INFO)

    def tearDown(self):
        configure_logging(get_default_config())


if __name__ == '__main__':
    unittest.main()
