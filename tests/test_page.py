"""Tests for the page bootstrap in portfolio.api."""

import pytest

import portfolio
from portfolio.api import ERROR_MESSAGE, Page
from portfolio.infra import MemoryStorage
from portfolio.page import ColorSchemeQuery, is_hidden
from conftest import NOW, FakeGitHubClient, api_repo

ITEMS = [
    api_repo("alpha", "2024-05-01T00:00:00Z", stars=80, language="Python"),
    api_repo("beta", "2024-05-20T00:00:00Z", language="Go"),
]


def make_page(config=None, **kwargs):
    kwargs.setdefault('client', FakeGitHubClient(ITEMS))
    kwargs.setdefault('storage', MemoryStorage())
    kwargs.setdefault('system', ColorSchemeQuery(prefers_dark=False))
    kwargs.setdefault('clock', lambda: NOW)
    return Page(config=config if config is not None else {'github': {'username': 'octocat'}}, **kwargs)


@pytest.fixture
def page():
    return make_page().start()


class TestStart:

    def test_components_initialized(self, page):
        document = page.document
        assert document.root.get_attribute('data-theme') == 'light'
        project_ids = [c.get_attribute('data-project-id') for c in document.query_selector_all('.project-card')]
        assert project_ids == ['project-2', 'project-3']
        repo_names = [c.get_attribute('data-repo-name') for c in document.query_selector_all('.repo-card')]
        assert repo_names == ['beta', 'alpha']
        assert page.client.calls == ['octocat']

    def test_start_is_idempotent(self, page):
        page.start()
        assert page.client.calls == ['octocat']
        assert len(page.document.query_selector_all('.project-card')) == 2

    def test_config_merged_over_defaults(self):
        page = make_page({'github': {'username': 'someone'}, 'feed': {'limit': 1}})
        assert page.config['feed']['limit'] == 1
        assert page.config['feed']['starred_min_stars'] == 50
        page.start()
        assert page.client.calls == ['someone']
        assert [r.name for r in page.feed.repositories] == ['beta']

    def test_dark_system_preference(self):
        page = make_page(system=ColorSchemeQuery(prefers_dark=True)).start()
        assert page.document.root.get_attribute('data-theme') == 'dark'

    def test_feed_failure_leaves_rest_of_page_working(self, failing_client):
        page = make_page(client=failing_client).start()
        assert page.document.root.get_attribute('data-theme') == 'light'
        assert len(page.document.query_selector_all('.project-card')) == 2
        assert not is_hidden(page.document.get_element_by_id('repos-error'))
        assert page.errors == []

    def test_projects_override(self):
        page = make_page(projects=[]).start()
        assert page.document.query_selector_all('.project-card') == []

    def test_images_lazy_loaded_except_critical(self):
        page = make_page()
        main = page.document.get_element_by_id('main')
        hero = main.append_child(page.document.create_element('img', {'class': 'critical', 'src': 'hero.png'}))
        photo = main.append_child(page.document.create_element('img', {'src': 'photo.png'}))
        page.start()
        assert not hero.has_attribute('loading')
        assert photo.get_attribute('loading') == 'lazy'


class TestInteraction:

    def test_anchor_link_moves_focus(self, page):
        document = page.document
        document.query_selector('.skip-link').click()
        assert document.active_element.id == 'main'
        document.query_selector('a[href="#repositories"]').click()
        assert document.active_element.id == 'repositories'
        assert document.window.opened == []

    def test_project_dialog_round_trip(self, page):
        document = page.document
        card = document.query_selector('.project-card')
        card.focus()
        document.press_key('Enter')
        assert page.modal.title == page.catalog.get('project-2').title
        document.press_key('Escape')
        assert not page.modal.is_open
        assert document.active_element is card

    def test_theme_toggle_persists(self, page):
        page.document.query_selector('.theme-toggle').click()
        assert page.document.root.get_attribute('data-theme') == 'dark'
        assert page.storage.get_item('portfolio-theme') == 'dark'

    def test_search_through_page(self, page):
        document = page.document
        document.type_text(document.get_element_by_id('repo-search'), 'go')
        page.scheduler.advance(0.3)
        assert [r.name for r in page.feed.filtered] == ['beta']


class TestErrorHandling:

    def test_listener_error_shows_notification(self, page):
        def boom(event):
            raise RuntimeError("listener failed")

        page.document.query_selector('.site-title').add_event_listener('click', boom)
        page.document.query_selector('.site-title').click()

        assert len(page.errors) == 1
        notification = page.document.query_selector('.error-notification')
        assert notification is not None
        assert notification.get_attribute('role') == 'alert'
        assert notification.text_content == ERROR_MESSAGE
        assert page.announcer.history[-1] == ERROR_MESSAGE

        page.scheduler.advance(4.9)
        assert page.document.query_selector('.error-notification') is not None
        page.scheduler.advance(0.1)
        assert page.document.query_selector('.error-notification') is None

    def test_timer_error(self, page):
        def boom():
            raise ValueError("timer failed")

        page.scheduler.call_later(0, boom)
        page.scheduler.advance(0)
        assert isinstance(page.errors[0], ValueError)

    def test_error_logged(self, page, caplog):
        page.handle_error(RuntimeError("kaput"))
        assert "Application Error: kaput" in caplog.text


class TestSnapshot:

    def test_snapshot_html(self, page):
        html = page.snapshot_html()
        assert html.startswith('<!DOCTYPE html>')
        assert 'data-theme="light"' in html
        assert 'data-project-id="project-2"' in html
        assert 'data-repo-name="alpha"' in html

    def test_snapshot_flushes_timers(self, page):
        page.handle_error(RuntimeError("kaput"))
        assert 'error-notification' not in page.snapshot_html()


class TestCreate:

    def test_create_starts_page(self):
        client = FakeGitHubClient(ITEMS)
        page = portfolio.create(
            username='someone',
            github_token='secret',
            config={},
            client=client,
            storage=MemoryStorage(),
            system=ColorSchemeQuery(prefers_dark=False),
        )
        assert isinstance(page, Page)
        assert client.calls == ['someone']
        assert page.config['github']['token'] == 'secret'
        assert len(page.document.query_selector_all('.repo-card')) == 2
