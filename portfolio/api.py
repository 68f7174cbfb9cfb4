"""
High-level Python API for portfolio.

Builds the page, wires the components together and drives them.

Example:
    import portfolio

    # Create a page (uses config defaults)
    page = portfolio.Page()
    page.start()

    # Interact with it
    page.theme.toggle()
    page.catalog.open_project("project-2")
    page.document.press_key("Escape")

    # Search the repository feed
    page.document.type_text(page.document.get_element_by_id("repo-search"), "cli")
    page.scheduler.advance(0.3)
    print([r.name for r in page.feed.filtered])

    # Static snapshot of the current state
    html = page.snapshot_html()
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging

from .config import load_config, get_default_config, merge_configs
from .domain import Project
from .infra import GitHubClient, LocalStorage
from .page import Announcer, ColorSchemeQuery, Event, Scheduler, Window, build_document
from .services import ModalController, ProjectCatalog, RepositoryFeed, ThemeStore, load_projects

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Sorry, something went wrong. Please refresh the page and try again."
ERROR_NOTIFICATION_SECONDS = 5.0


class Page:
    """
    The portfolio page: document, event loop and components.

    Components are created in dependency order and started by start():
    theme first, then the modal, the project catalog, and finally the
    repository feed. Exceptions escaping event listeners or timers land
    in handle_error().
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        client: Optional[GitHubClient] = None,
        storage=None,
        system: Optional[ColorSchemeQuery] = None,
        projects: Optional[Sequence[Project]] = None,
        window: Optional[Window] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the page.

        Args:
            config: Full config dict (default: loaded from the config file)
            client: GitHub client (default: built from the github config)
            storage: Theme storage (default: LocalStorage at theme.storage_path)
            system: OS color scheme (default: resolved from config/terminal)
            projects: Project catalog (default: site.projects_file or bundled)
            window: Window that records opened links
            clock: Reference time for relative dates on repository cards
        """
        if config is None:
            self._config = load_config()
        else:
            self._config = merge_configs(get_default_config(), config)

        github = self._config['github']
        feed = self._config['feed']
        theme = self._config['theme']
        site = self._config['site']

        self.document = build_document(site['title'], github['username'], window)
        self.scheduler = Scheduler()
        self.document.on_error = self.handle_error
        self.scheduler.on_error = self.handle_error
        self.announcer = Announcer(self.document, self.scheduler)
        self.errors: List[BaseException] = []

        self.client = client or GitHubClient(
            token=github.get('token') or None,
            api_url=github['api_url'],
            timeout=github['timeout_seconds'],
        )
        self.storage = storage if storage is not None else LocalStorage(Path(theme['storage_path']).expanduser())
        self.system = system or ColorSchemeQuery.from_environment(theme.get('system_preference') or None)
        if projects is None:
            projects = load_projects(site.get('projects_file') or None)

        self.theme = ThemeStore(
            self.document, self.storage, self.system, self.announcer,
            storage_key=theme['storage_key'],
        )
        self.modal = ModalController(self.document, self.announcer)
        self.catalog = ProjectCatalog(self.document, self.modal, projects)
        self.feed = RepositoryFeed(
            self.document,
            self.client,
            github['username'],
            self.scheduler,
            self.announcer,
            limit=feed['limit'],
            fork_min_stars=feed['fork_min_stars'],
            starred_min_stars=feed['starred_min_stars'],
            debounce_ms=feed['debounce_ms'],
            clock=clock,
        )
        self._started = False

    @property
    def config(self) -> Dict[str, Any]:
        """Access the configuration."""
        return self._config

    def start(self) -> 'Page':
        """Initialize every component; safe to call more than once."""
        if self._started:
            return self
        self._started = True

        # Theme first so the page never renders in the wrong scheme
        self.theme.initialize()
        self.modal.initialize()
        self.catalog.render()
        self.feed.start()

        self._bind_anchor_links()
        self._lazy_load_images()
        logger.info("Portfolio page initialized")
        return self

    # =========================================================================
    # INCIDENTAL PAGE BEHAVIOUR
    # =========================================================================

    def _bind_anchor_links(self) -> None:
        """In-page links move focus to their target instead of navigating."""
        for link in self.document.query_selector_all('a[href]'):
            href = link.get_attribute('href')
            if not href.startswith('#') or len(href) < 2:
                continue

            def on_click(event: Event, target_id: str = href[1:]) -> None:
                event.prevent_default()
                target = self.document.get_element_by_id(target_id)
                if target is not None:
                    target.focus()

            link.add_event_listener('click', on_click)

    def _lazy_load_images(self) -> None:
        for img in self.document.query_selector_all('img'):
            if not img.has_class('critical') and not img.has_attribute('loading'):
                img.set_attribute('loading', 'lazy')

    # =========================================================================
    # ERRORS
    # =========================================================================

    def handle_error(self, error: BaseException) -> None:
        """
        Global handler for errors escaping listeners and timers.

        Logs the error, announces a generic message and shows a
        notification banner for five seconds.
        """
        logger.error(f"Application Error: {error}", exc_info=error)
        self.errors.append(error)
        self.announcer.announce(ERROR_MESSAGE)

        notification = self.document.create_element('div', {
            'class': 'error-notification',
            'role': 'alert',
            'aria-live': 'assertive',
        })
        notification.text_content = ERROR_MESSAGE
        self.document.body.append_child(notification)
        self.scheduler.call_later(ERROR_NOTIFICATION_SECONDS, notification.remove)

    # =========================================================================
    # OUTPUT
    # =========================================================================

    def snapshot_html(self) -> str:
        """Let pending timers run, then serialize the page."""
        self.scheduler.run_until_idle()
        return self.document.to_html()


# Convenience function for quick access
def create(username: Optional[str] = None, github_token: Optional[str] = None, **kwargs) -> Page:
    """
    Create and start a Page.

    Convenience function for:
        page = portfolio.create(username="octocat")

    Args:
        username: GitHub account whose repositories are listed
        github_token: GitHub API token
        **kwargs: Additional arguments passed to Page
    """
    config = kwargs.pop('config', None)
    if config is None:
        config = load_config()
    if username:
        config = merge_configs(config, {'github': {'username': username}})
    if github_token:
        config = merge_configs(config, {'github': {'token': github_token}})
    return Page(config=config, **kwargs).start()
