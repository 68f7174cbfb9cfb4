"""
Repository feed for portfolio.

Fetches the public repositories of one GitHub account, keeps a canonical
list (forks filtered, newest first, capped) and renders a derived view
filtered by the search field and the category buttons.

The feed never raises past its own boundary: a failed fetch shows the
error panel with a retry button instead.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..domain import Repository
from ..errors import GitHubAPIError
from ..infra import GitHubClient
from ..markup import repo_card_html
from ..page import Announcer, Document, Element, Event, Scheduler
from ..repo_filter import (
    Category,
    FilterState,
    FEED_LIMIT,
    FORK_MIN_STARS,
    STARRED_MIN_STARS,
    filter_repositories,
    select_repositories,
)

logger = logging.getLogger(__name__)

DEBOUNCE_MS = 300


class RepositoryFeed:
    """
    The repositories section of the page.

    Example:
        feed = RepositoryFeed(document, GitHubClient(), "octocat", scheduler, announcer)
        feed.start()            # load, then bind search and filters
        feed.apply_filters("cli")
        print([r.name for r in feed.filtered])
    """

    def __init__(
        self,
        document: Document,
        client: GitHubClient,
        username: str,
        scheduler: Scheduler,
        announcer: Optional[Announcer] = None,
        limit: int = FEED_LIMIT,
        fork_min_stars: int = FORK_MIN_STARS,
        starred_min_stars: int = STARRED_MIN_STARS,
        debounce_ms: int = DEBOUNCE_MS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.document = document
        self.client = client
        self.username = username
        self.scheduler = scheduler
        self.announcer = announcer
        self.limit = limit
        self.fork_min_stars = fork_min_stars
        self.starred_min_stars = starred_min_stars
        self.debounce_ms = debounce_ms
        self.clock = clock
        self.state = FilterState()
        self.loading = False
        self.error: Optional[str] = None
        self._repositories: List[Repository] = []
        self._filtered: List[Repository] = []
        self._bound = False
        self._retry_bound = False

    @property
    def repositories(self) -> Tuple[Repository, ...]:
        """Canonical list from the last successful fetch."""
        return tuple(self._repositories)

    @property
    def filtered(self) -> Tuple[Repository, ...]:
        """Derived view currently rendered."""
        return tuple(self._filtered)

    def _el(self, element_id: str) -> Optional[Element]:
        return self.document.get_element_by_id(element_id)

    def _now(self) -> Optional[datetime]:
        return self.clock() if self.clock is not None else None

    # -- loading ----------------------------------------------------------

    def start(self) -> None:
        """Load repositories, then bind the search field and filter buttons."""
        self.load()
        self.bind()

    def load(self) -> bool:
        """
        Fetch, select and render the repositories.

        Returns:
            True on success; on failure the error panel is shown
        """
        loading = self._el('repos-loading')
        error_panel = self._el('repos-error')
        self.loading = True
        self.error = None
        if loading is not None:
            loading.remove_class('hidden')
        if error_panel is not None:
            error_panel.add_class('hidden')

        try:
            items = self.client.list_user_repos(self.username)
            repos = [Repository.from_api_response(item) for item in items]
        except (GitHubAPIError, ValueError) as e:
            logger.error(f"Error loading repositories: {e}")
            self.loading = False
            if loading is not None:
                loading.add_class('hidden')
            self._show_error(str(e))
            return False

        self._repositories = select_repositories(repos, self.limit, self.fork_min_stars)
        self._filtered = list(self._repositories)
        self.loading = False
        if loading is not None:
            loading.add_class('hidden')
        logger.info(f"Loaded {len(self._repositories)} repositories for {self.username}")
        self.render()
        return True

    def _show_error(self, message: str) -> None:
        self.error = message
        error_panel = self._el('repos-error')
        if error_panel is None:
            logger.warning('Repository error panel not found')
            return

        message_el = error_panel.query_selector('.error-message')
        if message_el is not None:
            message_el.text_content = message
        error_panel.remove_class('hidden')

        retry = self._el('retry-repos')
        if retry is not None and not self._retry_bound:
            self._retry_bound = True
            retry.add_event_listener('click', self._on_retry)

    def _on_retry(self, event: Event) -> None:
        error_panel = self._el('repos-error')
        if error_panel is not None:
            error_panel.add_class('hidden')
        self.load()

    # -- rendering --------------------------------------------------------

    def render(self) -> None:
        grid = self._el('repositories-grid')
        if grid is None:
            logger.warning('Repositories grid element not found')
            return

        for card in grid.query_selector_all('.repo-card'):
            card.remove()

        empty = self._el('repos-empty')
        if not self._filtered:
            if empty is not None:
                empty.remove_class('hidden')
            return

        if empty is not None:
            empty.add_class('hidden')

        now = self._now()
        for repo in self._filtered:
            grid.append_child(self._create_card(repo, now))

    def _create_card(self, repo: Repository, now: Optional[datetime]) -> Element:
        card = self.document.create_element('div', {
            'class': 'repo-card',
            'role': 'listitem',
            'tabindex': '0',
            'data-repo-name': repo.name.lower(),
            'data-repo-language': (repo.language or '').lower(),
        })
        card.inner_html = repo_card_html(repo, now, self.starred_min_stars)

        def on_click(event: Event) -> None:
            self.document.window.open(repo.html_url, '_blank', 'noopener,noreferrer')

        def on_keydown(event: Event) -> None:
            if event.key in ('Enter', ' '):
                event.prevent_default()
                card.click()

        card.add_event_listener('click', on_click)
        card.add_event_listener('keydown', on_keydown)
        return card

    # -- filtering --------------------------------------------------------

    def bind(self) -> None:
        """Wire the category buttons and the debounced search field."""
        if self._bound:
            return
        self._bound = True

        buttons = self.document.query_selector_all('.filter-btn')
        for button in buttons:
            button.add_event_listener('click', self._make_filter_handler(button, buttons))

        search = self._el('repo-search')
        if search is None:
            logger.warning('Repository search field not found')
            return

        debounced = self.scheduler.debounce(self.apply_filters, self.debounce_ms / 1000)
        search.add_event_listener('input', lambda event: debounced())

        def on_keydown(event: Event) -> None:
            if event.key == 'Escape':
                debounced.cancel()
                search.value = ''
                self.apply_filters('')
                search.blur()

        search.add_event_listener('keydown', on_keydown)

    def _make_filter_handler(self, button: Element, buttons: List[Element]):
        def on_click(event: Event) -> None:
            for other in buttons:
                other.remove_class('active')
            button.add_class('active')
            try:
                category = Category(button.data('filter') or Category.ALL.value)
            except ValueError:
                logger.warning(f"Unknown repository filter: {button.data('filter')!r}")
                category = Category.ALL
            self.set_category(category)
        return on_click

    def set_category(self, category: Category) -> None:
        self.state = FilterState(self.state.search, Category(category))
        self.apply_filters()

    def apply_filters(self, search: Optional[str] = None) -> List[Repository]:
        """
        Recompute the derived view and render it.

        Args:
            search: Search text; defaults to the search field's current value
        """
        if search is None:
            field = self._el('repo-search')
            search = field.value if field is not None else self.state.search
        self.state = FilterState(search, self.state.category)
        self._filtered = filter_repositories(self._repositories, self.state, self.starred_min_stars)
        self.render()

        count = len(self._filtered)
        if self.announcer is not None:
            self.announcer.announce(f"{count} {'repository' if count == 1 else 'repositories'} found")
        return list(self._filtered)
