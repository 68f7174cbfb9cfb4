"""
portfolio - A personal portfolio page with a live GitHub repository feed.

The page is modelled headlessly: a small document tree that the page
components bind to, an event loop with a virtual clock, and a CLI that
renders the result to static HTML.

Quick Start:
    import portfolio

    # Build and start the page (uses config defaults)
    page = portfolio.create(username="octocat")

    # Repository feed
    for repo in page.feed.filtered:
        print(repo.name, repo.stars)

    # Theme and dialogs
    page.theme.toggle()
    page.catalog.open_project("project-2")

    # Static HTML
    html = page.snapshot_html()

Domain Objects:
    Repository - One public repository from the GitHub API
    Project - A curated project with its detail content
    Theme - light or dark

Components:
    ThemeStore - Theme state, persistence and OS preference
    ModalController - Accessible dialog with confirm/alert helpers
    ProjectCatalog - Featured project cards
    RepositoryFeed - Fetch, filter, search and render repositories
"""

__version__ = "1.0.0"

# High-level API
from .api import Page, create

# Domain objects
from .domain import Repository, Project, ProjectDetails, Theme

# Components
from .services import ThemeStore, ModalController, ProjectCatalog, RepositoryFeed

# Errors
from .errors import PortfolioError, GitHubAPIError, StorageError, ConfigError

__all__ = [
    '__version__',
    'Page',
    'create',
    'Repository',
    'Project',
    'ProjectDetails',
    'Theme',
    'ThemeStore',
    'ModalController',
    'ProjectCatalog',
    'RepositoryFeed',
    'PortfolioError',
    'GitHubAPIError',
    'StorageError',
    'ConfigError',
]
