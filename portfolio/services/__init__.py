"""
Component layer for portfolio.

Each component owns one region of the page and binds to it through the
document model:
- ThemeStore: Light/dark theme, persisted and reconciled with the OS
- ModalController: The accessible dialog, plus confirm/alert helpers
- ProjectCatalog: Curated project cards and their detail dialogs
- RepositoryFeed: GitHub repositories with search and category filters

Components never share state; the Page in ``portfolio.api`` creates and
wires them.
"""

from .theme_store import ThemeStore
from .modal_controller import ModalController
from .project_catalog import ProjectCatalog, load_projects
from .repository_feed import RepositoryFeed

__all__ = [
    'ThemeStore',
    'ModalController',
    'ProjectCatalog',
    'load_projects',
    'RepositoryFeed',
]
