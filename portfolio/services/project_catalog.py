"""
Curated project catalog for portfolio.

Renders one card per featured project into ``#projects-grid`` and shows
project details in the modal dialog. The catalog itself is a YAML file
bundled with the package; a different file can be configured.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from ..analytics import track_event
from ..domain import Project
from ..markup import project_card_html, project_detail_html
from ..page import Document, Element, Event
from .modal_controller import ModalController

logger = logging.getLogger(__name__)

GRID_ID = 'projects-grid'


def load_projects(path: Optional[str] = None) -> List[Project]:
    """
    Load the project catalog.

    Args:
        path: YAML file with a top-level ``projects`` list; defaults to the
            catalog bundled with the package

    Raises:
        ValueError: If an entry is malformed
        OSError: If the file cannot be read
    """
    if path:
        text = Path(path).expanduser().read_text(encoding='utf-8')
    else:
        text = resources.files('portfolio').joinpath('data').joinpath('projects.yaml').read_text(encoding='utf-8')

    data = yaml.safe_load(text) or {}
    entries = data.get('projects', []) if isinstance(data, dict) else data
    return [Project.from_dict(entry) for entry in entries or []]


class ProjectCatalog:
    """
    Featured project cards and their detail dialogs.

    Example:
        catalog = ProjectCatalog(document, modal, load_projects())
        catalog.render()
        catalog.open_project("go-kms")
    """

    def __init__(self, document: Document, modal: ModalController, projects: Sequence[Project]):
        self.document = document
        self.modal = modal
        self.projects = tuple(projects)

    @property
    def featured(self) -> List[Project]:
        """Featured projects in declaration order."""
        return [p for p in self.projects if p.featured]

    def get(self, project_id: str) -> Optional[Project]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def render(self) -> None:
        grid = self.document.get_element_by_id(GRID_ID)
        if grid is None:
            logger.warning('Projects grid element not found')
            return

        grid.clear()
        for project in self.featured:
            grid.append_child(self._create_card(project))

    def _create_card(self, project: Project) -> Element:
        card = self.document.create_element('div', {
            'class': 'project-card',
            'role': 'listitem',
            'tabindex': '0',
            'data-project-id': project.id,
        })
        card.inner_html = project_card_html(project)

        def on_click(event: Event) -> None:
            self.show_details(project)

        def on_keydown(event: Event) -> None:
            if event.target is card and event.key in ('Enter', ' '):
                event.prevent_default()
                self.show_details(project)

        def on_learn_more(event: Event) -> None:
            event.stop_propagation()
            event.prevent_default()
            self.show_details(project)

        card.add_event_listener('click', on_click)
        card.add_event_listener('keydown', on_keydown)

        learn_more = card.query_selector('[data-action="modal"]')
        if learn_more is not None:
            learn_more.add_event_listener('click', on_learn_more)

        code_link = card.query_selector('[data-action="code"]')
        if code_link is not None:
            code_link.add_event_listener('click', lambda event: event.stop_propagation())

        return card

    def show_details(self, project: Project) -> bool:
        """Open the detail dialog for a project."""
        opened = self.modal.open(project.title, project_detail_html(project))
        if opened:
            track_event('project_modal_opened', project_id=project.id)
        return opened

    def open_project(self, project_id: str) -> bool:
        project = self.get(project_id)
        if project is None:
            logger.warning(f"Unknown project: {project_id}")
            return False
        return self.show_details(project)
