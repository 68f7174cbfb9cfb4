"""
Domain layer for portfolio.

Contains pure domain objects with no I/O or side effects:
- Repository: One entry of the public repository feed
- Project: A curated catalog entry with its detail payload
- Theme: The light/dark page theme

These objects are immutable and provide serialization methods for
JSON output.
"""

from .repository import Repository, parse_timestamp
from .project import Project, ProjectDetails
from .theme import Theme

__all__ = [
    'Repository',
    'parse_timestamp',
    'Project',
    'ProjectDetails',
    'Theme',
]
