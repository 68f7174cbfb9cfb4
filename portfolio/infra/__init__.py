"""
Infrastructure layer for portfolio.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access
- LocalStorage: JSON file persistence for the page's local storage
- MemoryStorage: Same interface, process memory only

These provide clean interfaces that can be mocked for testing.
"""

from .github_client import GitHubClient, RateLimitStatus
from .local_storage import LocalStorage, MemoryStorage

__all__ = [
    'GitHubClient',
    'RateLimitStatus',
    'LocalStorage',
    'MemoryStorage',
]
