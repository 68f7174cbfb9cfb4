"""
Exception types for portfolio.

Components catch these at their own boundary and degrade to a visible
state; only the CLI turns them into exit codes.
"""

from typing import Optional


class PortfolioError(Exception):
    """Base class for all portfolio errors."""


class GitHubAPIError(PortfolioError):
    """A repository fetch failed (non-2xx status, transport error, bad JSON)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(PortfolioError):
    """Local storage could not be read or written."""


class ConfigError(PortfolioError):
    """Configuration file could not be parsed."""
