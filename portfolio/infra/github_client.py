"""
GitHub API client infrastructure for portfolio.

Provides the one call the repository feed needs:
- List public repositories of a user
- Optional token authentication
- Rate limit tracking from response headers

Every failure (non-2xx status, transport error, invalid JSON) surfaces
as a GitHubAPIError so callers have a single thing to catch.
"""

import os
import time
import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any

import requests

from ..errors import GitHubAPIError

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Fewer than 100 requests left in the window."""
        return self.remaining < 100


class GitHubClient:
    """
    Minimal GitHub REST client built on a requests session.

    Example:
        client = GitHubClient(token=None)
        items = client.list_user_repos("octocat")
        print(len(items))
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_BASE,
        timeout: float = 30,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (defaults to PORTFOLIO_GITHUB_TOKEN or GITHUB_TOKEN env var)
            api_url: API host, without trailing slash
            timeout: HTTP request timeout in seconds
        """
        self.token = token or os.environ.get('PORTFOLIO_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self._rate_limit_status: Optional[RateLimitStatus] = None

        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'portfolio-site',
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Status parsed from the last response, if it carried the headers."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers) -> None:
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining < 0 or limit < 0:
            return

        self._rate_limit_status = RateLimitStatus(
            remaining=remaining,
            limit=limit,
            reset_time=reset_time,
            used=used,
        )
        if self._rate_limit_status.is_low:
            logger.warning(
                f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
            )

    def _get(self, endpoint: str) -> Any:
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"GitHub API request failed: {e}")
            raise GitHubAPIError(f"GitHub API request failed: {e}") from e

        self._update_rate_limit_from_headers(response.headers or {})

        if not response.ok:
            raise GitHubAPIError(
                f"GitHub API Error: {response.status_code} {response.reason or ''}".rstrip(),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"GitHub API returned invalid JSON: {e}") from e

    def list_user_repos(self, username: str) -> List[Dict[str, Any]]:
        """
        Fetch the public repositories of a user.

        Args:
            username: GitHub account handle

        Returns:
            List of raw repository objects

        Raises:
            GitHubAPIError: On any failure
        """
        data = self._get(f"users/{username}/repos")
        if not isinstance(data, list):
            raise GitHubAPIError("GitHub API Error: expected a list of repositories")
        logger.debug(f"GitHub: fetched {len(data)} repositories for {username}")
        return data
