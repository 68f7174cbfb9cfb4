"""
Repository domain object for portfolio.

A Repository is one entry of the public repository feed, decoded from a
single GitHub API object. It is immutable: the feed replaces its whole
working set on every successful fetch instead of patching entries.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any


def parse_timestamp(value: Optional[str]) -> datetime:
    """
    Parse a GitHub ISO-8601 timestamp such as ``2024-05-01T12:00:00Z`` into
    an aware UTC datetime. Naive values are taken as UTC.

    Raises:
        ValueError: If the value is missing, not a string or malformed
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"expected a timestamp string, got {value!r}")
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class Repository:
    """
    A public repository as shown in the feed.

    Example:
        repo = Repository.from_api_response(item)
        print(repo.name, repo.stars, repo.updated_at.date())
    """
    name: str
    html_url: str
    updated_at: datetime
    description: Optional[str] = None
    language: Optional[str] = None
    stars: int = 0
    is_fork: bool = False

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Repository':
        """
        Create from one item of ``GET /users/{user}/repos``.

        Raises:
            ValueError: If the item is not an object or lacks name/url/timestamp
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected a repository object, got {type(data).__name__}")

        name = data.get('name')
        html_url = data.get('html_url')
        if not name or not html_url:
            raise ValueError("repository object is missing 'name' or 'html_url'")

        stars = data.get('stargazers_count') or 0
        try:
            stars = max(0, int(stars))
        except (TypeError, ValueError):
            stars = 0

        return cls(
            name=str(name),
            html_url=str(html_url),
            updated_at=parse_timestamp(data.get('updated_at')),
            description=data.get('description') or None,
            language=data.get('language') or None,
            stars=stars,
            is_fork=bool(data.get('fork', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'language': self.language,
            'stars': self.stars,
            'is_fork': self.is_fork,
            'updated_at': self.updated_at.isoformat(),
            'html_url': self.html_url,
        }
