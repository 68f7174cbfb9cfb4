"""
Repository selection and filtering for the feed.

Two stages, both pure:

1. select_repositories() turns a fetched list into the canonical feed:
   forks are dropped unless they have more than ``fork_min_stars`` stars,
   the rest is sorted by last update (newest first) and capped.
2. filter_repositories() derives the visible view from the canonical
   list and the current FilterState. It is always recomputed from
   scratch.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .domain import Repository

FEED_LIMIT = 12
FORK_MIN_STARS = 5
STARRED_MIN_STARS = 50


class Category(str, Enum):
    """Category buttons above the repository grid."""
    ALL = "all"
    STARRED = "starred"


@dataclass(frozen=True)
class FilterState:
    search: str = ""
    category: Category = Category.ALL


def select_repositories(
    repos: Iterable[Repository],
    limit: int = FEED_LIMIT,
    fork_min_stars: int = FORK_MIN_STARS,
) -> List[Repository]:
    """
    Build the canonical feed from fetched repositories.

    Args:
        repos: Decoded repositories, in API order
        limit: Maximum number kept
        fork_min_stars: Forks need strictly more stars than this to stay

    Returns:
        At most ``limit`` repositories, newest update first
    """
    kept = [r for r in repos if not r.is_fork or r.stars > fork_min_stars]
    kept.sort(key=lambda r: r.updated_at, reverse=True)
    return kept[:limit]


def matches_search(repo: Repository, search: str) -> bool:
    """Case-insensitive substring match on name, description or language."""
    if not search:
        return True
    needle = search.lower()
    return any(
        needle in field.lower()
        for field in (repo.name, repo.description, repo.language)
        if field
    )


def matches_category(repo: Repository, category: Category,
                     starred_min_stars: int = STARRED_MIN_STARS) -> bool:
    if category == Category.STARRED:
        return repo.stars > starred_min_stars
    return True


def filter_repositories(
    repos: Iterable[Repository],
    state: FilterState,
    starred_min_stars: int = STARRED_MIN_STARS,
) -> List[Repository]:
    """Repositories matching both the search text and the category."""
    return [
        r for r in repos
        if matches_search(r, state.search)
        and matches_category(r, state.category, starred_min_stars)
    ]
