"""Shared fixtures for portfolio tests."""

from datetime import datetime, timezone

import pytest

from portfolio.domain import Project
from portfolio.errors import GitHubAPIError
from portfolio.infra import MemoryStorage
from portfolio.page import Announcer, ColorSchemeQuery, Scheduler, build_document

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def api_repo(name, updated_at="2024-05-01T12:00:00Z", stars=0, fork=False,
             description=None, language=None):
    """One item as returned by GET /users/{user}/repos."""
    return {
        "name": name,
        "description": description,
        "language": language,
        "stargazers_count": stars,
        "fork": fork,
        "updated_at": updated_at,
        "html_url": f"https://github.com/octocat/{name}",
    }


def make_project(project_id="p1", featured=True, **overrides):
    data = {
        "id": project_id,
        "title": f"Project {project_id}",
        "description": "A project",
        "image": f"assets/{project_id}.png",
        "tags": ["Python"],
        "link": f"https://github.com/octocat/{project_id}",
        "featured": featured,
        "details": {
            "overview": "Overview text",
            "features": ["Fast"],
            "technologies": ["Python"],
            "challenges": "Hard parts",
            "impact": "Big impact",
        },
    }
    data.update(overrides)
    return Project.from_dict(data)


class FakeGitHubClient:
    """Stands in for GitHubClient; returns canned items or raises."""

    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = []

    def list_user_repos(self, username):
        self.calls.append(username)
        if self.error is not None:
            raise self.error
        return list(self.items)


@pytest.fixture
def document():
    return build_document(title="Test Portfolio", github_username="octocat")


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def announcer(document, scheduler):
    return Announcer(document, scheduler)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def system():
    return ColorSchemeQuery(prefers_dark=False)


@pytest.fixture
def failing_client():
    return FakeGitHubClient(error=GitHubAPIError("GitHub API Error: 500 Internal Server Error", status_code=500))
