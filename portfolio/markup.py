"""
HTML markup for cards and dialog bodies.

Every catalog or API string goes through escape_html before it is placed
in markup, whether as text or as an attribute value.
"""

from datetime import datetime
from typing import Optional

from .domain import Project, Repository
from .format_utils import format_relative_time, format_star_count
from .repo_filter import STARRED_MIN_STARS

_HTML_ESCAPES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#039;',
})


def escape_html(text) -> str:
    """Escape the five HTML-significant characters."""
    if text is None:
        return ''
    return str(text).translate(_HTML_ESCAPES)


def _tags(tags, css_class: str) -> str:
    return ''.join(f'<span class="{css_class}">{escape_html(tag)}</span>' for tag in tags)


def repo_card_html(repo: Repository, now: Optional[datetime] = None,
                   star_threshold: int = STARRED_MIN_STARS) -> str:
    """Inner markup of a repository card."""
    star_badge = ''
    if repo.stars > star_threshold:
        star_badge = (
            f'<div class="repo-star-badge" title="{repo.stars} stars">'
            f'<span aria-hidden="true">⭐</span>'
            f'<span>{format_star_count(repo.stars)}</span>'
            f'</div>'
        )

    description = ''
    if repo.description:
        description = f'<p class="repo-description">{escape_html(repo.description)}</p>'

    language = ''
    if repo.language:
        language = (
            f'<span class="language-dot" data-language="{escape_html(repo.language.lower())}" aria-hidden="true"></span>'
            f'<span>{escape_html(repo.language)}</span>'
        )

    return (
        f'<div class="repo-header"><div>'
        f'<h3 class="repo-title">{escape_html(repo.name)}</h3>'
        f'{star_badge}'
        f'</div></div>'
        f'{description}'
        f'<div class="repo-meta">'
        f'<div class="repo-language">{language}</div>'
        f'<div class="repo-updated">Updated {format_relative_time(repo.updated_at, now)}</div>'
        f'</div>'
    )


def project_card_html(project: Project) -> str:
    """Inner markup of a project card."""
    title = escape_html(project.title)
    return (
        f'<img src="{escape_html(project.image)}" alt="{title} preview" class="project-image" loading="lazy">'
        f'<div class="project-content">'
        f'<h3 class="project-title">{title}</h3>'
        f'<p class="project-description">{escape_html(project.description)}</p>'
        f'<div class="project-tags">{_tags(project.tags, "project-tag")}</div>'
        f'<div class="project-links">'
        f'<button class="project-link" data-action="modal">Learn more</button>'
        f'<a href="{escape_html(project.link)}" class="project-link" data-action="code" '
        f'target="_blank" rel="noopener noreferrer">View code</a>'
        f'</div>'
        f'</div>'
    )


def _section(title: str, body: str) -> str:
    return (
        f'<section class="project-section">'
        f'<h4 class="project-section-title">{title}</h4>'
        f'{body}'
        f'</section>'
    )


def project_detail_html(project: Project) -> str:
    """Body of the project detail dialog."""
    details = project.details
    title = escape_html(project.title)

    features = ''.join(f'<li>{escape_html(f)}</li>' for f in details.features)
    sections = [
        _section('Overview', f'<p class="project-section-content">{escape_html(details.overview)}</p>'),
        _section('Key Features', f'<ul class="project-features-list">{features}</ul>'),
        _section('Technologies', f'<div class="project-tech-list">{_tags(details.technologies, "project-tech")}</div>'),
    ]
    if details.metrics:
        metrics = ''.join(
            f'<div class="project-metric">'
            f'<span class="metric-label">{escape_html(label)}</span>'
            f'<span class="metric-value">{escape_html(value)}</span>'
            f'</div>'
            for label, value in details.metrics
        )
        sections.append(_section('Key Metrics', f'<div class="project-metrics">{metrics}</div>'))
    sections.append(_section('Challenges &amp; Solutions',
                             f'<p class="project-section-content">{escape_html(details.challenges)}</p>'))
    sections.append(_section('Impact', f'<p class="project-section-content">{escape_html(details.impact)}</p>'))

    return (
        f'<div class="project-modal-content">'
        f'<div class="project-modal-header">'
        f'<img src="{escape_html(project.image)}" alt="{title} preview" class="project-modal-image">'
        f'<div class="project-modal-info">'
        f'<div class="project-tags">{_tags(project.tags, "project-tag")}</div>'
        f'<p class="project-modal-description">{escape_html(project.description)}</p>'
        f'</div>'
        f'</div>'
        f'<div class="project-modal-body">'
        f'{"".join(sections)}'
        f'<div class="project-modal-actions">'
        f'<a href="{escape_html(project.link)}" class="btn btn-primary" target="_blank" '
        f'rel="noopener noreferrer">View Project</a>'
        f'</div>'
        f'</div>'
        f'</div>'
    )


def confirm_html(message: str, confirm_text: str = 'OK', cancel_text: str = 'Cancel') -> str:
    return (
        f'<div class="confirm-modal-content">'
        f'<p class="confirm-message">{escape_html(message)}</p>'
        f'<div class="confirm-actions">'
        f'<button class="btn btn-secondary" id="confirm-cancel">{escape_html(cancel_text)}</button>'
        f'<button class="btn btn-primary" id="confirm-ok">{escape_html(confirm_text)}</button>'
        f'</div>'
        f'</div>'
    )


def alert_html(message: str, button_text: str = 'OK') -> str:
    return (
        f'<div class="alert-modal-content">'
        f'<p class="alert-message">{escape_html(message)}</p>'
        f'<div class="alert-actions">'
        f'<button class="btn btn-primary" id="alert-ok">{escape_html(button_text)}</button>'
        f'</div>'
        f'</div>'
    )
