"""
The page skeleton.

Builds the static structure every component binds to: the theme toggle,
the projects grid, the repository section with its search field, filter
buttons and state panels, the modal root, and the live region.
"""

from typing import Optional

from .document import Document, Window
from ..markup import escape_html

STYLESHEET = 'styles.css'


def _skeleton(title: str, github_username: str) -> str:
    title = escape_html(title)
    user = escape_html(github_username)
    return f"""
<a href="#main" class="skip-link">Skip to main content</a>
<header class="header">
  <nav class="nav">
    <a href="#projects" class="nav-link">Projects</a>
    <a href="#repositories" class="nav-link">Repositories</a>
  </nav>
  <button class="theme-toggle" type="button" aria-label="Switch to dark mode" title="Switch to dark mode">
    <span class="theme-toggle-icon" aria-hidden="true">🌙</span>
  </button>
</header>
<main id="main" tabindex="-1">
  <h1 class="site-title">{title}</h1>
  <section id="projects" class="section" aria-labelledby="projects-heading">
    <h2 id="projects-heading">Projects</h2>
    <div id="projects-grid" class="projects-grid" role="list"></div>
  </section>
  <section id="repositories" class="section" aria-labelledby="repositories-heading">
    <h2 id="repositories-heading">Repositories</h2>
    <p class="section-subtitle">Public repositories of {user} on GitHub</p>
    <div class="repo-controls">
      <label for="repo-search" class="visually-hidden">Search repositories</label>
      <input id="repo-search" type="search" placeholder="Search repositories..." autocomplete="off">
      <div class="repo-filters" role="group" aria-label="Filter repositories">
        <button class="filter-btn active" data-filter="all" type="button">All</button>
        <button class="filter-btn" data-filter="starred" type="button">Starred</button>
      </div>
    </div>
    <div id="repositories-grid" class="repositories-grid" role="list">
      <div id="repos-loading" class="repos-state hidden" role="status">Loading repositories...</div>
      <div id="repos-error" class="repos-state hidden" role="alert">
        <p class="error-message"></p>
        <button id="retry-repos" class="btn btn-secondary" type="button">Try again</button>
      </div>
      <div id="repos-empty" class="repos-state hidden">No repositories match your search.</div>
    </div>
  </section>
</main>
<div id="modal-overlay" class="modal-overlay hidden">
  <div class="modal-container" role="dialog" aria-modal="true" aria-labelledby="modal-title">
    <div class="modal-header">
      <h2 id="modal-title" class="modal-title"></h2>
      <button class="modal-close" type="button" aria-label="Close dialog">&times;</button>
    </div>
    <div id="modal-body" class="modal-body"></div>
  </div>
</div>
<div id="live-region" class="visually-hidden" aria-live="polite" aria-atomic="true"></div>
"""


def build_document(title: str = 'Portfolio', github_username: str = '',
                   window: Optional[Window] = None) -> Document:
    """Create a document holding the full page skeleton."""
    document = Document(window=window)
    document.root.set_attribute('lang', 'en')
    document.head.inner_html = (
        '<meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f'<title>{escape_html(title)}</title>'
        f'<link rel="stylesheet" href="{STYLESHEET}">'
    )
    document.body.inner_html = _skeleton(title, github_username)
    return document
