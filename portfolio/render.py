"""
Rendering functions for portfolio output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .domain import Project, Repository
from .format_utils import format_relative_time, format_star_count
from .repo_filter import STARRED_MIN_STARS

console = Console()


def render_repositories_table(repos: Sequence[Repository], title: Optional[str] = None,
                              now: Optional[datetime] = None,
                              star_threshold: int = STARRED_MIN_STARS) -> None:
    """
    Render the repository feed as a pretty table.

    Args:
        repos: Repositories in feed order
        title: Optional table title
        now: Reference time for the "Updated" column
        star_threshold: Star count above which a repository is marked starred
    """
    if not repos:
        console.print("[yellow]No repositories found.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Repository", style="cyan")
    table.add_column("Language", style="green")
    table.add_column("Stars", justify="right", style="yellow")
    table.add_column("Updated", style="dim")
    table.add_column("Description")

    for repo in repos:
        stars = format_star_count(repo.stars)
        if repo.stars > star_threshold:
            stars = f"⭐ {stars}"
        name = f"{escape(repo.name)} [dim](fork)[/dim]" if repo.is_fork else escape(repo.name)
        table.add_row(
            name,
            escape(repo.language or ""),
            stars,
            format_relative_time(repo.updated_at, now),
            escape(repo.description or ""),
        )

    console.print(table)


def render_projects_table(projects: Sequence[Project]) -> None:
    """Render the project catalog as a pretty table."""
    if not projects:
        console.print("[yellow]No projects found.[/yellow]")
        return

    table = Table(
        title="Projects",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Tags", style="green")
    table.add_column("Featured", justify="center")

    for project in projects:
        table.add_row(
            escape(project.id),
            escape(project.title),
            escape(", ".join(project.tags)),
            "✅" if project.featured else "",
        )

    console.print(table)


def render_project_detail(project: Project) -> None:
    """Render one project the way its detail dialog lays it out."""
    details = project.details
    lines: List[str] = [escape(project.description), ""]

    if project.tags:
        lines.append(f"[bold]Tags:[/bold] {escape(', '.join(project.tags))}")
        lines.append("")

    lines.append("[bold]Overview[/bold]")
    lines.append(escape(details.overview))
    lines.append("")

    if details.features:
        lines.append("[bold]Key Features[/bold]")
        lines.extend(f"  • {escape(feature)}" for feature in details.features)
        lines.append("")

    if details.technologies:
        lines.append(f"[bold]Technologies:[/bold] {escape(', '.join(details.technologies))}")
        lines.append("")

    if details.metrics:
        lines.append("[bold]Key Metrics[/bold]")
        lines.extend(f"  {escape(label)}: [green]{escape(value)}[/green]" for label, value in details.metrics)
        lines.append("")

    lines.append("[bold]Challenges & Solutions[/bold]")
    lines.append(escape(details.challenges))
    lines.append("")
    lines.append("[bold]Impact[/bold]")
    lines.append(escape(details.impact))

    if project.link:
        lines.append("")
        lines.append(f"[link={project.link}]{escape(project.link)}[/link]")

    console.print(Panel("\n".join(lines), title=f"[bold cyan]{escape(project.title)}[/bold cyan]", box=box.ROUNDED))


def render_theme_status(status: Dict[str, Any]) -> None:
    """Render the resolved theme and where it came from."""
    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    theme = status.get('theme', '')
    icon = "☀️" if theme == "light" else "🌙"
    table.add_row("Theme", f"{icon} {theme}")
    table.add_row("Source", status.get('source', ''))
    table.add_row("System preference", status.get('system', ''))
    table.add_row("Storage", status.get('storage_path', ''))

    console.print(table)
