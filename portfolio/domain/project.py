"""
Project domain objects for portfolio.

Projects are the curated catalog bundled with the site. They are defined
at build time and never change while the page is running.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple


@dataclass(frozen=True)
class ProjectDetails:
    """Long-form content shown in the project detail dialog."""
    overview: str = ""
    features: Tuple[str, ...] = ()
    technologies: Tuple[str, ...] = ()
    challenges: str = ""
    impact: str = ""
    # Ordered label -> value pairs; None when the project has no metrics
    metrics: Optional[Tuple[Tuple[str, str], ...]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ProjectDetails':
        data = data or {}
        metrics = data.get('metrics')
        return cls(
            overview=str(data.get('overview', '')),
            features=tuple(str(f) for f in data.get('features') or ()),
            technologies=tuple(str(t) for t in data.get('technologies') or ()),
            challenges=str(data.get('challenges', '')),
            impact=str(data.get('impact', '')),
            metrics=tuple((str(k), str(v)) for k, v in metrics.items()) if metrics else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overview': self.overview,
            'features': list(self.features),
            'technologies': list(self.technologies),
            'challenges': self.challenges,
            'impact': self.impact,
            'metrics': dict(self.metrics) if self.metrics else None,
        }


@dataclass(frozen=True)
class Project:
    """
    A curated portfolio project.

    Only projects with ``featured=True`` are rendered on the page.
    """
    id: str
    title: str
    description: str = ""
    image: str = ""
    tags: Tuple[str, ...] = ()
    link: str = ""
    featured: bool = False
    details: ProjectDetails = field(default_factory=ProjectDetails)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        """
        Create from a catalog entry.

        Raises:
            ValueError: If the entry has no id or title
        """
        if not data.get('id') or not data.get('title'):
            raise ValueError(f"project entry needs 'id' and 'title': {data!r}")
        return cls(
            id=str(data['id']),
            title=str(data['title']),
            description=str(data.get('description', '')),
            image=str(data.get('image', '')),
            tags=tuple(str(t) for t in data.get('tags') or ()),
            link=str(data.get('link', '')),
            featured=bool(data.get('featured', False)),
            details=ProjectDetails.from_dict(data.get('details')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'image': self.image,
            'tags': list(self.tags),
            'link': self.link,
            'featured': self.featured,
            'details': self.details.to_dict(),
        }
