"""
Analytics hooks for portfolio.

There is no analytics backend: events are logged and nothing else.
"""

import logging

logger = logging.getLogger(__name__)


def track_event(name: str, **properties) -> None:
    """Log an analytics event with its properties."""
    logger.info(f"Event tracked: {name} {properties}" if properties else f"Event tracked: {name}")
