"""
Formatting utilities for portfolio.

Human-facing phrases used on repository cards (relative "updated" time,
abbreviated star counts) and machine output formats for the CLI
(JSON, JSON Lines, YAML).
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

import yaml


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit if count == 1 else unit + 's'} ago"


def format_relative_time(when: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a timestamp was.

    The difference is taken in whole days, ignoring direction:

        0 -> "today", 1 -> "yesterday", 2-6 -> "N days ago",
        7-29 -> "N weeks ago", 30-364 -> "N months ago", else "N years ago"

    Args:
        when: Timestamp to describe (naive values are taken as UTC)
        now: Reference time, defaults to the current time
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    days = abs(now - when).days

    if days == 0:
        return "today"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")


def format_star_count(count: int) -> str:
    """
    Abbreviate a count: 999 -> "999", 1500 -> "1.5k", 1000000 -> "1M".
    """
    for threshold, suffix in ((1_000_000, "M"), (1_000, "k")):
        if count >= threshold:
            text = f"{count / threshold:.1f}"
            if text.endswith(".0"):
                text = text[:-2]
            return text + suffix
    return str(count)


def format_output(data: Iterator[Dict[str, Any]], format: str) -> Iterator[str]:
    """
    Serialize records for machine consumption.

    Args:
        data: Iterator of dictionaries
        format: One of json, jsonl, yaml

    Yields:
        Output chunks (one per record for jsonl, one in total otherwise)
    """
    if format == "jsonl":
        for item in data:
            yield json.dumps(item, ensure_ascii=False)
    elif format == "json":
        yield json.dumps(list(data), ensure_ascii=False, indent=2)
    elif format == "yaml":
        yield yaml.safe_dump(list(data), default_flow_style=False, allow_unicode=True, sort_keys=False)
    else:
        raise ValueError(f"Unknown format: {format}")
