"""
Helpers for the markdown recipe body.

Recipes are stored as a single markdown document. The extraction endpoint
produces the following layout, and the editor and display code assume it:

    # Title
    ## Description            (optional)
    **Serves:** ...           (optional yield line)
    ## Time Estimates         (optional)
    ## Ingredients            (bulleted, grouped with ### subheadings)
    ## Instructions           (numbered)
    ## Notes                  (optional)

Nothing here validates that layout; the client only requires a non-empty body.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

_H1_PREFIX = re.compile(r"^#\s+")
_H2_LINE = re.compile(r"^##\s+(.*?)\s*$")

UNTITLED = "Untitled recipe"


def recipe_title(markdown: str) -> str:
    """
    Get the display title of a recipe.

    Args:
        markdown: Markdown recipe body

    Returns:
        The first line with its "# " prefix removed, or "Untitled recipe" when blank.
    """
    first_line = markdown.split("\n", 1)[0].strip() if markdown else ""
    title = _H1_PREFIX.sub("", first_line).strip()
    return title or UNTITLED


def section_names(markdown: str) -> List[str]:
    """Names of the level-two sections, in document order."""
    names = []
    for line in markdown.splitlines():
        match = _H2_LINE.match(line)
        if match:
            names.append(match.group(1))
    return names


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def humanize_delta(then: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago `then` was, e.g. "5 minutes ago".

    Args:
        then: Past timestamp (naive values are read as UTC)
        now: Reference time, defaults to the current UTC time

    Returns:
        Short relative description with an "ago" suffix.
    """
    now = now or datetime.now(timezone.utc)
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = max(0, int((now - then).total_seconds()))
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 45:
        return "less than a minute ago"
    if minutes < 60:
        return f"{_plural(max(1, minutes), 'minute')} ago"
    if hours < 24:
        return f"about {_plural(hours, 'hour')} ago"
    if days < 30:
        return f"{_plural(days, 'day')} ago"
    if days < 365:
        return f"about {_plural(days // 30, 'month')} ago"
    return f"about {_plural(days // 365, 'year')} ago"


def change_caption(recipe, now: Optional[datetime] = None) -> str:
    """
    Sidebar caption for a recipe, e.g. "Updated 3 days ago" or "Created 1 minute ago".

    Args:
        recipe: A Recipe model
        now: Reference time for tests
    """
    verb = "Updated" if recipe.was_edited else "Created"
    return f"{verb} {humanize_delta(recipe.effective_changed_at, now=now)}"
