"""
Records passed between the build stages.

A Post only exists once its frontmatter has passed validation; sources that
fail are dropped before any generator sees them.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Tuple

# Feed and sitemap timestamp for a site with no posts yet
EMPTY_SITE_DATE = date(1970, 1, 1)


@dataclass(frozen=True)
class Post:
    title: str
    date: date
    description: str
    slug: str
    categories: Tuple[str, ...]
    content: str
    rendered_content: str
    source: str = ''

    @property
    def date_iso(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class BuildOutput:
    """An absolute output path and the exact text to write there."""
    path: str
    content: str


@dataclass
class ValidationResult:
    is_valid: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
