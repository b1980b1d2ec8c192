"""
Quire - a small static blog generator.

Quire turns Markdown posts with YAML front matter into a static blog: post
pages, a paginated index, category listings, RSS and Atom feeds, a sitemap,
and a compiled stylesheet. Only stale stylesheets are recompiled, and watch
mode coalesces bursts of file changes into a single rebuild.
"""

__version__ = "1.0.0"

from .core import Quire, BuildState
from .errors import BuildError

__all__ = ['Quire', 'BuildState', 'BuildError']
