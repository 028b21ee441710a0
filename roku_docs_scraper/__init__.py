"""
Roku Developer Documentation scraper package.

Mirrors the Roku developer documentation site for offline use. Links are
discovered one hop from a small catalog of seed index pages, canonicalized
and deduplicated, then every page is rendered in a real browser and its
article markup is saved as a raw HTML artifact. A separate conversion stage
turns the raw tree into Markdown.
"""

__version__ = "0.1.0"
