"""
Browser module for the result scraper.

Provides browser automation built on Playwright, with Chromium as the
default engine and Camoufox (a hardened Firefox fork) as an alternative.

Submodules:
    instance: ``BrowserManager`` class.
"""

from .instance import BrowserManager

__all__ = ["BrowserManager"]
