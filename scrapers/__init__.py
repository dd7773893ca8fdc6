"""
Site scrapers for the result scraper.

Submodules:
    base: ``ScrapeResult`` and the ``ResultScraper`` superclass.
    educationboard: ``EducationBoardScraper`` for educationboardresults.gov.bd.
"""

from .base import ResultScraper, ScrapeResult
from .educationboard import EducationBoardScraper

__all__ = ["EducationBoardScraper", "ResultScraper", "ScrapeResult"]
