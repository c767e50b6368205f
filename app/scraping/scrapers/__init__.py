"""
Scraper subclass exports.
"""

from app.scraping.scrapers.html_scraper import HTMLScraper
from app.scraping.scrapers.json_scraper import JSONScraper

__all__ = ["HTMLScraper", "JSONScraper"]
