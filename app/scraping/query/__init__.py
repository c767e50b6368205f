"""
Document query backends.
"""

from app.scraping.query.base import DocumentLoader, MappedQuery
from app.scraping.query.html_query import HTMLQuery
from app.scraping.query.json_query import JSONQuery, parse_json_document

__all__ = [
    "DocumentLoader",
    "HTMLQuery",
    "JSONQuery",
    "MappedQuery",
    "parse_json_document",
]
