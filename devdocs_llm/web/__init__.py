"""
Web module for DevDocs to LLM.

Provides the Flask-based proxy in front of the Firecrawl API.
"""

from .app import create_app

__all__ = ["create_app"]
