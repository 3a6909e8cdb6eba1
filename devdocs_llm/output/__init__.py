"""
Output module for DevDocs to LLM.

Contains the Markdown and XML formatters and the zip archive builder.
"""

from .formatter import to_markdown, to_xml, escape_xml
from .archive import build_archive

__all__ = [
    "to_markdown",
    "to_xml",
    "escape_xml",
    "build_archive",
]
