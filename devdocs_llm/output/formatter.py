"""
Text formatters for crawl results.

Renders an ordered page list as one Markdown document or as an XML document
whose content is a line-by-line approximation of the Markdown structure.
"""

import re
from typing import Iterable, List

from ..crawler.models import PageResult


HEADER_RE = re.compile(r'^(#{1,6})\s+(.+)$')
LIST_ITEM_RE = re.compile(r'^\s*[-*+]\s')
FENCE = '```'

XML_ESCAPES = [
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&apos;'),
]

# Control characters XML 1.0 does not allow
INVALID_XML_CHARS_RE = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


def escape_xml(text: str) -> str:
    """Drop characters XML cannot carry, then escape the five special ones (ampersand first)."""
    text = INVALID_XML_CHARS_RE.sub('', text)
    for char, entity in XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def to_markdown(pages: Iterable[PageResult]) -> str:
    """
    Concatenate pages into one Markdown document.
    
    Each page becomes a ``# <url>`` header, its content and a ``---`` separator.
    """
    return ''.join(
        f"# {page.url}\n\n{page.content}\n\n---\n\n"
        for page in pages
    )


def markdown_lines_to_xml(content: str) -> List[str]:
    """
    Reinterpret escaped Markdown line by line as XML elements.
    
    Headings, fenced code blocks, bullet items and paragraphs are recognized.
    Multi-line constructs such as tables or nested lists are not modelled.
    
    Args:
        content: Markdown text, already XML-escaped
        
    Returns:
        One output line per input line
    """
    lines = []
    in_code = False
    
    for line in content.split('\n'):
        if line.startswith(FENCE):
            lines.append('</code>' if in_code else '<code>')
            in_code = not in_code
            continue
        
        if in_code:
            if line.endswith(FENCE):
                lines.append(line[:-len(FENCE)] + '</code>')
                in_code = False
            else:
                lines.append(line)
            continue
        
        header = HEADER_RE.match(line)
        if header:
            level = len(header.group(1))
            lines.append(f"<h{level}>{header.group(2)}</h{level}>")
        elif LIST_ITEM_RE.match(line):
            lines.append(f"<li>{LIST_ITEM_RE.sub('', line, count=1)}</li>")
        elif line:
            lines.append(f"<p>{line}</p>")
        else:
            lines.append('')
    
    # Close a fence left open at the end of the page
    if in_code:
        lines.append('</code>')
    
    return lines


def to_xml(pages: Iterable[PageResult]) -> str:
    """
    Render pages as an XML document.
    
    Args:
        pages: Ordered page results
        
    Returns:
        XML text with one ``<page>`` element per page
    """
    parts = ['<?xml version="1.0" encoding="UTF-8"?>\n<document>\n  ']
    
    for page in pages:
        xml_content = '\n      '.join(markdown_lines_to_xml(escape_xml(page.content)))
        parts.append(
            f"\n  <page>\n"
            f"    <url>{escape_xml(page.url)}</url>\n"
            f"    <content>\n"
            f"      {xml_content}\n"
            f"    </content>\n"
            f"  </page>"
        )
    
    parts.append('\n</document>')
    return ''.join(parts)
