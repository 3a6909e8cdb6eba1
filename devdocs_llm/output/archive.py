"""
Zip packaging of crawl results.

Each page becomes its own Markdown file inside a ``docs/`` folder.
"""

import io
import zipfile
from typing import Iterable

from ..crawler.models import PageResult
from ..utils.paths import page_filename


ARCHIVE_FOLDER = "docs"


def page_document(page: PageResult) -> str:
    """Markdown file body for a single page."""
    return f"# {page.url}\n\n{page.content.strip()}\n"


def build_archive(pages: Iterable[PageResult]) -> bytes:
    """
    Bundle pages into a deflate-compressed zip archive.
    
    Files are named ``<n>-<slug>.md`` where ``n`` is the 1-based page
    position and ``slug`` the lower-cased URL with every non-alphanumeric
    character replaced by a hyphen.
    
    Args:
        pages: Ordered page results
        
    Returns:
        The zip archive as bytes
    """
    buffer = io.BytesIO()
    
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        for index, page in enumerate(pages):
            name = f"{ARCHIVE_FOLDER}/{page_filename(index, page.url)}"
            archive.writestr(name, page_document(page))
    
    return buffer.getvalue()
