"""
Path and URL utilities for DevDocs to LLM.

Provides filename generation for exported pages, cursor URL checks and
directory management.
"""

import os
import re
from urllib.parse import urlparse


def url_to_slug(url: str) -> str:
    """
    Convert a URL to a filesystem-safe slug.
    
    Every character outside ``[a-z0-9]`` (case-insensitive) becomes a hyphen
    and the result is lower-cased, so distinct URLs of the same length never
    collapse onto each other unless they differ only in punctuation.
    
    Args:
        url: URL to convert
        
    Returns:
        Slug string
    """
    return re.sub(r'[^a-z0-9]', '-', url, flags=re.IGNORECASE).lower()


def page_filename(index: int, url: str, extension: str = ".md") -> str:
    """
    Build the archive filename for the page at ``index`` (0-based).
    
    The 1-based position prefix keeps names unique and ordered.
    """
    return f"{index + 1}-{url_to_slug(url)}{extension}"


def is_under_base_url(url: str, base_url: str) -> bool:
    """
    Check whether ``url`` points at the same origin and path prefix as ``base_url``.
    
    Args:
        url: URL to check
        base_url: Base URL it must live under
        
    Returns:
        True if ``url`` is under ``base_url``, False otherwise
    """
    parsed = urlparse(url)
    base = urlparse(base_url)
    
    if parsed.scheme.lower() != base.scheme.lower():
        return False
    if parsed.netloc.lower() != base.netloc.lower():
        return False
    
    base_path = base.path.rstrip('/')
    return parsed.path == base_path or parsed.path.startswith(base_path + '/')


def ensure_parent_dir(file_path: str) -> None:
    """
    Create the parent directory of a file if needed.
    
    Args:
        file_path: Path of the file about to be written
    """
    parent = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(parent, exist_ok=True)
