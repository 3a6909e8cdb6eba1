"""
Configuration for DevDocs to LLM.

Settings come from the process environment; a local ``.env`` file is read
first so development setups do not need exported variables.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import MissingConfigurationError
from .utils.constants import DEFAULT_FIRECRAWL_API_URL, DEFAULT_TIMEOUT


@dataclass
class Settings:
    """Runtime settings for the proxy."""
    
    api_key: str = ""
    api_url: str = DEFAULT_FIRECRAWL_API_URL
    timeout: float = DEFAULT_TIMEOUT
    
    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)
    
    def require_api_key(self) -> str:
        """
        Return the Firecrawl credential.
        
        Raises:
            MissingConfigurationError: If no credential is configured
        """
        if not self.api_key:
            raise MissingConfigurationError('Firecrawl API key not configured')
        return self.api_key


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build settings from the environment.
    
    Args:
        dotenv: Whether to load a ``.env`` file before reading the environment
        
    Returns:
        Settings instance
        
    Raises:
        ValueError: If ``FIRECRAWL_TIMEOUT`` is not a number
    """
    if dotenv:
        load_dotenv()
    
    return Settings(
        api_key=os.getenv('FIRECRAWL_API_KEY', '').strip(),
        api_url=os.getenv('FIRECRAWL_API_URL', DEFAULT_FIRECRAWL_API_URL).rstrip('/'),
        timeout=float(os.getenv('FIRECRAWL_TIMEOUT', DEFAULT_TIMEOUT)),
    )
