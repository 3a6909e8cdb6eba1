"""
Shared constants for DevDocs to LLM.

Contains common configuration values used across multiple modules.
"""

# Firecrawl REST API base URL (v1)
DEFAULT_FIRECRAWL_API_URL = "https://api.firecrawl.dev/v1"

# Upstream request timeout in seconds
DEFAULT_TIMEOUT = 60

# Where the client expects the proxy routes to be mounted
DEFAULT_PROXY_URL = "http://127.0.0.1:5000/api"

# Seconds between two crawl status checks
POLL_INTERVAL = 2.0

# Status checks before a crawl is reported as timed out (2s * 60 = 2 minutes)
MAX_POLL_ATTEMPTS = 60

# Pages requested from Firecrawl when no limit is given
DEFAULT_PAGE_LIMIT = 50

# Formats requested from Firecrawl when the caller gives none
DEFAULT_FORMATS = ["markdown", "html"]

# Number of result sets kept in the local history
MAX_HISTORY_ITEMS = 10

# Key under which the history is persisted
HISTORY_STORAGE_KEY = "devdocs-history"

# Documentation sites offered as starting points
EXAMPLE_DOCS = [
    {"name": "CrewAI", "url": "https://docs.crewai.com", "icon": "👥"},
    {"name": "Rombo Tailwind Animations", "url": "https://docs.rombo.co/tailwind", "icon": "🦁"},
    {"name": "OpenAI", "url": "https://platform.openai.com/docs", "icon": "🤖"},
    {"name": "FireCrawl", "url": "https://docs.firecrawl.dev", "icon": "🔥"},
    {"name": "Anthropic", "url": "https://docs.anthropic.com", "icon": "🧠"},
    {"name": "LangChain", "url": "https://python.langchain.com", "icon": "⛓️"},
]
