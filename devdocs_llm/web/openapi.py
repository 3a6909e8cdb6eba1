"""
OpenAPI description of the proxy routes.
"""

from typing import Any, Dict

from ..utils.constants import DEFAULT_PAGE_LIMIT


def _json_body(schema_ref: str) -> Dict[str, Any]:
    return {
        "required": True,
        "content": {"application/json": {"schema": {"$ref": schema_ref}}},
    }


def _json_response(description: str, schema_ref: str) -> Dict[str, Any]:
    return {
        "description": description,
        "content": {"application/json": {"schema": {"$ref": schema_ref}}},
    }


ERROR_RESPONSES = {
    "400": _json_response("Missing or invalid input", "#/components/schemas/Error"),
    "500": _json_response("Configuration or upstream error", "#/components/schemas/Error"),
}


SCHEMAS: Dict[str, Any] = {
    "Error": {
        "type": "object",
        "properties": {"error": {"type": "string", "description": "Error message"}},
    },
    "Extract": {
        "type": "object",
        "properties": {
            "schema": {"type": "object", "description": "Schema for content extraction"},
            "systemPrompt": {"type": "string", "description": "System prompt for extraction"},
            "prompt": {"type": "string", "description": "User prompt for extraction"},
        },
    },
    "CrawlRequest": {
        "type": "object",
        "required": ["url"],
        "properties": {
            "url": {"type": "string", "description": "URL to crawl"},
            "limit": {
                "type": "integer",
                "description": "Maximum number of pages to crawl",
                "default": DEFAULT_PAGE_LIMIT,
            },
            "allowBackwardLinks": {
                "type": "boolean",
                "description": "Whether to allow crawling backward links",
                "default": False,
            },
            "scrapeOptions": {
                "type": "object",
                "properties": {
                    "formats": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Content formats to extract",
                    },
                    "extract": {"$ref": "#/components/schemas/Extract"},
                },
            },
        },
    },
    "CrawlResponse": {
        "type": "object",
        "properties": {
            "success": {"type": "boolean"},
            "id": {"type": "string", "description": "Crawl job ID"},
        },
    },
    "CrawlStatus": {
        "type": "object",
        "properties": {
            "status": {
                "type": "string",
                "enum": ["scraping", "processing", "completed", "failed", "unknown"],
            },
            "total": {"type": "integer"},
            "completed": {"type": "integer"},
            "data": {"type": "array", "items": {"type": "object"}},
            "next": {"type": "string", "description": "Cursor for the next chunk of results"},
            "error": {"type": "string"},
        },
    },
    "NextRequest": {
        "type": "object",
        "required": ["next"],
        "properties": {"next": {"type": "string", "description": "Cursor returned by a status call"}},
    },
    "MapRequest": {
        "type": "object",
        "required": ["url"],
        "properties": {
            "url": {"type": "string", "description": "URL to map"},
            "search": {"type": "string", "description": "Optional search term to filter URLs"},
        },
    },
    "ScrapeRequest": {
        "type": "object",
        "required": ["url"],
        "properties": {
            "url": {"type": "string", "description": "URL to scrape"},
            "formats": {
                "type": "array",
                "items": {"type": "string"},
                "default": ["markdown", "html"],
            },
            "extract": {"$ref": "#/components/schemas/Extract"},
            "actions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "type": {"type": "string"},
                        "milliseconds": {"type": "integer"},
                        "selector": {"type": "string"},
                        "text": {"type": "string"},
                        "key": {"type": "string"},
                    },
                },
            },
            "location": {
                "type": "object",
                "properties": {
                    "country": {"type": "string"},
                    "languages": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
    "ExportRequest": {
        "type": "object",
        "required": ["results"],
        "properties": {
            "results": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["url", "content"],
                    "properties": {"url": {"type": "string"}, "content": {"type": "string"}},
                },
            },
        },
    },
}


def build_openapi(server_url: str) -> Dict[str, Any]:
    """
    Build the OpenAPI document.
    
    Args:
        server_url: URL the ``/api`` routes are served from
    
    Returns:
        OpenAPI 3.1 document as a dictionary
    """
    return {
        "openapi": "3.1.0",
        "info": {
            "title": "DevDocs to LLM API",
            "version": "1.0.0",
            "description": "API for crawling, mapping, and scraping web content using Firecrawl",
        },
        "servers": [{"url": server_url, "description": "DevDocs proxy routes"}],
        "components": {"schemas": SCHEMAS},
        "paths": {
            "/crawl": {
                "post": {
                    "summary": "Start crawling a website",
                    "requestBody": _json_body("#/components/schemas/CrawlRequest"),
                    "responses": {
                        "200": _json_response("Crawl started", "#/components/schemas/CrawlResponse"),
                        **ERROR_RESPONSES,
                    },
                }
            },
            "/crawl/status/{id}": {
                "get": {
                    "summary": "Check crawl status",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
                    ],
                    "responses": {
                        "200": _json_response("Crawl status", "#/components/schemas/CrawlStatus"),
                        "500": _json_response("Failed crawl", "#/components/schemas/CrawlStatus"),
                    },
                }
            },
            "/crawl/next": {
                "post": {
                    "summary": "Fetch the next chunk of crawl results",
                    "requestBody": _json_body("#/components/schemas/NextRequest"),
                    "responses": {
                        "200": _json_response("Next chunk", "#/components/schemas/CrawlStatus"),
                        **ERROR_RESPONSES,
                    },
                }
            },
            "/map": {
                "post": {
                    "summary": "Map a website's URLs",
                    "requestBody": _json_body("#/components/schemas/MapRequest"),
                    "responses": {
                        "200": {"description": "Firecrawl map response"},
                        **ERROR_RESPONSES,
                    },
                }
            },
            "/scrape": {
                "post": {
                    "summary": "Scrape a single URL",
                    "requestBody": _json_body("#/components/schemas/ScrapeRequest"),
                    "responses": {
                        "200": {"description": "Firecrawl scrape response"},
                        **ERROR_RESPONSES,
                    },
                }
            },
            "/export/{format}": {
                "post": {
                    "summary": "Download results as Markdown, XML or zip",
                    "parameters": [
                        {
                            "name": "format",
                            "in": "path",
                            "required": True,
                            "schema": {"type": "string", "enum": ["markdown", "xml", "zip"]},
                        }
                    ],
                    "requestBody": _json_body("#/components/schemas/ExportRequest"),
                    "responses": {
                        "200": {"description": "The formatted bundle as a download"},
                        "400": _json_response("Missing or invalid results", "#/components/schemas/Error"),
                    },
                }
            },
        },
    }
