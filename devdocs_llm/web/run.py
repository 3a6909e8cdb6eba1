#!/usr/bin/env python3
"""
Entry point for running the DevDocs to LLM proxy.

Usage:
    python -m devdocs_llm.web.run --host 0.0.0.0 --port 5000
"""

import argparse
import logging

from devdocs_llm.config import load_settings
from devdocs_llm.web.app import run_app
from devdocs_llm.utils.log import setup_logger, print_info, print_warning


def main():
    """Parse arguments and run the web application."""
    parser = argparse.ArgumentParser(
        description='Run the DevDocs to LLM proxy'
    )
    parser.add_argument(
        '--host',
        default='127.0.0.1',
        help='Host to bind to (default: 127.0.0.1)'
    )
    parser.add_argument(
        '--port', '-p',
        type=int,
        default=5000,
        help='Port to listen on (default: 5000)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode'
    )
    parser.add_argument(
        '--log-file',
        default=None,
        help='Also write logs to this file'
    )
    
    args = parser.parse_args()
    
    level = logging.DEBUG if args.debug else logging.INFO
    for name in ("devdocs_llm", "proxy", "firecrawl"):
        setup_logger(name, level=level, log_file=args.log_file)
    
    settings = load_settings()
    if not settings.has_api_key:
        print_warning("FIRECRAWL_API_KEY is not set; crawl routes will answer 500")
    
    print_info(f"Starting DevDocs proxy at http://{args.host}:{args.port}/api")
    run_app(host=args.host, port=args.port, debug=args.debug, settings=settings)


if __name__ == '__main__':
    main()
