"""
Flask web application for DevDocs to LLM.

Proxies crawl, status, map and scrape requests to Firecrawl with the
server-held credential and serves formatted downloads of crawl results.
"""

import io
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request, send_file

from ..config import Settings, load_settings
from ..crawler.models import pages_from_dicts
from ..errors import DevDocsError, MissingInputError
from ..firecrawl import FirecrawlClient
from ..output import build_archive, to_markdown, to_xml
from ..utils.constants import DEFAULT_PAGE_LIMIT, EXAMPLE_DOCS
from ..utils.log import get_logger
from .openapi import build_openapi


EXPORT_FORMATS = {
    'markdown': ('text/markdown', 'documentation.md'),
    'xml': ('application/xml', 'documentation.xml'),
    'zip': ('application/zip', 'documentation.zip'),
}


def _error(message: str, status: int) -> Tuple[Any, int]:
    return jsonify({'error': message}), status


def _handle_exception(e: Exception) -> Tuple[Any, int]:
    """Turn an exception into the uniform error response."""
    if isinstance(e, DevDocsError):
        return _error(e.message, e.status_code)
    get_logger("proxy").exception(f"Unexpected error: {e}")
    return _error(str(e) or 'Internal server error', 500)


def _request_data() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _require_url(data: Dict[str, Any]) -> str:
    url = data.get('url')
    if not isinstance(url, str) or not url.strip():
        raise MissingInputError('URL is required')
    return url.strip()


def _parse_limit(value: Any) -> int:
    if isinstance(value, bool):
        raise MissingInputError('Limit must be a positive integer')
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise MissingInputError(f'Invalid parameter value: {value!r}')
    if limit < 1:
        raise MissingInputError('Limit must be a positive integer')
    return limit


def create_app(settings: Optional[Settings] = None, client: Optional[FirecrawlClient] = None):
    """
    Create and configure the Flask application.
    
    Args:
        settings: Runtime settings (read from the environment when omitted)
        client: Firecrawl client (built from ``settings`` when omitted)
    """
    app = Flask(__name__)
    
    settings = settings or load_settings()
    app.extensions['firecrawl'] = client or FirecrawlClient(settings)
    
    logger = get_logger("proxy")
    logger.info(f"API Key available: {settings.has_api_key}")
    
    def firecrawl() -> FirecrawlClient:
        return app.extensions['firecrawl']
    
    @app.route('/api/crawl', methods=['POST'])
    async def start_crawl():
        """Start a new crawl job."""
        try:
            data = _request_data()
            url = _require_url(data)
            limit = _parse_limit(data.get('limit', DEFAULT_PAGE_LIMIT))
            
            job_id = await firecrawl().start_crawl(
                url,
                limit=limit,
                allow_backward_links=bool(data.get('allowBackwardLinks', False)),
                scrape_options=data.get('scrapeOptions') or None
            )
            return jsonify({'success': True, 'id': job_id})
        
        except Exception as e:
            return _handle_exception(e)
    
    @app.route('/api/crawl/status/<job_id>')
    async def crawl_status(job_id):
        """Get the status of a crawl job."""
        try:
            status = await firecrawl().crawl_status(job_id)
        except Exception as e:
            return _handle_exception(e)
        
        if status['status'] in ('failed', 'unknown'):
            return jsonify(status), 500
        return jsonify(status)
    
    @app.route('/api/crawl/next', methods=['POST'])
    async def crawl_next():
        """Fetch the next chunk of a completed crawl."""
        try:
            next_url = _request_data().get('next')
            if not isinstance(next_url, str) or not next_url:
                raise MissingInputError('Next cursor is required')
            
            chunk = await firecrawl().crawl_next(next_url)
        except Exception as e:
            return _handle_exception(e)
        
        if chunk['status'] in ('failed', 'unknown'):
            return jsonify(chunk), 500
        return jsonify(chunk)
    
    @app.route('/api/map', methods=['POST'])
    async def map_site():
        """List the URLs of a site."""
        try:
            data = _request_data()
            url = _require_url(data)
            return jsonify(await firecrawl().map(url, search=data.get('search')))
        except Exception as e:
            return _handle_exception(e)
    
    @app.route('/api/scrape', methods=['POST'])
    async def scrape():
        """Scrape a single page."""
        try:
            data = _request_data()
            url = _require_url(data)
            result = await firecrawl().scrape(
                url,
                formats=data.get('formats'),
                extract=data.get('extract'),
                actions=data.get('actions'),
                location=data.get('location')
            )
            return jsonify(result)
        except Exception as e:
            return _handle_exception(e)
    
    @app.route('/api/export/<fmt>', methods=['POST'])
    def export(fmt):
        """Download crawl results as Markdown, XML or a zip of Markdown files."""
        if fmt not in EXPORT_FORMATS:
            return _error(f'Unsupported format: {fmt}', 404)
        
        results = _request_data().get('results')
        if not isinstance(results, list) or not results:
            return _error('No results to export', 400)
        
        try:
            pages = pages_from_dicts(results)
        except (KeyError, TypeError) as e:
            return _error(f'Invalid results: {e}', 400)
        
        if fmt == 'markdown':
            body = to_markdown(pages).encode('utf-8')
        elif fmt == 'xml':
            body = to_xml(pages).encode('utf-8')
        else:
            body = build_archive(pages)
        
        mimetype, filename = EXPORT_FORMATS[fmt]
        return send_file(
            io.BytesIO(body),
            mimetype=mimetype,
            as_attachment=True,
            download_name=filename
        )
    
    @app.route('/api/openapi')
    def openapi():
        """Describe the proxy routes."""
        return jsonify(build_openapi(request.host_url.rstrip('/') + '/api'))
    
    @app.route('/api/examples')
    def examples():
        """List example documentation sites."""
        return jsonify({'examples': EXAMPLE_DOCS})
    
    return app


def run_app(
    host: str = '127.0.0.1',
    port: int = 5000,
    debug: bool = False,
    settings: Optional[Settings] = None
):
    """Run the Flask web application."""
    app = create_app(settings)
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_app()
