"""
Flask API Server - Catalog Extraction API
==========================================
HTTP surface for the catalog extraction pipeline.

Features:
- /extract: normalize products from caller-supplied HTML (single or batch)
- /scrape: run the full fetch -> extract -> fallback pipeline
- /proxy: passthrough to the upstream site with link rewriting
"""

from flask import Flask, request, jsonify, Response
from flask_cors import CORS
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Any
import logging
from datetime import datetime
import traceback
import os
import re
import requests

from api_config import (
    MAX_WORKERS,
    MAX_BATCH_SIZE,
    FLASK_HOST,
    FLASK_PORT,
    FLASK_DEBUG,
    PROXY_UPSTREAM_URL,
    PROXY_PREFIX,
    PROXY_TIMEOUT,
)
from catalog_scraper import CatalogScraper
from config import TARGET_URL, ENABLE_FALLBACK
from exceptions import PersistenceError, RunFailedError
from html_parser import HTMLProductParser
from result_writer import create_supabase_client, save_products_to_supabase

# Initialize Flask app
app = Flask(__name__)
CORS(app)  # Enable CORS for all routes

logger = logging.getLogger(__name__)

# Session for upstream proxy requests
proxy_session = requests.Session()

ROOT_RELATIVE_ATTR = re.compile(r'''(\b(?:href|src|action)\s*=\s*["'])/(?!/)''', re.I)


def extract_products_from_html(html_content: str, source_url: str) -> Dict[str, Any]:
    """
    Extract normalized products from one HTML document.

    A fresh parser (and so a fresh catalog and id sequence) is used per page.
    """
    try:
        result = HTMLProductParser().parse_html(html_content, source_url)
        return {
            'platform_url': source_url,
            'success': result['success'],
            'num_products': result['num_products'],
            'products': [product.to_dict() for product in result['products']],
            'selector_used': result.get('selector_used'),
            'num_skipped': result.get('num_skipped', 0),
            'error': result.get('error'),
        }
    except Exception as e:
        logger.error(f"Error extracting products from {source_url}: {e}", exc_info=True)
        return {
            'platform_url': source_url,
            'success': False,
            'num_products': 0,
            'products': [],
            'error': f"{type(e).__name__}: {str(e)}",
        }


def parse_flag(value: Any, default: bool) -> bool:
    """Read a JSON boolean, also accepting "true"/"false"-style strings."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def rewrite_root_relative_links(html: str, prefix: str = PROXY_PREFIX) -> str:
    """Route root-relative href/src/action attributes back through the proxy prefix."""
    return ROOT_RELATIVE_ATTR.sub(lambda m: f"{m.group(1)}{prefix.rstrip('/')}/", html)


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'service': 'Catalog Extraction API',
        'timestamp': datetime.now().isoformat()
    })


@app.route('/extract', methods=['POST'])
def extract_products():
    """
    Extract products from HTML content.

    Request body (single HTML):
    {
        "html": "<html>...</html>",
        "url": "https://othoba.com/electronics-appliances"
    }

    Request body (batch):
    {
        "html_contents": [{"html": "...", "url": "..."}, ...],
        "max_workers": 4
    }
    """
    start_time = datetime.now()

    try:
        data = request.get_json(silent=True)

        if not data:
            return jsonify({
                'success': False,
                'error': 'No JSON data provided'
            }), 400

        if 'html' in data or 'url' in data:
            html_content = data.get('html', '')
            source_url = data.get('url', '')

            if not html_content:
                return jsonify({
                    'success': False,
                    'error': 'HTML content is required'
                }), 400

            if not source_url:
                return jsonify({
                    'success': False,
                    'error': 'URL is required'
                }), 400

            result = extract_products_from_html(html_content, source_url)
            processing_time = (datetime.now() - start_time).total_seconds()

            return jsonify({
                'success': True,
                'results': [result],
                'total_processed': 1,
                'total_products': result['num_products'],
                'processing_time_seconds': round(processing_time, 2)
            })

        elif 'html_contents' in data:
            html_contents = data.get('html_contents', [])
            max_workers = data.get('max_workers', MAX_WORKERS)

            if not isinstance(html_contents, list):
                return jsonify({
                    'success': False,
                    'error': 'html_contents must be an array'
                }), 400

            if not html_contents:
                return jsonify({
                    'success': False,
                    'error': 'html_contents array is required'
                }), 400

            if len(html_contents) > MAX_BATCH_SIZE:
                return jsonify({
                    'success': False,
                    'error': f'Batch size exceeds maximum of {MAX_BATCH_SIZE}. Received {len(html_contents)} items.'
                }), 400

            try:
                max_workers = min(max(int(max_workers), 1), 20)
            except (ValueError, TypeError):
                max_workers = MAX_WORKERS

            logger.info(f"Processing {len(html_contents)} HTML contents with {max_workers} workers")

            results = []
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_url = {
                    executor.submit(
                        extract_products_from_html,
                        item.get('html', ''),
                        item.get('url', ''),
                    ): item.get('url', 'unknown')
                    for item in html_contents
                }

                for future in as_completed(future_to_url):
                    url = future_to_url[future]
                    try:
                        results.append(future.result())
                    except Exception as e:
                        logger.error(f"Error processing {url}: {e}", exc_info=True)
                        results.append({
                            'platform_url': url,
                            'success': False,
                            'num_products': 0,
                            'products': [],
                            'error': f"{type(e).__name__}: {str(e)}"
                        })

            processing_time = (datetime.now() - start_time).total_seconds()
            return jsonify({
                'success': True,
                'results': results,
                'total_processed': len(results),
                'total_products': sum(r.get('num_products', 0) for r in results),
                'processing_time_seconds': round(processing_time, 2),
                'max_workers_used': max_workers
            })

        else:
            return jsonify({
                'success': False,
                'error': 'Invalid request format. Provide either {"html": "...", "url": "..."} or {"html_contents": [...]}'
            }), 400

    except Exception as e:
        logger.error(f"Error in extract_products endpoint: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': f"{type(e).__name__}: {str(e)}",
            'traceback': traceback.format_exc() if app.debug else None
        }), 500


@app.route('/scrape', methods=['POST'])
def scrape_catalog():
    """
    Run the full pipeline for a listing page.

    Request body (all optional):
    {
        "url": "https://othoba.com/electronics-appliances",
        "allow_fallback": true,
        "save_to_db": false
    }
    """
    data = request.get_json(silent=True) or {}
    url = data.get('url') or TARGET_URL
    allow_fallback = parse_flag(data.get('allow_fallback'), ENABLE_FALLBACK)

    try:
        result = CatalogScraper(base_url=url, enable_fallback=allow_fallback).run()
    except RunFailedError as e:
        logger.error(f"Scrape of {url} failed: {e}")
        return jsonify({
            'success': False,
            'error': str(e),
            'cause': str(e.__cause__) if e.__cause__ else None
        }), 502

    payload = {'success': True, **result.to_dict()}

    if parse_flag(data.get('save_to_db'), False):
        try:
            client = create_supabase_client()
            payload['saved_to_db'] = save_products_to_supabase(client, result.products) if client else 0
        except PersistenceError as e:
            logger.error(f"Could not save scrape results: {e}")
            payload['saved_to_db'] = 0
            payload['persistence_error'] = str(e)

    return jsonify(payload)


@app.route(PROXY_PREFIX, defaults={'path': ''}, methods=['GET', 'POST'])
@app.route(f'{PROXY_PREFIX}/<path:path>', methods=['GET', 'POST'])
def proxy(path):
    """Forward the request to the upstream site and mirror its response."""
    upstream_url = f"{PROXY_UPSTREAM_URL.rstrip('/')}/{path}"
    query = request.query_string.decode('utf-8')
    if query:
        upstream_url = f"{upstream_url}?{query}"

    try:
        upstream = proxy_session.request(
            request.method,
            upstream_url,
            headers={'User-Agent': request.headers.get('User-Agent', 'Mozilla/5.0')},
            data=request.get_data() if request.method == 'POST' else None,
            timeout=PROXY_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Proxy request to {upstream_url} failed: {e}")
        return Response(f"Error fetching site: {e}", status=500, content_type='text/plain; charset=utf-8')

    content_type = upstream.headers.get('Content-Type', 'text/html; charset=utf-8')
    if 'text/html' in content_type.lower():
        body = rewrite_root_relative_links(upstream.text)
    else:
        body = upstream.content

    return Response(body, status=upstream.status_code, content_type=content_type)


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    port = int(os.getenv('PORT', FLASK_PORT))
    logger.info(f"Starting Catalog Extraction API on {FLASK_HOST}:{port}")
    logger.info(f"Proxy upstream: {PROXY_UPSTREAM_URL} (prefix {PROXY_PREFIX})")
    logger.info(f"Environment: {os.getenv('ENVIRONMENT', 'development')}")
    app.run(host=FLASK_HOST, port=port, debug=FLASK_DEBUG)
