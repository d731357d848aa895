"""
HTML Fetcher - Catalog Extraction System
=========================================
Fetches listing pages with a browser-like header set and a bounded,
fixed-interval retry loop.

Features:
- Plain HTTP GET through a shared requests session
- Optional headless-browser render service for script-driven pages
- Fixed backoff between attempts, hard attempt ceiling
- Terminal FetchError carrying the last underlying cause
"""

import requests
import time
import logging
from typing import Callable, Optional

from config import (
    MAX_RETRIES,
    RETRY_DELAY,
    REQUEST_TIMEOUT,
    RENDER_API_URL,
    RENDER_API_TIMEOUT,
)
from exceptions import FetchError


BROWSER_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                  '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Accept-Encoding': 'gzip, deflate, br',
    'Connection': 'keep-alive',
    'Upgrade-Insecure-Requests': '1',
}


class HTMLFetcher:
    """Fetches page HTML, retrying transport failures a bounded number of times."""

    def __init__(
        self,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        timeout: int = REQUEST_TIMEOUT,
        render_api_url: str = RENDER_API_URL,
        retry_on_status: bool = False,
    ):
        """
        Initialize fetcher with its own session.

        Args:
            max_retries: Retries after the first attempt
            retry_delay: Fixed delay before each retry (seconds)
            timeout: Per-request timeout (seconds)
            render_api_url: Render service endpoint; empty for plain GET
            retry_on_status: Treat non-2xx responses as retryable failures
        """
        self.logger = logging.getLogger(__name__)
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.render_api_url = render_api_url
        self.retry_on_status = retry_on_status
        self.session = requests.Session()
        self.session.headers.update(BROWSER_HEADERS)
        self.fetch_count = 0
        self.attempt_count = 0

    def fetch(self, url: str) -> str:
        """
        Fetch a page, through the render service when one is configured.

        Args:
            url: Page URL

        Returns:
            Document text

        Raises:
            FetchError: every attempt failed
        """
        if self.render_api_url:
            return self.fetch_rendered(url)
        return self._with_retries(url, self._get)

    def fetch_rendered(self, url: str) -> str:
        """Fetch script-rendered HTML for a page from the render service."""
        return self._with_retries(url, self._render)

    def _with_retries(self, url: str, operation: Callable[[str], str]) -> str:
        self.fetch_count += 1
        attempts = self.max_retries + 1
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            self.attempt_count += 1
            self.logger.info(f"Fetching page: {url} (Attempt {attempt}/{attempts})")
            try:
                html = operation(url)
                self.logger.info(f"Successfully fetched page ({len(html)} characters)")
                return html
            except (requests.exceptions.RequestException, ValueError) as e:
                last_error = e
                self.logger.warning(f"Attempt {attempt}/{attempts} failed for {url}: {e}")
                if attempt < attempts:
                    self.logger.info(f"Retrying in {self.retry_delay} seconds...")
                    time.sleep(self.retry_delay)

        self.logger.error(f"All retry attempts exhausted for {url}")
        raise FetchError(url, attempts, last_error) from last_error

    def _get(self, url: str) -> str:
        response = self.session.get(url, timeout=self.timeout)
        if self.retry_on_status:
            response.raise_for_status()
        # requests assumes ISO-8859-1 for text/* without a charset, which mangles currency glyphs
        if not response.encoding or response.encoding.lower() == 'iso-8859-1':
            response.encoding = response.apparent_encoding
        return response.text

    def _render(self, url: str) -> str:
        response = self.session.post(
            self.render_api_url,
            json={"urls": [url]},
            timeout=RENDER_API_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()

        # Format: {"results": [{"url": "...", "html": "..."}, ...]} or a bare list
        if isinstance(data, dict) and 'results' in data:
            results = data['results']
        elif isinstance(data, list):
            results = data
        else:
            raise ValueError(f"Unexpected render response format: {type(data).__name__}")

        for result in results:
            if not isinstance(result, dict):
                continue
            ok = result.get('status') == 'success' or result.get('success') is True
            html = result.get('html') or ''
            if ok and isinstance(html, str) and html.strip():
                return html
            error = result.get('error', 'No HTML content')
            raise ValueError(f"Render service failed for {url}: {error}")

        raise ValueError(f"Render service returned no result for {url}")
