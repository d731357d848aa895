"""
HTML Parser - Catalog Extraction System
========================================
Parses one listing page into normalized product records.

Pipeline per page:
1. Strip script/style noise and detect blocked/error pages
2. Resolve product containers (selector cascade, then structural scan)
3. Extract fields per candidate element (failures skip the element only)
4. Normalize and append to the run's deduplicated catalog

Also discovers category sub-page links for sparse listings.
"""

from bs4 import BeautifulSoup
from typing import List, Dict, Any, Optional, Sequence, Union
from urllib.parse import urljoin, urlparse
from datetime import datetime
import re
import logging

from config import CONTAINER_MIN_MATCHES, MAX_CANDIDATES_PER_PAGE, CATEGORY_KEYWORDS
from exceptions import ExtractionError
from field_extractor import FieldExtractor
from normalizer import Normalizer, ProductCatalog, clean_text
from selector_resolver import resolve


class HTMLProductParser:
    """Extracts product records from listing-page HTML."""

    def __init__(
        self,
        field_extractor: Optional[FieldExtractor] = None,
        normalizer: Optional[Normalizer] = None,
        container_min_matches: int = CONTAINER_MIN_MATCHES,
        max_candidates: int = MAX_CANDIDATES_PER_PAGE,
    ):
        """Initialize parser with selector sets and error-page indicators."""
        self.logger = logging.getLogger(__name__)
        self.field_extractor = field_extractor or FieldExtractor()
        self.normalizer = normalizer or Normalizer()
        self.container_min_matches = container_min_matches
        self.max_candidates = max_candidates
        self._build_selector_sets()

    def _build_selector_sets(self):
        """Product container selectors, highest priority first."""
        self.container_selectors = [
            '.product-item',
            '.product-card',
            '.item',
            '.product',
            '[data-product]',
            '.grid-item',
            '.list-item',
            '.card',
            '.product-box',
            '.item-box',
            '.product-wrapper',
        ]

        self.error_indicators = [
            '403 error', '404 error', 'access denied', 'request blocked',
            'error: the request could not be satisfied',
            'page not found', 'forbidden',
        ]

    def parse_html(
        self,
        html_content: Union[str, bytes],
        source_url: str,
        catalog: Optional[ProductCatalog] = None,
    ) -> Dict[str, Any]:
        """
        Parse HTML and append extracted products to the catalog.

        Args:
            html_content: Raw HTML (text or bytes)
            source_url: Page URL (for link resolution and provenance)
            catalog: Run catalog to append to; a fresh one when omitted

        Returns:
            Dict with success status, the newly accepted products and metadata
        """
        start_time = datetime.now()
        catalog = catalog if catalog is not None else ProductCatalog()
        result = {
            'success': False,
            'url': source_url,
            'platform': self._extract_platform(source_url),
            'timestamp': start_time.isoformat(),
            'selector_used': None,
            'num_candidates': 0,
            'num_skipped': 0,
            'num_products': 0,
            'products': [],
        }

        text = html_content.decode('utf-8', errors='replace') if isinstance(html_content, bytes) else html_content
        if self._is_error_page(text):
            result['error'] = 'Error page detected (likely blocked or not found)'
            return result

        soup = BeautifulSoup(html_content, 'html.parser')
        for tag in soup(['script', 'style', 'noscript']):
            tag.decompose()

        match = resolve(soup, self.container_selectors, self.container_min_matches)
        if match is None:
            self.logger.info("No candidate product elements found")
            result['error'] = 'No products found by any selector'
            return result

        self.logger.info(f"Using selector '{match.selector}' with {len(match.elements)} candidates")
        result['selector_used'] = match.selector
        scraped_at = datetime.now().isoformat()
        added = []

        candidates = match.elements[:self.max_candidates]
        for index, element in enumerate(candidates):
            try:
                fields = self.field_extractor.extract(element, source_url, index)
            except ExtractionError as e:
                self.logger.warning(f"Skipping element {index}: {e}")
                result['num_skipped'] += 1
                continue

            if fields is None:
                continue

            record = self.normalizer.normalize(fields, source_url, scraped_at=scraped_at)
            if catalog.add(record):
                added.append(record)
                self.logger.info(f"Extracted product: {record.name[:50]}")

        duration = (datetime.now() - start_time).total_seconds()
        result.update({
            'success': len(added) > 0,
            'num_candidates': len(candidates),
            'num_products': len(added),
            'products': added,
            'duration_seconds': round(duration, 2),
        })
        if not added:
            result['error'] = 'No valid products in candidate elements'

        self.logger.info(f"Total products extracted from page: {len(added)} (catalog size {len(catalog)})")
        return result

    def discover_category_links(
        self,
        html_content: Union[str, bytes],
        base_url: str,
        keywords: Sequence[str] = CATEGORY_KEYWORDS,
        limit: Optional[int] = None,
    ) -> List[str]:
        """
        Find category sub-page links by their anchor text.

        Args:
            html_content: Raw HTML of the base page
            base_url: Base page URL
            keywords: Topical keywords matched at the start of a word
            limit: Maximum links returned

        Returns:
            Unique absolute URLs in document order
        """
        pattern = re.compile(r'\b(?:' + '|'.join(re.escape(k) for k in keywords) + r')', re.I)
        soup = BeautifulSoup(html_content, 'html.parser')
        links = []

        for anchor in soup.find_all('a', href=True):
            href = anchor['href'].strip()
            if not href or href.startswith('#') or href.startswith('javascript:'):
                continue
            if not pattern.search(clean_text(anchor.get_text(' '))):
                continue
            url = urljoin(base_url, href)
            if url != base_url and url not in links:
                links.append(url)
            if limit is not None and len(links) >= limit:
                break

        self.logger.info(f"Found {len(links)} category links")
        return links

    def _is_error_page(self, text: str) -> bool:
        # Only short pages; real listings mention "not found" in footers all the time
        if len(text) >= 5000:
            return False
        lowered = text.lower()
        return any(indicator in lowered for indicator in self.error_indicators)

    def _extract_platform(self, url: str) -> str:
        """Extract platform name from URL."""
        parsed = urlparse(url)
        domain = parsed.netloc.replace('www.', '')
        return domain.split('.')[0] if domain else 'unknown'
