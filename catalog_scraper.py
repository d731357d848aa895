"""
Catalog Scraper - Catalog Extraction System
============================================
Drives one scrape run: fetch the base page, extract, sweep category
sub-pages when the listing is sparse, and substitute the fallback catalog
when live extraction stays below the threshold.

Run states: INIT -> FETCHING_BASE -> EXTRACTING -> (SWEEPING_SUBPAGES)?
-> (FALLBACK)? -> DONE. FAILED is reached only when the base page cannot be
fetched and the fallback catalog is disabled.
"""

import argparse
import logging
import sys
import time
from collections import Counter
from datetime import datetime
from typing import List, Dict, Any, Optional

from config import (
    TARGET_URL,
    MIN_PRODUCTS_THRESHOLD,
    MAX_CATEGORY_PAGES,
    CATEGORY_PAGE_DELAY,
    ENABLE_FALLBACK,
    NO_PRICE_TEXT,
    NO_COLOR_TEXT,
    LOG_LEVEL,
    LOG_TO_FILE,
    LOGS_DIR,
    SAVE_RESULTS,
)
from exceptions import FetchError, PersistenceError, RunFailedError
from fallback_catalog import fallback_catalog
from html_fetcher import HTMLFetcher
from html_parser import HTMLProductParser
from models import ProductRecord, RunResult, RunState
from normalizer import ProductCatalog
from result_writer import save_results_json

logger = logging.getLogger(__name__)


def compute_stats(products: List[ProductRecord]) -> Dict[str, Any]:
    """Aggregate statistics over a final product list."""
    categories = Counter(p.category for p in products if p.category)
    brands = Counter(p.brand for p in products if p.brand)
    colors = []
    for product in products:
        for color in product.colors:
            if color != NO_COLOR_TEXT and color not in colors:
                colors.append(color)

    total_images = sum(len(p.images) for p in products)
    return {
        'totalProducts': len(products),
        'productsWithImages': sum(1 for p in products if p.images),
        'productsWithColors': sum(1 for p in products if any(c != NO_COLOR_TEXT for c in p.colors)),
        'productsWithPrices': sum(1 for p in products if p.price and p.price != NO_PRICE_TEXT),
        'productsWithDescriptions': sum(1 for p in products if p.description),
        'categories': list(categories),
        'brands': list(brands),
        'categoryBreakdown': dict(categories),
        'brandBreakdown': dict(brands),
        'colorsFound': colors,
        'averageImagesPerProduct': round(total_images / len(products), 2) if products else 0,
    }


class CatalogScraper:
    """Runs fetch -> extract -> merge for one listing site."""

    def __init__(
        self,
        base_url: str = TARGET_URL,
        fetcher: Optional[HTMLFetcher] = None,
        parser: Optional[HTMLProductParser] = None,
        min_products: int = MIN_PRODUCTS_THRESHOLD,
        max_category_pages: int = MAX_CATEGORY_PAGES,
        category_page_delay: float = CATEGORY_PAGE_DELAY,
        enable_fallback: bool = ENABLE_FALLBACK,
    ):
        self.logger = logging.getLogger(__name__)
        self.base_url = base_url
        self.fetcher = fetcher or HTMLFetcher()
        self.parser = parser or HTMLProductParser()
        self.min_products = min_products
        self.max_category_pages = max_category_pages
        self.category_page_delay = category_page_delay
        self.enable_fallback = enable_fallback

    def run(self) -> RunResult:
        """
        Execute one run.

        Returns:
            RunResult with the final product list and statistics

        Raises:
            RunFailedError: base page fetch failed and fallback is disabled
        """
        result = RunResult(source_url=self.base_url)
        catalog = ProductCatalog()
        self._enter(result, RunState.INIT)
        self.logger.info(f"Starting catalog scrape of {self.base_url}")

        self._enter(result, RunState.FETCHING_BASE)
        try:
            html = self.fetcher.fetch(self.base_url)
        except FetchError as e:
            if not self.enable_fallback:
                self._enter(result, RunState.FAILED)
                self.logger.error(f"Base page fetch failed and fallback is disabled: {e}")
                raise RunFailedError(f"Could not fetch base page {self.base_url}") from e
            return self._finish_with_fallback(result, f"base page fetch failed: {e}")

        self._enter(result, RunState.EXTRACTING)
        self._extract_page(html, self.base_url, catalog, result)

        if len(catalog) < self.min_products:
            self._enter(result, RunState.SWEEPING_SUBPAGES)
            self._sweep_category_pages(html, catalog, result)

        if len(catalog) < self.min_products and self.enable_fallback:
            return self._finish_with_fallback(
                result,
                f"only {len(catalog)} products extracted (minimum {self.min_products})",
            )

        return self._finish(result, catalog.records)

    def _extract_page(self, html: str, url: str, catalog: ProductCatalog, result: RunResult) -> int:
        try:
            page = self.parser.parse_html(html, url, catalog)
        except (AttributeError, TypeError, ValueError) as e:
            self.logger.error(f"Error parsing {url}: {type(e).__name__}: {e}", exc_info=True)
            return 0
        result.pages_scraped.append(url)
        return page['num_products']

    def _sweep_category_pages(self, html: str, catalog: ProductCatalog, result: RunResult):
        self.logger.info('Attempting to find and scrape category pages...')
        links = self.parser.discover_category_links(html, self.base_url, limit=self.max_category_pages)

        for index, url in enumerate(links):
            if index > 0:
                time.sleep(self.category_page_delay)
            self.logger.info(f"Scraping category: {url}")
            try:
                page_html = self.fetcher.fetch(url)
            except FetchError as e:
                self.logger.warning(f"Error scraping category {url}: {e}")
                continue
            added = self._extract_page(page_html, url, catalog, result)
            self.logger.info(f"Category {url} added {added} products")

    def _finish_with_fallback(self, result: RunResult, reason: str) -> RunResult:
        self._enter(result, RunState.FALLBACK)
        self.logger.warning(f"Using fallback catalog: {reason}")
        result.used_fallback = True
        result.fallback_reason = reason
        products = fallback_catalog(self.base_url)
        self.logger.info(f"Created {len(products)} fallback products")
        return self._finish(result, products)

    def _finish(self, result: RunResult, products: List[ProductRecord]) -> RunResult:
        result.products = products
        result.stats = compute_stats(products)
        result.finished_at = datetime.now().isoformat()
        self._enter(result, RunState.DONE)

        self.logger.info(f"\n{'='*60}")
        self.logger.info("SCRAPING SUMMARY")
        self.logger.info(f"{'='*60}")
        self.logger.info(f"Total Products: {result.stats['totalProducts']}")
        self.logger.info(f"With Colors: {result.stats['productsWithColors']}")
        self.logger.info(f"With Prices: {result.stats['productsWithPrices']}")
        self.logger.info(f"Pages Scraped: {len(result.pages_scraped)}")
        self.logger.info(f"Used Fallback: {result.used_fallback}")
        return result

    def _enter(self, result: RunResult, state: RunState):
        result.states.append(state)
        self.logger.debug(f"Run state -> {state.name}")


def setup_logging(level: str = LOG_LEVEL):
    """Configure logging with console and optional dated file output."""
    handlers = []

    console_handler = logging.StreamHandler()
    # Set UTF-8 encoding for console handler (Windows compatibility)
    if hasattr(console_handler.stream, 'reconfigure'):
        try:
            console_handler.stream.reconfigure(encoding='utf-8', errors='replace')
        except (AttributeError, ValueError):
            pass
    handlers.append(console_handler)

    if LOG_TO_FILE and LOGS_DIR:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        log_file = LOGS_DIR / f"scrape_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    arg_parser = argparse.ArgumentParser(description='Extract a normalized product catalog from a listing page.')
    arg_parser.add_argument('--url', default=TARGET_URL, help='listing page to scrape')
    arg_parser.add_argument('--no-fallback', action='store_true', help='fail instead of using the fallback catalog')
    arg_parser.add_argument('--output', help='JSON output path (defaults to the results directory)')
    args = arg_parser.parse_args(argv)

    setup_logging()

    print("\n" + "="*60)
    print("Catalog Extraction System")
    print("="*60 + "\n")

    scraper = CatalogScraper(base_url=args.url, enable_fallback=not args.no_fallback)
    try:
        result = scraper.run()
    except RunFailedError as e:
        logger.error(f"Scraping failed: {e} (cause: {e.__cause__})")
        return 1

    if args.output or SAVE_RESULTS:
        try:
            path = save_results_json(result, args.output)
        except PersistenceError as e:
            logger.error(f"Could not save results: {e}")
            return 1
        print(f"Results saved to: {path}")

    stats = result.stats
    print("\n" + "="*60)
    print(f"[OK] Processed {stats['totalProducts']} products from {result.source_url}")
    print("="*60)
    print(f"Products with images: {stats['productsWithImages']}")
    print(f"Products with colors: {stats['productsWithColors']}")
    print(f"Products with prices: {stats['productsWithPrices']}")
    print(f"Products with descriptions: {stats['productsWithDescriptions']}")
    if result.used_fallback:
        print(f"Fallback catalog used: {result.fallback_reason}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
