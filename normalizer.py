"""
Normalizer & Deduplicator - Catalog Extraction System
======================================================
Canonicalizes raw extracted fields into ProductRecords and keeps the
per-run catalog free of duplicates.

Dedup rule: a record is rejected when an accepted record has the same name
(case-insensitive) or the same first image URL. Distinct products sharing a
stock photo are therefore dropped; that is a known limitation.
"""

from typing import List, Dict, Any, Iterable, Iterator, Optional
from urllib.parse import urlsplit
from datetime import datetime
import itertools
import secrets
import re
import time
import logging

from config import (
    MAX_IMAGES_PER_PRODUCT,
    MAX_COLORS_PER_PRODUCT,
    DEFAULT_CATEGORY,
    NO_PRICE_TEXT,
    NO_COLOR_TEXT,
)
from models import ProductRecord

ABSOLUTE_URL = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*://')


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    if not text:
        return ''
    return ' '.join(str(text).split())


def dedupe_casefold(values: Iterable[str]) -> List[str]:
    """Drop case-insensitive repeats, keeping the first spelling."""
    seen = set()
    result = []
    for value in values:
        key = value.lower()
        if key not in seen:
            seen.add(key)
            result.append(value)
    return result


def is_absolute_url(url: str) -> bool:
    return bool(ABSOLUTE_URL.match(url or ''))


def site_origin(base_url: str) -> str:
    parts = urlsplit(base_url)
    return f"{parts.scheme}://{parts.netloc}"


def site_name(url: str) -> str:
    return urlsplit(url).netloc.replace('www.', '') or url


def absolutize_url(src: str, base_url: str) -> str:
    """
    Resolve an image path against the site.

    - protocol-relative (//host/x) gets https: prepended
    - root-relative (/x) gets the site origin prepended
    - anything else not already absolute gets the site origin plus a slash prepended
    """
    src = (src or '').strip()
    if src.startswith('//'):
        return 'https:' + src
    if is_absolute_url(src):
        return src
    if src.startswith('/'):
        return site_origin(base_url) + src
    return f"{site_origin(base_url)}/{src}"


class RecordIdGenerator:
    """Opaque ids unique within one run: a sequence number plus a random part."""

    def __init__(self, prefix: str = 'product'):
        self.prefix = prefix
        self._counter = itertools.count(1)
        self._run_stamp = int(time.time() * 1000)

    def next_id(self) -> str:
        return f"{self.prefix}_{self._run_stamp}_{next(self._counter)}_{secrets.token_hex(4)}"


class Normalizer:
    """Turns raw field dicts into finalized ProductRecords."""

    def __init__(
        self,
        id_generator: Optional[RecordIdGenerator] = None,
        max_images: int = MAX_IMAGES_PER_PRODUCT,
        max_colors: int = MAX_COLORS_PER_PRODUCT,
    ):
        self.ids = id_generator or RecordIdGenerator()
        self.max_images = max_images
        self.max_colors = max_colors

    def normalize(
        self,
        candidate: Dict[str, Any],
        base_url: str,
        source_url: Optional[str] = None,
        scraped_at: Optional[str] = None,
    ) -> ProductRecord:
        """
        Canonicalize fields, apply defaults and assign an id.

        Already-normalized input (including an existing id) passes through unchanged.

        Args:
            candidate: Raw fields from the field extractor
            base_url: Page URL used to resolve relative image paths
            source_url: Provenance URL (defaults to base_url)
            scraped_at: Provenance timestamp (defaults to now)
        """
        name = clean_text(candidate.get('name'))
        source_url = candidate.get('source_url') or source_url or base_url

        images = list(dict.fromkeys(
            absolutize_url(src, base_url) for src in candidate.get('images') or [] if src and src.strip()
        ))[:self.max_images]

        colors = dedupe_casefold(
            clean_text(color) for color in candidate.get('colors') or [] if clean_text(color)
        )[:self.max_colors]

        description = clean_text(candidate.get('description'))
        if not description:
            description = f"{name} - Electronics item from {site_name(source_url)}"

        return ProductRecord(
            id=candidate.get('id') or self.ids.next_id(),
            name=name,
            description=description,
            images=tuple(images),
            price=(candidate.get('price') or '').strip() or NO_PRICE_TEXT,
            colors=tuple(colors) if colors else (NO_COLOR_TEXT,),
            category=clean_text(candidate.get('category')) or DEFAULT_CATEGORY,
            source_url=source_url,
            scraped_at=candidate.get('scraped_at') or scraped_at or datetime.now().isoformat(),
            brand=clean_text(candidate.get('brand')) or None,
            product_url=candidate.get('product_url') or None,
        )


class ProductCatalog:
    """The accumulating record set of one run. Only ever appended to."""

    def __init__(self, records: Optional[Iterable[ProductRecord]] = None):
        self.logger = logging.getLogger(__name__)
        self._records: List[ProductRecord] = []
        self._names = set()
        self._first_images = set()
        for record in records or []:
            self.add(record)

    def is_duplicate(self, record: ProductRecord) -> bool:
        if record.name.lower() in self._names:
            return True
        return bool(record.images) and record.images[0] in self._first_images

    def add(self, record: ProductRecord) -> bool:
        """Append a record unless it duplicates an accepted one."""
        if self.is_duplicate(record):
            self.logger.debug(f"Skipping duplicate product: {record.name[:50]}")
            return False
        self._records.append(record)
        self._names.add(record.name.lower())
        if record.images:
            self._first_images.add(record.images[0])
        return True

    @property
    def records(self) -> List[ProductRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProductRecord]:
        return iter(list(self._records))
