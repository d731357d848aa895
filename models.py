"""
Data Models - Catalog Extraction System
========================================
Product records and run results produced by the pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple


@dataclass(frozen=True)
class ProductRecord:
    """A normalized product. Created by the normalizer, never mutated afterwards."""

    id: str
    name: str
    description: str
    images: Tuple[str, ...]
    price: str
    colors: Tuple[str, ...]
    category: str
    source_url: str
    scraped_at: str
    brand: Optional[str] = None
    product_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON output shape."""
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'images': list(self.images),
            'price': self.price,
            'colors': list(self.colors),
            'category': self.category,
            'sourceUrl': self.source_url,
            'scrapedAt': self.scraped_at,
        }
        if self.brand:
            data['brand'] = self.brand
        if self.product_url:
            data['productUrl'] = self.product_url
        return data


class RunState(Enum):
    INIT = 'init'
    FETCHING_BASE = 'fetching_base'
    EXTRACTING = 'extracting'
    SWEEPING_SUBPAGES = 'sweeping_subpages'
    FALLBACK = 'fallback'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class RunResult:
    """Final output of one scrape run."""

    source_url: str
    products: List[ProductRecord] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: Optional[str] = None
    used_fallback: bool = False
    fallback_reason: Optional[str] = None
    pages_scraped: List[str] = field(default_factory=list)
    states: List[RunState] = field(default_factory=list)

    @property
    def state(self) -> RunState:
        return self.states[-1] if self.states else RunState.INIT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scrapingInfo': {
                'sourceUrl': self.source_url,
                'startedAt': self.started_at,
                'finishedAt': self.finished_at,
                'totalProducts': len(self.products),
                'usedFallback': self.used_fallback,
                'fallbackReason': self.fallback_reason,
                'pagesScraped': self.pages_scraped,
                'state': self.state.value,
            },
            'products': [product.to_dict() for product in self.products],
            'productStats': self.stats,
        }
