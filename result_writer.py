"""
Result Writer - Catalog Extraction System
==========================================
Persists run results: JSON files on disk and, optionally, a Supabase table.
Every failure surfaces as PersistenceError so callers can tell it apart from
extraction problems.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from supabase import create_client, Client

from config import RESULTS_DIR, SUPABASE_URL, SUPABASE_KEY, SUPABASE_TABLE
from exceptions import PersistenceError
from models import ProductRecord, RunResult

logger = logging.getLogger(__name__)


def save_results_json(result: RunResult, path: Optional[Union[str, Path]] = None) -> Path:
    """
    Write a run result to a JSON file.

    Args:
        result: Finished run
        path: Output file; defaults to a timestamped file under RESULTS_DIR

    Returns:
        Path written

    Raises:
        PersistenceError: no destination or the write failed
    """
    if path is None:
        if not RESULTS_DIR:
            raise PersistenceError("No output path given and SAVE_RESULTS is disabled")
        path = RESULTS_DIR / f"catalog_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"Could not write results to {path}: {e}") from e

    logger.info(f"Saved {len(result.products)} products to: {path}")
    return path


def create_supabase_client(url: str = SUPABASE_URL, key: str = SUPABASE_KEY) -> Optional[Client]:
    """Return a Supabase client, or None when credentials are not configured."""
    if not url or not key:
        logger.warning("Supabase credentials not provided. Database storage will be disabled.")
        return None
    try:
        client = create_client(url, key)
    except Exception as e:
        raise PersistenceError(f"Failed to initialize Supabase client: {e}") from e
    logger.info("Supabase client initialized successfully")
    return client


def to_db_record(product: ProductRecord) -> Dict[str, Any]:
    """Map a record to the catalog table's columns."""
    return {
        'product_id': product.id,
        'product_name': product.name,
        'description': product.description,
        'image_urls': list(product.images),
        'price_text': product.price,
        'colors': list(product.colors),
        'category': product.category,
        'brand': product.brand,
        'product_url': product.product_url,
        'source_url': product.source_url,
        'scraped_at': product.scraped_at,
    }


def save_products_to_supabase(
    client: Client,
    products: List[ProductRecord],
    table: str = SUPABASE_TABLE,
) -> int:
    """
    Insert products into a Supabase table in one batch.

    Returns:
        Number of rows saved

    Raises:
        PersistenceError: the insert failed
    """
    if not products:
        return 0

    db_records = [to_db_record(product) for product in products]
    try:
        response = client.table(table).insert(db_records).execute()
    except Exception as e:
        raise PersistenceError(f"Error saving products to Supabase: {type(e).__name__}: {e}") from e

    saved_count = len(response.data or [])
    logger.info(f"Successfully saved {saved_count}/{len(products)} products to Supabase")
    return saved_count
