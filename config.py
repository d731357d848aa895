"""
Configuration - Catalog Extraction System
==========================================
Centralized configuration for the fetcher, parser and run driver.
"""

from pathlib import Path
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ============ Environment Detection ============
ENVIRONMENT = os.getenv('ENVIRONMENT', 'development').lower()
IS_PRODUCTION = ENVIRONMENT == 'production'

# ============ Target Configuration ============

# Listing page the run starts from
TARGET_URL = os.getenv('TARGET_URL', 'https://othoba.com/electronics-appliances')

# ============ Fetch Configuration ============

# Retries after the first attempt (total attempts = MAX_RETRIES + 1)
MAX_RETRIES = int(os.getenv('MAX_RETRIES', '3'))

# Fixed delay before each retry (seconds)
RETRY_DELAY = float(os.getenv('RETRY_DELAY', '2'))

# Timeout for a single page request (seconds)
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '30'))

# Headless-browser render service (empty disables it and plain GET is used)
RENDER_API_URL = os.getenv('RENDER_API_URL', '')

# Timeout for render service requests (seconds); same per-fetch ceiling as plain requests
RENDER_API_TIMEOUT = int(os.getenv('RENDER_API_TIMEOUT', str(REQUEST_TIMEOUT)))

# ============ Run Configuration ============

# Below this many products the run sweeps category pages, then falls back
MIN_PRODUCTS_THRESHOLD = int(os.getenv('MIN_PRODUCTS_THRESHOLD', '10'))

# Maximum category sub-pages fetched when the base page is sparse
MAX_CATEGORY_PAGES = int(os.getenv('MAX_CATEGORY_PAGES', '3'))

# Pause after each category sub-page fetch (seconds)
CATEGORY_PAGE_DELAY = float(os.getenv('CATEGORY_PAGE_DELAY', '2'))

# Anchor text keywords that mark a category sub-page link
CATEGORY_KEYWORDS = ['mobile', 'laptop', 'tv', 'camera', 'headphone', 'speaker']

# Substitute the fallback catalog when live extraction is insufficient
ENABLE_FALLBACK = os.getenv('ENABLE_FALLBACK', 'True').lower() == 'true'

# ============ Parser Configuration ============

# Minimum matches for a container selector to be accepted on a page
CONTAINER_MIN_MATCHES = int(os.getenv('CONTAINER_MIN_MATCHES', '4'))

# Maximum candidate elements examined per page
MAX_CANDIDATES_PER_PAGE = int(os.getenv('MAX_CANDIDATES_PER_PAGE', '100'))

MAX_IMAGES_PER_PRODUCT = 5
MAX_COLORS_PER_PRODUCT = 10

# Defaults applied by the normalizer
DEFAULT_CATEGORY = 'Electronics & Appliances'
NO_PRICE_TEXT = 'Price not available'
NO_COLOR_TEXT = 'Not specified'

# ============ Storage Configuration ============

# Whether to save run results to files (disabled in production by default)
SAVE_RESULTS = os.getenv('SAVE_RESULTS', 'False' if IS_PRODUCTION else 'True').lower() == 'true'

# Whether to save logs to files
SAVE_LOGS = os.getenv('SAVE_LOGS', 'True').lower() == 'true'

# Base directory (current working directory)
BASE_DIR = Path.cwd()

# Results directory (only used if SAVE_RESULTS is True)
RESULTS_DIR = BASE_DIR / "results" if SAVE_RESULTS else None

# Logs directory (only used if SAVE_LOGS is True)
LOGS_DIR = BASE_DIR / "logs" if SAVE_LOGS else None

# ============ Logging Configuration ============

# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# Whether to log to file (uses SAVE_LOGS setting)
LOG_TO_FILE = SAVE_LOGS

# ============ Optional: Supabase Configuration ============

SUPABASE_URL = os.getenv('SUPABASE_URL', '')
SUPABASE_KEY = os.getenv('SUPABASE_KEY', '')
SUPABASE_TABLE = os.getenv('SUPABASE_TABLE', 'catalog_products')


# ============ Render Service Request Format ============
# Example payload structure for reference:
"""
{
  "urls": ["https://othoba.com/electronics-appliances"]
}

Expected response format:
{
  "results": [
    {
      "url": "https://othoba.com/electronics-appliances",
      "html": "<html>...</html>",
      "status": "success"
    }
  ]
}

OR simple array format:
[
  {
    "url": "https://othoba.com/electronics-appliances",
    "html": "<html>...</html>",
    "success": true
  }
]
"""
