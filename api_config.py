"""
API Configuration
================
Configuration settings for the Flask API server and the proxy passthrough.
Loads from environment variables with fallback defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Maximum number of pages parsed in parallel for a batch /extract request
MAX_WORKERS = int(os.getenv('MAX_WORKERS', '4'))

# Flask server configuration
FLASK_HOST = os.getenv('FLASK_HOST', '0.0.0.0')
FLASK_PORT = int(os.getenv('FLASK_PORT', '5000'))
FLASK_DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'

# Maximum number of HTML contents allowed in a single batch request
MAX_BATCH_SIZE = int(os.getenv('MAX_BATCH_SIZE', '50'))

# Upstream site the /proxy route forwards to
PROXY_UPSTREAM_URL = os.getenv('PROXY_UPSTREAM_URL', 'https://othoba.com')

# Path prefix root-relative links are rewritten to
PROXY_PREFIX = os.getenv('PROXY_PREFIX', '/proxy')

# Timeout for upstream proxy requests (seconds)
PROXY_TIMEOUT = int(os.getenv('PROXY_TIMEOUT', '30'))
