"""
Field Extractor - Catalog Extraction System
============================================
Resolves the fields of one candidate product element.

Fields are resolved independently, in order: name, description, images,
price, colors, category (then the supplemental brand and product link).
Each field walks its own selector priority list and falls back to text
heuristics. A candidate is accepted only with a name and at least one image.
"""

from bs4 import Tag
from typing import List, Dict, Any, Optional
from urllib.parse import urljoin
import re
import logging

from config import MAX_IMAGES_PER_PRODUCT, MAX_COLORS_PER_PRODUCT
from exceptions import ExtractionError
from normalizer import absolutize_url, clean_text, dedupe_casefold


NAME_SELECTORS = [
    # Specific product-name classes
    '.product-name',
    '.product-title',
    '.item-title',
    '.card-title',
    '[data-product-name]',
    '.product-info h3',
    '.product-info h4',
    # Generic headings
    'h2',
    'h3',
    'h4',
    'h5',
    # Name/title-like class patterns
    '.title',
    '.name',
    '[class*="name"]',
    '[class*="title"]',
]

DESCRIPTION_SELECTORS = [
    '.product-description',
    '.product-details',
    '.description',
    '.details',
    '.summary',
    '.product-summary',
    '.short-desc',
    '[class*="desc"]',
    'p',
]

IMAGE_ATTRIBUTES = ['src', 'data-src', 'data-lazy', 'data-original', 'data-lazy-src']

PRICE_SELECTORS = [
    '.price',
    '.product-price',
    '.current-price',
    '.sale-price',
    '.regular-price',
    '.cost',
    '.amount',
    '[data-price]',
    '[class*="price"]',
]

COLOR_SWATCH_SELECTORS = [
    '.color-option',
    '.variant',
    '.color',
    '.swatch',
    '[data-color]',
    '.color-selector',
    '.attribute-color',
]

COLOR_ATTRIBUTES = ['data-color', 'title', 'alt']

# Multi-word colours first so they are reported ahead of their components
COLOR_KEYWORDS = [
    'rose gold', 'space gray', 'deep purple', 'sierra blue', 'alpine green', 'product red',
    'midnight', 'starlight', 'graphite',
    'black', 'white', 'red', 'blue', 'green', 'yellow', 'orange', 'purple', 'pink',
    'brown', 'gray', 'grey', 'silver', 'gold',
]

CATEGORY_SELECTORS = [
    '.category',
    '.product-category',
    '[data-category]',
    '.cat-link',
    '.breadcrumb',
]

BRAND_SELECTORS = ['[itemprop="brand"]', '[data-brand]', '[class*="brand"]']

KNOWN_BRANDS = [
    'Samsung', 'Apple', 'Xiaomi', 'Realme', 'Oppo', 'Vivo', 'Nokia', 'Huawei',
    'Dell', 'HP', 'Lenovo', 'Asus', 'Acer', 'LG', 'Sony', 'JBL', 'Canon', 'Nikon',
    'Fujifilm', 'Walton', 'Sharp', 'Singer', 'Philips', 'Miyako', 'Panasonic',
    'Toshiba', 'Hitachi', 'Vision',
]

PLACEHOLDER_MARKERS = ['placeholder', 'data:image']

MIN_OWN_TEXT_LENGTH = 2
MAX_OWN_TEXT_LENGTH = 200
MAX_SWATCH_TEXT_LENGTH = 50

DIGITS = re.compile(r'\d+')


class FieldExtractor:
    """Extracts raw product fields from candidate elements."""

    def __init__(
        self,
        max_images: int = MAX_IMAGES_PER_PRODUCT,
        max_colors: int = MAX_COLORS_PER_PRODUCT,
    ):
        self.logger = logging.getLogger(__name__)
        self.max_images = max_images
        self.max_colors = max_colors

    def extract(self, element: Tag, base_url: str, index: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        Extract the raw fields of one candidate element.

        Args:
            element: Candidate product element
            base_url: Page URL used to resolve relative links
            index: Position of the element on the page (for error reporting)

        Returns:
            Dict of raw fields, or None when the acceptance gate rejects it

        Raises:
            ExtractionError: the element could not be processed
        """
        try:
            name = self.extract_name(element)
            if not name:
                return None

            description = self.extract_description(element, name)
            images = self.extract_images(element, base_url)
            if not images:
                return None

            return {
                'name': name,
                'description': description,
                'images': images,
                'price': self.extract_price(element),
                'colors': self.extract_colors(element, name, description),
                'category': self.extract_category(element),
                'brand': self.extract_brand(element, name),
                'product_url': self.extract_product_url(element, base_url),
            }
        except (AttributeError, TypeError, ValueError, KeyError) as e:
            raise ExtractionError(f"Error extracting product info: {type(e).__name__}: {e}", index) from e

    def extract_name(self, element: Tag) -> str:
        for selector in NAME_SELECTORS:
            text = self._first_text(element, selector)
            if text:
                return text

        link = element.select_one('a[title]')
        if link and clean_text(link.get('title')):
            return clean_text(link.get('title'))

        for img in element.find_all('img'):
            alt = clean_text(img.get('alt'))
            if alt:
                return alt

        own_text = clean_text(''.join(element.find_all(string=True, recursive=False)))
        if MIN_OWN_TEXT_LENGTH <= len(own_text) <= MAX_OWN_TEXT_LENGTH:
            return own_text
        return ''

    def extract_description(self, element: Tag, name: str) -> str:
        for selector in DESCRIPTION_SELECTORS:
            for candidate in element.select(selector):
                text = clean_text(candidate.get_text(' '))
                if text and text != name:
                    return text
        return ''

    def extract_images(self, element: Tag, base_url: str) -> List[str]:
        images = []
        for img in element.find_all('img'):
            src = self._image_source(img)
            if not src:
                continue
            url = absolutize_url(src, base_url)
            if url not in images:
                images.append(url)
            if len(images) >= self.max_images:
                break
        return images

    def extract_price(self, element: Tag) -> str:
        for selector in PRICE_SELECTORS:
            for candidate in element.select(selector):
                text = candidate.get_text(' ', strip=True) or (candidate.get('data-price') or '').strip()
                # A "price" class without digits is a label, not a price
                if DIGITS.search(text):
                    return text
        return ''

    def extract_colors(self, element: Tag, name: str, description: str) -> List[str]:
        colors = self._swatch_colors(element)
        if not colors:
            colors = self.colors_from_text(f"{name} {description}")
        return dedupe_casefold(colors)[:self.max_colors]

    def colors_from_text(self, text: str) -> List[str]:
        """Colour keywords found in free text (case-insensitive substring match)."""
        lowered = (text or '').lower()
        return [color for color in COLOR_KEYWORDS if color in lowered]

    def extract_category(self, element: Tag) -> str:
        for selector in CATEGORY_SELECTORS:
            candidate = element.select_one(selector)
            if candidate is None:
                continue
            text = clean_text(candidate.get_text(' ')) or clean_text(candidate.get('data-category'))
            if text:
                return text
        return ''

    def extract_brand(self, element: Tag, name: str) -> Optional[str]:
        for selector in BRAND_SELECTORS:
            candidate = element.select_one(selector)
            if candidate is None:
                continue
            brand = clean_text(candidate.get('content') or candidate.get('data-brand') or candidate.get_text(' '))
            if brand:
                return brand

        words = name.split()
        if words:
            for brand in KNOWN_BRANDS:
                if words[0].lower() == brand.lower():
                    return brand
        return None

    def extract_product_url(self, element: Tag, base_url: str) -> Optional[str]:
        links = [element] if element.name == 'a' and element.get('href') else []
        links.extend(element.find_all('a', href=True))
        for link in links:
            href = link.get('href', '').strip()
            if href and href != '#' and not href.startswith('javascript:'):
                return urljoin(base_url, href)
        return None

    def _swatch_colors(self, element: Tag) -> List[str]:
        colors = []
        for selector in COLOR_SWATCH_SELECTORS:
            for swatch in element.select(selector):
                text = clean_text(swatch.get_text(' '))
                if text and len(text) < MAX_SWATCH_TEXT_LENGTH:
                    colors.append(text)
                for attr in COLOR_ATTRIBUTES:
                    value = clean_text(swatch.get(attr))
                    if value and len(value) < MAX_SWATCH_TEXT_LENGTH:
                        colors.append(value)
            if colors:
                break
        return colors

    def _image_source(self, img: Tag) -> str:
        for attr in IMAGE_ATTRIBUTES:
            value = (img.get(attr) or '').strip()
            if not value:
                continue
            lowered = value.lower()
            if any(marker in lowered for marker in PLACEHOLDER_MARKERS):
                continue
            return value
        return ''

    def _first_text(self, element: Tag, selector: str) -> str:
        candidate = element.select_one(selector)
        if candidate is None:
            return ''
        return clean_text(candidate.get_text(' '))
