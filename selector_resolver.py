"""
Selector Resolver - Catalog Extraction System
==============================================
Finds product container elements on a page.

Candidate selectors are evaluated strictly in priority order and the first
one reaching the minimum match count wins. When none does, a structural scan
keeps any generic container holding both an image and currency-like text.
"""

from bs4 import BeautifulSoup, Tag
from typing import List, NamedTuple, Optional, Sequence, Union
import re
import logging

logger = logging.getLogger(__name__)

STRUCTURAL_SELECTOR = 'structural-heuristic'

STRUCTURAL_TAGS = ['div', 'li', 'article', 'section']

CURRENCY_PATTERN = re.compile(r'\d[\d,]*|৳|\bTk\b|\bBDT\b|\$|€|£|₹|\bRs\b', re.I)


class SelectorMatch(NamedTuple):
    """Elements matched by one selector, with its index in the candidate list (-1 for the structural scan)."""
    elements: List[Tag]
    selector: str
    index: int

    @property
    def is_structural(self) -> bool:
        return self.index < 0


def resolve_selector(
    document: Union[BeautifulSoup, Tag],
    candidate_selectors: Sequence[str],
    min_matches: int = 1,
) -> Optional[SelectorMatch]:
    """
    Return the first selector whose match count reaches min_matches.

    Later selectors are never evaluated once one succeeds.

    Returns:
        SelectorMatch, or None when every candidate falls short
    """
    for index, selector in enumerate(candidate_selectors):
        elements = document.select(selector)
        logger.info(f"Found {len(elements)} elements with selector: {selector}")
        if elements and len(elements) >= min_matches:
            return SelectorMatch(elements, selector, index)
    return None


def has_currency_text(text: str) -> bool:
    return bool(text) and CURRENCY_PATTERN.search(text) is not None


def structural_scan(document: Union[BeautifulSoup, Tag]) -> List[Tag]:
    """
    Generic containers holding at least one image and currency-like text.

    Nested matches are collapsed, in document order: a wrapper around several
    matches is dropped in favour of them, and a match that is the only one
    inside another (an image block with a discount badge) is dropped in
    favour of its enclosing tile.
    """
    found = []
    for element in document.find_all(STRUCTURAL_TAGS):
        if element.find('img') is None:
            continue
        if has_currency_text(element.get_text(' ', strip=True)):
            found.append(element)

    found_ids = {id(element) for element in found}
    enclosing = {}
    inner = {id(element): [] for element in found}
    for element in found:
        parent = next((p for p in element.parents if id(p) in found_ids), None)
        enclosing[id(element)] = parent
        if parent is not None:
            inner[id(parent)].append(element)

    # Descendants follow their ancestors in document order, so walk backwards
    wrappers = set()
    for element in reversed(found):
        children = inner[id(element)]
        if len(children) > 1 or any(id(child) in wrappers for child in children):
            wrappers.add(id(element))

    kept = []
    for element in found:
        if id(element) in wrappers:
            continue
        parent = enclosing[id(element)]
        if parent is not None and id(parent) not in wrappers:
            continue
        kept.append(element)
    return kept


def resolve(
    document: Union[BeautifulSoup, Tag],
    candidate_selectors: Sequence[str],
    min_matches: int = 1,
) -> Optional[SelectorMatch]:
    """
    Resolve product containers, falling back to the structural scan.

    Args:
        document: Parsed page
        candidate_selectors: Container selectors in priority order
        min_matches: Floor a configured selector must reach

    Returns:
        SelectorMatch, or None when the structural scan is empty too
    """
    match = resolve_selector(document, candidate_selectors, min_matches)
    if match:
        return match

    logger.info("No products found with standard selectors, trying structural scan...")
    elements = structural_scan(document)
    logger.info(f"Structural scan found {len(elements)} potential products")
    if elements:
        return SelectorMatch(elements, STRUCTURAL_SELECTOR, -1)
    return None
