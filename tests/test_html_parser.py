import pytest

from conftest import BASE_URL, listing_page, product_card
from exceptions import ExtractionError
from field_extractor import FieldExtractor
from html_parser import HTMLProductParser
from normalizer import ProductCatalog, is_absolute_url
from selector_resolver import STRUCTURAL_SELECTOR


@pytest.fixture
def parser():
    return HTMLProductParser()


def test_parses_listing_with_configured_selector(parser, make_listing):
    result = parser.parse_html(make_listing(12), BASE_URL)

    assert result["success"]
    assert result["selector_used"] == ".product-item"
    assert result["num_products"] == 12
    products = result["products"]
    assert products[0].name == "Gadget 1"
    assert products[0].price == "৳ 1,499"
    assert products[0].images == ("https://othoba.com/img/gadget-1.jpg",)
    assert products[0].product_url == "https://othoba.com/p/gadget-1"
    assert products[0].source_url == BASE_URL


def test_accepted_records_satisfy_catalog_invariants(parser, make_listing):
    products = parser.parse_html(make_listing(15), BASE_URL)["products"]

    assert all(p.name and p.images for p in products)
    assert len({p.name.lower() for p in products}) == len(products)
    assert len({p.images[0] for p in products}) == len(products)
    assert len({p.id for p in products}) == len(products)
    assert all(is_absolute_url(url) for p in products for url in p.images)


def test_duplicates_on_a_page_are_rejected(parser):
    cards = [
        product_card("Sony Bravia", "/img/1.jpg"),
        product_card("SONY BRAVIA", "/img/2.jpg"),
        product_card("LG OLED", "/img/1.jpg"),
        product_card("Walton Fridge", "/img/3.jpg"),
        product_card("Sharp Oven", "/img/4.jpg"),
    ]

    result = parser.parse_html(listing_page(cards), BASE_URL)

    assert [p.name for p in result["products"]] == ["Sony Bravia", "Walton Fridge", "Sharp Oven"]


def test_products_already_in_catalog_are_not_added_again(parser, make_listing):
    catalog = ProductCatalog()
    parser.parse_html(make_listing(5), BASE_URL, catalog)

    second = parser.parse_html(make_listing(7), BASE_URL + "/page-2", catalog)

    assert second["num_products"] == 2
    assert len(catalog) == 7


def test_failing_element_is_skipped_without_aborting_the_page(make_listing):
    class FlakyExtractor(FieldExtractor):
        def extract(self, element, base_url, index=None):
            if index == 1:
                raise ExtractionError("broken markup", index)
            return super().extract(element, base_url, index)

    parser = HTMLProductParser(field_extractor=FlakyExtractor())

    result = parser.parse_html(make_listing(6), BASE_URL)

    assert result["num_skipped"] == 1
    assert result["num_products"] == 5
    assert "Gadget 2" not in [p.name for p in result["products"]]


def test_structural_fallback_extracts_unclassed_tiles(parser):
    cards = [
        product_card("Walton Fridge", "/img/fridge.jpg", container_class="tile"),
        product_card("Sharp Oven", "/img/oven.jpg", container_class="tile"),
        product_card("Singer Iron", "/img/iron.jpg", container_class="tile"),
    ]

    result = parser.parse_html(listing_page(cards), BASE_URL)

    assert result["selector_used"] == STRUCTURAL_SELECTOR
    assert sorted(p.name for p in result["products"]) == ["Sharp Oven", "Singer Iron", "Walton Fridge"]
    assert all(len(p.images) == 1 for p in result["products"])


def test_structural_tiles_with_badged_thumbnails_keep_every_product(parser):
    tiles = [
        f'<div class="tile"><div class="thumb"><img src="/img/fridge-{i}.jpg" alt="Front view">'
        f'<span>-10%</span></div><h4>Walton Fridge {i}</h4><span class="price">Tk {i},500</span></div>'
        for i in range(1, 4)
    ]

    result = parser.parse_html(listing_page(tiles), BASE_URL)

    assert result["selector_used"] == STRUCTURAL_SELECTOR
    assert [p.name for p in result["products"]] == ["Walton Fridge 1", "Walton Fridge 2", "Walton Fridge 3"]
    assert result["products"][0].price == "Tk 1,500"


def test_too_few_configured_matches_fall_through_to_structural_scan(parser, make_listing):
    result = parser.parse_html(make_listing(3), BASE_URL)

    assert result["selector_used"] == STRUCTURAL_SELECTOR
    assert result["num_products"] == 3


def test_page_without_products_reports_failure(parser):
    result = parser.parse_html("<html><body><p>Nothing to see</p></body></html>", BASE_URL)

    assert not result["success"]
    assert result["num_products"] == 0
    assert result["error"]


def test_error_page_is_detected(parser):
    result = parser.parse_html("<html><body><h1>403 Error</h1>Access denied</body></html>", BASE_URL)

    assert not result["success"]
    assert "Error page" in result["error"]


def test_bytes_input_keeps_currency_glyphs(parser, make_listing):
    result = parser.parse_html(make_listing(4).encode("utf-8"), BASE_URL)

    assert result["products"][0].price == "৳ 1,499"


def test_discover_category_links(parser):
    html = listing_page([], nav_links=[
        ("Mobile Phones", "/mobile-phones"),
        ("Laptops", "https://othoba.com/laptops"),
        ("About us", "/about"),
        ("Smart TVs", "/tv"),
        ("Mobile Accessories", "/mobile-phones"),
        ("Contact", "/contact"),
        ("Cameras", "/cameras"),
        ("Headphones", "javascript:void(0)"),
    ])

    links = parser.discover_category_links(html, BASE_URL)

    assert links == [
        "https://othoba.com/mobile-phones",
        "https://othoba.com/laptops",
        "https://othoba.com/tv",
        "https://othoba.com/cameras",
    ]
    assert parser.discover_category_links(html, BASE_URL, limit=2) == links[:2]
