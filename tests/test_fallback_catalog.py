from fallback_catalog import FALLBACK_PRODUCTS, IMAGE_BASE, fallback_catalog
from normalizer import ProductCatalog, is_absolute_url

SOURCE = "https://othoba.com/electronics-appliances"


def test_fallback_catalog_has_every_product():
    products = fallback_catalog(SOURCE, scraped_at="2026-10-19T10:00:00")

    assert len(products) == len(FALLBACK_PRODUCTS) == 19
    assert products[0].name == "Samsung Galaxy A54 5G Smartphone"
    assert products[0].price == "৳ 42,999"
    assert products[0].brand == "Samsung"
    assert all(p.source_url == SOURCE for p in products)
    assert all(p.scraped_at == "2026-10-19T10:00:00" for p in products)


def test_fallback_records_are_valid_and_unique():
    products = fallback_catalog(SOURCE)
    catalog = ProductCatalog()

    assert all(catalog.add(p) for p in products)
    assert all(p.name and p.description and p.price and p.colors and p.category for p in products)
    assert all(len(p.images) == 2 for p in products)
    assert all(is_absolute_url(url) and url.startswith(IMAGE_BASE) for p in products for url in p.images)


def test_fallback_ids_are_stable_between_calls():
    first = [p.id for p in fallback_catalog(SOURCE)]
    second = [p.id for p in fallback_catalog("https://othoba.com/other")]

    assert first == second
    assert first[0] == "fallback_01"
    assert first[-1] == "fallback_19"
