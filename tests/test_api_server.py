import pytest
import requests

import api_server
from catalog_scraper import CatalogScraper
from conftest import BASE_URL, FakeFetcher, FakeResponse
from api_server import app, rewrite_root_relative_links


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def fake_scraper(monkeypatch):
    """Route /scrape through canned pages instead of the network."""

    def install(pages=None, failing=()):
        fetcher = FakeFetcher(pages, failing)
        monkeypatch.setattr(
            api_server, "CatalogScraper",
            lambda base_url, enable_fallback: CatalogScraper(
                base_url, fetcher=fetcher, enable_fallback=enable_fallback, category_page_delay=0,
            ),
        )
        return fetcher

    return install


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_extract_single_page(client, make_listing):
    response = client.post("/extract", json={"html": make_listing(5), "url": BASE_URL})

    data = response.get_json()
    assert response.status_code == 200
    assert data["total_products"] == 5
    product = data["results"][0]["products"][0]
    assert product["name"] == "Gadget 1"
    assert product["price"] == "৳ 1,499"
    assert product["images"] == ["https://othoba.com/img/gadget-1.jpg"]
    assert product["sourceUrl"] == BASE_URL


def test_extract_requires_url(client, make_listing):
    response = client.post("/extract", json={"html": make_listing(5)})

    assert response.status_code == 400
    assert "URL" in response.get_json()["error"]


def test_extract_rejects_unknown_format(client):
    response = client.post("/extract", json={"pages": []})

    assert response.status_code == 400


def test_extract_batch(client, make_listing):
    response = client.post("/extract", json={
        "html_contents": [
            {"html": make_listing(4, prefix="Phone"), "url": "https://othoba.com/mobile-phones"},
            {"html": make_listing(6, prefix="Laptop"), "url": "https://othoba.com/laptops"},
        ],
        "max_workers": 2,
    })

    data = response.get_json()
    assert data["total_processed"] == 2
    assert data["total_products"] == 10
    assert data["max_workers_used"] == 2


def test_extract_batch_size_is_limited(client, monkeypatch):
    monkeypatch.setattr(api_server, "MAX_BATCH_SIZE", 1)

    response = client.post("/extract", json={"html_contents": [{"html": "a", "url": "b"}] * 2})

    assert response.status_code == 400


def test_scrape_returns_catalog(client, fake_scraper, make_listing):
    fake_scraper({BASE_URL: make_listing(12)})

    response = client.post("/scrape", json={"url": BASE_URL})

    data = response.get_json()
    assert data["success"]
    assert data["scrapingInfo"]["totalProducts"] == 12
    assert data["scrapingInfo"]["usedFallback"] is False
    assert data["productStats"]["totalProducts"] == 12


def test_scrape_falls_back_when_site_is_down(client, fake_scraper):
    fake_scraper(failing=[BASE_URL])

    data = client.post("/scrape", json={"url": BASE_URL}).get_json()

    assert data["scrapingInfo"]["usedFallback"] is True
    assert len(data["products"]) == 19


def test_scrape_failure_without_fallback_is_bad_gateway(client, fake_scraper):
    fake_scraper(failing=[BASE_URL])

    response = client.post("/scrape", json={"url": BASE_URL, "allow_fallback": False})

    assert response.status_code == 502
    assert "Failed to fetch" in response.get_json()["cause"]


def test_proxy_rewrites_root_relative_links(client, monkeypatch):
    seen = []

    def fake_request(method, url, headers=None, data=None, timeout=None):
        seen.append((method, url, headers["User-Agent"]))
        return FakeResponse('<a href="/mobile">M</a><img src="//cdn.x.com/a.png"><img src="/a.png">')

    monkeypatch.setattr(api_server.proxy_session, "request", fake_request)

    response = client.get("/proxy/electronics-appliances?page=2", headers={"User-Agent": "TestAgent"})

    body = response.get_data(as_text=True)
    assert seen == [("GET", "https://othoba.com/electronics-appliances?page=2", "TestAgent")]
    assert 'href="/proxy/mobile"' in body
    assert 'src="/proxy/a.png"' in body
    assert 'src="//cdn.x.com/a.png"' in body


def test_proxy_mirrors_upstream_status(client, monkeypatch):
    monkeypatch.setattr(
        api_server.proxy_session, "request",
        lambda *args, **kwargs: FakeResponse("not here", status_code=404),
    )

    assert client.get("/proxy/missing").status_code == 404


def test_proxy_upstream_failure(client, monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(api_server.proxy_session, "request", refuse)

    response = client.get("/proxy")

    assert response.status_code == 500
    assert response.get_data(as_text=True).startswith("Error fetching site:")


def test_rewrite_leaves_absolute_links_alone():
    html = '<a href="https://othoba.com/x">x</a><form action="/search"></form>'

    assert rewrite_root_relative_links(html) == '<a href="https://othoba.com/x">x</a><form action="/proxy/search"></form>'


def test_scrape_reads_string_flags(client, fake_scraper):
    fake_scraper(failing=[BASE_URL])

    response = client.post("/scrape", json={"url": BASE_URL, "allow_fallback": "false"})

    assert response.status_code == 502


@pytest.mark.parametrize("value, expected", [
    (None, True), (False, False), ("false", False), ("False", False), ("0", False),
    ("true", True), (1, True), (0, False),
])
def test_parse_flag(value, expected):
    assert api_server.parse_flag(value, True) is expected
