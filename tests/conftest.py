import time

import pytest
import requests

BASE_URL = "https://othoba.com/electronics-appliances"


class FakeResponse:
    """Stand-in for requests.Response."""

    def __init__(self, text="", status_code=200, json_data=None, headers=None, encoding="utf-8"):
        self.text = text
        self.content = text.encode("utf-8")
        self.status_code = status_code
        self.headers = headers or {"Content-Type": "text/html; charset=utf-8"}
        self.encoding = encoding
        self.apparent_encoding = "utf-8"
        self._json_data = json_data

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeFetcher:
    """Serves canned pages; URLs in `failing` raise FetchError."""

    def __init__(self, pages=None, failing=()):
        self.pages = pages or {}
        self.failing = set(failing)
        self.calls = []

    def fetch(self, url):
        from exceptions import FetchError

        self.calls.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchError(url, 4, requests.exceptions.ConnectionError("connection reset"))
        return self.pages[url]


def product_card(name, image, price="৳ 1,000", container_class="product-item", extra=""):
    slug = name.lower().replace(" ", "-")
    return f"""
    <div class="{container_class}">
      <a href="/p/{slug}"><img src="{image}" alt="{name}"></a>
      <h3 class="product-name">{name}</h3>
      <span class="price">{price}</span>
      {extra}
    </div>
    """


def listing_page(cards, nav_links=()):
    nav = "".join(f'<a href="{href}">{text}</a>' for text, href in nav_links)
    return f"""
    <html>
      <head><meta charset="utf-8"><title>Electronics</title>
        <script>var tracking = "<div class='product-item'>fake</div>";</script>
      </head>
      <body>
        <nav>{nav}</nav>
        <div class="listing">{''.join(cards)}</div>
      </body>
    </html>
    """


@pytest.fixture
def make_listing():
    """Build a listing page of `count` distinct products."""

    def _make(count, prefix="Gadget", container_class="product-item", nav_links=(), image_dir="/img"):
        cards = [
            product_card(
                f"{prefix} {i}",
                f"{image_dir}/{prefix.lower()}-{i}.jpg",
                price=f"৳ {i},499",
                container_class=container_class,
            )
            for i in range(1, count + 1)
        ]
        return listing_page(cards, nav_links)

    return _make


@pytest.fixture
def sleeps(monkeypatch):
    """Record time.sleep calls instead of sleeping."""
    calls = []
    monkeypatch.setattr(time, "sleep", lambda seconds: calls.append(seconds))
    return calls
