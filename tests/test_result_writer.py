import json

import pytest

import result_writer
from catalog_scraper import compute_stats
from exceptions import PersistenceError
from fallback_catalog import fallback_catalog
from models import RunResult, RunState
from result_writer import (
    create_supabase_client,
    save_products_to_supabase,
    save_results_json,
    to_db_record,
)

SOURCE = "https://othoba.com/electronics-appliances"


class FakeSupabase:
    """Chains table().insert().execute() like the Supabase client."""

    def __init__(self, fail=False):
        self.fail = fail
        self.table_name = None
        self.inserted = None

    def table(self, name):
        self.table_name = name
        return self

    def insert(self, records):
        self.inserted = records
        return self

    def execute(self):
        if self.fail:
            raise RuntimeError("connection refused")
        return type("Response", (), {"data": self.inserted})()


@pytest.fixture
def finished_run():
    products = fallback_catalog(SOURCE)
    result = RunResult(source_url=SOURCE, products=products, stats=compute_stats(products))
    result.used_fallback = True
    result.states.extend([RunState.INIT, RunState.FALLBACK, RunState.DONE])
    return result


def test_save_results_json_writes_utf8(tmp_path, finished_run):
    path = save_results_json(finished_run, tmp_path / "results" / "run.json")

    text = path.read_text(encoding="utf-8")
    data = json.loads(text)
    assert "৳ 42,999" in text
    assert data["scrapingInfo"]["totalProducts"] == 19
    assert data["scrapingInfo"]["usedFallback"] is True
    assert data["scrapingInfo"]["state"] == "done"
    assert data["products"][0]["sourceUrl"] == SOURCE
    assert data["productStats"]["totalProducts"] == 19


def test_save_results_json_failure_raises_persistence_error(tmp_path, finished_run):
    with pytest.raises(PersistenceError):
        save_results_json(finished_run, tmp_path)


def test_save_results_json_needs_a_destination(monkeypatch, finished_run):
    monkeypatch.setattr(result_writer, "RESULTS_DIR", None)

    with pytest.raises(PersistenceError):
        save_results_json(finished_run)


def test_to_db_record_maps_columns():
    record = to_db_record(fallback_catalog(SOURCE)[0])

    assert record["product_id"] == "fallback_01"
    assert record["price_text"] == "৳ 42,999"
    assert record["image_urls"] == list(fallback_catalog(SOURCE)[0].images)


def test_save_products_to_supabase_inserts_one_batch():
    client = FakeSupabase()
    products = fallback_catalog(SOURCE)

    saved = save_products_to_supabase(client, products, table="catalog_products")

    assert saved == 19
    assert client.table_name == "catalog_products"
    assert len(client.inserted) == 19


def test_save_products_to_supabase_failure_raises():
    with pytest.raises(PersistenceError) as exc_info:
        save_products_to_supabase(FakeSupabase(fail=True), fallback_catalog(SOURCE))

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_nothing_to_save_skips_the_database():
    client = FakeSupabase(fail=True)

    assert save_products_to_supabase(client, []) == 0
    assert client.inserted is None


def test_client_is_not_created_without_credentials():
    assert create_supabase_client("", "") is None
