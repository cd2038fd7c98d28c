"""Tests for feed API endpoints."""

import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from conftest import FakeCommerce, make_product, make_variant
from product_feed.core.feed.models import FeedHooks, Region
from product_feed.core.feed.xml_writer import G_NS
from product_feed.deps import get_feed_hooks, get_feed_service
from product_feed.main import app


@pytest.fixture
def client(example_commerce, make_service):
    """Test client wired to the in-memory commerce backend."""
    app.dependency_overrides[get_feed_service] = lambda: make_service(example_commerce)
    app.dependency_overrides[get_feed_hooks] = lambda: FeedHooks()
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


class TestJsonFeed:
    """Tests for GET /feed/v2/products."""

    def test_returns_items(self, client):
        response = client.get("/feed/v2/products")

        assert response.status_code == 200
        items = response.json()
        assert items[0]["id"] == "v1"
        assert items[0]["availability"] == 3
        assert items[0]["price"] == "1000 USD"

    def test_by_country_code(self, client):
        response = client.get("/feed/v2/products", params={"country_code": "US"})
        assert response.status_code == 200

    def test_unknown_currency_is_404(self, client):
        response = client.get("/feed/v2/products", params={"currency": "gbp"})

        assert response.status_code == 404
        assert response.json() == {"message": "No region found with currency code"}

    def test_unknown_country_is_404(self, client):
        response = client.get("/feed/v2/products", params={"country_code": "se"})

        assert response.status_code == 404
        assert response.json() == {"message": "No region found for country code"}

    def test_invalid_page(self, client):
        assert client.get("/feed/v2/products", params={"page": 0}).status_code == 422

    def test_page_past_end_is_empty(self, client):
        response = client.get("/feed/v2/products", params={"page": 3, "page_size": 1})

        assert response.status_code == 200
        assert response.json() == []

    def test_configured_hooks_apply(self, client):
        app.dependency_overrides[get_feed_hooks] = lambda: FeedHooks(include_fields=["id", "price"])

        response = client.get("/feed/v2/products")

        assert response.json() == [{"id": "v1", "price": "1000 USD"}]


class TestXmlFeeds:
    """Tests for the XML endpoints."""

    def test_v1_without_prefix(self, client):
        response = client.get("/feed/v1/products-xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        root = ET.fromstring(response.content)
        item = root.find("channel/item")
        assert item.find("availability").text == "in stock"
        assert item.find("color").text == "Red"

    def test_v1_with_google_merchant(self, client):
        response = client.get("/feed/v1/products-xml", params={"google_merchant": "true"})

        item = ET.fromstring(response.content).find("channel/item")
        assert item.find(f"{{{G_NS}}}id").text == "v1"
        assert item.find(f"{{{G_NS}}}color").text == "Red"

    def test_merchant_feed_always_prefixed(self, client):
        response = client.get("/feed/products-xml", params={"currency": "usd"})

        assert response.status_code == 200
        item = ET.fromstring(response.content).find("channel/item")
        assert item.find(f"{{{G_NS}}}price").text == "1000 USD"

    def test_no_regions_is_404(self, make_service):
        app.dependency_overrides[get_feed_service] = lambda: make_service(FakeCommerce(regions=[]))
        app.dependency_overrides[get_feed_hooks] = lambda: FeedHooks()
        try:
            with TestClient(app) as client:
                response = client.get("/feed/products-xml")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 404
        assert response.json() == {"message": "No regions found"}

    def test_availability_failure_is_502(self, example_commerce, make_service):
        async def broken(variant_ids, sales_channel_id):
            raise ConnectionError("inventory down")

        example_commerce.get_availability = broken
        app.dependency_overrides[get_feed_service] = lambda: make_service(example_commerce)
        app.dependency_overrides[get_feed_hooks] = lambda: FeedHooks()
        try:
            with TestClient(app) as client:
                response = client.get("/feed/v1/products-xml")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 502


def test_currency_query_matches_case_insensitively(make_service):
    commerce = FakeCommerce(regions=[Region(id="r1", currency_code="usd"), Region(id="r2", currency_code="eur")])
    app.dependency_overrides[get_feed_service] = lambda: make_service(commerce)
    app.dependency_overrides[get_feed_hooks] = lambda: FeedHooks()
    try:
        with TestClient(app) as client:
            response = client.get("/feed/v2/products", params={"currency": "EUR"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == []


class TestFullJsonFeed:
    """Tests for GET /feed/products/all."""

    def test_returns_every_batch(self, make_service):
        commerce = FakeCommerce(
            regions=[Region(id="r1", currency_code="usd")],
            products=[make_product(f"p{i}", [make_variant(f"v{i}")]) for i in range(3)],
            availability={"sc1": {"v0": 1, "v2": 5}},
        )
        app.dependency_overrides[get_feed_service] = lambda: make_service(commerce, batch_size=2)
        app.dependency_overrides[get_feed_hooks] = lambda: FeedHooks()
        try:
            with TestClient(app) as client:
                response = client.get("/feed/products/all")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert [(i["id"], i["availability"]) for i in response.json()] == [("v0", 1), ("v1", 0), ("v2", 5)]
        assert [(offset, take) for _, offset, take in commerce.page_calls] == [(0, 2), (2, 2)]

    def test_unknown_currency_is_404(self, client):
        response = client.get("/feed/products/all", params={"currency": "gbp"})

        assert response.status_code == 404
        assert response.json() == {"message": "No region found with currency code"}
