"""
Tests for the product service and its listing cache
"""
import json
from decimal import Decimal

from storefront.database import SessionLocal
from storefront.product_service.cache import ProductListingCache
from storefront.product_service.cache import get_product_cache
from storefront.product_service.main import app as product_app
from storefront.product_service.models.product import Product
from storefront.product_service.services.product_service import ProductService

from conftest import BrokenRedis

CACHE_KEY = "products:all"


def create(client, **fields):
    payload = {"name": "Widget", "price": "19.99", "stock_quantity": 5, **fields}
    response = client.post("/api/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestProductCrud:

    def test_empty_listing(self, product_client):
        response = product_client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == {"products": [], "total": 0}

    def test_create_product(self, product_client):
        response = product_client.post("/api/products", json={
            "name": "Widget",
            "description": "A useful widget",
            "price": "19.99",
            "category": "tools",
            "stock_quantity": 5,
            "sku": "WID-1"
        })

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Widget"
        assert Decimal(body["price"]) == Decimal("19.99")
        assert body["stock_quantity"] == 5
        assert body["is_active"] is True

    def test_name_and_price_are_required(self, product_client):
        assert product_client.post("/api/products", json={"price": "1.00"}).status_code == 400
        assert product_client.post("/api/products", json={"name": "Widget"}).status_code == 400

    def test_negative_values_are_rejected(self, product_client):
        negative_price = product_client.post("/api/products", json={"name": "Widget", "price": "-1"})
        negative_stock = product_client.post("/api/products", json={
            "name": "Widget", "price": "1.00", "stock_quantity": -3
        })

        assert negative_price.status_code == 400
        assert negative_stock.status_code == 400

    def test_duplicate_sku_conflicts(self, product_client):
        create(product_client, sku="WID-1")

        response = product_client.post("/api/products", json={
            "name": "Other", "price": "2.00", "sku": "WID-1"
        })

        assert response.status_code == 409
        assert response.json()["detail"] == "Product SKU already exists"

    def test_get_product(self, product_client):
        product = create(product_client)

        response = product_client.get(f"/api/products/{product['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Widget"

        missing = product_client.get("/api/products/999999")
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Product not found"

    def test_listing_shows_active_products_newest_first(self, product_client):
        first = create(product_client, name="First")
        second = create(product_client, name="Second")
        hidden = create(product_client, name="Hidden")
        product_client.delete(f"/api/products/{hidden['id']}")

        body = product_client.get("/api/products").json()

        assert body["total"] == 2
        assert [p["id"] for p in body["products"]] == [second["id"], first["id"]]

    def test_products_by_category(self, product_client):
        create(product_client, name="Hammer", category="tools")
        create(product_client, name="Apple", category="food")

        response = product_client.get("/api/products/category/tools")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Hammer"]

    def test_partial_update(self, product_client):
        product = create(product_client, category="tools")

        response = product_client.put(f"/api/products/{product['id']}", json={"price": "24.50"})

        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["price"]) == Decimal("24.50")
        assert body["name"] == "Widget"
        assert body["category"] == "tools"

    def test_update_can_reactivate(self, product_client):
        product = create(product_client)
        product_client.delete(f"/api/products/{product['id']}")

        response = product_client.put(f"/api/products/{product['id']}", json={"is_active": True})

        assert response.status_code == 200
        assert product_client.get(f"/api/products/{product['id']}").status_code == 200

    def test_update_missing_product(self, product_client):
        response = product_client.put("/api/products/999999", json={"name": "Nope"})

        assert response.status_code == 404

    def test_update_to_taken_sku_conflicts(self, product_client):
        create(product_client, sku="WID-1")
        other = create(product_client, name="Other", sku="WID-2")

        response = product_client.put(f"/api/products/{other['id']}", json={"sku": "WID-1"})

        assert response.status_code == 409

    def test_delete_is_soft(self, product_client):
        product = create(product_client)

        response = product_client.delete(f"/api/products/{product['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        assert product_client.get(f"/api/products/{product['id']}").status_code == 404
        with SessionLocal() as session:
            assert session.get(Product, product["id"]).is_active is False

    def test_delete_missing_product(self, product_client):
        assert product_client.delete("/api/products/999999").status_code == 404


class TestListingCache:

    def test_listing_is_cached_with_ttl(self, product_client, memory_redis):
        create(product_client)

        body = product_client.get("/api/products").json()

        assert json.loads(memory_redis.store[CACHE_KEY]) == body
        assert memory_redis.expiries[CACHE_KEY] == 300

    def test_cached_listing_is_served(self, product_client, memory_redis, make_product):
        create(product_client, name="Cached")
        product_client.get("/api/products")

        # bypasses the service, so nothing invalidates the cache
        make_product(name="Sneaky")

        body = product_client.get("/api/products").json()
        assert [p["name"] for p in body["products"]] == ["Cached"]

    def test_writes_invalidate_listing(self, product_client, memory_redis):
        product = create(product_client)

        for write in (
            lambda: create(product_client, name="Another"),
            lambda: product_client.put(f"/api/products/{product['id']}", json={"name": "Renamed"}),
            lambda: product_client.delete(f"/api/products/{product['id']}"),
        ):
            product_client.get("/api/products")
            assert CACHE_KEY in memory_redis.store
            write()
            assert CACHE_KEY not in memory_redis.store

        names = [p["name"] for p in product_client.get("/api/products").json()["products"]]
        assert names == ["Another"]

    def test_listing_read_before_a_write_is_not_cached(self, memory_redis, make_product, db_session):
        make_product(name="Old")
        cache = ProductListingCache(memory_redis)
        service = ProductService(db_session, cache)
        read_rows = service.repository.get_all_active

        def read_then_concurrent_write():
            rows = read_rows()
            cache.invalidate()
            return rows

        service.repository.get_all_active = read_then_concurrent_write
        payload = service.get_all_products()

        assert [p["name"] for p in json.loads(payload)["products"]] == ["Old"]
        assert CACHE_KEY not in memory_redis.store

    def test_stale_generation_write_is_dropped(self, memory_redis):
        cache = ProductListingCache(memory_redis)
        generation = cache.generation()

        cache.invalidate()
        cache.set("[]", generation)
        assert CACHE_KEY not in memory_redis.store

        cache.set("[]", cache.generation())
        assert memory_redis.store[CACHE_KEY] == "[]"

    def test_broken_cache_falls_back_to_database(self, product_client):
        product_app.dependency_overrides[get_product_cache] = lambda: ProductListingCache(BrokenRedis())

        created = create(product_client)
        response = product_client.get("/api/products")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["products"]] == [created["id"]]

    def test_cache_status_in_health(self, product_client):
        response = product_client.get("/health")

        assert response.status_code == 200
        assert response.json()["cache"] == "healthy"
        assert response.json()["database"] == "healthy"

    def test_health_stays_healthy_without_cache(self, product_client):
        product_app.dependency_overrides[get_product_cache] = lambda: ProductListingCache(BrokenRedis())

        body = product_client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["cache"].startswith("unhealthy")

    def test_disabled_cache(self):
        cache = ProductListingCache(None)

        assert cache.enabled is False
        assert cache.get() is None
        assert cache.ping() == "disabled"
        cache.set("[]", cache.generation())
        cache.invalidate()
