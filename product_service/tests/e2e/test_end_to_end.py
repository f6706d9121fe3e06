"""
End-to-end tests for the Product Service HTTP API.

Requests go through the full middleware stack against a per-test SQLite
store, with deletion events captured by an in-memory publisher.
"""

from decimal import Decimal

import pytest

PRODUCTS_URL = "/api/products"


def create(client, headers, **overrides):
    payload = {
        "name": "Red Shirt",
        "description": "Cotton shirt",
        "price": "10.00",
        "quantity": 5,
    }
    payload.update(overrides)
    return client.post(PRODUCTS_URL, json=payload, headers=headers)


class TestProductLifecycle:
    """Create, read, update and delete through the API."""

    def test_full_lifecycle(self, client, seller_headers, recording_publisher):
        headers = seller_headers("seller1")

        created = create(client, headers)
        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        product = body["data"]
        assert product["ownerId"] == "seller1"
        assert Decimal(product["price"]) == Decimal("10.00")
        product_id = product["id"]

        fetched = client.get(f"{PRODUCTS_URL}/{product_id}")
        assert fetched.status_code == 200
        assert fetched.json()["data"] == product

        updated = client.put(
            f"{PRODUCTS_URL}/{product_id}",
            json={"name": "Red Shirt", "price": "9.99", "quantity": 5},
            headers=headers,
        )
        assert updated.status_code == 200
        assert Decimal(updated.json()["data"]["price"]) == Decimal("9.99")
        assert updated.json()["data"]["description"] is None

        deleted = client.delete(f"{PRODUCTS_URL}/{product_id}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {
            "success": True,
            "message": "Product deleted successfully",
            "data": None,
        }

        missing = client.get(f"{PRODUCTS_URL}/{product_id}")
        assert missing.status_code == 404
        assert missing.json()["message"] == "Product not found"

        assert recording_publisher.payloads == [
            {"productId": product_id, "ownerId": "seller1"}
        ]
        assert recording_publisher.published[0][0] == "product-deleted"

    def test_correlation_id_is_forwarded(
        self, client, seller_headers, recording_publisher
    ):
        headers = seller_headers("seller1")
        product_id = create(client, headers).json()["data"]["id"]

        client.delete(
            f"{PRODUCTS_URL}/{product_id}",
            headers={**headers, "X-Correlation-ID": "corr-42"},
        )

        assert recording_publisher.published[0][1].correlation_id == "corr-42"

    def test_camel_case_request_fields(self, client, seller_headers):
        response = create(client, seller_headers(), ownerId="someone-else")

        assert response.status_code == 201
        assert response.json()["data"]["ownerId"] == "seller1"


class TestAuthorization:
    """Identity and ownership enforcement."""

    def test_create_requires_identity(self, client, sample_product_payload):
        response = client.post(PRODUCTS_URL, json=sample_product_payload)

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Authentication required",
            "data": None,
        }

    def test_create_requires_seller_role(
        self, client, seller_headers, sample_product_payload
    ):
        response = client.post(
            PRODUCTS_URL,
            json=sample_product_payload,
            headers=seller_headers("u1", role="customer"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Seller role required"

    def test_non_owner_cannot_update(self, client, seller_headers):
        product_id = create(client, seller_headers("seller1")).json()["data"]["id"]

        response = client.put(
            f"{PRODUCTS_URL}/{product_id}",
            json={"name": "Mine now", "price": "1.00", "quantity": 1},
            headers=seller_headers("seller2"),
        )

        assert response.status_code == 403
        assert (
            response.json()["message"]
            == "You do not have permission to update this product"
        )
        assert client.get(f"{PRODUCTS_URL}/{product_id}").json()["data"]["name"] == (
            "Red Shirt"
        )

    def test_non_owner_cannot_delete(
        self, client, seller_headers, recording_publisher
    ):
        product_id = create(client, seller_headers("seller1")).json()["data"]["id"]

        response = client.delete(
            f"{PRODUCTS_URL}/{product_id}", headers=seller_headers("seller2")
        )

        assert response.status_code == 403
        assert (
            response.json()["message"]
            == "You do not have permission to delete this product"
        )
        assert client.get(f"{PRODUCTS_URL}/{product_id}").status_code == 200
        assert recording_publisher.published == []

    def test_update_unknown_product(self, client, seller_headers):
        response = client.put(
            f"{PRODUCTS_URL}/missing",
            json={"name": "X", "price": "1.00", "quantity": 1},
            headers=seller_headers(),
        )

        assert response.status_code == 404

    def test_reads_are_public(self, client, seller_headers):
        create(client, seller_headers())

        response = client.get(PRODUCTS_URL)

        assert response.status_code == 200
        assert response.json()["data"]["totalElements"] == 1


class TestValidation:
    """Malformed input is rejected with 400."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"name": "   "},
            {"price": "-1"},
            {"quantity": -3},
            {"price": "1.999"},
        ],
    )
    def test_invalid_product(self, client, seller_headers, overrides):
        response = create(client, seller_headers(), **overrides)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["data"] is None

    def test_missing_fields(self, client, seller_headers):
        response = client.post(
            PRODUCTS_URL, json={"name": "Lamp"}, headers=seller_headers()
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "query",
        ["page=-1", "size=0", "size=101", "sortBy=colour", "minPrice=-5"],
    )
    def test_invalid_listing_parameters(self, client, query):
        response = client.get(f"{PRODUCTS_URL}?{query}")

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestListings:
    """Catalog and seller listings."""

    @pytest.fixture
    def catalog(self, client, seller_headers):
        create(client, seller_headers("seller1"), name="Red Shirt", price="10.00")
        create(client, seller_headers("seller2"), name="Blue Hat", price="30.00")
        create(client, seller_headers("seller1"), name="Red Scarf", price="20.00")
        return client

    def test_default_listing(self, catalog):
        response = catalog.get(PRODUCTS_URL)

        data = response.json()["data"]
        assert response.json()["message"] == "Products retrieved successfully"
        assert [p["name"] for p in data["content"]] == [
            "Blue Hat",
            "Red Scarf",
            "Red Shirt",
        ]
        assert data["pageNumber"] == 0
        assert data["pageSize"] == 10
        assert data["totalElements"] == 3
        assert data["totalPages"] == 1
        assert data["isLastPage"] is True

    def test_search_and_price_filter(self, catalog):
        response = catalog.get(
            PRODUCTS_URL, params={"search": "red", "minPrice": "15", "maxPrice": "25"}
        )

        assert [p["name"] for p in response.json()["data"]["content"]] == [
            "Red Scarf"
        ]

    def test_sort_by_price_descending(self, catalog):
        response = catalog.get(
            PRODUCTS_URL, params={"sortBy": "price", "sortDir": "desc"}
        )

        prices = [Decimal(p["price"]) for p in response.json()["data"]["content"]]
        assert prices == sorted(prices, reverse=True)

    def test_paging(self, catalog):
        response = catalog.get(PRODUCTS_URL, params={"page": 1, "size": 2})

        data = response.json()["data"]
        assert [p["name"] for p in data["content"]] == ["Red Shirt"]
        assert data["totalPages"] == 2
        assert data["isLastPage"] is True

    def test_empty_catalog(self, client):
        data = client.get(PRODUCTS_URL).json()["data"]

        assert data["content"] == []
        assert data["totalElements"] == 0
        assert data["isLastPage"] is True

    def test_my_products(self, catalog, seller_headers):
        response = catalog.get(
            f"{PRODUCTS_URL}/my-products", headers=seller_headers("seller1")
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert {p["ownerId"] for p in data["content"]} == {"seller1"}
        assert data["totalElements"] == 2

    def test_my_products_with_filters(self, catalog, seller_headers):
        response = catalog.get(
            f"{PRODUCTS_URL}/my-products",
            params={"minPrice": "5", "maxPrice": "15"},
            headers=seller_headers("seller1"),
        )

        assert [p["name"] for p in response.json()["data"]["content"]] == [
            "Red Shirt"
        ]

    def test_my_products_requires_seller(self, catalog, seller_headers):
        anonymous = catalog.get(f"{PRODUCTS_URL}/my-products")
        customer = catalog.get(
            f"{PRODUCTS_URL}/my-products", headers=seller_headers("u1", "customer")
        )

        assert anonymous.status_code == 401
        assert customer.status_code == 400


class TestHealth:
    """Service health endpoint."""

    def test_health_without_kafka(self, client):
        response = client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "degraded"
        assert body["checks"]["database"]["status"] == "healthy"
        assert body["checks"]["events"]["connected"] is False
