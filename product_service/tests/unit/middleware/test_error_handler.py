"""
Unit tests for Product Service error handling.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

from product_service.app.core.exceptions import (
    ProductNotFoundError,
    ProductPermissionError,
    ProductValidationError,
)
from product_service.app.middleware.error.error_handler import (
    ProductServiceErrorHandler,
    setup_product_error_handling,
)


class Payload(BaseModel):
    name: str
    quantity: int


@pytest.fixture
def app():
    app = FastAPI()
    setup_product_error_handling(app)

    @app.get("/not-found")
    async def not_found():
        raise ProductNotFoundError()

    @app.get("/forbidden")
    async def forbidden():
        raise ProductPermissionError(
            "You do not have permission to delete this product"
        )

    @app.get("/bad-sort")
    async def bad_sort():
        raise ProductValidationError("Cannot sort products by 'colour'")

    @app.get("/unauthenticated")
    async def unauthenticated():
        raise HTTPException(status_code=401, detail="Authentication required")

    @app.post("/payload")
    async def payload(body: Payload):
        return body

    @app.get("/store-down")
    async def store_down():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


class TestProductServiceErrorHandler:
    """Every failure is wrapped in the response envelope."""

    def test_not_found(self, client):
        response = client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Product not found",
            "data": None,
        }

    def test_forbidden(self, client):
        response = client.get("/forbidden")

        assert response.status_code == 403
        assert (
            response.json()["message"]
            == "You do not have permission to delete this product"
        )

    def test_domain_validation(self, client):
        response = client.get("/bad-sort")

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_http_exception(self, client):
        response = client.get("/unauthenticated")

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required"

    def test_unknown_route(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_request_validation_is_400(self, client):
        response = client.post("/payload", json={"name": "Lamp", "quantity": "many"})

        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert body["data"] is None
        assert "quantity" in body["message"]

    def test_store_failure_is_503(self, client):
        response = client.get("/store-down")

        assert response.status_code == 503
        assert response.json()["message"] == "Product store is unavailable"

    def test_unhandled_exception_is_500(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "An internal server error occurred",
            "data": None,
        }


class TestSummarizeErrors:
    """Validation error messages."""

    def test_field_paths(self):
        message = ProductServiceErrorHandler._summarize_errors(
            [
                {"loc": ("body", "price"), "msg": "Input should be greater than or equal to 0"},
                {"loc": ("query", "size"), "msg": "Input should be less than or equal to 100"},
            ]
        )

        assert message == (
            "price: Input should be greater than or equal to 0; "
            "query.size: Input should be less than or equal to 100"
        )

    def test_no_errors(self):
        assert (
            ProductServiceErrorHandler._summarize_errors([])
            == "Request validation failed"
        )
