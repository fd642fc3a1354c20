"""Tests for the StorefrontClient SDK."""

import httpx

from storefront_engine.client import StorefrontClient

KEY = "os_live_" + "a" * 32

PRODUCT = {
    "id": "p-1",
    "tenant_id": "t-1",
    "category_id": "c-1",
    "name": "Shirt",
    "description": None,
    "base_price": 19.99,
    "stock_level": 3,
    "attributes": {"size": "M"},
    "image_urls": [],
}


def make_client(handler, **kwargs):
    return StorefrontClient(
        KEY,
        server_url="http://shop.test",
        retry_backoff_base=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestStorefrontClient:
    def test_sends_api_key(self):
        seen = {}

        def handler(request):
            seen["key"] = request.headers["x-api-key"]
            return httpx.Response(200, json={"id": "t-1", "business_name": "Acme", "subdomain": "acme"})

        with make_client(handler) as client:
            assert client.get_storefront()["subdomain"] == "acme"
        assert seen["key"] == KEY

    def test_list_products(self):
        def handler(request):
            assert request.url.params["page"] == "2"
            return httpx.Response(200, json={
                "data": [PRODUCT],
                "pagination": {"page": 2, "limit": 1, "total": 2, "total_pages": 2},
            })

        with make_client(handler) as client:
            page = client.list_products(page=2, limit=1)
        assert page.code == ""
        assert page.total == 2
        assert page.products[0].attributes == {"size": "M"}

    def test_get_product_not_found(self):
        with make_client(lambda r: httpx.Response(404, json={"detail": "Product not found"})) as client:
            assert client.get_product("p-x") is None

    def test_unauthenticated(self):
        with make_client(lambda r: httpx.Response(401, json={"detail": "Invalid API key"})) as client:
            page = client.list_products()
        assert page.code == "UNAUTHENTICATED"
        assert page.error == "Invalid API key"

    def test_retries_server_errors(self):
        calls = []

        def handler(request):
            calls.append(1)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=PRODUCT)

        with make_client(handler) as client:
            product = client.get_product("p-1")
        assert product.name == "Shirt"
        assert len(calls) == 3

    def test_gives_up_after_retries(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with make_client(handler, max_retries=2) as client:
            data = client.get_storefront()
        assert data["code"] == "CONNECTION_ERROR"
