"""
StorefrontClient SDK — sync client for the Storefront-Engine API-key channel.

Used by storefront frontends and integrations that hold a tenant API key
(``os_live_...``) to read the tenant's storefront and catalog.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx


@dataclass
class ClientProduct:
    """Product as returned by the storefront channel."""

    id: str
    name: str
    base_price: float
    stock_level: int
    category_id: str
    description: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)
    image_urls: list[str] = field(default_factory=list)


@dataclass
class ClientProductPage:
    products: list[ClientProduct] = field(default_factory=list)
    page: int = 1
    limit: int = 50
    total: int = 0
    total_pages: int = 0
    code: str = ""
    error: str = ""


class StorefrontClient:
    """
    Synchronous HTTP client for the storefront endpoints.

    Errors never raise; results carry ``code``/``error`` like the server's
    error responses so callers can branch on them.
    """

    def __init__(
        self,
        api_key: str,
        server_url: str = "http://localhost:8080",
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_base: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self.max_retries = max_retries
        self.retry_backoff_base = retry_backoff_base
        self._http = httpx.Client(
            base_url=self.server_url,
            timeout=timeout,
            headers={"x-api-key": api_key},
            transport=transport,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Central HTTP method with retry on timeouts, 5xx and 429."""
        last_error = None
        for attempt in range(self.max_retries):
            try:
                resp = self._http.request(method, path, **kwargs)
                if resp.status_code >= 500 or resp.status_code == 429:
                    last_error = f"HTTP {resp.status_code}"
                    if attempt < self.max_retries - 1:
                        time.sleep(self.retry_backoff_base * (2 ** attempt))
                        continue
                    return {"error": f"Server error: {resp.status_code}", "code": "SERVER_ERROR"}
                if resp.status_code == 401:
                    return {"error": resp.json().get("detail", ""), "code": "UNAUTHENTICATED"}
                if resp.status_code == 404:
                    return {"error": resp.json().get("detail", ""), "code": "NOT_FOUND"}
                if resp.status_code >= 400:
                    return {"error": f"Client error: {resp.status_code}", "code": "CLIENT_ERROR"}
                return resp.json()
            except httpx.TimeoutException:
                last_error = "timeout"
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_backoff_base * (2 ** attempt))
                    continue
            except httpx.HTTPError as e:
                last_error = str(e)
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_backoff_base * (2 ** attempt))
                    continue
            except json.JSONDecodeError:
                return {"error": "Invalid JSON response", "code": "JSON_ERROR"}

        return {"error": f"All {self.max_retries} retries exhausted: {last_error}", "code": "CONNECTION_ERROR"}

    @staticmethod
    def _parse_product(data: dict) -> ClientProduct:
        return ClientProduct(
            id=data["id"],
            name=data["name"],
            base_price=data["base_price"],
            stock_level=data["stock_level"],
            category_id=data["category_id"],
            description=data.get("description"),
            attributes=data.get("attributes") or {},
            image_urls=data.get("image_urls") or [],
        )

    def get_storefront(self) -> dict[str, Any]:
        return self._request("GET", "/storefront")

    def list_products(self, page: int = 1, limit: int = 50) -> ClientProductPage:
        data = self._request("GET", "/storefront/products", params={"page": page, "limit": limit})
        if "code" in data:
            return ClientProductPage(code=data["code"], error=data.get("error", ""))
        pagination = data.get("pagination", {})
        return ClientProductPage(
            products=[self._parse_product(p) for p in data.get("data", [])],
            page=pagination.get("page", page),
            limit=pagination.get("limit", limit),
            total=pagination.get("total", 0),
            total_pages=pagination.get("total_pages", 0),
        )

    def get_product(self, product_id: str) -> Optional[ClientProduct]:
        data = self._request("GET", f"/storefront/products/{product_id}")
        if "code" in data:
            return None
        return self._parse_product(data)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
