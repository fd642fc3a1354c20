"""Integration tests for tenant endpoints."""

from tests.conftest import insert_category, login_headers, signup


class TestTenantRouter:
    async def test_list_own_tenants(self, client, merchant):
        resp = await client.get("/tenants", headers=merchant["headers"])
        assert resp.status_code == 200
        assert [t["subdomain"] for t in resp.json()] == ["acme"]

    async def test_create_additional_tenant(self, client, merchant, category_id):
        resp = await client.post("/tenants", json={
            "business_name": "Second Shop", "subdomain": "second", "category_id": category_id,
        }, headers=merchant["headers"])
        assert resp.status_code == 201
        data = resp.json()
        assert data["owner_id"] == merchant["user_id"]
        assert data["api_key"].startswith("os_live_")
        assert "api_key_hash" not in data

    async def test_create_requires_bearer(self, client):
        resp = await client.post("/tenants", json={"business_name": "X Shop", "subdomain": "xshop"})
        assert resp.status_code == 401

    async def test_create_taken_subdomain(self, client, merchant):
        resp = await client.post("/tenants", json={
            "business_name": "Copy", "subdomain": "acme",
        }, headers=merchant["headers"])
        assert resp.status_code == 409

    async def test_get_own(self, client, merchant):
        tenant_id = merchant["tenant"]["id"]
        resp = await client.get(f"/tenants/{tenant_id}", headers=merchant["headers"])
        assert resp.status_code == 200
        assert resp.json()["business_name"] == "Acme Shop"

    async def test_get_unknown(self, client, merchant):
        resp = await client.get("/tenants/does-not-exist", headers=merchant["headers"])
        assert resp.status_code == 404

    async def test_update(self, client, merchant):
        tenant_id = merchant["tenant"]["id"]
        resp = await client.patch(f"/tenants/{tenant_id}", json={
            "business_name": "Acme Ltd",
        }, headers=merchant["headers"])
        assert resp.status_code == 200
        assert resp.json()["business_name"] == "Acme Ltd"
        assert resp.json()["subdomain"] == "acme"

    async def test_update_to_inactive_category(self, client, merchant):
        retired = await insert_category(name="Retired", is_active=False)
        resp = await client.patch(f"/tenants/{merchant['tenant']['id']}", json={
            "category_id": retired,
        }, headers=merchant["headers"])
        assert resp.status_code == 400

    async def test_regenerate_api_key(self, client, merchant):
        tenant_id = merchant["tenant"]["id"]
        old_key = merchant["tenant"]["api_key"]
        resp = await client.post(
            f"/tenants/{tenant_id}/regenerate-api-key", headers=merchant["headers"]
        )
        assert resp.status_code == 200
        new_key = resp.json()["api_key"]
        assert new_key != old_key

        old = await client.get("/storefront", headers={"x-api-key": old_key})
        assert old.status_code == 401
        new = await client.get("/storefront", headers={"x-api-key": new_key})
        assert new.status_code == 200

    async def test_delete(self, client, merchant):
        tenant_id = merchant["tenant"]["id"]
        resp = await client.delete(f"/tenants/{tenant_id}", headers=merchant["headers"])
        assert resp.status_code == 204
        resp = await client.get("/tenants", headers=merchant["headers"])
        assert resp.json() == []


class TestTenantIsolation:
    async def test_other_merchant_is_forbidden(self, client, merchant, category_id):
        await signup(client, "rival@example.com", "rival", category_id)
        rival = await login_headers(client, "rival@example.com")
        tenant_id = merchant["tenant"]["id"]

        assert (await client.get(f"/tenants/{tenant_id}", headers=rival)).status_code == 403
        resp = await client.patch(
            f"/tenants/{tenant_id}", json={"business_name": "Hijacked"}, headers=rival
        )
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Access denied to this tenant"
        resp = await client.post(f"/tenants/{tenant_id}/regenerate-api-key", headers=rival)
        assert resp.status_code == 403
        assert (await client.delete(f"/tenants/{tenant_id}", headers=rival)).status_code == 403

        resp = await client.get(f"/tenants/{tenant_id}", headers=merchant["headers"])
        assert resp.json()["business_name"] == "Acme Shop"

    async def test_list_only_shows_own(self, client, merchant, category_id):
        await signup(client, "rival@example.com", "rival", category_id)
        rival = await login_headers(client, "rival@example.com")
        resp = await client.get("/tenants", headers=rival)
        assert [t["subdomain"] for t in resp.json()] == ["rival"]
