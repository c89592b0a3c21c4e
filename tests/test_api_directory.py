import uuid


class TestOfficeEndpoints:
    def test_list(self, client, offices) -> None:
        resp = client.get("/offices")
        assert resp.status_code == 200
        assert [o["name"] for o in resp.json()["items"]] == offices

    def test_create_requires_super_admin(
        self, client, staff, super_admin, actor_headers
    ) -> None:
        resp = client.post(
            "/offices", json={"name": "Legal Section"}, headers=actor_headers(staff)
        )
        assert resp.status_code == 403
        resp = client.post(
            "/offices",
            json={"name": "Legal Section"},
            headers=actor_headers(super_admin),
        )
        assert resp.status_code == 201
        assert resp.json()["name"] == "Legal Section"

    def test_duplicate(self, client, super_admin, actor_headers) -> None:
        resp = client.post(
            "/offices",
            json={"name": "RECORDS SECTION"},
            headers=actor_headers(super_admin),
        )
        assert resp.status_code == 409

    def test_delete_in_use(self, client, staff, super_admin, actor_headers, offices) -> None:
        resp = client.delete(
            "/offices/Cashier Section", headers=actor_headers(super_admin)
        )
        assert resp.status_code == 409
        assert resp.json()["details"] == {"blocking_users": 1}
        names = [o["name"] for o in client.get("/offices").json()["items"]]
        assert names == offices

    def test_delete(self, client, super_admin, actor_headers) -> None:
        resp = client.delete("/api/v1/offices/HR Section", headers=actor_headers(super_admin))
        assert resp.status_code == 204
        names = [o["name"] for o in client.get("/offices").json()["items"]]
        assert "HR Section" not in names


class TestUserEndpoints:
    def test_create(self, client, super_admin, actor_headers) -> None:
        resp = client.post(
            "/users",
            json={"name": "Mara", "office": "HR Section", "role": "Approver"},
            headers=actor_headers(super_admin),
        )
        assert resp.status_code == 201
        assert resp.json()["role"] == "Approver"

    def test_create_forbidden(self, client, staff, actor_headers) -> None:
        resp = client.post(
            "/users",
            json={"name": "Mara", "office": "HR Section"},
            headers=actor_headers(staff),
        )
        assert resp.status_code == 403

    def test_list_and_get(self, client, staff, admin) -> None:
        resp = client.get("/users?office=Records Section")
        assert [u["name"] for u in resp.json()["items"]] == ["Josh"]
        resp = client.get(f"/users/{staff.id}")
        assert resp.json()["office"] == "Cashier Section"

    def test_get_not_found(self, client) -> None:
        assert client.get(f"/users/{uuid.uuid4()}").status_code == 404

    def test_update_own_profile(self, client, staff, actor_headers) -> None:
        resp = client.patch(
            f"/users/{staff.id}",
            json={"position": "Cashier II", "avatar_url": "https://cdn.local/r.png"},
            headers=actor_headers(staff),
        )
        assert resp.status_code == 200
        assert resp.json()["position"] == "Cashier II"

    def test_update_role_forbidden(self, client, staff, actor_headers) -> None:
        resp = client.patch(
            f"/users/{staff.id}", json={"role": "Admin"}, headers=actor_headers(staff)
        )
        assert resp.status_code == 403

    def test_delete(self, client, staff, super_admin, actor_headers) -> None:
        user_id = str(staff.id)
        resp = client.delete(f"/users/{user_id}", headers=actor_headers(super_admin))
        assert resp.status_code == 204
        assert client.get(f"/users/{user_id}").status_code == 404

    def test_delete_super_admin_rejected(self, client, super_admin, actor_headers) -> None:
        resp = client.delete(
            f"/users/{super_admin.id}", headers=actor_headers(super_admin)
        )
        assert resp.status_code == 400


class TestServiceEndpoints:
    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "ok"}

    def test_metrics(self, client) -> None:
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "doctrack_document_transitions_total" in resp.text
