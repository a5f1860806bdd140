"""
HTTP tests for the client endpoints.
"""

from conftest import client_payload


class TestCreateClient:
    def test_create_returns_envelope(self, api):
        response = api.post("/api/clients", json=client_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Client created successfully"
        client = body["client"]
        assert client["id"]
        assert client["username"] == "acme"
        assert client["clientName"] == "Acme Traders"
        assert client["pos"] == []
        assert client["createdAt"]
        assert client["updatedAt"]

    def test_strings_are_trimmed_and_email_lowercased(self, api):
        response = api.post(
            "/api/clients",
            json=client_payload(
                username="  acme  ",
                gstin=" 29ABCDE1234F1Z5 ",
                contactDetails={"email": "  Accounts@AcmeTraders.COM ", "phone": " 555 "},
            ),
        )

        client = response.json()["client"]
        assert client["username"] == "acme"
        assert client["gstin"] == "29ABCDE1234F1Z5"
        assert client["contactDetails"] == {"email": "accounts@acmetraders.com", "phone": "555"}

    def test_empty_email_is_dropped(self, api):
        response = api.post(
            "/api/clients",
            json=client_payload(contactDetails={"email": "", "phone": "555"}),
        )

        assert response.status_code == 201
        assert response.json()["client"]["contactDetails"]["email"] is None

    def test_missing_username_is_rejected(self, api):
        payload = client_payload()
        del payload["username"]

        response = api.post("/api/clients", json=payload)

        assert response.status_code == 400
        assert api.get("/api/clients").json() == []

    def test_blank_required_field_is_rejected(self, api):
        response = api.post("/api/clients", json=client_payload(billingAddress="   "))

        assert response.status_code == 400
        assert api.get("/api/clients").json() == []

    def test_invalid_email_is_rejected(self, api):
        response = api.post(
            "/api/clients",
            json=client_payload(contactDetails={"email": "not-an-email"}),
        )

        assert response.status_code == 400

    def test_duplicate_username_is_rejected(self, api, make_client):
        make_client()

        response = api.post("/api/clients", json=client_payload(clientName="Other"))

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]
        assert len(api.get("/api/clients").json()) == 1

    def test_legacy_create_path(self, api):
        response = api.post("/create-client", json=client_payload())

        assert response.status_code == 201
        assert response.json()["client"]["username"] == "acme"


class TestReadClients:
    def test_list_clients(self, api, make_client):
        make_client(username="a")
        make_client(username="b")

        response = api.get("/api/clients")

        assert response.status_code == 200
        assert [c["username"] for c in response.json()] == ["a", "b"]

    def test_get_client(self, api, make_client):
        created = make_client()

        response = api.get(f"/api/clients/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing_client(self, api):
        response = api.get("/api/clients/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"


class TestUpdateClient:
    def test_partial_update(self, api, make_client):
        created = make_client()

        response = api.put(
            f"/api/clients/{created['id']}",
            json={"clientName": "  Acme Traders Pvt Ltd "},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Client updated successfully"
        assert body["client"]["clientName"] == "Acme Traders Pvt Ltd"
        assert body["client"]["username"] == created["username"]
        assert body["client"]["gstin"] == created["gstin"]
        assert api.get(f"/api/clients/{created['id']}").json()["clientName"] == "Acme Traders Pvt Ltd"

    def test_update_replaces_pos(self, api, make_client):
        created = make_client()

        response = api.put(
            f"/api/clients/{created['id']}",
            json={"pos": [{"poNumber": " PO-9 ", "poDate": "2024-02-01"}]},
        )

        assert response.json()["client"]["pos"] == [{"poNumber": "PO-9", "poDate": "2024-02-01"}]

    def test_update_revalidates(self, api, make_client):
        created = make_client()

        response = api.put(f"/api/clients/{created['id']}", json={"gstin": "  "})

        assert response.status_code == 400
        assert api.get(f"/api/clients/{created['id']}").json()["gstin"] == created["gstin"]

    def test_update_cannot_null_required_field(self, api, make_client):
        created = make_client()

        response = api.put(f"/api/clients/{created['id']}", json={"username": None})

        assert response.status_code == 400

    def test_update_to_taken_username(self, api, make_client):
        make_client(username="taken")
        other = make_client(username="other")

        response = api.put(f"/api/clients/{other['id']}", json={"username": "taken"})

        assert response.status_code == 400
        assert api.get(f"/api/clients/{other['id']}").json()["username"] == "other"

    def test_update_missing_client(self, api):
        response = api.put("/api/clients/does-not-exist", json={"clientName": "X"})

        assert response.status_code == 404

    def test_legacy_edit_path(self, api, make_client):
        created = make_client()

        response = api.put(f"/edit-client/{created['id']}", json={"contactPerson": "S. Rao"})

        assert response.status_code == 200
        assert response.json()["client"]["contactPerson"] == "S. Rao"


class TestDeleteClient:
    def test_delete_returns_deleted_client(self, api, make_client):
        created = make_client()

        response = api.delete(f"/api/clients/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Client deleted successfully"
        assert body["client"]["id"] == created["id"]
        assert api.get(f"/api/clients/{created['id']}").status_code == 404

    def test_delete_missing_client(self, api):
        response = api.delete("/api/clients/does-not-exist")

        assert response.status_code == 404
