# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from invoice_manager.db.engine import create_schema, get_engine


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'test.sqlite'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture
def engine(db_url):
    engine = get_engine()
    create_schema(engine)
    return engine


@pytest.fixture
def api(db_url):
    from invoice_manager import app

    with TestClient(app) as test_client:
        yield test_client


def client_payload(**overrides):
    payload = {
        "username": "acme",
        "clientName": "Acme Traders",
        "billingAddress": "12 MG Road, Bengaluru",
        "shippingAddress": "Plot 4, Peenya Industrial Area, Bengaluru",
        "gstin": "29ABCDE1234F1Z5",
        "contactPerson": "R. Iyer",
        "contactDetails": {"email": "accounts@acmetraders.com", "phone": "+91 80 1234 5678"},
    }
    payload.update(overrides)
    return payload


def invoice_payload(client_id, **overrides):
    payload = {
        "invoiceNumber": "INV-001",
        "client": client_id,
        "date": "2024-03-01",
        "dueDate": "2024-03-31",
        "items": [
            {"description": "Steel brackets", "quantity": 2, "rate": 100},
            {"description": "Installation", "quantity": 1, "rate": 50},
        ],
        "taxRate": 18,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_client(api):
    def _make(**overrides):
        response = api.post("/api/clients", json=client_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["client"]

    return _make


@pytest.fixture
def make_invoice(api):
    def _make(client_id, **overrides):
        response = api.post("/api/invoices", json=invoice_payload(client_id, **overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _make
