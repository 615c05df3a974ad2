"""HTTP read/write endpoints exercised through FastAPI's test client."""
import json

import pytest
from fastapi.testclient import TestClient

from contract_tracker.api.app import create_app
from contract_tracker.core.errors import StoreUnavailableError
from contract_tracker.store.records import ContractStore


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


def _post(client: TestClient, body):
    raw = body if isinstance(body, (str, bytes)) else json.dumps(body)
    return client.post("/", content=raw, headers={"Content-Type": "text/plain;charset=utf-8"})


def test_read_returns_all_contracts(client):
    response = client.get("/")

    assert response.status_code == 200
    contracts = response.json()["contracts"]
    assert [item["cui"] for item in contracts] == ["CUI001", "CUI002", "CUI003"]
    assert contracts[0]["status"] == "Activo"
    assert contracts[0]["total_amount"] == 1000


def test_read_failure_is_a_server_error(store_config):
    def missing():
        raise StoreUnavailableError('Sheet "Contratos" not found.')

    client = TestClient(create_app(ContractStore(missing, store_config)))
    response = client.get("/")

    assert response.status_code == 500
    assert response.json() == {"error": 'Server error: Sheet "Contratos" not found.'}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_returns_decoded_contract(client):
    response = _post(client, {"action": "CREATE", "payload": {"cui": "CUI100", "progress": "30"}})

    assert response.status_code == 200
    assert response.json()["cui"] == "CUI100"
    assert response.json()["execution_progress"] == 30
    assert len(client.get("/").json()["contracts"]) == 4


def test_action_is_case_insensitive(client):
    response = _post(client, {"action": "create", "payload": {"cui": "lower"}})
    assert response.status_code == 200


def test_update_missing_contract_is_a_client_error(client):
    response = _post(client, {"action": "UPDATE", "payload": {"cui": "CUI999"}})

    assert response.status_code == 400
    assert response.json() == {"error": "Request error: Contract with CUI CUI999 not found."}


def test_update_replaces_contract(client):
    response = _post(
        client, {"action": "UPDATE", "payload": {"cui": "CUI001", "contractor": "Acme 2", "progress": 100}}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Completado"
    assert client.get("/").json()["contracts"][0]["contractor"] == "Acme 2"


def test_delete_confirms_key(client):
    response = _post(client, {"action": "DELETE", "payload": {"id": "CUI003"}})

    assert response.json() == {"success": True, "id": "CUI003"}
    second = _post(client, {"action": "DELETE", "payload": {"id": "CUI003"}})
    assert second.status_code == 400
    assert "not found" in second.json()["error"]


def test_unknown_action_is_rejected(client):
    response = _post(client, {"action": "ARCHIVE", "payload": {}})

    assert response.status_code == 400
    assert response.json()["error"] == "Request error: Unrecognized action: ARCHIVE"


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[]",
        json.dumps({"payload": {"cui": "X"}}),
        json.dumps({"action": "CREATE"}),
        json.dumps({"action": "", "payload": {}}),
        json.dumps({"action": "CREATE", "payload": "cui"}),
    ],
)
def test_malformed_requests_never_touch_the_store(client, memory_table, body):
    before = memory_table.get_all_values()

    response = _post(client, body)

    assert response.status_code == 400
    assert response.json()["error"].startswith("Request error:")
    assert memory_table.get_all_values() == before


def test_json_content_type_is_accepted(client):
    response = client.post("/", json={"action": "CREATE", "payload": {"cui": "JSON1"}})
    assert response.status_code == 200
