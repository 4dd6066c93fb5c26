"""
API tests for the estimator pricing server using the Flask test client
"""
import os
from datetime import datetime, timedelta

import pytest

from backend.app import App


@pytest.fixture
def server(tmp_path):
    return App(
        config_file_path=str(tmp_path / "pricing_config.json"),
        output_folder=str(tmp_path / "output")
    )


@pytest.fixture
def client(server):
    server.app.config["TESTING"] = True
    return server.app.test_client()


ESTIMATE_PAYLOAD = {
    "processingGroups": [
        {
            "id": "grp_1",
            "name": "Club shirts",
            "items": [
                {"productId": "p1", "quantity": 10, "unitPrice": 1000},
                {"productId": "p9", "quantity": 2, "isBringIn": True}
            ],
            "customItems": [{"id": "c1", "label": "Folding", "amount": 600}],
            "sampleItems": [{"id": "s1", "label": "Proof", "quantity": 1, "unitPrice": 500}],
            "silkscreenPrintCost": 5000,
            "setupCost": 3000
        }
    ],
    "customerInfo": {"address1": "東京都新宿区"}
}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"success": True, "status": "ok"}


def test_unit_prices_single_group(client):
    response = client.post("/api/unit-prices", json={
        "quantity": 10, "bringInQuantity": 0, "tshirtCost": 1000, "silkscreenPrintCost": 500
    })
    assert response.status_code == 200
    result = response.get_json()
    assert result["success"] is True
    assert result["unit_prices"] == [
        {"groupId": "", "groupName": "", "laborUnitPrice": 50, "salesUnitPrice": 150}
    ]


def test_unit_prices_many_groups(client):
    response = client.post("/api/unit-prices", json={"groupCosts": [
        {"groupId": "a", "quantity": 5, "bringInQuantity": 5, "tshirtCost": 0, "setupCost": 100},
        {"groupId": "b", "quantity": 0, "tshirtCost": 0, "dtfPrintCost": 900},
        {"groupId": "c", "quantity": 3, "dtfPrintCost": 10}
    ]})
    assert response.status_code == 200
    prices = {p["groupId"]: p for p in response.get_json()["unit_prices"]}
    assert prices["a"]["laborUnitPrice"] == 20
    assert prices["a"]["salesUnitPrice"] == 0
    assert prices["b"]["laborUnitPrice"] == 0
    assert prices["c"]["laborUnitPrice"] == 3


def test_unit_prices_rejects_invalid_group(client):
    response = client.post("/api/unit-prices", json={"quantity": 2, "bringInQuantity": 3, "tshirtCost": 0})
    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["details"]

    response = client.post("/api/unit-prices", json={"quantity": 2, "tshirtCost": -10})
    assert response.status_code == 400


def test_unit_prices_rejects_non_object_body(client):
    response = client.post("/api/unit-prices", json=[1, 2, 3])
    assert response.status_code == 400


def test_estimate(client):
    response = client.post("/api/estimate", json=ESTIMATE_PAYLOAD)
    assert response.status_code == 200
    result = response.get_json()
    assert result["success"] is True
    assert result["session_id"]

    estimate = result["estimate"]
    assert estimate["totalQuantity"] == 12
    assert estimate["subtotal"] == 19100
    assert estimate["shippingCost"] == 1000
    assert estimate["tax"] == 2010
    assert estimate["totalCostWithTax"] == 22110
    assert estimate["costPerShirt"] == 1843

    group = estimate["groups"][0]
    assert group["groupCost"]["bringInQuantity"] == 2
    assert group["laborUnitPrice"] == 758
    assert group["salesUnitPrice"] == 1758


def test_estimate_rejects_invalid_items(client):
    response = client.post("/api/estimate", json={
        "processingGroups": [{"id": "g", "name": "g", "items": [{"productId": "p", "quantity": -1}]}]
    })
    assert response.status_code == 400


def test_export_download_and_cleanup(client, server):
    session_id = client.post("/api/estimate", json=ESTIMATE_PAYLOAD).get_json()["session_id"]

    response = client.post("/api/export-estimate", json={"session_id": session_id})
    assert response.status_code == 200
    export = response.get_json()
    assert export["groups_exported"] == 1
    filepath = os.path.join(server.output_folder, export["filename"])
    assert os.path.exists(filepath)

    download = client.get(export["download_url"])
    assert download.status_code == 200
    assert download.data[:2] == b"PK"
    download.close()

    response = client.post("/api/cleanup-session", json={"session_id": session_id})
    cleanup = response.get_json()
    assert cleanup["success"] is True
    assert cleanup["files_deleted"] == 1
    assert not os.path.exists(filepath)
    assert session_id not in server.estimate_sessions


def test_export_unknown_session(client):
    response = client.post("/api/export-estimate", json={"session_id": "missing"})
    assert response.status_code == 404

    response = client.post("/api/cleanup-session", json={"session_id": "missing"})
    assert response.status_code == 404


def test_download_missing_file(client):
    response = client.get("/api/download/nothing.xlsx")
    assert response.status_code == 404


def test_config_inquiry(client):
    result = client.get("/api/config/inquiry").get_json()
    assert result["success"] is True
    assert result["config"]["tax_rate"] == 0.10
    assert "DEFAULT" in result["config"]["shipping_costs"]


def test_config_update_changes_estimates(client):
    response = client.post("/api/config/update", json={"tax_rate": 0.08})
    assert response.status_code == 200
    assert response.get_json()["updated_fields"] == ["tax_rate"]

    estimate = client.post("/api/estimate", json=ESTIMATE_PAYLOAD).get_json()["estimate"]
    # floor(20100 * 0.08)
    assert estimate["tax"] == 1608

    client.post("/api/config/reset")
    estimate = client.post("/api/estimate", json=ESTIMATE_PAYLOAD).get_json()["estimate"]
    assert estimate["tax"] == 2010


def test_config_update_rejects_invalid_values(client):
    response = client.post("/api/config/update", json={"tax_rate": 2})
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_stale_sessions_expire_with_their_files(client, server):
    old_id = client.post("/api/estimate", json=ESTIMATE_PAYLOAD).get_json()["session_id"]
    filename = client.post("/api/export-estimate", json={"session_id": old_id}).get_json()["filename"]
    filepath = os.path.join(server.output_folder, filename)

    server.estimate_sessions[old_id]['created_at'] -= server.session_ttl + timedelta(minutes=1)
    new_id = client.post("/api/estimate", json=ESTIMATE_PAYLOAD).get_json()["session_id"]

    assert old_id not in server.estimate_sessions
    assert new_id in server.estimate_sessions
    assert not os.path.exists(filepath)

    response = client.post("/api/export-estimate", json={"session_id": old_id})
    assert response.status_code == 404


def test_fresh_sessions_are_kept(server):
    server.store_estimate_session("s1", {})
    assert server.expire_stale_sessions() == 0
    assert server.expire_stale_sessions(datetime.now() + server.session_ttl + timedelta(seconds=1)) == 1
    assert server.estimate_sessions == {}
