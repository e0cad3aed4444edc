"""Integration tests for risk-gated UPI transfers, bank transfers and beneficiaries"""

import pytest
from fastapi.testclient import TestClient
from bankshield.domain.exceptions import OracleError
from bankshield.domain.models import RiskAssessment

SIGNALS = {
    "tap_pressure": [0.42, 0.51],
    "swipe_gestures": [{"angle": 10.0, "speed": 0.7}],
    "key_hold_times": [0.12, 0.11, 0.13],
    "screen_navigation": ["Dashboard", "Pay and Transfer"],
    "ip": "103.21.58.4",
    "gyro_variance": 0.1,
    "session_duration": 95.0,
    "pasted_credentials": False,
}


def upi_transfer(client: TestClient, headers: dict, recipient: str = "ravi@okbank"):
    return client.post(
        "/v1/transfers/upi",
        headers=headers,
        json={"amount": "2500.00", "recipient": recipient, "notes": "rent", "signals": SIGNALS},
    )


def beneficiaries(client: TestClient, headers: dict) -> list:
    return client.get("/v1/beneficiaries", headers=headers).json()["beneficiaries"]


@pytest.mark.parametrize(
    "score,tier,message",
    [
        (0.1, "low", "Transaction Approved"),
        (0.4, "medium", "Step-Up Authentication Required"),
        (0.7, "high", "Transaction Blocked"),
    ],
)
def test_upi_transfer_tiers(client: TestClient, auth_headers, risk_oracle, score, tier, message):
    risk_oracle.assessment = RiskAssessment(risk_score=score, reasons=["r"])

    response = upi_transfer(client, auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == tier
    assert data["message"] == message
    assert data["beneficiary_saved"] is (tier != "high")
    assert len(beneficiaries(client, auth_headers)) == (0 if tier == "high" else 1)


def test_oracle_failure_blocks_transfer(client: TestClient, auth_headers, risk_oracle):
    risk_oracle.error = OracleError("risk_score unreachable")

    response = upi_transfer(client, auth_headers)

    data = response.json()
    assert response.status_code == 200
    assert data["risk_score"] == 1.0
    assert data["reasons"] == ["internal error", "assuming high risk as a precaution"]
    assert data["blocked"] is True
    assert beneficiaries(client, auth_headers) == []


def test_stored_baseline_is_sent_to_oracle(client: TestClient, auth_headers, risk_oracle):
    upi_transfer(client, auth_headers)
    signals = risk_oracle.calls[-1]
    assert len(signals.baseline_key_hold_times) == 12
    assert signals.pasted_credentials is False


def test_repeat_recipient_is_saved_once(client: TestClient, auth_headers):
    upi_transfer(client, auth_headers)
    second = upi_transfer(client, auth_headers)
    assert second.json()["beneficiary_saved"] is False
    assert len(beneficiaries(client, auth_headers)) == 1


def test_short_recipient_is_rejected_before_oracle_call(client: TestClient, auth_headers, risk_oracle):
    response = upi_transfer(client, auth_headers, recipient="ab")
    assert response.status_code == 422
    assert risk_oracle.calls == []


def test_bank_transfer_saves_beneficiary_by_account_number(client: TestClient, auth_headers):
    body = {
        "beneficiary_name": "Ravi Kumar",
        "ifsc_code": "HDFC0001234",
        "account_number": "123456789012",
        "confirm_account_number": "123456789012",
        "amount": "15000",
    }
    first = client.post("/v1/transfers/bank", headers=auth_headers, json=body)
    assert first.status_code == 200
    assert first.json()["beneficiary_saved"] is True

    second = client.post("/v1/transfers/bank", headers=auth_headers, json=body)
    assert second.json()["beneficiary_saved"] is False

    saved = beneficiaries(client, auth_headers)
    assert len(saved) == 1
    assert saved[0]["type"] == "Bank Account"


def test_bank_transfer_validation(client: TestClient, auth_headers):
    body = {
        "beneficiary_name": "Ravi Kumar",
        "ifsc_code": "HDFC0001234",
        "account_number": "123456789012",
        "confirm_account_number": "123456789013",
        "amount": "15000",
    }
    assert client.post("/v1/transfers/bank", headers=auth_headers, json=body).status_code == 422

    body.update(confirm_account_number="123456789012", ifsc_code="HDFC1234")
    assert client.post("/v1/transfers/bank", headers=auth_headers, json=body).status_code == 422


def test_add_and_remove_beneficiary(client: TestClient, auth_headers):
    body = {
        "beneficiary_name": "Meera Nair",
        "ifsc_code": "SBIN0004567",
        "account_number": "9988776655",
        "confirm_account_number": "9988776655",
    }
    created = client.post("/v1/beneficiaries", headers=auth_headers, json=body)
    assert created.status_code == 201

    duplicate = client.post("/v1/beneficiaries", headers=auth_headers, json=body)
    assert duplicate.status_code == 409

    beneficiary_id = created.json()["id"]
    assert client.delete(f"/v1/beneficiaries/{beneficiary_id}", headers=auth_headers).status_code == 204
    assert client.delete(f"/v1/beneficiaries/{beneficiary_id}", headers=auth_headers).status_code == 404
    assert beneficiaries(client, auth_headers) == []
