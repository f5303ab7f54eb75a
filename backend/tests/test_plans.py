"""
Plans, plan switching and contact-sales requests
"""
from models import ContactRequest

CONTACT = {
    "name": "Dana Reyes",
    "email": "Dana@BigCorp.com",
    "company": "BigCorp",
    "phone": "+1 555 0100",
    "message": "We need SSO and 40 seats.",
}


def test_list_plans(client):
    plans = {p["id"]: p for p in client.get("/api/plans").json()["plans"]}
    assert list(plans) == ["FREE", "BASIC", "PRO", "ENTERPRISE"]
    assert plans["FREE"]["aiCallsLimit"] == 5
    assert plans["BASIC"]["aiCallsLimit"] == 50
    assert plans["PRO"]["aiCallsLimit"] == 200
    assert plans["ENTERPRISE"]["aiCallsLimit"] is None


def test_change_plan(auth_client):
    response = auth_client.post("/api/user/plan", json={"plan": "pro"})
    assert response.status_code == 200
    assert response.json()["user"]["plan"] == "PRO"
    assert response.json()["user"]["aiCallsLimit"] == 200

    enterprise = auth_client.post("/api/user/plan", json={"plan": "ENTERPRISE"}).json()["user"]
    assert enterprise["aiCallsLimit"] is None
    assert auth_client.get("/api/auth/me").json()["user"]["plan"] == "ENTERPRISE"


def test_change_plan_rejects_unknown(auth_client):
    response = auth_client.post("/api/user/plan", json={"plan": "PLATINUM"})
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown plan: PLATINUM"}


def test_change_plan_requires_session(client):
    assert client.post("/api/user/plan", json={"plan": "PRO"}).status_code == 401


def test_contact_sales(client, db_session):
    response = client.post("/api/contact-sales", json=CONTACT)
    assert response.status_code == 200
    assert response.json()["success"] is True

    entry = db_session.query(ContactRequest).one()
    assert entry.email == "dana@bigcorp.com"
    assert entry.plan_name == "ENTERPRISE"


def test_contact_sales_requires_every_field(client, db_session):
    response = client.post("/api/contact-sales", json={**CONTACT, "phone": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "All fields are required"}
    assert db_session.query(ContactRequest).count() == 0


def test_root_and_unknown_route(client):
    assert client.get("/").json()["status"] == "online"
    missing = client.get("/api/nothing-here")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Not Found"}
