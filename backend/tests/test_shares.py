"""
Share links: owner management and anonymous viewing by token
"""
from datetime import timedelta

from models import ShareLink, utcnow


def create_analysis(client, sample_brd):
    response = client.post("/api/analyze/text", json={"text": sample_brd, "documentName": "portal.txt"})
    return response.json()["analysis"]


def test_share_link_lifecycle(auth_client, make_client, sample_brd):
    analysis = create_analysis(auth_client, sample_brd)
    url = f"/api/analyses/{analysis['id']}/share"

    assert auth_client.get(url).json() == {"shareToken": None, "isPublic": False}

    created = auth_client.post(url).json()
    assert len(created["shareToken"]) == 64
    assert created["isPublic"] is False
    assert auth_client.post(url).json() == created

    updated = auth_client.patch(url, json={"isPublic": True}).json()
    assert updated == {"shareToken": created["shareToken"], "isPublic": True}

    viewer = make_client()
    shared = viewer.get(f"/api/shared/{created['shareToken']}")
    assert shared.status_code == 200
    body = shared.json()["analysis"]
    assert body["id"] == analysis["id"]
    assert body["documentName"] == "portal.txt"
    assert body["requirements"] == analysis["requirements"]
    assert body["isPublic"] is True
    assert "documentText" not in body

    assert auth_client.delete(url).json() == {"success": True}
    assert auth_client.delete(url).json() == {"success": True}
    assert viewer.get(f"/api/shared/{created['shareToken']}").status_code == 404


def test_private_link_is_viewable_by_token(auth_client, make_client, sample_brd):
    analysis = create_analysis(auth_client, sample_brd)
    token = auth_client.post(f"/api/analyses/{analysis['id']}/share").json()["shareToken"]

    response = make_client().get(f"/api/shared/{token}")
    assert response.status_code == 200
    assert response.json()["analysis"]["isPublic"] is False


def test_patch_without_link(auth_client, sample_brd):
    analysis = create_analysis(auth_client, sample_brd)
    response = auth_client.patch(f"/api/analyses/{analysis['id']}/share", json={"isPublic": True})
    assert response.status_code == 404
    assert response.json() == {"error": "Share link not found"}


def test_only_owner_manages_links(auth_client, make_client, signup, sample_brd):
    analysis = create_analysis(auth_client, sample_brd)
    url = f"/api/analyses/{analysis['id']}/share"

    assert make_client().post(url).status_code == 401

    stranger = make_client()
    signup(stranger, email="stranger@example.com")
    assert stranger.post(url).status_code == 403
    assert stranger.get(url).status_code == 403
    assert stranger.delete(url).status_code == 403

    assert auth_client.post("/api/analyses/unknown/share").status_code == 404


def test_unknown_and_expired_tokens(auth_client, make_client, sample_brd, db_session):
    viewer = make_client()
    unknown = viewer.get("/api/shared/not-a-token")
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Share link not found"}

    analysis = create_analysis(auth_client, sample_brd)
    token = auth_client.post(f"/api/analyses/{analysis['id']}/share").json()["shareToken"]

    link = db_session.query(ShareLink).filter(ShareLink.token == token).one()
    link.expires_at = utcnow() - timedelta(days=1)
    db_session.commit()

    expired = viewer.get(f"/api/shared/{token}")
    assert expired.status_code == 403
    assert expired.json() == {"error": "Share link has expired"}


def test_deleting_analysis_removes_its_link(auth_client, sample_brd, db_session):
    analysis = create_analysis(auth_client, sample_brd)
    auth_client.post(f"/api/analyses/{analysis['id']}/share")

    auth_client.delete(f"/api/analyses/{analysis['id']}")
    assert db_session.query(ShareLink).count() == 0
