# truefans/modules/digital_passes/tests/test_digital_pass_routes.py

"""
Tests for the /api/v1/digital-pass routes.
"""

from datetime import datetime, timedelta

import httpx

from truefans.app.main import app
from truefans.core.auth import User as AuthUser
from truefans.core.config import Settings
from truefans.core.error_handling import ExternalServiceError
from truefans.modules.digital_passes.dependencies import get_wallet_client
from truefans.modules.digital_passes.models.pass_models import DigitalPass, PassStatus
from truefans.modules.digital_passes.services.wallet_provider import PassNinjaClient

BASE = "/api/v1/digital-pass"


class TestGeneratePass:
    """POST /generate"""

    def test_returns_download_url(self, anonymous_client, db_session, restaurant):
        response = anonymous_client.post(
            f"{BASE}/generate",
            json={"name": "Sam Diner", "phone": "+15550100", "birthday": "1990-04-01", "restaurantId": restaurant.id},
        )

        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "downloadUrl": "https://passninja.test/p/SN-123",
        }
        created = db_session.query(DigitalPass).one()
        assert created.holder_name == "Sam Diner"
        assert created.visits == 0
        assert created.is_active is True

    def test_unknown_restaurant(self, anonymous_client, wallet_client):
        response = anonymous_client.post(
            f"{BASE}/generate", json={"name": "Sam", "restaurantId": "nowhere"}
        )

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Restaurant not found"
        wallet_client.create_pass.assert_not_called()

    def test_wallet_provider_failure(self, anonymous_client, db_session, restaurant, wallet_client):
        wallet_client.create_pass.side_effect = ExternalServiceError("passninja", "Wallet provider is unreachable")

        response = anonymous_client.post(
            f"{BASE}/generate", json={"name": "Sam", "restaurantId": restaurant.id}
        )

        assert response.status_code == 502
        assert response.json()["detail"]["message"] == "Wallet provider is unreachable"
        assert db_session.query(DigitalPass).count() == 0

    def test_unreadable_provider_reply(self, anonymous_client, db_session, restaurant):
        config = Settings(passninja_account_id="acct-1", passninja_api_key="key-1")
        provider = PassNinjaClient(
            config=config,
            http_client=httpx.AsyncClient(
                transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>ok</html>"))
            ),
        )
        app.dependency_overrides[get_wallet_client] = lambda: provider

        response = anonymous_client.post(
            f"{BASE}/generate", json={"name": "Sam", "restaurantId": restaurant.id}
        )

        assert response.status_code == 502
        assert response.json()["detail"] == {
            "message": "Wallet provider returned an invalid response",
            "details": {"service": "passninja"},
        }
        assert db_session.query(DigitalPass).count() == 0

    def test_name_is_required(self, anonymous_client, restaurant):
        response = anonymous_client.post(f"{BASE}/generate", json={"restaurantId": restaurant.id})

        assert response.status_code == 422


class TestUserPasses:
    """GET /user and GET /{pass_id}"""

    def test_requires_authentication(self, anonymous_client):
        response = anonymous_client.get(f"{BASE}/user")

        assert response.status_code == 401

    def test_lists_only_own_passes(self, client, make_pass, db_session):
        own = make_pass()
        make_pass(user_id=None)

        response = client.get(f"{BASE}/user")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [p["passId"] for p in body["data"]] == [own.pass_id]
        assert body["data"][0]["userId"] == "user-1"
        assert body["data"][0]["isActive"] is True

    def test_empty_list(self, client):
        response = client.get(f"{BASE}/user")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": []}

    def test_get_own_pass(self, client, make_pass):
        digital_pass = make_pass(points=15, visits=3)

        response = client.get(f"{BASE}/{digital_pass.pass_id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["passId"] == digital_pass.pass_id
        assert data["points"] == 15
        assert data["visits"] == 3
        assert data["status"] == "active"

    def test_get_someone_elses_pass(self, client, make_pass, auth_state):
        digital_pass = make_pass()
        auth_state["user"] = AuthUser(id="user-2")

        response = client.get(f"{BASE}/{digital_pass.pass_id}")

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Digital pass not found"


class TestUpdatePass:
    """PUT /{pass_id}/update"""

    def test_overwrites_supplied_fields_only(self, client, make_pass):
        digital_pass = make_pass(points=10, visits=4)

        response = client.put(f"{BASE}/{digital_pass.pass_id}/update", json={"visits": 9})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["visits"] == 9
        assert data["points"] == 10
        assert data["lastUsed"] is not None

    def test_rejects_negative_points(self, client, make_pass):
        digital_pass = make_pass()

        response = client.put(f"{BASE}/{digital_pass.pass_id}/update", json={"points": -5})

        assert response.status_code == 422

    def test_unknown_pass(self, client):
        response = client.put(f"{BASE}/missing/update", json={"points": 5})

        assert response.status_code == 404


class TestValidatePass:
    """POST /validate"""

    def test_valid_pass(self, client, make_pass, staff_user):
        digital_pass = make_pass(points=30, visits=2)

        response = client.post(f"{BASE}/validate", json={"passId": digital_pass.pass_id})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"isValid": True, "user": "user-1", "points": 30, "visits": 3},
        }

    def test_each_validation_counts_once(self, client, make_pass, staff_user, db_session):
        digital_pass = make_pass()

        for _ in range(3):
            client.post(f"{BASE}/validate", json={"passId": digital_pass.pass_id})

        db_session.expire_all()
        assert db_session.query(DigitalPass).filter_by(pass_id=digital_pass.pass_id).one().visits == 3

    def test_inactive_pass_fails_closed(self, client, make_pass, staff_user):
        digital_pass = make_pass(is_active=False)

        response = client.post(f"{BASE}/validate", json={"passId": digital_pass.pass_id})

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Invalid or expired digital pass"

    def test_suspended_pass_fails_closed(self, client, make_pass, staff_user):
        digital_pass = make_pass(status=PassStatus.SUSPENDED)

        response = client.post(f"{BASE}/validate", json={"passId": digital_pass.pass_id})

        assert response.status_code == 404

    def test_expired_pass_fails_closed(self, client, make_pass, staff_user):
        digital_pass = make_pass(expires_at=datetime.utcnow() - timedelta(days=1))

        response = client.post(f"{BASE}/validate", json={"passId": digital_pass.pass_id})

        assert response.status_code == 404

    def test_requires_restaurant_staff(self, client, make_pass):
        digital_pass = make_pass()

        response = client.post(f"{BASE}/validate", json={"passId": digital_pass.pass_id})

        assert response.status_code == 403
        assert response.json()["detail"]["message"] == "Only restaurant staff can validate passes"
