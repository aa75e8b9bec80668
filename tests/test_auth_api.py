from fastapi.testclient import TestClient

from finplatform.auth import issue_token
from finplatform.countries import FALLBACK_COUNTRIES
from finplatform.models import Account, Country

from .conftest import PASSWORD, TEST_SECRET, auth_header


def test_health_reports_database(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert "timestamp" in body


class TestRegister:
    def test_creates_active_tier1_account_without_hash(self, register_user):
        data = register_user(email="carol@example.com", phone="+15550100")
        assert data["success"] is True
        assert data["token"]
        user = data["user"]
        assert "password_hash" not in user
        assert user["email"] == "carol@example.com"
        assert user["phone"] == "+15550100"
        assert user["user_status"] == "active"
        assert user["user_tier"] == "tier1"
        assert user["balance"] == 0
        assert user["crypto_balance"] == 0
        assert user["bank_account_details"] == "Not assigned yet"
        assert user["crypto_address"] == "Not assigned yet"
        assert user["paypal_address"] == "Not assigned yet"

    def test_currency_comes_from_country_table(self, register_user, db_session):
        db_session.add(Country(country_code="KE", country_name="Kenya", phone_code="+254",
                               currency_code="KES", currency_symbol="KSh"))
        db_session.commit()
        assert register_user(country_code="KE")["user"]["currency"] == "KES"

    def test_currency_defaults_to_usd_on_miss(self, register_user):
        assert register_user(country_code="ZZ")["user"]["currency"] == "USD"

    def test_missing_field_is_rejected(self, client):
        resp = client.post("/api/auth/register", json={"email": "a@b.com", "password": "x", "countryCode": "US"})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "All fields are required"}

    def test_phone_is_optional(self, register_user):
        assert register_user()["user"]["phone"] == ""

    def test_duplicate_email_rejected_and_first_account_kept(self, client, register_user, db_session):
        first = register_user(email="dup@example.com")
        resp = client.post("/api/auth/register", json={
            "email": "dup@example.com", "password": "other", "fullName": "Second", "countryCode": "US",
        })
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email already registered"
        rows = db_session.query(Account).filter(Account.email == "dup@example.com").all()
        assert [r.id for r in rows] == [first["user"]["id"]]
        assert rows[0].full_name == "Test User"

    def test_email_match_is_case_sensitive(self, register_user):
        register_user(email="Case@example.com")
        assert register_user(email="case@example.com")["user"]["email"] == "case@example.com"

    def test_stored_password_is_hashed(self, register_user, db_session):
        data = register_user()
        row = db_session.get(Account, data["user"]["id"])
        assert row.password_hash != PASSWORD
        assert row.password_hash.startswith("$2")

    def test_non_json_body_is_rejected(self, client):
        resp = client.post("/api/auth/register", content="nope", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_password_longer_than_bcrypt_limit(self, client):
        long_pw = "p" * 80
        resp = client.post("/api/auth/register", json={
            "email": "longpw@example.com", "password": long_pw, "fullName": "Long", "countryCode": "US",
        })
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        resp = client.post("/api/auth/login", json={"email": "longpw@example.com", "password": long_pw})
        assert resp.status_code == 200


def test_unexpected_error_uses_envelope(app):
    def explode():
        raise RuntimeError("boom")

    app.add_api_route("/explode", explode)
    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/explode")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server error: boom"}


class TestLogin:
    def test_success_returns_fresh_token(self, client, register_user):
        register_user(email="dave@example.com")
        resp = client.post("/api/auth/login", json={"email": "dave@example.com", "password": PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["token"]
        assert "password_hash" not in body["user"]

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client, register_user):
        register_user(email="erin@example.com")
        wrong_pw = client.post("/api/auth/login", json={"email": "erin@example.com", "password": "nope"})
        unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})
        assert wrong_pw.status_code == unknown.status_code == 401
        assert wrong_pw.json() == unknown.json() == {"success": False, "message": "Invalid email or password"}

    def test_missing_credentials(self, client):
        resp = client.post("/api/auth/login", json={"email": "x@y.com"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email and password required"

    def test_non_active_account_is_forbidden(self, client, register_user, db_session):
        data = register_user(email="frank@example.com")
        row = db_session.get(Account, data["user"]["id"])
        row.user_status = "suspended"
        db_session.commit()
        resp = client.post("/api/auth/login", json={"email": "frank@example.com", "password": PASSWORD})
        assert resp.status_code == 403
        assert resp.json()["message"] == "Account is suspended"


class TestProfile:
    def test_requires_token(self, client):
        resp = client.get("/api/auth/profile")
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Authentication token required"}

    def test_rejects_bad_token(self, client):
        resp = client.get("/api/auth/profile", headers=auth_header("garbage"))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    def test_returns_own_account(self, client, user, user_headers):
        resp = client.get("/api/auth/profile", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == user["user"]["id"]
        assert "password_hash" not in resp.json()["user"]

    def test_unknown_account_is_not_found(self, client):
        token = issue_token("missing-id", "ghost@example.com", TEST_SECRET)
        resp = client.get("/api/auth/profile", headers=auth_header(token))
        assert resp.status_code == 404

    def test_token_stays_valid_after_suspension(self, client, user, user_headers, db_session):
        row = db_session.get(Account, user["user"]["id"])
        row.user_status = "frozen"
        db_session.commit()
        resp = client.get("/api/auth/profile", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["user_status"] == "frozen"


class TestCountries:
    def test_empty_table_uses_fallback(self, client):
        resp = client.get("/api/auth/countries")
        assert resp.status_code == 200
        assert resp.json()["countries"] == FALLBACK_COUNTRIES

    def test_store_error_uses_fallback(self, client, app):
        Country.__table__.drop(app.state.db.engine)
        resp = client.get("/api/auth/countries")
        assert resp.status_code == 200
        countries = {c["country_code"]: c for c in resp.json()["countries"]}
        assert len(countries) == 5
        assert countries["US"] == {"country_code": "US", "country_name": "United States", "phone_code": "+1",
                                   "currency_code": "USD", "currency_symbol": "$"}
        assert (countries["KE"]["phone_code"], countries["KE"]["currency_code"]) == ("+254", "KES")
        assert (countries["UK"]["country_name"], countries["UK"]["currency_code"]) == ("United Kingdom", "GBP")
        assert (countries["NG"]["phone_code"], countries["NG"]["currency_code"]) == ("+234", "NGN")
        assert (countries["IN"]["phone_code"], countries["IN"]["currency_code"]) == ("+91", "INR")

    def test_store_error_during_registration_defaults_currency(self, app, register_user):
        Country.__table__.drop(app.state.db.engine)
        assert register_user(country_code="KE")["user"]["currency"] == "USD"

    def test_table_rows_ordered_by_name(self, client, db_session):
        db_session.add_all([
            Country(country_code="NG", country_name="Nigeria", phone_code="+234", currency_code="NGN", currency_symbol="₦"),
            Country(country_code="GH", country_name="Ghana", phone_code="+233", currency_code="GHS", currency_symbol="₵"),
        ])
        db_session.commit()
        names = [c["country_name"] for c in client.get("/api/auth/countries").json()["countries"]]
        assert names == ["Ghana", "Nigeria"]
