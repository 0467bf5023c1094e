from datetime import timedelta

from bson import ObjectId

from conftest import PASSWORD, run, signup
from storefront.config.settings import get_settings
from storefront.routes import auth as auth_routes
from storefront.utils.mail import MailDeliveryError
from storefront.utils.security import create_token, hash_reset_token
from storefront.utils.serializers import utcnow


class FakeMailer:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def __call__(self, recipient, subject, html):
        if self.fail:
            raise MailDeliveryError("provider unavailable")
        self.sent.append((recipient, subject, html))
        return "msg_1"

    def last_token(self):
        html = self.sent[-1][2]
        link = html.split('href="', 1)[1].split('"', 1)[0]
        return link.rsplit("/", 1)[1]


def request_reset(client, monkeypatch, email="jane@shop.io"):
    mailer = FakeMailer()
    monkeypatch.setattr(auth_routes, "send_mail", mailer)
    response = client.post("/auth/forgot-password", json={"email": email})
    assert response.status_code == 200, response.text
    return mailer


def test_signup_returns_sanitized_user_and_sets_cookie(client, db):
    response = client.post(
        "/auth/signup", json={"name": "Jane Doe", "email": "Jane@Shop.io", "password": PASSWORD}
    )

    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"_id", "email", "is_verified", "is_admin"}
    assert body["email"] == "jane@shop.io"
    assert body["is_admin"] is False
    assert "token" in response.cookies
    assert "httponly" in response.headers["set-cookie"].lower()

    stored = run(db.users.find_one({"_id": ObjectId(body["_id"])}))
    assert stored["password"] != PASSWORD
    assert stored["password"].startswith("$2")


def test_signup_with_existing_email_returns_400(client):
    signup(client)

    response = client.post(
        "/auth/signup", json={"name": "Other", "email": "jane@shop.io", "password": PASSWORD}
    )

    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}


def test_signup_validation_error_is_400_with_details(client):
    response = client.post("/auth/signup", json={"name": "Jane", "email": "not-an-email", "password": "short"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    fields = {detail["field"] for detail in body["details"]}
    assert {"email", "password"} <= fields


def test_login_sets_cookie_and_returns_sanitized_user(make_client):
    signup(make_client())
    client = make_client()

    response = client.post("/auth/login", json={"email": "jane@shop.io", "password": PASSWORD})

    assert response.status_code == 200
    assert response.json()["email"] == "jane@shop.io"
    assert "password" not in response.json()
    assert "token" in response.cookies


def test_login_with_wrong_password_is_rejected(make_client):
    signup(make_client())
    client = make_client()

    response = client.post("/auth/login", json={"email": "jane@shop.io", "password": "wrong-password"})

    assert response.status_code == 404
    assert response.json() == {"message": "Invalid Credentials"}
    assert "token" not in client.cookies


def test_login_with_unknown_email_is_rejected(client):
    response = client.post("/auth/login", json={"email": "ghost@shop.io", "password": PASSWORD})

    assert response.status_code == 404


def test_check_auth_requires_cookie(client):
    response = client.get("/auth/check-auth")

    assert response.status_code == 401
    assert response.json() == {"message": "Token missing, please login again"}


def test_check_auth_returns_logged_in_user(customer):
    client, user = customer

    response = client.get("/auth/check-auth")

    assert response.status_code == 200
    assert response.json() == user


def test_check_auth_rejects_tampered_token(client):
    client.cookies.set("token", "not.a.jwt")

    response = client.get("/auth/check-auth")

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid Token, please login again"}


def test_check_auth_rejects_expired_token(client, customer):
    _, user = customer
    client.cookies.set("token", create_token(user, timedelta(minutes=-5)))

    response = client.get("/auth/check-auth")

    assert response.status_code == 401
    assert response.json() == {"message": "Token expired, please login again"}


def test_check_auth_rejects_token_of_deleted_user(customer, db):
    client, user = customer
    run(db.users.delete_one({"_id": ObjectId(user["_id"])}))

    response = client.get("/auth/check-auth")

    assert response.status_code == 401


def test_logout_clears_cookie(customer):
    client, _ = customer

    response = client.get("/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logout successful"}
    assert client.get("/auth/check-auth").status_code == 401


def test_forgot_password_for_unknown_email_returns_404(client, monkeypatch):
    monkeypatch.setattr(auth_routes, "send_mail", FakeMailer())

    response = client.post("/auth/forgot-password", json={"email": "ghost@shop.io"})

    assert response.status_code == 404
    assert response.json() == {"message": "Provided email does not exist"}


def test_forgot_password_stores_hashed_token_and_mails_link(customer, db, monkeypatch):
    client, user = customer

    mailer = request_reset(client, monkeypatch)

    assert len(mailer.sent) == 1
    recipient, subject, html = mailer.sent[0]
    assert recipient == "jane@shop.io"
    assert f"/reset-password/{user['_id']}/" in html

    raw_token = mailer.last_token()
    rows = run(db.password_reset_tokens.find({"user": ObjectId(user["_id"])}).to_list(length=None))
    assert len(rows) == 1
    assert rows[0]["token"] != raw_token
    assert rows[0]["token"] == hash_reset_token(raw_token)
    assert rows[0]["expires_at"] > utcnow()


def test_forgot_password_replaces_previous_token(customer, db, monkeypatch):
    client, user = customer

    first = request_reset(client, monkeypatch).last_token()
    second = request_reset(client, monkeypatch).last_token()

    rows = run(db.password_reset_tokens.find({"user": ObjectId(user["_id"])}).to_list(length=None))
    assert len(rows) == 1
    assert rows[0]["token"] == hash_reset_token(second)
    assert rows[0]["token"] != hash_reset_token(first)


def test_forgot_password_mail_failure_returns_500(customer, monkeypatch):
    client, _ = customer
    monkeypatch.setattr(auth_routes, "send_mail", FakeMailer(fail=True))

    response = client.post("/auth/forgot-password", json={"email": "jane@shop.io"})

    assert response.status_code == 500
    assert response.json() == {"message": "Error occurred while sending password reset mail"}


def test_reset_password_updates_password_and_deletes_token(customer, db, make_client, monkeypatch):
    client, user = customer
    token = request_reset(client, monkeypatch).last_token()

    response = client.post(
        "/auth/reset-password",
        json={"user_id": user["_id"], "token": token, "password": "brand-new-password"}
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Password updated successfully"}
    assert run(db.password_reset_tokens.count_documents({})) == 0

    fresh = make_client()
    assert fresh.post("/auth/login", json={"email": "jane@shop.io", "password": PASSWORD}).status_code == 404
    assert fresh.post("/auth/login", json={"email": "jane@shop.io", "password": "brand-new-password"}).status_code == 200


def test_reset_password_for_unknown_user_returns_404(client):
    response = client.post(
        "/auth/reset-password",
        json={"user_id": str(ObjectId()), "token": "whatever", "password": "brand-new-password"}
    )

    assert response.status_code == 404
    assert response.json() == {"message": "User does not exist"}


def test_reset_password_without_token_row_returns_404(customer):
    client, user = customer

    response = client.post(
        "/auth/reset-password",
        json={"user_id": user["_id"], "token": "whatever", "password": "brand-new-password"}
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Reset link is not valid"}


def test_reset_password_with_expired_token_returns_404_and_deletes_row(customer, db, monkeypatch):
    client, user = customer
    token = request_reset(client, monkeypatch).last_token()
    run(db.password_reset_tokens.update_one(
        {"user": ObjectId(user["_id"])},
        {"$set": {"expires_at": utcnow() - timedelta(minutes=1)}}
    ))

    response = client.post(
        "/auth/reset-password",
        json={"user_id": user["_id"], "token": token, "password": "brand-new-password"}
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Reset link has expired"}
    assert run(db.password_reset_tokens.count_documents({})) == 0


def test_reset_password_with_wrong_token_keeps_password(customer, db, make_client, monkeypatch):
    client, user = customer
    request_reset(client, monkeypatch)

    response = client.post(
        "/auth/reset-password",
        json={"user_id": user["_id"], "token": "forged-token", "password": "brand-new-password"}
    )

    assert response.status_code == 404
    assert run(db.password_reset_tokens.count_documents({})) == 1
    assert make_client().post(
        "/auth/login", json={"email": "jane@shop.io", "password": PASSWORD}
    ).status_code == 200


def test_reset_password_rejects_malformed_user_id(client):
    response = client.post(
        "/auth/reset-password",
        json={"user_id": "123", "token": "whatever", "password": "brand-new-password"}
    )

    assert response.status_code == 400


def test_superseded_reset_link_no_longer_resets_password(customer, db, make_client, monkeypatch):
    client, user = customer
    first = request_reset(client, monkeypatch).last_token()
    request_reset(client, monkeypatch)

    response = client.post(
        "/auth/reset-password",
        json={"user_id": user["_id"], "token": first, "password": "brand-new-password"}
    )

    assert response.status_code == 404
    assert make_client().post(
        "/auth/login", json={"email": "jane@shop.io", "password": PASSWORD}
    ).status_code == 200


def test_reset_link_token_is_not_accepted_as_login_cookie(customer, make_client, monkeypatch):
    client, _ = customer
    token = request_reset(client, monkeypatch).last_token()
    stranger = make_client()
    stranger.cookies.set("token", token)

    response = stranger.get("/auth/check-auth")

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid Token, please login again"}


def test_production_cookie_is_secure_and_cross_site(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "production", True)

    response = client.post(
        "/auth/signup", json={"name": "Jane Doe", "email": "jane@shop.io", "password": PASSWORD}
    )

    cookie = response.headers["set-cookie"].lower()
    assert response.status_code == 201
    assert "secure" in cookie
    assert "samesite=none" in cookie
    assert "httponly" in cookie


def test_development_cookie_is_lax(client):
    response = client.post(
        "/auth/signup", json={"name": "Jane Doe", "email": "jane@shop.io", "password": PASSWORD}
    )

    cookie = response.headers["set-cookie"].lower()
    assert "samesite=lax" in cookie
    assert "secure" not in cookie
