"""End-to-end tests through the HTTP routes."""

import base64
import os
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError


def b64(password):
    return base64.b64encode(password.encode("utf-8")).decode("ascii")


def signup(client, username, email, password="pw1"):
    return client.post(
        "/signup",
        data={"username": username, "email": email, "password": b64(password)},
    )


def login(client, username, password="pw1"):
    return client.post("/login", data={"username": username, "password": b64(password)})


def use_token(client, token):
    client.cookies.clear()
    if token:
        client.cookies.set("sessionId", token)


def add_item(client, name="Lamp", price="12.5", files=None):
    return client.post("/items", data={"name": name, "price": price}, files=files or [])


def error_code(response):
    return response.json()["detail"]["code"]


class TestSignupAndLogin:

    def test_signup(self, client, fake_db):
        response = signup(client, "alice", "alice@x.com")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["userId"]

        stored = fake_db["users"].docs[0]
        assert stored["username"] == "alice"
        assert stored["password"] != "pw1"

    def test_duplicate_username(self, client):
        signup(client, "alice", "alice@x.com")
        response = signup(client, "alice", "other@x.com")

        assert response.status_code == 400
        assert error_code(response) == "USER_ALREADY_EXISTS"

    def test_duplicate_email(self, client):
        signup(client, "alice", "alice@x.com")
        response = signup(client, "bob", "alice@x.com")

        assert response.status_code == 400
        assert error_code(response) == "USER_ALREADY_EXISTS"

    def test_signup_bad_encoding(self, client):
        response = client.post(
            "/signup",
            data={"username": "alice", "email": "alice@x.com", "password": "***"},
        )

        assert response.status_code == 400
        assert error_code(response) == "INVALID_PASSWORD_ENCODING"

    def test_signup_missing_field(self, client):
        response = client.post("/signup", data={"username": "alice"})
        assert response.status_code == 422

    def test_login_sets_http_only_cookie(self, client):
        signup(client, "alice", "alice@x.com")
        response = login(client, "alice")

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["username"] == "alice"
        assert user["email"] == "alice@x.com"
        assert "password" not in user
        assert response.cookies.get("sessionId")
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

    def test_login_twice_returns_same_token(self, client, services):
        signup(client, "alice", "alice@x.com")
        first = login(client, "alice").cookies["sessionId"]
        second = login(client, "alice").cookies["sessionId"]

        assert first == second
        assert len(services.session_store) == 1

    def test_login_wrong_password(self, client):
        signup(client, "alice", "alice@x.com")
        response = login(client, "alice", "nope")

        assert response.status_code == 400
        assert error_code(response) == "INVALID_CREDENTIALS"
        assert "sessionId" not in response.cookies

    def test_login_unknown_user(self, client):
        response = login(client, "ghost")

        assert response.status_code == 400
        assert error_code(response) == "INVALID_CREDENTIALS"

    def test_logout_without_session_succeeds(self, client):
        response = client.post("/logout")

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestAuctionFlow:

    def test_full_flow(self, client, fake_db, test_settings):
        signup(client, "alice", "alice@x.com")
        alice = login(client, "alice").cookies["sessionId"]
        signup(client, "bob", "bob@x.com", "pw2")
        bob = login(client, "bob", "pw2").cookies["sessionId"]

        use_token(client, alice)
        assert client.get("/items").status_code == 200

        response = add_item(client, files=[("images", ("lamp.jpg", b"jpegdata", "image/jpeg"))])
        assert response.status_code == 201
        item_id = response.json()["data"]["itemId"]

        items = client.get("/items").json()["data"]
        assert len(items) == 1
        assert items[0]["id"] == item_id
        assert items[0]["name"] == "Lamp"
        assert items[0]["price"] == 12.5
        assert items[0]["isAuthoredByCurrentUser"] is True
        image_url = items[0]["images"][0]
        assert image_url.startswith("/public/uploads/")
        assert client.get(image_url).content == b"jpegdata"

        use_token(client, bob)
        assert client.get("/items").json()["data"][0]["isAuthoredByCurrentUser"] is False

        response = client.delete(f"/items/{item_id}")
        assert response.status_code == 403
        assert error_code(response) == "NOT_ITEM_OWNER"
        assert len(fake_db["items"].docs) == 1
        assert len(fake_db["images"].docs) == 1

        use_token(client, alice)
        response = client.delete(f"/items/{item_id}")
        assert response.status_code == 200

        assert client.get("/items").json()["data"] == []
        assert fake_db["items"].docs == []
        assert fake_db["images"].docs == []

    def test_anonymous_listing(self, client):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")
        add_item(client)

        use_token(client, None)
        response = client.get("/items")

        assert response.status_code == 200
        assert response.json()["data"][0]["isAuthoredByCurrentUser"] is False

    def test_listing_with_stale_cookie_is_anonymous(self, client):
        use_token(client, "forged")
        response = client.get("/items")

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_multiple_images_keep_upload_order(self, client, fake_db):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")

        response = add_item(client, files=[
            ("images", ("first.png", b"1", "image/png")),
            ("images", ("second.png", b"22", "image/png")),
        ])
        assert response.status_code == 201

        item = fake_db["items"].docs[0]
        paths = [
            next(img["imagePath"] for img in fake_db["images"].docs if img["_id"] == oid)
            for oid in item["imageIds"]
        ]
        listed = client.get("/items").json()["data"][0]["images"]
        assert listed == [f"/public/{p}" for p in paths]
        assert [client.get(url).content for url in listed] == [b"1", b"22"]

    def test_add_item_without_images(self, client):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")

        assert add_item(client).status_code == 201
        assert client.get("/items").json()["data"][0]["images"] == []

    def test_add_item_validation(self, client):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")

        assert add_item(client, price="-1").status_code == 422
        assert add_item(client, price="abc").status_code == 422
        assert client.post("/items", data={"price": "1"}).status_code == 422

    def test_non_finite_price_rejected(self, client, fake_db):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")

        for price in ("inf", "-inf", "nan", "Infinity"):
            assert add_item(client, price=price).status_code == 422

        assert fake_db["items"].docs == []
        response = client.get("/items")
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_uploaded_html_is_not_served_as_html(self, client):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")

        response = add_item(client, files=[
            ("images", ("x.html", b"<script>alert(1)</script>", "image/png")),
        ])
        assert response.status_code == 201

        url = client.get("/items").json()["data"][0]["images"][0]
        assert not url.endswith(".html")
        served = client.get(url)
        assert "text/html" not in served.headers.get("content-type", "")

    def test_delete_unknown_item(self, client):
        signup(client, "alice", "alice@x.com")
        login(client, "alice")

        assert error_code(client.delete("/items/0123456789abcdef01234567")) == "ITEM_NOT_FOUND"
        assert client.delete("/items/garbage").status_code == 404


class TestSessionEnforcement:

    def test_protected_routes_need_session(self, client):
        for response in (add_item(client), client.delete("/items/0123456789abcdef01234567")):
            assert response.status_code == 400
            assert error_code(response) == "INVALID_SESSION"

    def test_token_unusable_after_logout(self, client):
        signup(client, "alice", "alice@x.com")
        token = login(client, "alice").cookies["sessionId"]

        assert client.post("/logout").status_code == 200

        use_token(client, token)
        response = add_item(client)
        assert response.status_code == 400
        assert error_code(response) == "INVALID_SESSION"

    def test_token_unusable_after_sweep(self, client, services):
        signup(client, "alice", "alice@x.com")
        token = login(client, "alice").cookies["sessionId"]
        user = services.session_store.get(token)
        created = datetime.now(timezone.utc) - timedelta(minutes=61)
        services.session_store.put(token, user, created_at=created)

        assert services.session_sweeper.run_once() == 1

        use_token(client, token)
        assert error_code(add_item(client)) == "INVALID_SESSION"

    def test_young_session_survives_sweep(self, client, services):
        signup(client, "alice", "alice@x.com")
        token = login(client, "alice").cookies["sessionId"]
        user = services.session_store.get(token)
        created = datetime.now(timezone.utc) - timedelta(minutes=59)
        services.session_store.put(token, user, created_at=created)

        assert services.session_sweeper.run_once() == 0

        use_token(client, token)
        assert add_item(client).status_code == 201


class TestStorageFailures:

    def test_listing_failure_is_500(self, client, fake_db):
        fake_db["items"].fail_with = PyMongoError("socket closed")

        response = client.get("/items")

        assert response.status_code == 500
        assert error_code(response) == "STORAGE_ERROR"
        assert "socket" not in response.text

    def test_signup_failure_is_500(self, client, fake_db):
        fake_db["users"].fail_with = PyMongoError("socket closed")

        response = signup(client, "alice", "alice@x.com")

        assert response.status_code == 500
        assert error_code(response) == "STORAGE_ERROR"


class TestAppEndpoints:

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["success"] is True
        assert body["data"]["status"] == "ok"
        assert body["data"]["sessions"] == 0
        assert body["data"]["database"] is False

    def test_index_missing(self, client):
        response = client.get("/")

        assert response.status_code == 404
        assert error_code(response) == "INDEX_NOT_FOUND"

    def test_index_served(self, client, test_settings):
        os.makedirs(test_settings.STATIC_DIR, exist_ok=True)
        with open(os.path.join(test_settings.STATIC_DIR, "index.html"), "w") as f:
            f.write("<h1>HydAuction</h1>")

        response = client.get("/")

        assert response.status_code == 200
        assert "HydAuction" in response.text

    def test_lifespan_creates_upload_dir(self, client, services):
        assert os.path.isdir(services.upload_storage.upload_dir)

    def test_shutdown_clears_sessions(self, app, services):
        with TestClient(app) as test_client:
            signup(test_client, "alice", "alice@x.com")
            login(test_client, "alice")
            assert len(services.session_store) == 1
            assert services.session_sweeper.is_running

        assert len(services.session_store) == 0
        assert not services.session_sweeper.is_running

