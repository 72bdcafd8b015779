from database import USERS
from schemas import SignupRequest
from services import ensure_default_admin, signup
from settings import settings


def _signup(client, email="mom@shop.in", password="pass123", **extra):
    body = {"name": "Mom", "email": email, "password": password}
    body.update(extra)
    return client.post("/api/signup", json=body)


def test_signup_then_duplicate_conflicts(client, db):
    res = _signup(client)
    assert res.status_code == 201
    assert res.json()["message"] == "User created successfully"

    res = _signup(client, name="Someone else")
    assert res.status_code == 400
    assert res.json() == {"error": "User already exists"}
    assert db[USERS].count_documents({"email": "mom@shop.in"}) == 1


def test_signup_defaults_to_customer_and_hashes_password(client, db):
    _signup(client)
    user = db[USERS].find_one({"email": "mom@shop.in"})
    assert user["role"] == "customer"
    assert user["password"] != "pass123"
    assert "createdAt" in user


def test_signup_accepts_type_as_role(client, db):
    res = _signup(client, email="boss@shop.in", type="admin")
    assert res.status_code == 201
    assert db[USERS].find_one({"email": "boss@shop.in"})["role"] == "admin"


def test_signup_rejects_bad_input(client):
    assert _signup(client, email="not-an-email").status_code == 400
    res = client.post("/api/signup", json={"name": "Mom", "email": "mom@shop.in"})
    assert res.status_code == 400
    assert "password" in res.json()["error"]
    assert _signup(client, role="superuser").status_code == 400


def test_login_returns_profile_without_password(client):
    _signup(client)
    res = client.post("/api/login", json={"email": "mom@shop.in", "password": "pass123", "role": "customer"})
    assert res.status_code == 200
    body = res.json()
    assert set(body["user"]) == {"id", "name", "email", "role"}
    assert body["user"]["name"] == "Mom"
    assert body["user"]["role"] == "customer"
    assert body["token_type"] == "bearer"
    assert body["access_token"]


def test_login_wrong_password(client):
    _signup(client)
    res = client.post("/api/login", json={"email": "mom@shop.in", "password": "nope", "role": "customer"})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid credentials"}


def test_login_role_must_match(client):
    _signup(client)
    res = client.post("/api/login", json={"email": "mom@shop.in", "password": "pass123", "type": "admin"})
    assert res.status_code == 400


def test_login_unknown_user(client):
    res = client.post("/api/login", json={"email": "ghost@shop.in", "password": "x"})
    assert res.status_code == 400


def test_default_admin_is_seeded(client, db):
    assert db[USERS].count_documents({"email": settings.ADMIN_EMAIL, "role": "admin"}) == 1
    res = client.post(
        "/api/login",
        json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD, "role": "admin"},
    )
    assert res.status_code == 200
    assert res.json()["user"]["role"] == "admin"


def test_bootstrap_is_idempotent(client, db):
    assert ensure_default_admin(db) is False
    assert ensure_default_admin(db) is False
    assert db[USERS].count_documents({"email": settings.ADMIN_EMAIL}) == 1


def test_bootstrap_on_empty_database(db):
    assert ensure_default_admin(db) is True
    assert db[USERS].find_one({"email": settings.ADMIN_EMAIL})["role"] == "admin"


def test_signup_service_returns_id(db):
    user_id = signup(db, SignupRequest(name="Mom", email="mom@shop.in", password="pass123"))
    assert str(db[USERS].find_one({"email": "mom@shop.in"})["_id"]) == user_id


def test_signup_keeps_email_as_typed(client, db, order_payload):
    res = _signup(client, email="Mom@Shop.IN")
    assert res.status_code == 201
    assert db[USERS].find_one({"email": "Mom@Shop.IN"}) is not None

    res = client.post("/api/login", json={"email": "Mom@Shop.IN", "password": "pass123", "role": "customer"})
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "Mom@Shop.IN"

    client.post("/api/orders", json=order_payload(customerEmail="Mom@Shop.IN"))
    orders = client.get("/api/orders/customer/Mom@Shop.IN").json()
    assert len(orders) == 1
