def test_register_login_and_me(client):
    registered = client.post(
        "/auth/register",
        json={
            "first_name": "Grace",
            "last_name": "Hopper",
            "email": "grace@example.com",
            "password": "cobol-1959",
        },
    )
    assert registered.status_code == 201
    assert registered.json()["role"] == "client"

    login = client.post("/auth/login", json={"email": "grace@example.com", "password": "cobol-1959"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "grace@example.com"


def test_duplicate_email_rejected(client, user):
    response = client.post(
        "/auth/register",
        json={"first_name": "Ada", "email": user.email, "password": "another-pass"},
    )
    assert response.status_code == 400


def test_wrong_password(client, user):
    response = client.post("/auth/login", json={"email": user.email, "password": "nope-nope"})
    assert response.status_code == 401


def test_bad_token(client):
    response = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_admin_denial_is_logged(client, user, user_headers, caplog):
    with caplog.at_level("WARNING", logger="app.dependencies.admin"):
        response = client.get("/admin/orders", headers=user_headers)

    assert response.status_code == 403
    assert f"User {user.id} denied admin access to GET /admin/orders" in caplog.text


def test_admin_passes_guard(client, admin_headers):
    assert client.get("/admin/orders", headers=admin_headers).status_code == 200
