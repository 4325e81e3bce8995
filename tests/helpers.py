"""Helpers shared by the test modules."""

DEMO_PASSWORD = "password123"
SUPERADMIN_PASSWORD = "super-secret"
SUPERADMIN = "madisonabigail1103admin"


def login_token(api, username, password=DEMO_PASSWORD, restaurant=None) -> str:
    response = api.post(
        "/api/auth/login",
        json={"username": username, "password": password, "restaurant": restaurant},
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth(token: str) -> dict:
    return {"X-Session-Token": token}
