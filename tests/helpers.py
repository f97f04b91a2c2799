from fastapi.testclient import TestClient


def signup(client: TestClient, name="Ada", email="ada@x.com", password="pw123") -> dict:
    response = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def add_to_cart(client: TestClient, headers: dict, product_id: int, qty: int):
    return client.post(
        "/api/cart/add",
        json={"productId": product_id, "qty": qty},
        headers=headers,
    )
