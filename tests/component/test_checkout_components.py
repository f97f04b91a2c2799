"""
Component tests for checkout and the order history.

Checkout runs as one transaction: the cart row is locked, items are priced
against the catalog, the order is written and the cart emptied, then commit.
"""
import pytest
from sqlalchemy import BigInteger, update
from sqlalchemy.exc import OperationalError

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderItemModel, OrderModel
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import CartEmpty, CartMissing
from storefront.domain.schemas import MAX_LINE_QTY
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.order_service import OrderService
from tests.helpers import add_to_cart, auth_headers, signup


def checkout(client, headers):
    return client.post("/api/orders/checkout", headers=headers)


class TestCheckoutSuccess:

    def test_checkout_creates_order_and_empties_cart(self, test_client, user, products, count_rows):
        p1, p2 = products[0], products[1]
        add_to_cart(test_client, user["headers"], p1["id"], 2)
        add_to_cart(test_client, user["headers"], p2["id"], 1)

        response = checkout(test_client, user["headers"])

        assert response.status_code == 200
        order = response.json()["order"]
        assert order["user_id"] == user["user"]["id"]
        assert order["created_at"]
        assert len(order["line_items"]) == 2

        lines = {line["product_id"]: line for line in order["line_items"]}
        assert lines[p1["id"]] == {
            "product_id": p1["id"],
            "name": p1["name"],
            "qty": 2,
            "price_cents": p1["price_cents"],
            "subtotal_cents": 2 * p1["price_cents"],
        }
        assert order["total_cents"] == 2 * p1["price_cents"] + p2["price_cents"]

        # cart row stays, its items are gone
        assert test_client.get("/api/cart", headers=user["headers"]).json() == {"items": []}
        assert count_rows(CartModel) == 1
        assert count_rows(CartItemModel) == 0
        assert count_rows(OrderModel) == 1
        assert count_rows(OrderItemModel) == 2

    def test_totals_are_consistent(self, test_client, user, products):
        for i, product in enumerate(products, start=1):
            add_to_cart(test_client, user["headers"], product["id"], i)

        order = checkout(test_client, user["headers"]).json()["order"]

        for line in order["line_items"]:
            assert line["subtotal_cents"] == line["qty"] * line["price_cents"]
        assert order["total_cents"] == sum(line["subtotal_cents"] for line in order["line_items"])

    def test_order_keeps_price_after_catalog_change(self, test_client, user, products, db_session):
        p1 = products[0]
        add_to_cart(test_client, user["headers"], p1["id"], 3)
        checkout(test_client, user["headers"])

        db_session.execute(
            update(ProductModel).where(ProductModel.id == p1["id"]).values(price_cents=1)
        )
        db_session.commit()

        orders = test_client.get("/api/orders", headers=user["headers"]).json()["orders"]
        line = orders[0]["line_items"][0]
        assert line["price_cents"] == p1["price_cents"]
        assert line["subtotal_cents"] == 3 * p1["price_cents"]
        assert orders[0]["total_cents"] == 3 * p1["price_cents"]

    def test_amounts_beyond_32_bits(self, test_client, user, db_session, count_rows):
        price = 2**31 + 1
        product = ProductModel(name="Tiara", price_cents=price)
        db_session.add(product)
        db_session.commit()
        product_id = product.id
        db_session.close()

        add_to_cart(test_client, user["headers"], product_id, MAX_LINE_QTY)
        response = checkout(test_client, user["headers"])

        assert response.status_code == 200
        order = response.json()["order"]
        assert order["total_cents"] == MAX_LINE_QTY * price
        assert order["line_items"][0]["subtotal_cents"] == MAX_LINE_QTY * price
        assert count_rows(OrderModel) == 1

    def test_money_columns_are_64_bit(self):
        for column in (
            ProductModel.__table__.c.price_cents,
            OrderModel.__table__.c.total_cents,
            OrderItemModel.__table__.c.price_cents,
            OrderItemModel.__table__.c.subtotal_cents,
        ):
            assert isinstance(column.type, BigInteger)


class TestCheckoutValidation:

    def test_empty_cart(self, test_client, user, count_rows):
        response = checkout(test_client, user["headers"])

        assert response.status_code == 400
        assert response.json() == {"error": "Cart empty"}
        assert count_rows(OrderModel) == 0

    def test_missing_cart_row(self, test_client, user, db_session, count_rows):
        db_session.query(CartModel).delete()
        db_session.commit()

        response = checkout(test_client, user["headers"])

        assert response.status_code == 400
        assert response.json() == {"error": "Cart missing"}
        assert count_rows(OrderModel) == 0

    def test_unauthenticated_checkout(self, test_client):
        response = test_client.post("/api/orders/checkout")

        assert response.status_code == 401

    def test_product_gone_from_catalog(self, test_client, user, products, count_rows, monkeypatch):
        add_to_cart(test_client, user["headers"], products[0]["id"], 1)
        add_to_cart(test_client, user["headers"], products[1]["id"], 1)

        original = ProductRepo.get_products_by_ids

        def without_first(self, product_ids):
            found = original(self, product_ids)
            found.pop(products[0]["id"], None)
            return found

        monkeypatch.setattr(ProductRepo, "get_products_by_ids", without_first)

        response = checkout(test_client, user["headers"])

        assert response.status_code == 400
        assert response.json() == {"error": "Product unavailable"}
        assert count_rows(OrderModel) == 0
        assert count_rows(CartItemModel) == 2


class TestCheckoutAtomicity:

    def test_failure_after_order_insert_rolls_everything_back(
        self, test_client, user, products, count_rows, monkeypatch
    ):
        add_to_cart(test_client, user["headers"], products[0]["id"], 2)

        def broken_clear(self, cart_id):
            raise OperationalError("DELETE FROM cart_items", {}, Exception("connection lost"))

        monkeypatch.setattr(CartRepo, "clear_cart_items", broken_clear)

        response = checkout(test_client, user["headers"])

        assert response.status_code == 500
        assert response.json() == {"error": "Checkout failed"}
        assert count_rows(OrderModel) == 0
        assert count_rows(OrderItemModel) == 0
        cart = test_client.get("/api/cart", headers=user["headers"]).json()
        assert cart == {"items": [{"productId": products[0]["id"], "qty": 2}]}

    def test_retry_after_failure_succeeds_once(
        self, test_client, user, products, count_rows, monkeypatch
    ):
        add_to_cart(test_client, user["headers"], products[0]["id"], 1)

        def broken_clear(self, cart_id):
            raise OperationalError("DELETE FROM cart_items", {}, Exception("boom"))

        with monkeypatch.context() as m:
            m.setattr(CartRepo, "clear_cart_items", broken_clear)
            assert checkout(test_client, user["headers"]).status_code == 500

        assert checkout(test_client, user["headers"]).status_code == 200
        assert count_rows(OrderModel) == 1

    def test_second_checkout_of_same_cart_sees_empty_cart(self, test_client, user, products, count_rows):
        add_to_cart(test_client, user["headers"], products[0]["id"], 1)

        first = checkout(test_client, user["headers"])
        second = checkout(test_client, user["headers"])

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json() == {"error": "Cart empty"}
        assert count_rows(OrderModel) == 1


class TestCheckoutService:
    """Checkout called directly on the service, outside HTTP."""

    def _user_without_cart(self, db):
        user = UserModel(name="Ghost", email="ghost@x.com", password_hash="x")
        db.add(user)
        db.commit()
        return user.id

    def test_cart_missing(self, db_session):
        user_id = self._user_without_cart(db_session)

        with pytest.raises(CartMissing):
            OrderService(db_session).checkout(user_id)

    def test_cart_empty(self, db_session, count_rows):
        user_id = self._user_without_cart(db_session)
        db_session.add(CartModel(user_id=user_id))
        db_session.commit()

        with pytest.raises(CartEmpty):
            OrderService(db_session).checkout(user_id)
        assert count_rows(OrderModel) == 0


class TestOrderHistory:

    def test_no_orders(self, test_client, user):
        response = test_client.get("/api/orders", headers=user["headers"])

        assert response.status_code == 200
        assert response.json() == {"orders": []}

    def test_orders_newest_first_with_lines(self, test_client, user, products):
        add_to_cart(test_client, user["headers"], products[0]["id"], 1)
        first = checkout(test_client, user["headers"]).json()["order"]
        add_to_cart(test_client, user["headers"], products[1]["id"], 2)
        second = checkout(test_client, user["headers"]).json()["order"]

        orders = test_client.get("/api/orders", headers=user["headers"]).json()["orders"]

        assert [o["id"] for o in orders] == [second["id"], first["id"]]
        assert orders[0]["line_items"][0]["qty"] == 2
        assert orders[1]["line_items"][0]["product_id"] == products[0]["id"]

    def test_orders_are_private(self, test_client, user, products):
        add_to_cart(test_client, user["headers"], products[0]["id"], 1)
        checkout(test_client, user["headers"])
        other = signup(test_client, name="Bob", email="bob@x.com")

        response = test_client.get("/api/orders", headers=auth_headers(other["token"]))

        assert response.json() == {"orders": []}


class TestEndToEnd:

    def test_signup_login_add_checkout_history(self, test_client, products):
        p1 = products[0]
        signup(test_client, name="Ada", email="ada@x.com", password="pw123")
        login = test_client.post(
            "/api/auth/login", json={"email": "ada@x.com", "password": "pw123"}
        )
        assert login.status_code == 200
        headers = auth_headers(login.json()["token"])

        assert add_to_cart(test_client, headers, p1["id"], 2).status_code == 200
        assert add_to_cart(test_client, headers, p1["id"], 1).status_code == 200
        assert test_client.get("/api/cart", headers=headers).json() == {
            "items": [{"productId": p1["id"], "qty": 3}]
        }

        assert checkout(test_client, headers).status_code == 200

        orders = test_client.get("/api/orders", headers=headers).json()["orders"]
        assert len(orders) == 1
        assert len(orders[0]["line_items"]) == 1
        line = orders[0]["line_items"][0]
        assert line["qty"] == 3
        assert line["subtotal_cents"] == 3 * p1["price_cents"]
        assert orders[0]["total_cents"] == 3 * p1["price_cents"]
