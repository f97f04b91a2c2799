# storefront/services/order_service.py
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    AppError,
    CartEmpty,
    CartMissing,
    CheckoutFailed,
    ProductUnavailable,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def build_order_lines(
    items: Iterable[CartItemModel],
    products: Mapping[int, ProductModel],
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Prices cart items against the given catalog rows.

    Returns the order lines and the total. The total is the sum of the line
    subtotals, each subtotal is ``qty * price_cents`` in integer minor units.
    Raises ProductUnavailable when an item's product is not in ``products``.
    """
    lines = []
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            raise ProductUnavailable()
        lines.append(
            {
                "product_id": product.id,
                "name": product.name,
                "qty": item.qty,
                "price_cents": product.price_cents,
                "subtotal_cents": item.qty * product.price_cents,
            }
        )
    total = sum(line["subtotal_cents"] for line in lines)
    return lines, total


def _line_to_dict(item) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "name": item.name,
        "qty": item.qty,
        "price_cents": item.price_cents,
        "subtotal_cents": item.subtotal_cents,
    }


class OrderService:
    """
    Orders: checkout (cart -> immutable order) and the order history.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)

    def checkout(self, user_id: int) -> Dict[str, Any]:
        """
        Use case: turn the caller's cart into an order.

        1. lock the cart row (one checkout per user at a time)
        2. read its items, price them against the current catalog
        3. insert order + lines, empty the cart
        4. commit

        Everything happens in one transaction; on any failure nothing is persisted.
        """
        try:
            cart = self.carts.lock_cart_by_user(user_id)
            if not cart:
                raise CartMissing()

            items = self.carts.get_cart_items(cart.id)
            if not items:
                raise CartEmpty()

            products = self.products.get_products_by_ids(i.product_id for i in items)
            lines, total = build_order_lines(items, products)

            order = self.repo.add_order(user_id, total, lines)
            self.carts.clear_cart_items(cart.id)
            result = self._order_to_dict(order, lines)

            self.db.commit()
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("checkout_failed", user_id=user_id)
            raise CheckoutFailed() from e

        logger.info(
            "order_created",
            order_id=result["id"],
            user_id=user_id,
            lines=len(lines),
            total_cents=total,
        )

        return result

    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        """
        Use case: order history, newest first.
        """
        orders = self.repo.list_orders_by_user(user_id)
        items_by_order = self.repo.get_items_by_order_ids([o.id for o in orders])

        return [
            self._order_to_dict(o, [_line_to_dict(i) for i in items_by_order.get(o.id, [])])
            for o in orders
        ]

    @staticmethod
    def _order_to_dict(order: OrderModel, lines: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "created_at": order.created_at,
            "total_cents": order.total_cents,
            "line_items": lines,
        }
