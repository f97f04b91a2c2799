# storefront/repos/order_repo.py
from collections import defaultdict
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, user_id: int, total_cents: int, lines: List[dict]) -> OrderModel:
        """Stages the order and its lines in the current transaction; caller commits."""
        order = OrderModel(user_id=user_id, total_cents=total_cents)
        order.items = [
            OrderItemModel(
                product_id=line["product_id"],
                name=line["name"],
                qty=line["qty"],
                price_cents=line["price_cents"],
                subtotal_cents=line["subtotal_cents"],
            )
            for line in lines
        ]
        self.db.add(order)
        self.db.flush()
        return order

    def list_orders_by_user(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def get_items_by_order_ids(self, order_ids: List[int]) -> Dict[int, List[OrderItemModel]]:
        if not order_ids:
            return {}
        rows = self.db.execute(
            select(OrderItemModel)
            .where(OrderItemModel.order_id.in_(order_ids))
            .order_by(OrderItemModel.id)
        ).scalars().all()
        by_order: Dict[int, List[OrderItemModel]] = defaultdict(list)
        for item in rows:
            by_order[item.order_id].append(item)
        return by_order
