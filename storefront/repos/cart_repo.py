# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import Select, delete, select, update
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


def select_cart_for_update(user_id: int) -> Select:
    #SELECT ... FOR UPDATE, the row lock is held until commit/rollback
    return select(CartModel).where(CartModel.user_id == user_id).with_for_update()


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def lock_cart_by_user(self, user_id: int) -> CartModel | None:
        """
        Cart row of the user, exclusively locked for the rest of the transaction.
        A second locker of the same row blocks until the first one finishes.
        """
        return self.db.execute(select_cart_for_update(user_id)).scalar_one_or_none()

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def increase_item_qty(self, cart_id: int, product_id: int, qty: int) -> int:
        # qty = qty + n in the database, never read-modify-write in python
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
            .values(qty=CartItemModel.qty + qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        return result.rowcount

    def clear_cart_items(self, cart_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
