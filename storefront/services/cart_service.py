from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import CartMissing, StorageError, ValidationError
from storefront.domain.schemas import MAX_LINE_QTY
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the per-user cart.
    query (get) is read only, commands (add, remove) run in their own transaction
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    #query
    def get_cart(self, user_id: int) -> List[Dict[str, Any]]:
        cart = self.repo.get_cart_by_user(user_id)

        #no cart row means nothing in cart
        if not cart:
            return []

        return [
            {"product_id": i.product_id, "qty": i.qty}
            for i in self.repo.get_cart_items(cart.id)
        ]

    #commands
    def add_item(self, user_id: int, product_id: int, qty: int) -> None:
        if not product_id:
            raise ValidationError("Invalid payload")
        if qty < 1 or qty > MAX_LINE_QTY:
            raise ValidationError("Invalid payload")

        try:
            # same lock as checkout, an add never lands in a cart being checked out
            cart = self.repo.lock_cart_by_user(user_id)
            if not cart:
                raise CartMissing()

            existing = self.repo.get_cart_item(cart.id, product_id)
            if existing and existing.qty + qty > MAX_LINE_QTY:
                raise ValidationError("Quantity limit exceeded")

            updated = self.repo.increase_item_qty(cart.id, product_id, qty)
            if updated:
                logger.info("cart_item_qty_increased", cart_id=cart.id, product_id=product_id, qty=qty)
            else:
                logger.info("cart_item_added", cart_id=cart.id, product_id=product_id, qty=qty)
                self.repo.add_cart_item(
                    CartItemModel(cart_id=cart.id, product_id=product_id, qty=qty)
                )

            self.repo.commit()
        except ValidationError:
            self.repo.rollback()
            raise
        except IntegrityError as e:
            #product_id foreign key
            self.repo.rollback()
            logger.info("unknown_product_rejected", user_id=user_id, product_id=product_id, error=str(e.orig))
            raise ValidationError("Unknown product") from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.exception("cart_add_failed", user_id=user_id, product_id=product_id)
            raise StorageError() from e

    def remove_item(self, user_id: int, product_id: int) -> None:
        if not product_id:
            raise ValidationError("Invalid payload")

        try:
            cart = self.repo.get_cart_by_user(user_id)
            if not cart:
                return

            deleted = self.repo.delete_cart_item(cart.id, product_id)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.exception("cart_remove_failed", user_id=user_id, product_id=product_id)
            raise StorageError() from e

        if deleted:
            logger.info("cart_item_removed", cart_id=cart.id, product_id=product_id)
