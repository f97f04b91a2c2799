from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def add_user_with_cart(self, user: UserModel) -> UserModel:
        """Stages the user and its empty cart in the current transaction; caller commits."""
        self.db.add(user)
        self.db.flush()  # user.id
        self.db.add(CartModel(user_id=user.id))
        self.db.flush()
        return user

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
