from typing import Any, Dict, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import EmailTaken, InvalidCredentials, NotFoundError, StorageError
from storefront.domain.schemas import LoginIn, SignupIn
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger
from storefront.utils.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)


def _public_user(user: UserModel) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": user.created_at,
    }


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def signup(self, payload: SignupIn) -> Tuple[str, Dict[str, Any]]:
        #fast path, the unique index on email is the real guarantee
        if self.repo.get_user_by_email(payload.email):
            raise EmailTaken()

        user = UserModel(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
        )
        try:
            #user and cart are committed together or not at all
            self.repo.add_user_with_cart(user)
            token = create_access_token(user)
            public = _public_user(user)
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            logger.info("signup_email_race", email=payload.email)
            raise EmailTaken() from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.exception("signup_failed")
            raise StorageError() from e

        logger.info("user_signed_up", user_id=public["id"])
        return token, public

    def login(self, payload: LoginIn) -> Tuple[str, Dict[str, Any]]:
        user = self.repo.get_user_by_email(payload.email)
        # same error for unknown email and wrong password
        if not user or not verify_password(payload.password, user.password_hash):
            raise InvalidCredentials()

        return create_access_token(user), _public_user(user)

    def get_user(self, user_id: int) -> Dict[str, Any]:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError()
        return _public_user(user)
