# storefront/domain/errors.py


class AppError(Exception):
    """Base for errors that map onto a client-facing response."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid payload"


class CartMissing(ValidationError):
    default_message = "Cart missing"


class CartEmpty(ValidationError):
    default_message = "Cart empty"


class ProductUnavailable(ValidationError):
    default_message = "Product unavailable"


class AuthError(AppError):
    status_code = 401
    default_message = "Unauthenticated"


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class Unauthenticated(AuthError):
    default_message = "Invalid token"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class EmailTaken(ConflictError):
    default_message = "Email already registered"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class StorageError(AppError):
    """Storage failure; raised only after the open transaction was rolled back."""


class CheckoutFailed(StorageError):
    default_message = "Checkout failed"
