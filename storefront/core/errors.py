# storefront/core/errors.py
# Error hierarchy shared by the backends and domain services.
# The web layer maps status_code straight onto the HTTP response.


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(StorefrontError):
    """Unknown backend identifier or an operation the configured backend cannot perform."""

    status_code = 500


class BadRequestError(StorefrontError):
    status_code = 400


class InsufficientStockError(BadRequestError):
    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for '{product_name}' (available: {available}, requested: {requested})"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class AuthenticationError(StorefrontError):
    status_code = 401


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409
