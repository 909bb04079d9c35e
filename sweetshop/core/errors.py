"""Error taxonomy shared by the services and the HTTP surface.

Every error carries the status code the API answers with, so route handlers
never translate exceptions by hand.
"""


class ShopError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class Conflict(ShopError):
    status_code = 400
    message = "User already exists"


class NotFound(ShopError):
    status_code = 404
    message = "Sweet not found"


class AccountNotFound(NotFound):
    status_code = 400
    message = "User not found"


class InvalidCredential(ShopError):
    status_code = 400
    message = "Invalid password"


class Unauthenticated(ShopError):
    status_code = 401
    message = "Not authenticated"


class Forbidden(ShopError):
    status_code = 403
    message = "Forbidden"


class InsufficientStock(ShopError):
    status_code = 400
    message = "Insufficient stock"

    def __init__(self, available: int | None = None, message: str | None = None) -> None:
        self.available = available
        if message is None and available is not None:
            message = f"Insufficient stock. Only {available} left."
        super().__init__(message)


class InvalidAmount(ShopError):
    status_code = 400
    message = "Invalid amount"


class InternalStoreError(ShopError):
    status_code = 500
    message = "Inventory store unavailable"
