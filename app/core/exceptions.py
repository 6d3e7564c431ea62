"""
Application errors raised by services and repositories

Each error carries the HTTP status the API layer answers with; app.main
registers the handler that turns them into {"detail": message} responses.
"""


class StoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StoreError):
    status_code = 404


class InvalidRequestError(StoreError):
    status_code = 400


class InsufficientStockError(InvalidRequestError):
    def __init__(self, product_name: str):
        super().__init__(f"Insufficient stock for product: {product_name}")
        self.product_name = product_name


class PermissionDeniedError(StoreError):
    status_code = 403


class OrderTransactionError(StoreError):
    status_code = 500

    def __init__(self, message: str = "Failed to create order due to a transaction error."):
        super().__init__(message)
