class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class UnknownProductError(ValidationError):
    def __init__(self, product_id: str):
        super().__init__(f"Unknown product: {product_id}")
        self.product_id = product_id


class NotFoundError(AppError):
    pass


class InsufficientStockError(AppError):
    pass


class AuthorizationError(AppError):
    pass


class RemoteProviderError(AppError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class SessionExpiredError(RemoteProviderError):
    pass
