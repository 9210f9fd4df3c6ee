from .models import Client, Reseller, Product, SaleItem, Sale, Expense, User
from .dashboard import DashboardData, TopProduct, TopReseller
from .errors import (
    ValidationError,
    UnknownProductError,
    NotFoundError,
    InsufficientStockError,
    AuthorizationError,
    RemoteProviderError,
    SessionExpiredError,
)

__all__ = [
    "Client",
    "Reseller",
    "Product",
    "SaleItem",
    "Sale",
    "Expense",
    "User",
    "DashboardData",
    "TopProduct",
    "TopReseller",
    "ValidationError",
    "UnknownProductError",
    "NotFoundError",
    "InsufficientStockError",
    "AuthorizationError",
    "RemoteProviderError",
    "SessionExpiredError",
]
