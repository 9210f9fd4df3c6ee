from .sales_service import SalesService
from .inventory_service import InventoryService
from .directory_service import DirectoryService
from .expense_service import ExpenseService
from .reporting_service import ReportingService
from .auth_service import AuthService

__all__ = [
    "SalesService",
    "InventoryService",
    "DirectoryService",
    "ExpenseService",
    "ReportingService",
    "AuthService",
]
