from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Protocol

from bsm.domain.dashboard import DashboardData
from bsm.domain.models import Client, Expense, Product, Reseller, Sale, User


class DataProvider(Protocol):
    """Async contract shared by the in-memory store and the HTTP provider."""

    # Clients
    async def get_clients(self) -> list[Client]: ...
    async def get_client(self, client_id: str) -> Optional[Client]: ...
    async def add_client(self, name: str, phone: str, payment_date: date | None = None) -> Client: ...
    async def update_client(self, client_id: str, **changes: Any) -> Optional[Client]: ...
    async def delete_client(self, client_id: str) -> Optional[Client]: ...

    # Resellers
    async def get_resellers(self) -> list[Reseller]: ...
    async def get_reseller(self, reseller_id: str) -> Optional[Reseller]: ...
    async def add_reseller(self, name: str, phone: str, commission: float) -> Reseller: ...
    async def update_reseller(self, reseller_id: str, **changes: Any) -> Optional[Reseller]: ...
    async def delete_reseller(self, reseller_id: str) -> Optional[Reseller]: ...

    # Products
    async def get_products(self) -> list[Product]: ...
    async def get_product(self, product_id: str) -> Optional[Product]: ...
    async def add_product(self, name: str, quantity: int, unit_price: float, cost_price: float) -> Product: ...
    async def update_product(self, product_id: str, **changes: Any) -> Optional[Product]: ...
    async def delete_product(self, product_id: str) -> Optional[Product]: ...

    # Sales
    async def get_sales(self) -> list[Sale]: ...
    async def get_sale(self, sale_id: str) -> Optional[Sale]: ...
    async def add_sale(
        self,
        client_id: str,
        reseller_id: str,
        items: Iterable[Mapping[str, Any]],
        date: datetime | None = None,
    ) -> Sale: ...

    # Expenses
    async def get_expenses(self) -> list[Expense]: ...
    async def get_expense(self, expense_id: str) -> Optional[Expense]: ...
    async def add_expense(
        self, item_name: str, quantity: float, unit_cost: float, total_cost: float, date: datetime | None = None
    ) -> Expense: ...
    async def update_expense(self, expense_id: str, **changes: Any) -> Optional[Expense]: ...
    async def delete_expense(self, expense_id: str) -> Optional[Expense]: ...

    # Users
    async def authenticate_user(self, username: str, password: str) -> Optional[User]: ...
    async def get_users(self) -> list[User]: ...
    async def get_user(self, user_id: str) -> Optional[User]: ...
    async def add_user(self, username: str, password: str, name: str, role: str) -> User: ...
    async def update_user(self, user_id: str, **changes: Any) -> Optional[User]: ...
    async def delete_user(self, user_id: str) -> Optional[User]: ...

    # Dashboard
    async def get_dashboard_data(self) -> DashboardData: ...
