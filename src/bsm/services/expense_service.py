from __future__ import annotations

from datetime import datetime
from typing import Any

from bsm.domain.errors import NotFoundError, ValidationError
from bsm.domain.models import Expense


class ExpenseService:
    def __init__(self, provider):
        self.provider = provider

    async def list_expenses(self) -> list[Expense]:
        return await self.provider.get_expenses()

    async def record_expense(
        self, item_name: str, quantity: float, unit_cost: float, date: datetime | None = None
    ) -> Expense:
        """The store keeps total_cost as given, so it is computed here."""
        item_name = (item_name or "").strip()
        if not item_name:
            raise ValidationError("Item name is required.")
        if quantity <= 0:
            raise ValidationError("Quantity must be > 0.")
        if unit_cost < 0:
            raise ValidationError("Unit cost must be >= 0.")
        return await self.provider.add_expense(
            item_name, quantity, unit_cost, total_cost=quantity * unit_cost, date=date
        )

    async def update_expense(self, expense_id: str, **changes: Any) -> Expense:
        if "quantity" in changes or "unit_cost" in changes:
            current = await self.provider.get_expense(expense_id)
            if not current:
                raise NotFoundError("Expense not found.")
            quantity = changes.get("quantity", current.quantity)
            unit_cost = changes.get("unit_cost", current.unit_cost)
            changes["total_cost"] = quantity * unit_cost

        updated = await self.provider.update_expense(expense_id, **changes)
        if not updated:
            raise NotFoundError("Expense not found.")
        return updated

    async def delete_expense(self, expense_id: str) -> Expense:
        removed = await self.provider.delete_expense(expense_id)
        if not removed:
            raise NotFoundError("Expense not found.")
        return removed
