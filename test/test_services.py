from datetime import datetime

import pytest

from conftest import run, seeded_store

from bsm.domain.errors import NotFoundError, ValidationError
from bsm.services.directory_service import DirectoryService
from bsm.services.expense_service import ExpenseService
from bsm.services.inventory_service import InventoryService
from bsm.services.sales_service import SalesService


class RecordingProvider:
    """Stands in for a provider; fails the test if the call gets through."""

    async def add_sale(self, *args, **kwargs):
        raise AssertionError("provider should not be reached")


def test_sales_service_rejects_bad_carts_before_hitting_provider():
    sales = SalesService(RecordingProvider())

    with pytest.raises(ValidationError, match="Cart is empty"):
        run(sales.create_sale("1", "1", []))
    with pytest.raises(ValidationError, match="Quantity must be >= 1"):
        run(sales.create_sale("1", "1", [{"product_id": "1", "quantity": 0}]))
    with pytest.raises(ValidationError, match="Unit price must be > 0"):
        run(sales.create_sale("1", "1", [{"product_id": "1", "quantity": 1, "unit_price": 0.0}]))


def test_sales_service_records_sale():
    store = seeded_store()
    sales = SalesService(store)

    sale = run(sales.create_sale("1", "1", [{"product_id": "1", "quantity": 5, "unit_price": 8.5}]))

    assert sale.total_amount == 42.5
    assert run(sales.get_sale(sale.id)) == sale
    assert len(run(sales.list_sales())) == 6


def test_inventory_service_checks_fields():
    inv = InventoryService(seeded_store())

    with pytest.raises(ValidationError, match="Price must be > 0"):
        run(inv.add_product("Brownie", 1, 0.0, 1.0))
    with pytest.raises(ValidationError, match="Quantity must be >= 0"):
        run(inv.add_product("Brownie", -1, 10.0, 1.0))
    with pytest.raises(ValidationError, match="Name is required"):
        run(inv.update_product("1", name="  "))
    with pytest.raises(NotFoundError):
        run(inv.update_product("999", unit_price=9.0))


def test_inventory_service_low_stock():
    inv = InventoryService(seeded_store())

    assert [p.name for p in run(inv.low_stock())] == ["Brownie Vegano", "Brownie Zero Açúcar"]
    assert [p.id for p in run(inv.low_stock(threshold=30))] == ["3", "4", "5"]


def test_directory_service_commission_range():
    directory = DirectoryService(seeded_store())

    with pytest.raises(ValidationError, match="between 0 and 100"):
        run(directory.add_reseller("Nova", "1", 120))
    with pytest.raises(ValidationError, match="between 0 and 100"):
        run(directory.update_reseller("1", commission=-1))

    reseller = run(directory.add_reseller("  Nova  ", "1", 12.5))
    assert reseller.name == "Nova"


def test_directory_service_missing_client():
    directory = DirectoryService(seeded_store())

    with pytest.raises(NotFoundError):
        run(directory.delete_client("999"))


def test_expense_service_computes_total():
    expenses = ExpenseService(seeded_store())

    expense = run(expenses.record_expense("Cacau", 4, 12.5, date=datetime(2024, 3, 26)))
    assert expense.total_cost == 50.0

    updated = run(expenses.update_expense(expense.id, quantity=6))
    assert updated.total_cost == 75.0
    assert updated.unit_cost == 12.5


def test_expense_service_rejects_bad_input():
    expenses = ExpenseService(seeded_store())

    with pytest.raises(ValidationError):
        run(expenses.record_expense("", 1, 1.0))
    with pytest.raises(NotFoundError):
        run(expenses.update_expense("999", unit_cost=2.0))


def test_sales_service_rejects_fractional_and_incomplete_lines():
    sales = SalesService(RecordingProvider())

    with pytest.raises(ValidationError, match="whole number"):
        run(sales.create_sale("1", "1", [{"product_id": "1", "quantity": 2.7}]))
    with pytest.raises(ValidationError, match="needs product_id and quantity"):
        run(sales.create_sale("1", "1", [{"quantity": 1}]))
