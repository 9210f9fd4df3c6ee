from datetime import datetime, timezone

import pytest

from conftest import make_store, run, seeded_store

from bsm.domain.dashboard import UNKNOWN_PRODUCT, UNKNOWN_RESELLER, build_dashboard
from bsm.domain.models import Sale, SaleItem


def _setup(now: datetime):
    store = make_store(now=now)
    run(store.add_client("Ana", "1"))
    run(store.add_reseller("Pedro", "2", 15))
    run(store.add_reseller("Fernanda", "3", 20))
    for name in ("A", "B", "C", "D"):
        run(store.add_product(name, 100, 10.0, 4.0))
    return store


def test_seeded_dashboard_for_march_2024():
    data = run(seeded_store(now=datetime(2024, 3, 28)).get_dashboard_data())

    assert data.total_sales == 5
    assert data.total_clients == 5
    assert data.total_resellers == 3
    assert data.monthly_sales == 5
    assert data.monthly_revenue == pytest.approx(453.5)
    assert data.monthly_expenses_total == pytest.approx(528.0)
    assert data.monthly_profit == pytest.approx(-74.5)
    assert [p.id for p in data.low_stock_products] == ["4", "5"]
    assert [(t.id, t.quantity) for t in data.top_products] == [("1", 15), ("3", 12), ("2", 9)]
    assert [(t.id, t.total) for t in data.top_resellers] == [("1", 210.0), ("2", 157.5), ("3", 86.0)]
    assert [s.id for s in data.recent_sales] == ["5", "4", "3", "2", "1"]


def test_monthly_figures_only_count_current_calendar_month():
    store = _setup(now=datetime(2024, 6, 15))
    run(store.add_sale("1", "1", [{"product_id": "1", "quantity": 2}], date=datetime(2024, 6, 1)))
    run(store.add_sale("1", "1", [{"product_id": "1", "quantity": 3}], date=datetime(2024, 5, 31, 23, 59)))
    run(store.add_sale("1", "1", [{"product_id": "1", "quantity": 4}], date=datetime(2023, 6, 10)))
    run(store.add_expense("Farinha", 1, 5.0, 5.0, date=datetime(2024, 6, 2)))
    run(store.add_expense("Manteiga", 1, 50.0, 50.0, date=datetime(2024, 5, 2)))

    data = run(store.get_dashboard_data())

    assert data.monthly_sales == 1
    assert data.monthly_revenue == pytest.approx(20.0)
    assert data.monthly_expenses_total == pytest.approx(5.0)
    assert data.monthly_profit == pytest.approx(15.0)
    assert data.total_revenue == pytest.approx(90.0)


def test_top_products_sorted_by_quantity_and_truncated():
    store = _setup(now=datetime(2024, 6, 15))
    for pid, qty in (("1", 5), ("2", 10), ("3", 2), ("4", 1)):
        run(store.add_sale("1", "1", [{"product_id": pid, "quantity": qty}]))

    data = run(store.get_dashboard_data())

    assert [t.quantity for t in data.top_products] == [10, 5, 2]
    assert [t.name for t in data.top_products] == ["B", "A", "C"]


def test_top_ties_keep_first_seen_order():
    store = _setup(now=datetime(2024, 6, 15))
    run(store.add_sale("1", "2", [{"product_id": "3", "quantity": 4}]))
    run(store.add_sale("1", "1", [{"product_id": "1", "quantity": 4}]))

    data = run(store.get_dashboard_data())

    assert [t.id for t in data.top_products] == ["3", "1"]
    assert [t.id for t in data.top_resellers] == ["2", "1"]


def test_low_stock_boundary_is_strictly_below_twenty():
    store = make_store()
    run(store.add_product("Twenty", 20, 10.0, 4.0))
    run(store.add_product("Nineteen", 19, 10.0, 4.0))

    data = run(store.get_dashboard_data())

    assert [p.name for p in data.low_stock_products] == ["Nineteen"]


def test_dangling_references_get_placeholder_names():
    sale = Sale(
        id="1",
        client_id="1",
        client_name="Ana",
        reseller_id="77",
        reseller_name="Gone",
        items=(SaleItem(product_id="88", product_name="Gone", quantity=3, unit_price=2.0),),
        total_amount=6.0,
        date=datetime(2024, 1, 1),
    )

    data = build_dashboard(clients=[], resellers=[], products=[], sales=[sale], expenses=[], now=datetime(2024, 1, 2))

    assert data.top_products[0].name == UNKNOWN_PRODUCT
    assert data.top_resellers[0].name == UNKNOWN_RESELLER


def test_recent_feeds_are_newest_first_and_capped_at_five():
    store = _setup(now=datetime(2024, 6, 15))
    for day in (3, 9, 1, 7, 5, 2):
        run(store.add_expense(f"day-{day}", 1, 1.0, 1.0, date=datetime(2024, 6, day)))

    data = run(store.get_dashboard_data())

    assert [e.item_name for e in data.recent_expenses] == ["day-9", "day-7", "day-5", "day-3", "day-2"]


def test_dashboard_reflects_later_writes():
    store = seeded_store()
    before = run(store.get_dashboard_data())
    run(store.add_sale("1", "1", [{"product_id": "2", "quantity": 15}]))

    after = run(store.get_dashboard_data())

    assert after.total_sales == before.total_sales + 1
    assert [p.id for p in after.low_stock_products] == ["2", "4", "5"]


def test_timezone_aware_dates_are_stored_naive():
    store = seeded_store()
    utc_moment = datetime(2024, 3, 27, 15, 0, tzinfo=timezone.utc)

    sale = run(store.add_sale("1", "1", [{"product_id": "1", "quantity": 1}], date=utc_moment))
    expense = run(store.add_expense("Cacau", 2, 10.0, 20.0, date=utc_moment))
    run(store.update_expense("1", date=datetime(2024, 3, 6, tzinfo=timezone.utc)))

    assert sale.date.tzinfo is None
    assert expense.date.tzinfo is None
    assert run(store.get_expense("1")).date.tzinfo is None

    data = run(store.get_dashboard_data())
    assert data.total_sales == 6
    assert data.recent_sales[0].id == sale.id
    assert data.recent_expenses[0].id == expense.id
