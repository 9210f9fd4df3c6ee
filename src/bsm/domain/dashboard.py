from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from bsm.domain.models import Client, Expense, Product, Reseller, Sale

LOW_STOCK_THRESHOLD = 20
TOP_LIMIT = 3
RECENT_LIMIT = 5
UNKNOWN_PRODUCT = "Unknown product"
UNKNOWN_RESELLER = "Unknown reseller"


@dataclass(frozen=True)
class TopProduct:
    id: str
    name: str
    quantity: int


@dataclass(frozen=True)
class TopReseller:
    id: str
    name: str
    total: float


@dataclass(frozen=True)
class DashboardData:
    total_sales: int
    total_revenue: float
    total_clients: int
    total_resellers: int
    monthly_revenue: float
    monthly_sales: int
    monthly_expenses_total: float
    monthly_profit: float
    low_stock_products: list[Product]
    top_products: list[TopProduct]
    top_resellers: list[TopReseller]
    recent_sales: list[Sale]
    recent_expenses: list[Expense]


def _same_month(moment: datetime, now: datetime) -> bool:
    return moment.year == now.year and moment.month == now.month


def top_products(sales: Sequence[Sale], products: Sequence[Product], limit: int = TOP_LIMIT) -> list[TopProduct]:
    sold: dict[str, int] = {}
    for sale in sales:
        for item in sale.items:
            sold[item.product_id] = sold.get(item.product_id, 0) + int(item.quantity)

    names = {p.id: p.name for p in products}
    ranked = [TopProduct(id=pid, name=names.get(pid, UNKNOWN_PRODUCT), quantity=qty) for pid, qty in sold.items()]
    # stable: ties keep first-sold order
    ranked.sort(key=lambda t: t.quantity, reverse=True)
    return ranked[:limit]


def top_resellers(sales: Sequence[Sale], resellers: Sequence[Reseller], limit: int = TOP_LIMIT) -> list[TopReseller]:
    revenue: dict[str, float] = {}
    for sale in sales:
        revenue[sale.reseller_id] = revenue.get(sale.reseller_id, 0.0) + float(sale.total_amount)

    names = {r.id: r.name for r in resellers}
    ranked = [TopReseller(id=rid, name=names.get(rid, UNKNOWN_RESELLER), total=total) for rid, total in revenue.items()]
    ranked.sort(key=lambda t: t.total, reverse=True)
    return ranked[:limit]


def build_dashboard(
    *,
    clients: Sequence[Client],
    resellers: Sequence[Reseller],
    products: Sequence[Product],
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    now: datetime,
) -> DashboardData:
    """
    Point-in-time summary of the given collections.

    The monthly figures use the calendar month of ``now``; the top-N and
    totals cover every sale on record.
    """
    monthly_sales = [s for s in sales if _same_month(s.date, now)]
    monthly_expenses = [e for e in expenses if _same_month(e.date, now)]

    monthly_revenue = sum(float(s.total_amount) for s in monthly_sales)
    monthly_expenses_total = sum(float(e.total_cost) for e in monthly_expenses)

    return DashboardData(
        total_sales=len(sales),
        total_revenue=sum(float(s.total_amount) for s in sales),
        total_clients=len(clients),
        total_resellers=len(resellers),
        monthly_revenue=monthly_revenue,
        monthly_sales=len(monthly_sales),
        monthly_expenses_total=monthly_expenses_total,
        monthly_profit=monthly_revenue - monthly_expenses_total,
        low_stock_products=[p for p in products if p.quantity < LOW_STOCK_THRESHOLD],
        top_products=top_products(sales, products),
        top_resellers=top_resellers(sales, resellers),
        recent_sales=sorted(sales, key=lambda s: s.date, reverse=True)[:RECENT_LIMIT],
        recent_expenses=sorted(expenses, key=lambda e: e.date, reverse=True)[:RECENT_LIMIT],
    )
