"""
JSON payload mapping for the remote API.

The API speaks camelCase keys and ISO-8601 dates:
  {"id": "1", "clientName": "Ana", "items": [{"productId": "1", ...}], "date": "2024-03-15T00:00:00"}
"""
from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from typing import Any, Mapping

from bsm.domain.dashboard import DashboardData, TopProduct, TopReseller
from bsm.domain.models import Client, Expense, Product, Reseller, Sale, SaleItem, User

DATETIME_FIELDS = {"created_at", "date"}
DATE_FIELDS = {"payment_date"}


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_date(value: Any) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return parse_datetime(value).date()


def to_payload(value: Any) -> Any:
    if is_dataclass(value):
        return {camel(f.name): to_payload(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, Mapping):
        return {camel(str(k)): to_payload(v) for k, v in value.items()}
    return value


def _decode_flat(model: type, data: Mapping[str, Any]) -> Any:
    kwargs = {}
    for f in fields(model):
        key = camel(f.name)
        if key not in data:
            continue
        raw = data[key]
        if f.name in DATETIME_FIELDS:
            raw = parse_datetime(raw)
        elif f.name in DATE_FIELDS:
            raw = parse_date(raw)
        elif (f.name == "id" or f.name.endswith("_id")) and raw is not None:
            raw = str(raw)
        kwargs[f.name] = raw
    return model(**kwargs)


def client_from_payload(data: Mapping[str, Any]) -> Client:
    return _decode_flat(Client, data)


def reseller_from_payload(data: Mapping[str, Any]) -> Reseller:
    return _decode_flat(Reseller, data)


def product_from_payload(data: Mapping[str, Any]) -> Product:
    return _decode_flat(Product, data)


def expense_from_payload(data: Mapping[str, Any]) -> Expense:
    return _decode_flat(Expense, data)


def user_from_payload(data: Mapping[str, Any]) -> User:
    # the API never returns credentials
    return _decode_flat(User, {"password": "", **data})


def sale_from_payload(data: Mapping[str, Any]) -> Sale:
    items = tuple(_decode_flat(SaleItem, it) for it in data.get("items", []))
    return Sale(
        id=str(data["id"]),
        client_id=str(data["clientId"]),
        client_name=data.get("clientName", ""),
        reseller_id=str(data["resellerId"]),
        reseller_name=data.get("resellerName", ""),
        items=items,
        total_amount=float(data.get("totalAmount", sum(i.quantity * i.unit_price for i in items))),
        date=parse_datetime(data["date"]),
    )


def dashboard_from_payload(data: Mapping[str, Any]) -> DashboardData:
    return DashboardData(
        total_sales=int(data.get("totalSales", 0)),
        total_revenue=float(data.get("totalRevenue", 0.0)),
        total_clients=int(data.get("totalClients", 0)),
        total_resellers=int(data.get("totalResellers", 0)),
        monthly_revenue=float(data.get("monthlyRevenue", 0.0)),
        monthly_sales=int(data.get("monthlySales", 0)),
        monthly_expenses_total=float(data.get("monthlyExpensesTotal", 0.0)),
        monthly_profit=float(data.get("monthlyProfit", 0.0)),
        low_stock_products=[product_from_payload(p) for p in data.get("lowStockProducts", [])],
        top_products=[_decode_flat(TopProduct, p) for p in data.get("topProducts", [])],
        top_resellers=[_decode_flat(TopReseller, r) for r in data.get("topResellers", [])],
        recent_sales=[sale_from_payload(s) for s in data.get("recentSales", [])],
        recent_expenses=[expense_from_payload(e) for e in data.get("recentExpenses", [])],
    )
