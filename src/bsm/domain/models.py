from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date as Date, datetime
from typing import Optional

from bsm.domain.errors import ValidationError


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    phone: str
    created_at: datetime
    payment_date: Optional[Date] = None


@dataclass(frozen=True)
class Reseller:
    id: str
    name: str
    phone: str
    commission: float
    created_at: datetime


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    quantity: int
    unit_price: float
    cost_price: float
    created_at: datetime


@dataclass(frozen=True)
class SaleItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


def local_naive(moment: datetime) -> datetime:
    """Stored dates are naive local time; aware values are converted."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def whole_quantity(value: object) -> int:
    """Sale line quantity as an int; 3 and 3.0 pass, 2.7 and "abc" do not."""
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a whole number.")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValidationError("Quantity must be a whole number.") from e
    if not number.is_integer():
        raise ValidationError("Quantity must be a whole number.")
    return int(number)


@dataclass(frozen=True)
class Sale:
    id: str
    client_id: str
    client_name: str
    reseller_id: str
    reseller_name: str
    items: tuple[SaleItem, ...]
    total_amount: float
    date: datetime


@dataclass(frozen=True)
class Expense:
    id: str
    item_name: str
    quantity: float
    unit_cost: float
    total_cost: float
    date: datetime


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password: str = field(repr=False)
    name: str
    role: str
    created_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


USER_ROLES = ("admin", "user")
