from __future__ import annotations

import itertools
from collections import Counter
from dataclasses import fields, replace
from datetime import date, datetime
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from bsm.domain.dashboard import DashboardData, build_dashboard
from bsm.domain.errors import InsufficientStockError, NotFoundError, UnknownProductError, ValidationError
from bsm.domain.models import Client, Expense, Product, Reseller, Sale, SaleItem, User, local_naive, whole_quantity
from bsm.repositories.passwords import hash_password, verify_password


T = TypeVar("T")

READ_ONLY_FIELDS = frozenset({"id", "created_at"})


class Collection(Generic[T]):
    """Ordered records of one entity type, keyed by string id.

    Ids come from a counter owned by the collection, so a delete never
    frees an id for reuse.
    """

    def __init__(self, model: type[T]):
        self.model = model
        self._rows: list[T] = []
        self._ids = itertools.count(1)
        self._writable = frozenset(f.name for f in fields(model)) - READ_ONLY_FIELDS

    def __len__(self) -> int:
        return len(self._rows)

    def next_id(self) -> str:
        return str(next(self._ids))

    def all(self) -> list[T]:
        return list(self._rows)

    def get(self, record_id: str) -> Optional[T]:
        for row in self._rows:
            if row.id == record_id:
                return row
        return None

    def append(self, record: T) -> T:
        self._rows.append(record)
        return record

    def load(self, records: Iterable[T]) -> None:
        """Bulk insert records that already carry ids (seed data)."""
        highest = 0
        for record in records:
            self._rows.append(record)
            if str(record.id).isdigit():
                highest = max(highest, int(record.id))
        current = next(self._ids)
        self._ids = itertools.count(max(current, highest + 1))

    def update(self, record_id: str, changes: Mapping[str, Any]) -> Optional[T]:
        unknown = set(changes) - self._writable
        if unknown:
            raise ValidationError(f"Cannot update {self.model.__name__} field(s): {', '.join(sorted(unknown))}")
        for index, row in enumerate(self._rows):
            if row.id == record_id:
                self._rows[index] = replace(row, **changes)
                return self._rows[index]
        return None

    def delete(self, record_id: str) -> Optional[T]:
        for index, row in enumerate(self._rows):
            if row.id == record_id:
                return self._rows.pop(index)
        return None


class MemoryStore:
    """In-process data provider.

    Every coroutine runs to completion without awaiting, so on a single
    event loop each operation is atomic with respect to the others.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now, allow_oversell: bool = False):
        self.clock = clock
        self.allow_oversell = allow_oversell
        self.clients: Collection[Client] = Collection(Client)
        self.resellers: Collection[Reseller] = Collection(Reseller)
        self.products: Collection[Product] = Collection(Product)
        self.sales: Collection[Sale] = Collection(Sale)
        self.expenses: Collection[Expense] = Collection(Expense)
        self.users: Collection[User] = Collection(User)

    # ---------- Clients ----------
    async def get_clients(self) -> list[Client]:
        return self.clients.all()

    async def get_client(self, client_id: str) -> Optional[Client]:
        return self.clients.get(client_id)

    async def add_client(self, name: str, phone: str, payment_date: date | None = None) -> Client:
        client = Client(
            id=self.clients.next_id(),
            name=name,
            phone=phone,
            payment_date=payment_date,
            created_at=self.clock(),
        )
        return self.clients.append(client)

    async def update_client(self, client_id: str, **changes: Any) -> Optional[Client]:
        return self.clients.update(client_id, changes)

    async def delete_client(self, client_id: str) -> Optional[Client]:
        return self.clients.delete(client_id)

    # ---------- Resellers ----------
    async def get_resellers(self) -> list[Reseller]:
        return self.resellers.all()

    async def get_reseller(self, reseller_id: str) -> Optional[Reseller]:
        return self.resellers.get(reseller_id)

    async def add_reseller(self, name: str, phone: str, commission: float) -> Reseller:
        reseller = Reseller(
            id=self.resellers.next_id(),
            name=name,
            phone=phone,
            commission=commission,
            created_at=self.clock(),
        )
        return self.resellers.append(reseller)

    async def update_reseller(self, reseller_id: str, **changes: Any) -> Optional[Reseller]:
        return self.resellers.update(reseller_id, changes)

    async def delete_reseller(self, reseller_id: str) -> Optional[Reseller]:
        return self.resellers.delete(reseller_id)

    # ---------- Products ----------
    async def get_products(self) -> list[Product]:
        return self.products.all()

    async def get_product(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    async def add_product(self, name: str, quantity: int, unit_price: float, cost_price: float) -> Product:
        product = Product(
            id=self.products.next_id(),
            name=name,
            quantity=int(quantity),
            unit_price=unit_price,
            cost_price=cost_price,
            created_at=self.clock(),
        )
        return self.products.append(product)

    async def update_product(self, product_id: str, **changes: Any) -> Optional[Product]:
        return self.products.update(product_id, changes)

    async def delete_product(self, product_id: str) -> Optional[Product]:
        return self.products.delete(product_id)

    # ---------- Sales ----------
    async def get_sales(self) -> list[Sale]:
        return self.sales.all()

    async def get_sale(self, sale_id: str) -> Optional[Sale]:
        return self.sales.get(sale_id)

    async def add_sale(
        self,
        client_id: str,
        reseller_id: str,
        items: Iterable[Mapping[str, Any]],
        date: datetime | None = None,
    ) -> Sale:
        """
        items: [{product_id, quantity, unit_price?}]

        All lines are checked before any stock moves; a rejected sale leaves
        inventory untouched.
        """
        client = self.clients.get(client_id)
        if not client:
            raise NotFoundError(f"Client not found: {client_id}")
        reseller = self.resellers.get(reseller_id)
        if not reseller:
            raise NotFoundError(f"Reseller not found: {reseller_id}")

        lines = self._price_lines(items)

        for line in lines:
            product = self.products.get(line.product_id)
            self.products.update(line.product_id, {"quantity": product.quantity - line.quantity})

        sale = Sale(
            id=self.sales.next_id(),
            client_id=client.id,
            client_name=client.name,
            reseller_id=reseller.id,
            reseller_name=reseller.name,
            items=tuple(lines),
            total_amount=sum(line.quantity * line.unit_price for line in lines),
            date=local_naive(date or self.clock()),
        )
        self.sales.append(sale)
        return sale

    def _price_lines(self, items: Iterable[Mapping[str, Any]]) -> list[SaleItem]:
        items = list(items)
        if not items:
            raise ValidationError("Sale has no items.")

        lines: list[SaleItem] = []
        qty_by_product: Counter[str] = Counter()
        for it in items:
            if it.get("product_id") is None or it.get("quantity") is None:
                raise ValidationError("Each sale line needs product_id and quantity.")
            product_id = str(it["product_id"])
            qty = whole_quantity(it["quantity"])
            if qty <= 0:
                raise ValidationError("Quantity must be >= 1.")

            product = self.products.get(product_id)
            if not product:
                raise UnknownProductError(product_id)

            qty_by_product[product_id] += qty
            if not self.allow_oversell and qty_by_product[product_id] > product.quantity:
                raise InsufficientStockError(f"Not enough stock for {product.name}. Available: {product.quantity}")

            unit_price = it.get("unit_price")
            lines.append(
                SaleItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=qty,
                    unit_price=float(product.unit_price if unit_price is None else unit_price),
                )
            )
        return lines

    # ---------- Expenses ----------
    async def get_expenses(self) -> list[Expense]:
        return self.expenses.all()

    async def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self.expenses.get(expense_id)

    async def add_expense(
        self, item_name: str, quantity: float, unit_cost: float, total_cost: float, date: datetime | None = None
    ) -> Expense:
        expense = Expense(
            id=self.expenses.next_id(),
            item_name=item_name,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=total_cost,
            date=local_naive(date or self.clock()),
        )
        return self.expenses.append(expense)

    async def update_expense(self, expense_id: str, **changes: Any) -> Optional[Expense]:
        if changes.get("date") is not None:
            changes["date"] = local_naive(changes["date"])
        return self.expenses.update(expense_id, changes)

    async def delete_expense(self, expense_id: str) -> Optional[Expense]:
        return self.expenses.delete(expense_id)

    # ---------- Users ----------
    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        for user in self.users.all():
            if user.username == username and verify_password(user.password, password):
                return user
        return None

    async def get_users(self) -> list[User]:
        # admin accounts are not listed
        return [u for u in self.users.all() if u.role != "admin"]

    async def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def add_user(self, username: str, password: str, name: str, role: str) -> User:
        user = User(
            id=self.users.next_id(),
            username=username,
            password=hash_password(password),
            name=name,
            role=role,
            created_at=self.clock(),
        )
        return self.users.append(user)

    async def update_user(self, user_id: str, **changes: Any) -> Optional[User]:
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])
        return self.users.update(user_id, changes)

    async def delete_user(self, user_id: str) -> Optional[User]:
        return self.users.delete(user_id)

    # ---------- Dashboard ----------
    async def get_dashboard_data(self) -> DashboardData:
        return build_dashboard(
            clients=self.clients.all(),
            resellers=self.resellers.all(),
            products=self.products.all(),
            sales=self.sales.all(),
            expenses=self.expenses.all(),
            now=local_naive(self.clock()),
        )
