from __future__ import annotations

from typing import Any

from bsm.domain.dashboard import LOW_STOCK_THRESHOLD
from bsm.domain.errors import ValidationError, NotFoundError
from bsm.domain.models import Product


def _check_product_fields(fields: dict[str, Any]) -> None:
    if "name" in fields and not (fields["name"] or "").strip():
        raise ValidationError("Name is required.")
    if "quantity" in fields and int(fields["quantity"]) < 0:
        raise ValidationError("Quantity must be >= 0.")
    if "cost_price" in fields and float(fields["cost_price"]) < 0:
        raise ValidationError("Cost must be >= 0.")
    if "unit_price" in fields and float(fields["unit_price"]) <= 0:
        raise ValidationError("Price must be > 0.")


class InventoryService:
    def __init__(self, provider):
        self.provider = provider

    async def list_products(self) -> list[Product]:
        return await self.provider.get_products()

    async def low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
        return [p for p in await self.provider.get_products() if p.quantity < threshold]

    async def get_product(self, product_id: str) -> Product:
        p = await self.provider.get_product(product_id)
        if not p:
            raise NotFoundError("Product not found.")
        return p

    async def add_product(self, name: str, quantity: int, unit_price: float, cost_price: float) -> Product:
        _check_product_fields({"name": name, "quantity": quantity, "unit_price": unit_price, "cost_price": cost_price})
        return await self.provider.add_product(name.strip(), int(quantity), float(unit_price), float(cost_price))

    async def update_product(self, product_id: str, **changes: Any) -> Product:
        _check_product_fields(changes)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        updated = await self.provider.update_product(product_id, **changes)
        if not updated:
            raise NotFoundError("Product not found.")
        return updated

    async def delete_product(self, product_id: str) -> Product:
        removed = await self.provider.delete_product(product_id)
        if not removed:
            raise NotFoundError("Product not found.")
        return removed
