from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import logging
from bsm.domain.errors import ValidationError
from bsm.domain.models import Sale, whole_quantity
from bsm.repositories.contracts import DataProvider

log = logging.getLogger("bsm.sales")


class SalesService:
    def __init__(self, provider: DataProvider):
        self.provider = provider

    async def create_sale(
        self,
        client_id: str,
        reseller_id: str,
        items: Iterable[Mapping[str, Any]],
        date: datetime | None = None,
    ) -> Sale:
        """
        items: [{product_id, quantity, unit_price?}]
        """
        items = list(items)
        if not items:
            raise ValidationError("Cart is empty.")
        if not client_id or not reseller_id:
            raise ValidationError("Client and reseller are required.")

        for it in items:
            if it.get("product_id") is None or it.get("quantity") is None:
                raise ValidationError("Each sale line needs product_id and quantity.")
            if whole_quantity(it["quantity"]) <= 0:
                raise ValidationError("Quantity must be >= 1.")
            unit_price = it.get("unit_price")
            if unit_price is not None and float(unit_price) <= 0:
                raise ValidationError("Unit price must be > 0.")

        sale = await self.provider.add_sale(client_id, reseller_id, items, date)
        log.info(
            "sale_created sale_id=%s items=%s total=%.2f client=%s reseller=%s",
            sale.id,
            len(sale.items),
            sale.total_amount,
            sale.client_id,
            sale.reseller_id,
        )
        return sale

    async def list_sales(self) -> list[Sale]:
        return await self.provider.get_sales()

    async def get_sale(self, sale_id: str) -> Optional[Sale]:
        return await self.provider.get_sale(sale_id)
