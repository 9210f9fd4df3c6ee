from __future__ import annotations

from datetime import date
from typing import Any

from bsm.domain.errors import NotFoundError, ValidationError
from bsm.domain.models import Client, Reseller


def _require_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required.")
    return name


def _check_commission(commission: float) -> float:
    value = float(commission)
    if not 0 <= value <= 100:
        raise ValidationError("Commission must be between 0 and 100.")
    return value


class DirectoryService:
    """Clients and resellers."""

    def __init__(self, provider):
        self.provider = provider

    # ---------- Clients ----------
    async def list_clients(self) -> list[Client]:
        return await self.provider.get_clients()

    async def add_client(self, name: str, phone: str, payment_date: date | None = None) -> Client:
        return await self.provider.add_client(_require_name(name), (phone or "").strip(), payment_date)

    async def update_client(self, client_id: str, **changes: Any) -> Client:
        if "name" in changes:
            changes["name"] = _require_name(changes["name"])
        updated = await self.provider.update_client(client_id, **changes)
        if not updated:
            raise NotFoundError("Client not found.")
        return updated

    async def delete_client(self, client_id: str) -> Client:
        removed = await self.provider.delete_client(client_id)
        if not removed:
            raise NotFoundError("Client not found.")
        return removed

    # ---------- Resellers ----------
    async def list_resellers(self) -> list[Reseller]:
        return await self.provider.get_resellers()

    async def add_reseller(self, name: str, phone: str, commission: float) -> Reseller:
        return await self.provider.add_reseller(_require_name(name), (phone or "").strip(), _check_commission(commission))

    async def update_reseller(self, reseller_id: str, **changes: Any) -> Reseller:
        if "name" in changes:
            changes["name"] = _require_name(changes["name"])
        if "commission" in changes:
            changes["commission"] = _check_commission(changes["commission"])
        updated = await self.provider.update_reseller(reseller_id, **changes)
        if not updated:
            raise NotFoundError("Reseller not found.")
        return updated

    async def delete_reseller(self, reseller_id: str) -> Reseller:
        removed = await self.provider.delete_reseller(reseller_id)
        if not removed:
            raise NotFoundError("Reseller not found.")
        return removed
