from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional

import requests

from bsm.config import DEFAULT_API_URL, PreferenceStore
from bsm.domain.dashboard import DashboardData
from bsm.domain.errors import RemoteProviderError, SessionExpiredError
from bsm.domain.models import Client, Expense, Product, Reseller, Sale, User
from bsm.repositories import serialization as wire

log = logging.getLogger("bsm.http")

TOKEN_KEY = "auth_token"
LOGIN_REJECTED = {400, 401, 403, 404}


class HttpProvider:
    """
    Data provider backed by a remote REST API.

    Each operation is a single request against ``{api_url}/{resource}``.
    requests is blocking, so calls are pushed to a worker thread and the
    event loop only waits on the round-trip.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        preferences: PreferenceStore | None = None,
        session: requests.Session | None = None,
        timeout: float = 10,
    ):
        self.api_url = api_url.rstrip("/")
        self.preferences = preferences
        self.session = session or requests.Session()
        self.timeout = timeout
        self.auth_token: str | None = preferences.get(TOKEN_KEY) if preferences else None

    def set_auth_token(self, token: str | None) -> None:
        self.auth_token = token
        if self.preferences is None:
            return
        if token:
            self.preferences.set(TOKEN_KEY, token)
        else:
            self.preferences.remove(TOKEN_KEY)

    def _headers(self, accept: str = "application/json") -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": accept}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        fallback = f"API responded with status: {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return str(body.get("message") or body.get("title") or fallback)
        return fallback

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: Any = None,
        params: Mapping[str, str] | None = None,
        accept: str = "application/json",
    ) -> requests.Response:
        url = f"{self.api_url}/{endpoint}"
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                params=params,
                headers=self._headers(accept),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error("http_request_failed endpoint=%s error=%s", endpoint, e)
            raise RemoteProviderError(f"Could not reach API at {url}: {e}") from e

        if response.status_code == 401:
            self.set_auth_token(None)
            log.warning("http_session_expired endpoint=%s", endpoint)
            raise SessionExpiredError("Session expired. Please log in again.", status=401)

        if not response.ok:
            message = self._error_message(response)
            log.error("http_request_failed endpoint=%s status=%s error=%s", endpoint, response.status_code, message)
            raise RemoteProviderError(message, status=response.status_code)

        return response

    def _fetch_json(self, method: str, endpoint: str, payload: Any = None) -> Any:
        response = self._request(method, endpoint, payload)
        if not response.content:
            return None
        return response.json()

    async def _call(self, method: str, endpoint: str, payload: Any = None) -> Any:
        return await asyncio.to_thread(self._fetch_json, method, endpoint, payload)

    async def _call_optional(self, method: str, endpoint: str, payload: Any = None) -> Any:
        try:
            return await self._call(method, endpoint, payload)
        except RemoteProviderError as e:
            if e.status == 404:
                return None
            raise

    async def _list(self, resource: str, decode: Callable[[Mapping[str, Any]], Any]) -> list:
        data = await self._call("GET", resource)
        return [decode(row) for row in data or []]

    async def _one(self, method: str, endpoint: str, decode: Callable, payload: Any = None):
        data = await self._call_optional(method, endpoint, payload)
        return decode(data) if data else None

    # ---------- Clients ----------
    async def get_clients(self) -> list[Client]:
        return await self._list("clients", wire.client_from_payload)

    async def get_client(self, client_id: str) -> Optional[Client]:
        return await self._one("GET", f"clients/{client_id}", wire.client_from_payload)

    async def add_client(self, name: str, phone: str, payment_date: date | None = None) -> Client:
        payload = wire.to_payload({"name": name, "phone": phone, "payment_date": payment_date})
        return wire.client_from_payload(await self._call("POST", "clients", payload))

    async def update_client(self, client_id: str, **changes: Any) -> Optional[Client]:
        return await self._one("PUT", f"clients/{client_id}", wire.client_from_payload, wire.to_payload(changes))

    async def delete_client(self, client_id: str) -> Optional[Client]:
        return await self._one("DELETE", f"clients/{client_id}", wire.client_from_payload)

    # ---------- Resellers ----------
    async def get_resellers(self) -> list[Reseller]:
        return await self._list("resellers", wire.reseller_from_payload)

    async def get_reseller(self, reseller_id: str) -> Optional[Reseller]:
        return await self._one("GET", f"resellers/{reseller_id}", wire.reseller_from_payload)

    async def add_reseller(self, name: str, phone: str, commission: float) -> Reseller:
        payload = wire.to_payload({"name": name, "phone": phone, "commission": commission})
        return wire.reseller_from_payload(await self._call("POST", "resellers", payload))

    async def update_reseller(self, reseller_id: str, **changes: Any) -> Optional[Reseller]:
        return await self._one("PUT", f"resellers/{reseller_id}", wire.reseller_from_payload, wire.to_payload(changes))

    async def delete_reseller(self, reseller_id: str) -> Optional[Reseller]:
        return await self._one("DELETE", f"resellers/{reseller_id}", wire.reseller_from_payload)

    # ---------- Products ----------
    async def get_products(self) -> list[Product]:
        return await self._list("products", wire.product_from_payload)

    async def get_product(self, product_id: str) -> Optional[Product]:
        return await self._one("GET", f"products/{product_id}", wire.product_from_payload)

    async def add_product(self, name: str, quantity: int, unit_price: float, cost_price: float) -> Product:
        payload = wire.to_payload(
            {"name": name, "quantity": quantity, "unit_price": unit_price, "cost_price": cost_price}
        )
        return wire.product_from_payload(await self._call("POST", "products", payload))

    async def update_product(self, product_id: str, **changes: Any) -> Optional[Product]:
        return await self._one("PUT", f"products/{product_id}", wire.product_from_payload, wire.to_payload(changes))

    async def delete_product(self, product_id: str) -> Optional[Product]:
        return await self._one("DELETE", f"products/{product_id}", wire.product_from_payload)

    # ---------- Sales ----------
    async def get_sales(self) -> list[Sale]:
        return await self._list("sales", wire.sale_from_payload)

    async def get_sale(self, sale_id: str) -> Optional[Sale]:
        return await self._one("GET", f"sales/{sale_id}", wire.sale_from_payload)

    async def add_sale(
        self,
        client_id: str,
        reseller_id: str,
        items: Iterable[Mapping[str, Any]],
        date: datetime | None = None,
    ) -> Sale:
        lines = [{k: v for k, v in it.items() if v is not None} for it in items]
        payload = wire.to_payload(
            {"client_id": client_id, "reseller_id": reseller_id, "items": lines, "date": date or datetime.now()}
        )
        return wire.sale_from_payload(await self._call("POST", "sales", payload))

    # ---------- Expenses ----------
    async def get_expenses(self) -> list[Expense]:
        return await self._list("expenses", wire.expense_from_payload)

    async def get_expense(self, expense_id: str) -> Optional[Expense]:
        return await self._one("GET", f"expenses/{expense_id}", wire.expense_from_payload)

    async def add_expense(
        self, item_name: str, quantity: float, unit_cost: float, total_cost: float, date: datetime | None = None
    ) -> Expense:
        payload = wire.to_payload(
            {
                "item_name": item_name,
                "quantity": quantity,
                "unit_cost": unit_cost,
                "total_cost": total_cost,
                "date": date or datetime.now(),
            }
        )
        return wire.expense_from_payload(await self._call("POST", "expenses", payload))

    async def update_expense(self, expense_id: str, **changes: Any) -> Optional[Expense]:
        return await self._one("PUT", f"expenses/{expense_id}", wire.expense_from_payload, wire.to_payload(changes))

    async def delete_expense(self, expense_id: str) -> Optional[Expense]:
        return await self._one("DELETE", f"expenses/{expense_id}", wire.expense_from_payload)

    # ---------- Users ----------
    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        try:
            data = await self._call("POST", "auth/login", {"username": username, "password": password})
        except RemoteProviderError as e:
            if e.status in LOGIN_REJECTED:
                return None
            raise
        if not data or not data.get("user"):
            return None
        if data.get("token"):
            self.set_auth_token(data["token"])
        return wire.user_from_payload(data["user"])

    async def get_users(self) -> list[User]:
        return await self._list("users", wire.user_from_payload)

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self._one("GET", f"users/{user_id}", wire.user_from_payload)

    async def add_user(self, username: str, password: str, name: str, role: str) -> User:
        payload = {"username": username, "password": password, "name": name, "role": role}
        return wire.user_from_payload(await self._call("POST", "users", payload))

    async def update_user(self, user_id: str, **changes: Any) -> Optional[User]:
        return await self._one("PUT", f"users/{user_id}", wire.user_from_payload, wire.to_payload(changes))

    async def delete_user(self, user_id: str) -> Optional[User]:
        return await self._one("DELETE", f"users/{user_id}", wire.user_from_payload)

    # ---------- Dashboard ----------
    async def get_dashboard_data(self) -> DashboardData:
        return wire.dashboard_from_payload(await self._call("GET", "dashboard"))

    # ---------- Reports ----------
    def _export(self, report_type: str, fmt: str, filters: Mapping[str, str] | None) -> bytes:
        params = {wire.camel(key): value for key, value in (filters or {}).items()}
        response = self._request("GET", f"reports/{report_type}/{fmt}", params=params, accept="*/*")
        return response.content

    async def export_pdf_report(self, report_type: str, filters: Mapping[str, str] | None = None) -> bytes:
        return await asyncio.to_thread(self._export, report_type, "pdf", filters)

    async def export_excel_report(self, report_type: str, filters: Mapping[str, str] | None = None) -> bytes:
        return await asyncio.to_thread(self._export, report_type, "excel", filters)
