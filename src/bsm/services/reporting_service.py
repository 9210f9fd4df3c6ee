from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Mapping, Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from bsm.domain.dashboard import LOW_STOCK_THRESHOLD, DashboardData
from bsm.domain.errors import ValidationError
from bsm.domain.models import local_naive

log = logging.getLogger(__name__)

REPORT_TYPES = ("clients", "products", "sales", "expenses", "inventory")
REPORT_FORMATS = {"pdf": "pdf", "excel": "xlsx"}


def serialize_filters(filters: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Query-string form of report filters; dates become ISO strings, empty values are dropped."""
    out: dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, (datetime, date)):
            out[key] = value.isoformat()
        else:
            out[key] = str(value)
    return out


def default_report_filename(report_type: str, fmt: str, now: datetime | None = None) -> str:
    ts = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"report-{report_type}-{ts}.{REPORT_FORMATS[fmt]}"


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return local_naive(datetime.fromisoformat(str(value)))


def _in_window(moment: datetime, filters: Mapping[str, Any]) -> bool:
    start = _as_datetime(filters.get("start_date"))
    if start and moment < start:
        return False
    raw_end = filters.get("end_date")
    if raw_end is None:
        return True
    if isinstance(raw_end, str) and len(raw_end.strip()) == 10:
        raw_end = date.fromisoformat(raw_end.strip())
    if isinstance(raw_end, date) and not isinstance(raw_end, datetime):
        # a bare date includes the whole day
        return moment < _as_datetime(raw_end) + timedelta(days=1)
    return moment <= _as_datetime(raw_end)


def _in_amount_range(amount: float, filters: Mapping[str, Any]) -> bool:
    lo = filters.get("min_amount")
    hi = filters.get("max_amount")
    if lo is not None and amount < float(lo):
        return False
    if hi is not None and amount > float(hi):
        return False
    return True


class ReportingService:
    def __init__(self, provider):
        self.provider = provider

    async def dashboard(self) -> DashboardData:
        return await self.provider.get_dashboard_data()

    async def export_report(
        self,
        report_type: str,
        fmt: str,
        target: Path | str,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Path:
        """
        Writes the report to ``target`` (a file, or a directory that gets a
        timestamped file name) and returns the written path.

        With a remote provider the server renders the file; on the local
        store only Excel is available.
        """
        if report_type not in REPORT_TYPES:
            raise ValidationError(f"Unknown report type: {report_type}")
        if fmt not in REPORT_FORMATS:
            raise ValidationError(f"Unknown report format: {fmt}")

        path = Path(target)
        if path.is_dir():
            path = path / default_report_filename(report_type, fmt)

        remote = getattr(self.provider, f"export_{fmt}_report", None)
        if remote is not None:
            payload = await remote(report_type, serialize_filters(filters))
            path.write_bytes(payload)
        elif fmt == "excel":
            await self._export_excel_locally(report_type, path, dict(filters or {}))
        else:
            raise ValidationError("PDF reports are only available when connected to the HTTP API.")

        log.info("report_exported type=%s format=%s path=%s", report_type, fmt, path)
        return path

    async def _export_excel_locally(self, report_type: str, path: Path, filters: dict[str, Any]) -> None:
        wb = Workbook()
        ws = wb.active

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(name: str, end_col: int):
            if ws.max_row < 2:
                return
            ref = f"A1:{get_column_letter(end_col)}{ws.max_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        if report_type == "clients":
            ws.title = "Clients"
            ws.append(["ID", "Name", "Phone", "Payment Date", "Created At"])
            for c in await self.provider.get_clients():
                ws.append([
                    c.id, c.name, c.phone,
                    c.payment_date.isoformat() if c.payment_date else "",
                    c.created_at.isoformat(sep=" ", timespec="seconds"),
                ])
            set_widths({"A": 8, "B": 30, "C": 20, "D": 14, "E": 22})
            money_cols: list[str] = []
            end_col = 5

        elif report_type == "products":
            ws.title = "Products"
            ws.append(["ID", "Name", "Quantity", "Unit Price", "Cost Price"])
            for p in await self.provider.get_products():
                ws.append([p.id, p.name, int(p.quantity), float(p.unit_price), float(p.cost_price)])
            set_widths({"A": 8, "B": 30, "C": 10, "D": 14, "E": 14})
            money_cols = ["D", "E"]
            end_col = 5

        elif report_type == "inventory":
            ws.title = "Inventory"
            ws.append(["ID", "Name", "Quantity", "Cost Price", "Stock Value", "Low Stock"])
            for p in await self.provider.get_products():
                ws.append([
                    p.id, p.name, int(p.quantity), float(p.cost_price),
                    float(p.quantity * p.cost_price),
                    "yes" if p.quantity < LOW_STOCK_THRESHOLD else "no",
                ])
            set_widths({"A": 8, "B": 30, "C": 10, "D": 14, "E": 14, "F": 10})
            money_cols = ["D", "E"]
            end_col = 6

        elif report_type == "sales":
            ws.title = "Sales"
            ws.append(["Sale ID", "Date", "Client", "Reseller", "Product", "Qty", "Unit Price", "Line Total"])
            for s in await self.provider.get_sales():
                if not _in_window(s.date, filters) or not _in_amount_range(s.total_amount, filters):
                    continue
                if filters.get("client_id") and s.client_id != str(filters["client_id"]):
                    continue
                if filters.get("reseller_id") and s.reseller_id != str(filters["reseller_id"]):
                    continue
                for it in s.items:
                    ws.append([
                        s.id, s.date.isoformat(sep=" ", timespec="seconds"),
                        s.client_name, s.reseller_name, it.product_name,
                        int(it.quantity), float(it.unit_price), float(it.line_total),
                    ])
            set_widths({"A": 10, "B": 22, "C": 24, "D": 24, "E": 30, "F": 6, "G": 14, "H": 14})
            money_cols = ["G", "H"]
            end_col = 8

        else:
            ws.title = "Expenses"
            ws.append(["ID", "Date", "Item", "Qty", "Unit Cost", "Total Cost"])
            for e in await self.provider.get_expenses():
                if not _in_window(e.date, filters) or not _in_amount_range(e.total_cost, filters):
                    continue
                ws.append([
                    e.id, e.date.isoformat(sep=" ", timespec="seconds"), e.item_name,
                    e.quantity, float(e.unit_cost), float(e.total_cost),
                ])
            set_widths({"A": 8, "B": 22, "C": 30, "D": 8, "E": 14, "F": 14})
            money_cols = ["E", "F"]
            end_col = 6

        bold_row(1)
        for row in range(2, ws.max_row + 1):
            for col in money_cols:
                money(ws[f"{col}{row}"])
        ws.freeze_panes = "A2"
        add_table(f"{ws.title}Report", end_col)

        wb.save(path)
