from __future__ import annotations

import asyncio
import json
import logging

from bsm.application.container import AppContainer, build_container
from bsm.config import get_app_paths
from bsm.logging_config import setup_logging
from bsm.repositories.serialization import to_payload

log = logging.getLogger(__name__)


async def dashboard_summary(container: AppContainer) -> dict:
    data = await container.reporting.dashboard()
    return {
        "provider": container.selector.settings().kind,
        "totalSales": data.total_sales,
        "totalRevenue": round(data.total_revenue, 2),
        "monthlyRevenue": round(data.monthly_revenue, 2),
        "monthlyExpensesTotal": round(data.monthly_expenses_total, 2),
        "monthlyProfit": round(data.monthly_profit, 2),
        "lowStockProducts": [p.name for p in data.low_stock_products],
        "topProducts": to_payload(data.top_products),
        "topResellers": to_payload(data.top_resellers),
    }


def main() -> None:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)

    container = build_container(paths.prefs_path)
    log.info("app_started provider=%s", container.selector.settings().kind)

    summary = asyncio.run(dashboard_summary(container))
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
