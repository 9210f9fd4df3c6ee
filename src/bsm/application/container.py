from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bsm.application.provider_selector import ProviderSelector
from bsm.config import PreferenceStore
from bsm.repositories.contracts import DataProvider
from bsm.services.auth_service import AuthService
from bsm.services.directory_service import DirectoryService
from bsm.services.expense_service import ExpenseService
from bsm.services.inventory_service import InventoryService
from bsm.services.reporting_service import ReportingService
from bsm.services.sales_service import SalesService


@dataclass(frozen=True)
class AppContainer:
    preferences: PreferenceStore
    selector: ProviderSelector
    provider: DataProvider
    sales: SalesService
    inventory: InventoryService
    directory: DirectoryService
    expenses: ExpenseService
    reporting: ReportingService
    auth: AuthService


def build_container(prefs_path: Path | str, selector: ProviderSelector | None = None) -> AppContainer:
    """Wire services to the active provider.

    Services hold the provider they were built with; after
    ``selector.set_provider(...)`` build a new container.
    """
    selector = selector or ProviderSelector(PreferenceStore(prefs_path))
    preferences = selector.preferences
    provider = selector.get_provider()

    return AppContainer(
        preferences=preferences,
        selector=selector,
        provider=provider,
        sales=SalesService(provider),
        inventory=InventoryService(provider),
        directory=DirectoryService(provider),
        expenses=ExpenseService(provider),
        reporting=ReportingService(provider),
        auth=AuthService(provider),
    )
