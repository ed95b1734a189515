# Overview: Application service container; built once per app by create_app().

"""
Service container.

WHY: Page controllers never construct their own services or reach for a
module-level singleton. create_app() builds one AppServices per Flask app
and stores it in app.extensions["agraria"]; routes and CLI commands fetch it
with get_services().
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from flask import current_app

from .models import Activity, InventoryMovement, Product, Sale
from .services import seed_service
from .services.activity_service import ActivityService
from .services.auth_service import AuthService, UserRepository
from .services.dashboard_service import DashboardService
from .services.environment_service import EnvironmentRepository, EnvironmentService
from .services.inventory_service import InventoryService
from .services.recovery_service import PasswordRecovery
from .services.reporting_service import ReportingService
from .services.sales_service import SalesService
from .services.session_service import SessionStore
from .services.storage_service import (
    ACTIVITIES_KEY,
    LEGACY_PRODUCTS_KEY,
    LEGACY_SALES_KEY,
    MOVEMENTS_KEY,
    PRODUCTS_KEY,
    SALES_KEY,
    Collection,
    KeyValueStore,
)
from .services.user_service import UserService


EXTENSION_KEY = "agraria"


@dataclass
class AppServices:
    store: KeyValueStore
    users: UserRepository
    sessions: SessionStore
    environments: EnvironmentRepository
    activities: Collection[Activity]
    products: Collection[Product]
    movements: Collection[InventoryMovement]
    sales: Collection[Sale]
    legacy_sales: Collection[Sale]

    auth: AuthService
    user_service: UserService
    environment_service: EnvironmentService
    activity_service: ActivityService
    inventory_service: InventoryService
    sales_service: SalesService
    reporting_service: ReportingService
    dashboard_service: DashboardService

    def recovery(self, state: dict | None = None) -> PasswordRecovery:
        """A password recovery flow, fresh or restored from a client's saved state."""
        return PasswordRecovery.from_dict(self.users, state)

    def collections(self) -> list[Collection]:
        return [
            self.users,
            self.environments,
            self.activities,
            self.products,
            self.movements,
            self.sales,
        ]


def build_services(config) -> AppServices:
    store = KeyValueStore()

    users = UserRepository(store, seed=seed_service.default_users, bcrypt_rounds=int(config["BCRYPT_ROUNDS"]))
    sessions = SessionStore()
    environments = EnvironmentRepository(store, users, seed=seed_service.default_environments)
    activities = Collection(store, ACTIVITIES_KEY, Activity, seed=seed_service.default_activities)
    products = Collection(
        store,
        PRODUCTS_KEY,
        Product,
        seed=seed_service.default_products,
        fallback_keys=[LEGACY_PRODUCTS_KEY],
    )
    movements = Collection(store, MOVEMENTS_KEY, InventoryMovement, seed=seed_service.default_movements)
    sales = Collection(store, SALES_KEY, Sale)
    legacy_sales = Collection(store, LEGACY_SALES_KEY, Sale)

    auth = AuthService(
        users,
        sessions,
        login_delay=float(config["LOGIN_DELAY_SECONDS"]),
        session_max_age=timedelta(hours=int(config["SESSION_MAX_AGE_HOURS"])),
    )
    inventory_service = InventoryService(products, movements)

    return AppServices(
        store=store,
        users=users,
        sessions=sessions,
        environments=environments,
        activities=activities,
        products=products,
        movements=movements,
        sales=sales,
        legacy_sales=legacy_sales,
        auth=auth,
        user_service=UserService(users),
        environment_service=EnvironmentService(environments, users),
        activity_service=ActivityService(activities, environments),
        inventory_service=inventory_service,
        sales_service=SalesService(sales, inventory_service, tax_rate=Decimal(str(config["TAX_RATE"]))),
        reporting_service=ReportingService(activities, sales, legacy_sales),
        dashboard_service=DashboardService(users, environments, activities, sales),
    )


def get_services() -> AppServices:
    return current_app.extensions[EXTENSION_KEY]
