# Overview: Models package exports.

from .storage import StorageEntry
from .auth import Session, User
from .environments import ENVIRONMENT_TYPES, Environment, environment_type_label
from .activities import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES, Activity
from .inventory import (
    MOVEMENT_TYPES,
    PRODUCT_CATEGORIES,
    STOCK_LOW,
    STOCK_OK,
    STOCK_OUT,
    InventoryMovement,
    Product,
)
from .sales import PAYMENT_METHODS, Sale, SaleItem

__all__ = [
    "StorageEntry",
    "User",
    "Session",
    "Environment",
    "ENVIRONMENT_TYPES",
    "environment_type_label",
    "Activity",
    "MIN_DURATION_MINUTES",
    "MAX_DURATION_MINUTES",
    "Product",
    "InventoryMovement",
    "PRODUCT_CATEGORIES",
    "MOVEMENT_TYPES",
    "STOCK_OUT",
    "STOCK_LOW",
    "STOCK_OK",
    "Sale",
    "SaleItem",
    "PAYMENT_METHODS",
]
