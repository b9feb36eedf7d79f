from .base import UUIDMixin
from .master import AppUser, UserRole
from .customer import Customer, AccountType
from .catalog import Fabric, Style, ShelfProduct, Price, Campaign
from .measurement import Measurement, MeasurementType, DIMENSION_FIELDS, PROVISION_FIELDS
from .order import (
    Order, Garment, OrderShelfItem,
    CheckoutStatus, ProductionStage, OrderType, PaymentType, DiscountType, FabricSource,
)
from .audit import AuditLog

__all__ = [
    # Base
    "UUIDMixin",
    # Master
    "AppUser", "UserRole",
    # Customer
    "Customer", "AccountType",
    # Catalog
    "Fabric", "Style", "ShelfProduct", "Price", "Campaign",
    # Measurement
    "Measurement", "MeasurementType", "DIMENSION_FIELDS", "PROVISION_FIELDS",
    # Order
    "Order", "Garment", "OrderShelfItem",
    "CheckoutStatus", "ProductionStage", "OrderType", "PaymentType", "DiscountType", "FabricSource",
    # Audit
    "AuditLog",
]
