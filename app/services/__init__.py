# Services Package
from .catalog_service import CatalogService
from .pricing_service import PricingService, PricingContext
from .customer_service import CustomerService
from .measurement_service import MeasurementService, apply_provisions
from .stock_service import StockService
from .order_service import OrderService
from .link_service import LinkService
from .showroom_service import ShowroomService

__all__ = [
    "CatalogService",
    "PricingService",
    "PricingContext",
    "CustomerService",
    "MeasurementService",
    "apply_provisions",
    "StockService",
    "OrderService",
    "LinkService",
    "ShowroomService",
]
