# Pydantic Schemas Package
from .customer import CustomerCreate, CustomerUpdate, CustomerResponse, AccountTypeLookup
from .measurement import MeasurementCreate, MeasurementUpdate, MeasurementResponse
from .order import (
    GarmentInput, ShelfItemInput,
    GarmentBatch, ShelfBatch, OrderCreate, OrderUpdate,
    CheckoutRequest, SalesOrderCreate, TotalsPreviewRequest, StartOrderRequest, ReminderUpdate, StageUpdate,
)
from .link import LinkRequest, UnlinkRequest, SelectionRequest
from .catalog import FabricResponse, StyleResponse, ShelfProductResponse, PriceResponse, CampaignResponse

__all__ = [
    "CustomerCreate", "CustomerUpdate", "CustomerResponse", "AccountTypeLookup",
    "MeasurementCreate", "MeasurementUpdate", "MeasurementResponse",
    "GarmentInput", "ShelfItemInput",
    "GarmentBatch", "ShelfBatch", "OrderCreate", "OrderUpdate",
    "CheckoutRequest", "SalesOrderCreate", "TotalsPreviewRequest", "StartOrderRequest", "ReminderUpdate", "StageUpdate",
    "LinkRequest", "UnlinkRequest", "SelectionRequest",
    "FabricResponse", "StyleResponse", "ShelfProductResponse", "PriceResponse", "CampaignResponse",
]
