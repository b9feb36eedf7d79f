"""
Work Order Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal

class GarmentInput(BaseModel):
    """One row of the fabric/style selection table.

    Row-level business rules (required measurement, fabric source, etc.) are
    checked by the service so that every row's errors can be reported together.
    """
    id: Optional[UUID] = None
    garment_id: Optional[str] = None

    measurement_id: Optional[UUID] = None
    fabric_source: Optional[str] = None  # IN, OUT
    fabric_id: Optional[int] = None
    style_id: Optional[int] = None
    style: str = "kuwaiti"
    color: Optional[str] = None
    shop_name: Optional[str] = None
    home_delivery: bool = False
    quantity: int = Field(1, ge=1)
    fabric_length: Optional[Decimal] = None

    collar_type: Optional[str] = None
    collar_button: Optional[str] = None
    cuffs_type: Optional[str] = None
    cuffs_thickness: Optional[str] = None
    front_pocket_type: Optional[str] = None
    front_pocket_thickness: Optional[str] = None
    wallet_pocket: bool = False
    pen_holder: bool = False
    small_tabaggi: bool = False
    jabzour_1: Optional[str] = None
    jabzour_2: Optional[str] = None
    jabzour_thickness: Optional[str] = None
    lines: int = Field(1, ge=1, le=2)

    notes: Optional[str] = None
    express: bool = False
    brova: bool = False
    delivery_date: Optional[datetime] = None

class ShelfItemInput(BaseModel):
    shelf_id: int
    quantity: int = Field(1, ge=1)
    unit_price: Optional[Decimal] = None  # Defaults to the shelf price

class GarmentBatch(BaseModel):
    garments: List[GarmentInput] = []
    stitching_price: Optional[Decimal] = None
    home_delivery: Optional[bool] = None

class ShelfBatch(BaseModel):
    items: List[ShelfItemInput] = []

class OrderCreate(BaseModel):
    customer_id: int
    order_taker_id: Optional[UUID] = None
    campaign_id: Optional[int] = None
    notes: Optional[str] = None

class OrderUpdate(BaseModel):
    customer_id: Optional[int] = None
    campaign_id: Optional[int] = None
    order_taker_id: Optional[UUID] = None
    delivery_date: Optional[datetime] = None
    home_delivery: Optional[bool] = None
    num_of_fabrics: Optional[int] = None
    stitching_price: Optional[Decimal] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    referral_code: Optional[str] = None
    advance: Optional[Decimal] = None
    notes: Optional[str] = None

class CheckoutRequest(BaseModel):
    payment_type: Optional[str] = None  # knet, cash, link_payment, installments, others
    payment_ref_no: Optional[str] = None
    payment_note: Optional[str] = None
    paid: Optional[Decimal] = None
    advance: Optional[Decimal] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    referral_code: Optional[str] = None
    delivery_date: Optional[datetime] = None

class SalesOrderCreate(CheckoutRequest):
    """Shelf-only order created and paid in one step"""
    customer_id: int
    items: List[ShelfItemInput] = []
    order_taker_id: Optional[UUID] = None
    notes: Optional[str] = None

class TotalsPreviewRequest(BaseModel):
    garments: List[GarmentInput] = []
    shelf_items: List[ShelfItemInput] = []
    stitching_price: Optional[Decimal] = None
    home_delivery: bool = False
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None

class ReminderUpdate(BaseModel):
    kind: str  # r1, r2, r3, call, escalation
    date: Optional[datetime] = None
    notes: Optional[str] = None
    call_status: Optional[str] = None

class StageUpdate(BaseModel):
    production_stage: str

class StartOrderRequest(BaseModel):
    customer_id: int
    force_new: bool = False
    order_taker_id: Optional[UUID] = None
