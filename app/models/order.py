"""
Order Models
"""
from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, ForeignKey, Text, Index, Uuid, func
from sqlalchemy.orm import relationship
import enum

from app.core import Base
from .base import UUIDMixin


class CheckoutStatus(str, enum.Enum):
    DRAFT = "draft"             # Customer is building the order
    CONFIRMED = "confirmed"     # Paid / finalized
    CANCELLED = "cancelled"


class ProductionStage(str, enum.Enum):
    ORDER_AT_SHOP = "order_at_shop"
    SENT_TO_WORKSHOP = "sent_to_workshop"
    ORDER_AT_WORKSHOP = "order_at_workshop"
    BROVA_AND_FINAL_DISPATCHED_TO_SHOP = "brova_and_final_dispatched_to_shop"
    FINAL_DISPATCHED_TO_SHOP = "final_dispatched_to_shop"
    BROVA_AT_SHOP = "brova_at_shop"
    BROVA_ACCEPTED = "brova_accepted"
    BROVA_ALTERATION = "brova_alteration"
    BROVA_REPAIR_AND_PRODUCTION = "brova_repair_and_production"
    BROVA_ALTERATION_AND_PRODUCTION = "brova_alteration_and_production"
    FINAL_AT_SHOP = "final_at_shop"
    BROVA_AND_FINAL_AT_SHOP = "brova_and_final_at_shop"
    ORDER_COLLECTED = "order_collected"
    ORDER_DELIVERED = "order_delivered"
    WAITING_CUT = "waiting_cut"
    SOAKING = "soaking"
    REDO = "redo"


class OrderType(str, enum.Enum):
    WORK = "WORK"
    SALES = "SALES"


class PaymentType(str, enum.Enum):
    KNET = "knet"
    CASH = "cash"
    LINK_PAYMENT = "link_payment"
    INSTALLMENTS = "installments"
    OTHERS = "others"


class DiscountType(str, enum.Enum):
    FLAT = "flat"
    REFERRAL = "referral"
    LOYALTY = "loyalty"
    BY_VALUE = "by_value"


class FabricSource(str, enum.Enum):
    IN = "IN"     # Drawn from shop stock
    OUT = "OUT"   # Supplied by the customer


class Order(Base):
    """Order (Fatoura once confirmed)"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Sequential customer-facing number, assigned on confirmation
    invoice_number = Column(Integer)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"))
    order_taker_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"))

    # Primary order of the link group this order belongs to
    linked_order_id = Column(Integer, ForeignKey("orders.id"))

    # Dates
    order_date = Column(DateTime, server_default=func.now())
    delivery_date = Column(DateTime)
    linked_date = Column(DateTime)
    unlinked_date = Column(DateTime)

    # Reminders
    r1_date = Column(DateTime)
    r2_date = Column(DateTime)
    r3_date = Column(DateTime)
    call_reminder_date = Column(DateTime)
    escalation_date = Column(DateTime)
    r1_notes = Column(Text)
    r2_notes = Column(Text)
    r3_notes = Column(Text)
    call_notes = Column(Text)
    escalation_notes = Column(Text)
    call_status = Column(String(50))

    # State
    checkout_status = Column(String(20), default=CheckoutStatus.DRAFT.value, nullable=False, index=True)
    production_stage = Column(String(50))
    order_type = Column(String(10), default=OrderType.WORK.value, nullable=False)

    # Payment
    payment_type = Column(String(20))  # knet, cash, link_payment, installments, others
    payment_ref_no = Column(String(100))
    payment_note = Column(Text)
    discount_type = Column(String(20))  # flat, referral, loyalty, by_value
    discount_value = Column(Numeric(10, 3))
    discount_percentage = Column(Numeric(5, 2))
    referral_code = Column(String(50))
    paid = Column(Numeric(10, 3))
    advance = Column(Numeric(10, 3))
    stitching_price = Column(Numeric(10, 3))  # Selected stitching tier

    # Charges & totals
    fabric_charge = Column(Numeric(10, 3), default=0)
    stitching_charge = Column(Numeric(10, 3), default=0)
    style_charge = Column(Numeric(10, 3), default=0)
    delivery_charge = Column(Numeric(10, 3), default=0)
    shelf_charge = Column(Numeric(10, 3), default=0)
    order_total = Column(Numeric(10, 3), default=0)

    # Meta
    num_of_fabrics = Column(Integer)
    home_delivery = Column(Boolean, default=False)
    notes = Column(Text)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    campaign = relationship("Campaign")
    order_taker = relationship("AppUser")
    garments = relationship("Garment", back_populates="order", cascade="all, delete-orphan", order_by="Garment.sequence")
    shelf_items = relationship("OrderShelfItem", back_populates="order", cascade="all, delete-orphan")
    linked_order = relationship("Order", remote_side="Order.id", back_populates="child_orders")
    child_orders = relationship("Order", back_populates="linked_order")

    __table_args__ = (
        Index("orders_invoice_idx", invoice_number, unique=True),
        Index("orders_customer_idx", customer_id),
        Index("orders_date_idx", order_date),
        Index("orders_linked_idx", linked_order_id),
    )


class Garment(Base, UUIDMixin):
    """Garment (order line item)"""
    __tablename__ = "garments"

    garment_id = Column(String(30))  # e.g. 12-1, 12-2
    sequence = Column(Integer)  # Position within the order, the number after the dash

    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    fabric_id = Column(Integer, ForeignKey("fabrics.id"))
    style_id = Column(Integer, ForeignKey("styles.id"))
    style = Column(String(50), default="kuwaiti")
    measurement_id = Column(Uuid(as_uuid=True), ForeignKey("measurements.id"))

    # Line details
    fabric_source = Column(String(5))  # IN, OUT
    color = Column(String(50))
    shop_name = Column(String(100))
    home_delivery = Column(Boolean, default=False)
    quantity = Column(Integer, default=1)
    fabric_length = Column(Numeric(5, 2))

    # Price snapshots at save time
    fabric_price_snapshot = Column(Numeric(10, 3))
    stitching_price_snapshot = Column(Numeric(10, 3))
    style_price_snapshot = Column(Numeric(10, 3))

    # Style options
    collar_type = Column(String(50))
    collar_button = Column(String(50))
    cuffs_type = Column(String(50))
    cuffs_thickness = Column(String(50))
    front_pocket_type = Column(String(50))
    front_pocket_thickness = Column(String(50))
    wallet_pocket = Column(Boolean, default=False)
    pen_holder = Column(Boolean, default=False)
    small_tabaggi = Column(Boolean, default=False)
    jabzour_1 = Column(String(50))
    jabzour_2 = Column(String(50))
    jabzour_thickness = Column(String(50))
    lines = Column(Integer, default=1)

    notes = Column(Text)
    express = Column(Boolean, default=False)
    brova = Column(Boolean, default=False)
    delivery_date = Column(DateTime)
    piece_stage = Column(String(50))

    # Relationships
    order = relationship("Order", back_populates="garments")
    fabric = relationship("Fabric")
    style_ref = relationship("Style")
    measurement = relationship("Measurement", back_populates="garments")


class OrderShelfItem(Base):
    """Pre-made shelf product attached to an order"""
    __tablename__ = "order_shelf_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    shelf_id = Column(Integer, ForeignKey("shelf.id"), nullable=False)
    quantity = Column(Integer, default=1)
    unit_price = Column(Numeric(10, 3))

    # Relationships
    order = relationship("Order", back_populates="shelf_items")
    shelf = relationship("ShelfProduct")
