"""
Order Draft - State of the work order wizard

Every transition returns a new OrderDraft; nothing here touches the database.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple
from uuid import UUID
from decimal import Decimal

from app.models import CheckoutStatus
from app.schemas.order import GarmentInput, ShelfItemInput
from app.services.pricing_service import PricingService, PricingContext

# Wizard steps
DEMOGRAPHICS = 0
MEASUREMENTS = 1
FABRIC_SELECTION = 2
SHELF_PRODUCTS = 3
REVIEW_PAYMENT = 4

STEP_NAMES = {
    DEMOGRAPHICS: "Demographics",
    MEASUREMENTS: "Measurements",
    FABRIC_SELECTION: "Fabric/Style Selection",
    SHELF_PRODUCTS: "Shelf Products",
    REVIEW_PAYMENT: "Review & Payment",
}

LAST_STEP = REVIEW_PAYMENT


@dataclass(frozen=True)
class OrderDraft:
    order_id: Optional[int] = None
    current_step: int = DEMOGRAPHICS
    saved_steps: Tuple[int, ...] = ()
    customer_id: Optional[int] = None
    customer: Dict = field(default_factory=dict)
    measurement_id: Optional[UUID] = None
    garments: Tuple[GarmentInput, ...] = ()
    shelf_items: Tuple[ShelfItemInput, ...] = ()
    stitching_price: Decimal = Decimal("9")
    order: Dict = field(default_factory=dict)
    checkout_status: str = CheckoutStatus.DRAFT.value

    # Derived by recompute()
    garment_prices: Tuple[Dict, ...] = ()
    totals: Dict = field(default_factory=dict)

    def is_saved(self, step: int) -> bool:
        return step in self.saved_steps


def _check_step(step: int) -> None:
    if step < DEMOGRAPHICS or step > LAST_STEP:
        raise ValueError(f"Invalid wizard step: {step}")


def reset() -> OrderDraft:
    return OrderDraft()


def set_current_step(draft: OrderDraft, step: int) -> OrderDraft:
    _check_step(step)
    return replace(draft, current_step=step)


def add_saved_step(draft: OrderDraft, step: int) -> OrderDraft:
    _check_step(step)
    return replace(draft, saved_steps=tuple(sorted(set(draft.saved_steps) | {step})))


def remove_saved_step(draft: OrderDraft, step: int) -> OrderDraft:
    _check_step(step)
    return replace(draft, saved_steps=tuple(s for s in draft.saved_steps if s != step))


def proceed(draft: OrderDraft, step: int) -> OrderDraft:
    """Mark step saved and move to the next one"""
    draft = add_saved_step(draft, step)
    return set_current_step(draft, min(step + 1, LAST_STEP))


def with_order_id(draft: OrderDraft, order_id: int) -> OrderDraft:
    return replace(draft, order_id=order_id)


def with_customer(draft: OrderDraft, customer_id: int, customer: Optional[Dict] = None) -> OrderDraft:
    return replace(draft, customer_id=customer_id, customer=dict(customer or {}))


def with_measurement(draft: OrderDraft, measurement_id: Optional[UUID]) -> OrderDraft:
    return replace(draft, measurement_id=measurement_id)


def with_garments(draft: OrderDraft, garments) -> OrderDraft:
    return replace(draft, garments=tuple(garments))


def with_shelf_items(draft: OrderDraft, items) -> OrderDraft:
    return replace(draft, shelf_items=tuple(items))


def with_stitching_price(draft: OrderDraft, price) -> OrderDraft:
    return replace(draft, stitching_price=Decimal(str(price)))


def with_order_fields(draft: OrderDraft, **fields) -> OrderDraft:
    merged = dict(draft.order)
    merged.update(fields)
    return replace(draft, order=merged)


def with_checkout_status(draft: OrderDraft, status: str) -> OrderDraft:
    return replace(draft, checkout_status=status)


def recompute(draft: OrderDraft, ctx: PricingContext) -> OrderDraft:
    """Recalculate garment price snapshots and order totals"""
    ctx = replace(ctx, stitching_price=draft.stitching_price)
    garment_prices = tuple(PricingService.garment_snapshot(g, ctx) for g in draft.garments)
    totals = PricingService.calculate_totals(
        list(draft.garments),
        list(draft.shelf_items),
        ctx,
        home_delivery=bool(draft.order.get("home_delivery")),
        discount_type=draft.order.get("discount_type"),
        discount_percentage=draft.order.get("discount_percentage"),
        discount_value=draft.order.get("discount_value"),
    )
    return replace(draft, garment_prices=garment_prices, totals=totals)
