"""
Work Order Wizard - Step controller for building a work order

The wizard holds an OrderDraft in memory and writes to the database only when
a step is saved (proceed), confirmed or cancelled.
"""
from sqlalchemy.orm import Session
from dataclasses import dataclass, field
from typing import List, Optional, Union
from uuid import UUID
import logging

from app.models import Order, CheckoutStatus
from app.schemas.order import (
    OrderCreate, OrderUpdate, GarmentInput, GarmentBatch, ShelfItemInput, ShelfBatch, CheckoutRequest,
)
from app.schemas.measurement import MeasurementCreate, MeasurementUpdate
from app.services import (
    CustomerService, MeasurementService, OrderService, PricingService,
)
from app.services.order_service import SUCCESS, LOCKED
from . import draft as d

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    ok: bool
    draft: d.OrderDraft
    errors: List[str] = field(default_factory=list)
    locked: bool = False


@dataclass
class PendingDraftChoice:
    """Customer already has draft orders: continue one of them or start new"""
    customer_id: int
    orders: List[Order]

    @property
    def order_ids(self) -> List[int]:
        return [o.id for o in self.orders]


class WorkOrderWizard:
    """Drives an OrderDraft through the five wizard steps"""

    def __init__(self, db: Session, draft: Optional[d.OrderDraft] = None, performed_by: Optional[UUID] = None):
        self.db = db
        self.draft = draft or d.reset()
        self.performed_by = performed_by
        self._order: Optional[Order] = None

    # ===================== ORDER CACHE =====================

    @property
    def order(self) -> Optional[Order]:
        if self.draft.order_id is None:
            return None
        if self._order is None:
            self._order = OrderService.get_order_by_id(self.db, self.draft.order_id, with_relations=True)
        return self._order

    def _invalidate(self) -> None:
        self._order = None

    def _fail(self, errors: List[str], locked: bool = False) -> StepResult:
        return StepResult(ok=False, draft=self.draft, errors=errors, locked=locked)

    def _succeed(self, draft: d.OrderDraft) -> StepResult:
        self.draft = draft
        self._invalidate()
        return StepResult(ok=True, draft=draft)

    def _recompute(self, draft: d.OrderDraft) -> d.OrderDraft:
        ctx = PricingService.build_context(self.db, draft.stitching_price)
        return d.recompute(draft, ctx)

    # ===================== STEPS =====================

    def proceed(self, step: int, payload=None) -> StepResult:
        """Validate and persist a step, then advance. The draft is untouched on failure."""
        if step < d.DEMOGRAPHICS or step > d.LAST_STEP:
            return self._fail([f"Invalid wizard step: {step}"])

        if step != d.DEMOGRAPHICS:
            if self.order is None:
                return self._fail(["Save customer demographics first"])
            if not OrderService.is_draft(self.order):
                return self._fail([f"Order {self.order.id} is {self.order.checkout_status}"], locked=True)

        handlers = {
            d.DEMOGRAPHICS: self._save_demographics,
            d.MEASUREMENTS: self._save_measurement,
            d.FABRIC_SELECTION: self._save_garments,
            d.SHELF_PRODUCTS: self._save_shelf,
            d.REVIEW_PAYMENT: self.confirm,
        }
        return handlers[step](payload)

    def _save_demographics(self, customer_id) -> StepResult:
        customer = CustomerService.get_by_id(self.db, customer_id) if customer_id else None
        if not customer:
            return self._fail(["Customer not found"])

        draft = self.draft
        if self.order is None:
            order = OrderService.create_order(self.db, OrderCreate(customer_id=customer.id, order_taker_id=self.performed_by))
            draft = d.with_order_id(draft, order.id)
            draft = d.with_stitching_price(draft, order.stitching_price)
        elif not OrderService.is_draft(self.order):
            return self._fail([f"Order {self.order.id} is {self.order.checkout_status}"], locked=True)
        elif self.order.customer_id != customer.id:
            _, error = OrderService.update_order(self.db, self.order.id, OrderUpdate(customer_id=customer.id))
            if error:
                return self._fail([error])

        draft = d.with_customer(draft, customer.id, {"name": customer.name, "phone": customer.phone})
        return self._succeed(d.proceed(draft, d.DEMOGRAPHICS))

    def _save_measurement(self, payload) -> StepResult:
        customer_id = self.order.customer_id
        if isinstance(payload, MeasurementCreate):
            if payload.customer_id != customer_id:
                return self._fail(["Measurement belongs to a different customer"])
            measurement = MeasurementService.create_measurement(self.db, payload)
        elif isinstance(payload, MeasurementUpdate):
            if not self.draft.measurement_id:
                return self._fail(["No measurement selected to update"])
            measurement = MeasurementService.update_measurement(self.db, self.draft.measurement_id, payload)
        else:
            measurement = MeasurementService.get_by_id(self.db, payload) if payload else None

        if not measurement:
            return self._fail(["Measurement not found"])
        if measurement.customer_id != customer_id:
            return self._fail(["Measurement belongs to a different customer"])

        draft = d.with_measurement(self.draft, measurement.id)
        return self._succeed(d.proceed(draft, d.MEASUREMENTS))

    def _save_garments(self, batch: GarmentBatch) -> StepResult:
        if batch is None:
            return self._fail(["At least one garment is required"])

        result = OrderService.save_garments(
            self.db, self.order.id, batch.garments,
            stitching_price=batch.stitching_price,
            home_delivery=batch.home_delivery,
        )
        if result["status"] != SUCCESS:
            return self._fail(result["errors"], locked=result["status"] == LOCKED)

        order = result["order"]
        draft = d.with_garments(self.draft, batch.garments)
        draft = d.with_stitching_price(draft, order.stitching_price)
        draft = d.with_order_fields(draft, home_delivery=bool(order.home_delivery))
        draft = self._recompute(draft)
        return self._succeed(d.proceed(draft, d.FABRIC_SELECTION))

    def _save_shelf(self, batch: Optional[ShelfBatch]) -> StepResult:
        items = batch.items if batch else []
        result = OrderService.save_shelf_items(self.db, self.order.id, items)
        if result["status"] != SUCCESS:
            return self._fail(result["errors"], locked=result["status"] == LOCKED)

        saved = [
            ShelfItemInput(shelf_id=line.shelf_id, quantity=line.quantity, unit_price=line.unit_price)
            for line in result["order"].shelf_items
        ]
        draft = self._recompute(d.with_shelf_items(self.draft, saved))
        return self._succeed(d.proceed(draft, d.SHELF_PRODUCTS))

    def edit(self, step: int) -> d.OrderDraft:
        """Re-open a saved step for editing"""
        self.draft = d.set_current_step(d.remove_saved_step(self.draft, step), step)
        return self.draft

    # ===================== CHECKOUT =====================

    def confirm(self, payment: Optional[CheckoutRequest]) -> StepResult:
        if self.draft.order_id is None:
            return self._fail(["No order to confirm"])
        payment = payment or CheckoutRequest()

        result = OrderService.complete_work_order(self.db, self.draft.order_id, payment, self.performed_by)
        if result is None:
            return self._fail(["Order not found"])
        if result["status"] != SUCCESS:
            return self._fail(result["errors"], locked=result["status"] == LOCKED)

        order = result["order"]
        draft = d.with_order_fields(
            self.draft,
            invoice_number=order.invoice_number,
            payment_type=order.payment_type,
            paid=order.paid,
            order_total=order.order_total,
        )
        draft = d.with_checkout_status(draft, CheckoutStatus.CONFIRMED.value)
        return self._succeed(d.add_saved_step(draft, d.REVIEW_PAYMENT))

    def cancel(self) -> StepResult:
        if self.draft.order_id is None:
            return self._fail(["No order to cancel"])
        ok, message = OrderService.cancel_order(self.db, self.draft.order_id, self.performed_by)
        if not ok:
            return self._fail([message], locked=self.order is not None)
        return self._succeed(d.with_checkout_status(self.draft, CheckoutStatus.CANCELLED.value))

    # ===================== PENDING DRAFTS =====================

    def select_customer(self, customer_id: int) -> Union[PendingDraftChoice, StepResult]:
        """Offer the customer's open drafts before creating a new order"""
        if self.draft.order_id is None:
            pending = OrderService.get_pending_orders(self.db, customer_id)
            if pending:
                logger.info(f"Customer {customer_id} has pending drafts {[o.id for o in pending]}")
                return PendingDraftChoice(customer_id=customer_id, orders=pending)
        return self.proceed(d.DEMOGRAPHICS, customer_id)

    def start_new(self, customer_id: int) -> StepResult:
        """Ignore pending drafts and start a fresh order"""
        self.draft = d.reset()
        self._invalidate()
        return self.proceed(d.DEMOGRAPHICS, customer_id)

    def load_order(self, order_id: int) -> StepResult:
        """Resume a persisted draft order"""
        order = OrderService.get_order_by_id(self.db, order_id, with_relations=True)
        if not order:
            return self._fail(["Order not found"])
        if not OrderService.is_draft(order):
            return self._fail([f"Order {order.id} is {order.checkout_status}"], locked=True)

        measurements = MeasurementService.get_for_customer(self.db, order.customer_id)
        customer = order.customer

        draft = d.reset()
        draft = d.with_order_id(draft, order.id)
        draft = d.with_customer(draft, order.customer_id, {"name": customer.name, "phone": customer.phone})
        if order.stitching_price is not None:
            draft = d.with_stitching_price(draft, order.stitching_price)
        draft = d.with_order_fields(
            draft,
            home_delivery=bool(order.home_delivery),
            discount_type=order.discount_type,
            discount_percentage=order.discount_percentage,
            discount_value=order.discount_value,
        )

        draft = d.add_saved_step(draft, d.DEMOGRAPHICS)
        if measurements:
            draft = d.with_measurement(draft, measurements[-1].id)
            draft = d.add_saved_step(draft, d.MEASUREMENTS)
        if order.garments:
            draft = d.with_garments(draft, [GarmentInput.model_validate(g, from_attributes=True) for g in order.garments])
            draft = d.add_saved_step(draft, d.FABRIC_SELECTION)
        draft = d.set_current_step(draft, d.MEASUREMENTS)

        self.draft = self._recompute(draft)
        self._order = order
        return StepResult(ok=True, draft=self.draft)

    def cancel_pending_draft(self, order_id: int) -> List[Order]:
        """Cancel one of the customer's drafts and return the refreshed list"""
        order = OrderService.get_order_by_id(self.db, order_id)
        if not order:
            return []
        ok, message = OrderService.cancel_order(self.db, order_id, self.performed_by)
        if not ok:
            logger.warning(f"Could not cancel draft {order_id}: {message}")
        if self.draft.order_id == order_id:
            self.draft = d.reset()
            self._invalidate()
        return OrderService.get_pending_orders(self.db, order.customer_id)
