"""
Order Service - Business Logic for Work Orders
"""
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func, or_
from typing import Dict, List, Optional, Tuple
from uuid import UUID
from datetime import datetime
import logging

from app.core.config import settings
from app.models import (
    Order, Garment, OrderShelfItem, Customer, Measurement, ShelfProduct, Campaign, AppUser, AuditLog,
    CheckoutStatus, OrderType, ProductionStage, PaymentType, FabricSource,
)
from app.schemas.order import (
    OrderCreate, OrderUpdate, GarmentInput, ShelfItemInput, CheckoutRequest, TotalsPreviewRequest,
    SalesOrderCreate,
)
from .pricing_service import PricingService, PricingContext, to_decimal, ZERO
from .stock_service import StockService

logger = logging.getLogger(__name__)

# Result statuses for batch writes
SUCCESS = "success"
FAILED = "failed"
LOCKED = "locked"   # Order is no longer a draft


def write_audit(db: Session, table_name: str, record_id, action: str,
                before: Optional[dict] = None, after: Optional[dict] = None,
                performed_by: Optional[UUID] = None) -> None:
    """Queue an audit row in the current transaction"""
    db.add(AuditLog(
        table_name=table_name,
        record_id=str(record_id),
        action=action,
        performed_by=performed_by,
        before_data=before,
        after_data=after,
    ))


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class OrderService:
    """Work order business logic"""

    # Valid checkout transitions
    STATUS_TRANSITIONS = {
        CheckoutStatus.DRAFT.value: [CheckoutStatus.CONFIRMED.value, CheckoutStatus.CANCELLED.value],
        CheckoutStatus.CONFIRMED.value: [],
        CheckoutStatus.CANCELLED.value: [],
    }

    # ===================== READS =====================

    @staticmethod
    def get_order_by_id(db: Session, order_id: int, with_relations: bool = False) -> Optional[Order]:
        """Get order by ID, optionally with customer, garments and shelf items"""
        query = db.query(Order)
        if with_relations:
            query = query.options(
                selectinload(Order.customer),
                selectinload(Order.garments),
                selectinload(Order.shelf_items),
            )
        return query.filter(Order.id == order_id).first()

    @staticmethod
    def get_order_by_invoice_number(db: Session, invoice_number: int) -> Optional[Order]:
        return db.query(Order).filter(Order.invoice_number == invoice_number).first()

    @staticmethod
    def get_pending_orders(
        db: Session,
        customer_id: int,
        limit: Optional[int] = None,
        checkout_status: str = CheckoutStatus.DRAFT.value,
    ) -> List[Order]:
        """Customer's work orders in the given checkout status, newest first"""
        if limit is None:
            limit = settings.PENDING_ORDERS_LIMIT
        return db.query(Order)\
            .filter(
                Order.customer_id == customer_id,
                Order.checkout_status == checkout_status,
                Order.order_type == OrderType.WORK.value,
            )\
            .order_by(Order.order_date.desc(), Order.id.desc())\
            .limit(limit)\
            .all()

    @staticmethod
    def get_orders(
        db: Session,
        customer_id: Optional[int] = None,
        checkout_status: Optional[str] = None,
        order_type: Optional[str] = None,
        production_stage: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        page: int = 1,
        per_page: int = 50
    ) -> Tuple[List[Order], int]:
        """Order history with filters and pagination"""
        query = db.query(Order).options(selectinload(Order.customer), selectinload(Order.garments))

        if customer_id:
            query = query.filter(Order.customer_id == customer_id)
        if checkout_status and checkout_status != "all":
            query = query.filter(Order.checkout_status == checkout_status)
        if order_type and order_type != "all":
            query = query.filter(Order.order_type == order_type)
        if production_stage:
            query = query.filter(Order.production_stage == production_stage)
        if date_from:
            query = query.filter(Order.order_date >= date_from)
        if date_to:
            query = query.filter(Order.order_date <= date_to)

        if search and search.strip():
            term = search.strip()
            conditions = [Customer.name.ilike(f"%{term}%"), Customer.phone.ilike(f"%{term}%")]
            if term.isdigit():
                conditions += [Order.id == int(term), Order.invoice_number == int(term)]
            query = query.join(Customer, Order.customer_id == Customer.id).filter(or_(*conditions))

        total = query.count()

        orders = query.order_by(Order.order_date.desc(), Order.id.desc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()

        return orders, total

    # ===================== ORDER HEADER =====================

    @staticmethod
    def create_order(db: Session, order_data: OrderCreate) -> Optional[Order]:
        """Create a draft work order; None when the customer does not exist"""
        customer = db.query(Customer).filter(Customer.id == order_data.customer_id).first()
        if not customer:
            return None

        order = Order(
            customer_id=order_data.customer_id,
            order_taker_id=order_data.order_taker_id,
            campaign_id=order_data.campaign_id,
            notes=order_data.notes,
            order_date=datetime.now(),
            checkout_status=CheckoutStatus.DRAFT.value,
            order_type=OrderType.WORK.value,
            production_stage=ProductionStage.ORDER_AT_SHOP.value,
            stitching_price=to_decimal(settings.STITCHING_PRICE_STANDARD),
        )
        db.add(order)
        db.flush()

        write_audit(db, "orders", order.id, "INSERT",
                    after={"customer_id": order.customer_id, "checkout_status": order.checkout_status},
                    performed_by=order_data.order_taker_id)
        db.commit()
        db.refresh(order)

        logger.info(f"Created draft order {order.id} for customer {customer.id}")
        return order

    @staticmethod
    def _check_order_references(db: Session, updates: Dict) -> Optional[str]:
        if "customer_id" in updates:
            customer_id = updates["customer_id"]
            if customer_id is None:
                return "Customer is required"
            if not db.query(Customer.id).filter(Customer.id == customer_id).first():
                return f"Customer {customer_id} not found"
        campaign_id = updates.get("campaign_id")
        if campaign_id is not None and not db.query(Campaign.id).filter(Campaign.id == campaign_id).first():
            return f"Campaign {campaign_id} not found"
        taker_id = updates.get("order_taker_id")
        if taker_id is not None and not db.query(AppUser.id).filter(AppUser.id == taker_id).first():
            return f"Order taker {taker_id} not found"
        if updates.get("stitching_price") is not None:
            return PricingService.check_stitching_price(
                PricingService.build_context(db), updates["stitching_price"]
            )
        return None

    @staticmethod
    def update_order(db: Session, order_id: int, order_data: OrderUpdate) -> Tuple[Optional[Order], Optional[str]]:
        """Update order header fields. Returns (order, error)"""
        order = OrderService.get_order_by_id(db, order_id)
        if not order:
            return None, "Order not found"

        updates = order_data.model_dump(exclude_unset=True)
        error = OrderService._check_order_references(db, updates)
        if error:
            return None, error

        try:
            for field, value in updates.items():
                setattr(order, field, value)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order {order_id}: update failed: {e}")
            return None, f"Database error: {e}"

        db.refresh(order)
        return order, None

    @staticmethod
    def update_status(db: Session, order_id: int, new_status: str, performed_by: Optional[UUID] = None) -> Tuple[bool, str]:
        """Update checkout status with validation"""
        order = OrderService.get_order_by_id(db, order_id)
        if not order:
            return False, "Order not found"

        current_status = order.checkout_status
        allowed = OrderService.STATUS_TRANSITIONS.get(current_status, [])

        if new_status not in allowed:
            return False, f"Cannot transition from {current_status} to {new_status}"

        order.checkout_status = new_status

        write_audit(db, "orders", order.id, "STATUS_CHANGE",
                    before={"checkout_status": current_status},
                    after={"checkout_status": new_status},
                    performed_by=performed_by)

        db.commit()
        logger.info(f"Order {order.id}: {current_status} -> {new_status}")
        return True, "Status updated successfully"

    @staticmethod
    def cancel_order(db: Session, order_id: int, performed_by: Optional[UUID] = None) -> Tuple[bool, str]:
        return OrderService.update_status(db, order_id, CheckoutStatus.CANCELLED.value, performed_by)

    @staticmethod
    def is_draft(order: Order) -> bool:
        return order.checkout_status == CheckoutStatus.DRAFT.value

    # ===================== GARMENTS =====================

    @staticmethod
    def validate_garments(db: Session, garments: List[GarmentInput]) -> List[str]:
        """Row-level checks for a garment batch"""
        if not garments:
            return ["At least one garment is required"]

        errors = []
        for row, g in enumerate(garments, start=1):
            if not g.measurement_id:
                errors.append(f"Row {row}: Measurement is required")
            elif not db.query(Measurement.id).filter(Measurement.id == g.measurement_id).first():
                errors.append(f"Row {row}: Measurement not found")

            if not g.fabric_source:
                errors.append(f"Row {row}: Fabric source is required")
            elif g.fabric_source not in (FabricSource.IN.value, FabricSource.OUT.value):
                errors.append(f"Row {row}: Invalid fabric source {g.fabric_source}")
            elif g.fabric_source == FabricSource.IN.value and not g.fabric_id:
                errors.append(f"Row {row}: Fabric is required for shop fabric")
            elif g.fabric_source == FabricSource.OUT.value and not (g.shop_name or "").strip():
                errors.append(f"Row {row}: Shop name is required for outside fabric")

            if g.fabric_length is None or g.fabric_length <= 0:
                errors.append(f"Row {row}: Fabric length must be greater than 0")

            if not g.delivery_date:
                errors.append(f"Row {row}: Delivery date is required")

        return errors

    @staticmethod
    def _next_garment_number(order: Order) -> int:
        return max((g.sequence or 0 for g in order.garments), default=0) + 1

    @staticmethod
    def _new_garment(order: Order, number: int) -> Garment:
        return Garment(garment_id=f"{order.id}-{number}", sequence=number)

    @staticmethod
    def _apply_garment(garment: Garment, data: GarmentInput, ctx: PricingContext) -> None:
        for field, value in data.model_dump(exclude={"id", "garment_id"}).items():
            setattr(garment, field, value)
        for field, value in PricingService.garment_snapshot(data, ctx).items():
            setattr(garment, field, value)

    @staticmethod
    def _write_single_garment(db: Session, order: Order, garment: Optional[Garment], data: GarmentInput) -> Dict:
        """Validate one garment against the whole order, then insert or update it"""
        ctx = PricingService.build_context(db, order.stitching_price)

        rows = [data if garment is not None and g.id == garment.id else g for g in order.garments]
        if garment is None:
            rows.append(data)

        errors = OrderService.validate_garments(db, [data])
        errors += StockService.validate_fabric_stock(rows, ctx.fabrics)
        if errors:
            logger.warning(f"Order {order.id}: garment rejected ({len(errors)} errors)")
            return {"status": FAILED, "errors": errors}

        try:
            if garment is None:
                garment = OrderService._new_garment(order, OrderService._next_garment_number(order))
                order.garments.append(garment)
            OrderService._apply_garment(garment, data, ctx)
            order.num_of_fabrics = len(order.garments)
            OrderService._apply_totals(order, order.garments, order.shelf_items, ctx)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order {order.id}: garment write failed: {e}")
            return {"status": FAILED, "errors": [f"Database error: {e}"]}

        db.refresh(garment)
        logger.info(f"Saved garment {garment.garment_id}")
        return {"status": SUCCESS, "errors": [], "garment": garment}

    @staticmethod
    def create_garment(db: Session, order_id: int, data: GarmentInput) -> Optional[Dict]:
        """Add a single garment to a draft order"""
        order = OrderService.get_order_by_id(db, order_id, with_relations=True)
        if not order:
            return None
        if not OrderService.is_draft(order):
            return {"status": LOCKED, "errors": [f"Order {order.id} is {order.checkout_status}"]}
        return OrderService._write_single_garment(db, order, None, data)

    @staticmethod
    def update_garment(db: Session, garment_id: UUID, data: GarmentInput) -> Optional[Dict]:
        garment = db.query(Garment).filter(Garment.id == garment_id).first()
        if not garment:
            return None
        order = OrderService.get_order_by_id(db, garment.order_id, with_relations=True)
        if not OrderService.is_draft(order):
            return {"status": LOCKED, "errors": [f"Order {order.id} is {order.checkout_status}"]}
        return OrderService._write_single_garment(db, order, garment, data)

    @staticmethod
    def save_garments(
        db: Session,
        order_id: int,
        garments: List[GarmentInput],
        stitching_price=None,
        home_delivery: Optional[bool] = None,
    ) -> Optional[Dict]:
        """Validate, stock-check and upsert the full garment set of a draft order.

        The batch is written in one transaction; rows missing from the batch
        are removed from the order.
        """
        order = OrderService.get_order_by_id(db, order_id, with_relations=True)
        if not order:
            return None
        if not OrderService.is_draft(order):
            return {"status": LOCKED, "errors": [f"Order {order.id} is {order.checkout_status}"]}

        tier = stitching_price if stitching_price is not None else order.stitching_price
        ctx = PricingService.build_context(db, tier)

        errors = OrderService.validate_garments(db, garments)
        errors += StockService.validate_fabric_stock(garments, ctx.fabrics)
        tier_error = PricingService.check_stitching_price(ctx, stitching_price)
        if tier_error:
            errors.append(tier_error)
        if errors:
            logger.warning(f"Order {order.id}: garment batch rejected ({len(errors)} errors)")
            return {"status": FAILED, "errors": errors}

        try:
            existing = {g.id: g for g in order.garments}
            keep = set()
            next_number = OrderService._next_garment_number(order)

            for data in garments:
                garment = existing.get(data.id) if data.id else None
                if garment is None:
                    garment = OrderService._new_garment(order, next_number)
                    next_number += 1
                    order.garments.append(garment)
                else:
                    keep.add(garment.id)
                OrderService._apply_garment(garment, data, ctx)

            for garment_id, garment in existing.items():
                if garment_id not in keep:
                    order.garments.remove(garment)

            order.stitching_price = ctx.stitching_price
            if home_delivery is not None:
                order.home_delivery = home_delivery
            order.num_of_fabrics = len(garments)
            OrderService._apply_totals(order, garments, order.shelf_items, ctx)

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order {order_id}: garment batch failed: {e}")
            return {"status": FAILED, "errors": [f"Database error: {e}"]}

        db.refresh(order)
        logger.info(f"Order {order.id}: saved {len(garments)} garments")
        return {"status": SUCCESS, "errors": [], "order": order}

    # ===================== SHELF ITEMS =====================

    @staticmethod
    def _resolve_shelf_prices(db: Session, items: List[ShelfItemInput]) -> List[ShelfItemInput]:
        resolved = []
        for item in items:
            if item.unit_price is None:
                product = db.query(ShelfProduct).filter(ShelfProduct.id == item.shelf_id).first()
                item = item.model_copy(update={"unit_price": to_decimal(product.price) if product else ZERO})
            resolved.append(item)
        return resolved

    @staticmethod
    def save_shelf_items(db: Session, order_id: int, items: List[ShelfItemInput]) -> Optional[Dict]:
        """Replace the shelf lines of a draft order"""
        order = OrderService.get_order_by_id(db, order_id, with_relations=True)
        if not order:
            return None
        if not OrderService.is_draft(order):
            return {"status": LOCKED, "errors": [f"Order {order.id} is {order.checkout_status}"]}

        errors = StockService.validate_shelf_stock(db, items)
        if errors:
            return {"status": FAILED, "errors": errors}

        items = OrderService._resolve_shelf_prices(db, items)
        try:
            order.shelf_items.clear()
            for item in items:
                order.shelf_items.append(OrderShelfItem(
                    shelf_id=item.shelf_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                ))
            ctx = PricingService.build_context(db, order.stitching_price)
            OrderService._apply_totals(order, order.garments, items, ctx)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order {order_id}: shelf batch failed: {e}")
            return {"status": FAILED, "errors": [f"Database error: {e}"]}

        db.refresh(order)
        logger.info(f"Order {order.id}: saved {len(items)} shelf items")
        return {"status": SUCCESS, "errors": [], "order": order}

    # ===================== TOTALS & CHECKOUT =====================

    @staticmethod
    def _next_invoice_number(db: Session) -> int:
        return (db.query(func.max(Order.invoice_number)).scalar() or 0) + 1

    @staticmethod
    def _apply_totals(order: Order, garments: List, shelf_items: List, ctx: PricingContext) -> Dict:
        totals = PricingService.calculate_totals(
            garments, shelf_items, ctx,
            home_delivery=bool(order.home_delivery),
            discount_type=order.discount_type,
            discount_percentage=order.discount_percentage,
            discount_value=order.discount_value,
        )
        order.fabric_charge = totals["fabric_charge"]
        order.stitching_charge = totals["stitching_charge"]
        order.style_charge = totals["style_charge"]
        order.delivery_charge = totals["delivery_charge"]
        order.shelf_charge = totals["shelf_charge"]
        order.order_total = totals["order_total"]
        return totals

    @staticmethod
    def preview_totals(db: Session, request: TotalsPreviewRequest) -> Tuple[Optional[Dict], Optional[str]]:
        """Totals for unsaved draft data. Returns (totals, error)"""
        ctx = PricingService.build_context(db, request.stitching_price)
        error = PricingService.check_stitching_price(ctx, request.stitching_price)
        if error:
            return None, error
        shelf_items = OrderService._resolve_shelf_prices(db, request.shelf_items)
        return PricingService.calculate_totals(
            request.garments, shelf_items, ctx,
            home_delivery=request.home_delivery,
            discount_type=request.discount_type,
            discount_percentage=request.discount_percentage,
            discount_value=request.discount_value,
        ), None

    @staticmethod
    def validate_checkout(payment: CheckoutRequest, order_total) -> List[str]:
        errors = []
        if not payment.payment_type:
            errors.append("Payment type is required")
        else:
            valid = [p.value for p in PaymentType]
            if payment.payment_type not in valid:
                errors.append(f"Invalid payment type: {payment.payment_type}")
            if payment.payment_type != PaymentType.CASH.value and not (payment.payment_ref_no or "").strip():
                errors.append("Payment reference number is required for non-cash payments")
            if payment.payment_type == PaymentType.OTHERS.value and not (payment.payment_note or "").strip():
                errors.append("Payment note is required for 'others' payments")

        total = to_decimal(order_total)
        if total > 0 and payment.paid is not None and payment.paid > total:
            errors.append(f"Paid amount {payment.paid} exceeds order total {total}")
        return errors

    @staticmethod
    def complete_work_order(db: Session, order_id: int, payment: CheckoutRequest, performed_by: Optional[UUID] = None) -> Optional[Dict]:
        """Confirm a draft: apply payment, assign invoice number, deduct stock"""
        order = OrderService.get_order_by_id(db, order_id, with_relations=True)
        if not order:
            return None
        if not OrderService.is_draft(order):
            return {"status": LOCKED, "errors": [f"Order {order.id} is {order.checkout_status}"]}
        if not order.garments and not order.shelf_items:
            return {"status": FAILED, "errors": ["Order has no garments or shelf items"]}

        for field in ("discount_type", "discount_value", "discount_percentage", "referral_code"):
            value = getattr(payment, field)
            if value is not None:
                setattr(order, field, value)

        ctx = PricingService.build_context(db, order.stitching_price)
        totals = OrderService._apply_totals(order, order.garments, order.shelf_items, ctx)

        errors = OrderService.validate_checkout(payment, totals["order_total"])
        if errors:
            db.rollback()
            return {"status": FAILED, "errors": errors}

        try:
            order.invoice_number = OrderService._next_invoice_number(db)
            order.payment_type = payment.payment_type
            order.payment_ref_no = payment.payment_ref_no
            order.payment_note = payment.payment_note
            order.paid = payment.paid
            order.advance = payment.advance
            if payment.delivery_date:
                order.delivery_date = payment.delivery_date
            elif not order.delivery_date:
                dates = [g.delivery_date for g in order.garments if g.delivery_date]
                order.delivery_date = max(dates) if dates else None

            stock_errors = StockService.deduct_for_order(db, order)
            if stock_errors:
                db.rollback()
                return {"status": FAILED, "errors": stock_errors}
            order.checkout_status = CheckoutStatus.CONFIRMED.value

            write_audit(db, "orders", order.id, "STATUS_CHANGE",
                        before={"checkout_status": CheckoutStatus.DRAFT.value},
                        after={"checkout_status": order.checkout_status,
                               "invoice_number": order.invoice_number,
                               "order_total": str(order.order_total),
                               "delivery_date": _iso(order.delivery_date)},
                        performed_by=performed_by)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order {order_id}: confirmation failed: {e}")
            return {"status": FAILED, "errors": [f"Database error: {e}"]}

        db.refresh(order)
        logger.info(f"Order {order.id} confirmed as invoice {order.invoice_number}")
        return {"status": SUCCESS, "errors": [], "order": order}

    # ===================== SALES ORDERS =====================

    @staticmethod
    def create_complete_sales_order(db: Session, data: SalesOrderCreate, performed_by: Optional[UUID] = None) -> Optional[Dict]:
        """Create and confirm a shelf-only sales order in one transaction"""
        customer = db.query(Customer).filter(Customer.id == data.customer_id).first()
        if not customer:
            return None
        if not data.items:
            return {"status": FAILED, "errors": ["At least one shelf item is required"]}

        errors = StockService.validate_shelf_stock(db, data.items)
        if errors:
            return {"status": FAILED, "errors": errors}

        items = OrderService._resolve_shelf_prices(db, data.items)
        ctx = PricingService.build_context(db)
        totals = PricingService.calculate_totals(
            [], items, ctx,
            discount_type=data.discount_type,
            discount_percentage=data.discount_percentage,
            discount_value=data.discount_value,
        )
        errors = OrderService.validate_checkout(data, totals["order_total"])
        if errors:
            return {"status": FAILED, "errors": errors}

        try:
            order = Order(
                customer_id=customer.id,
                order_taker_id=data.order_taker_id or performed_by,
                notes=data.notes,
                order_date=datetime.now(),
                checkout_status=CheckoutStatus.CONFIRMED.value,
                order_type=OrderType.SALES.value,
                invoice_number=OrderService._next_invoice_number(db),
                payment_type=data.payment_type,
                payment_ref_no=data.payment_ref_no,
                payment_note=data.payment_note,
                paid=data.paid,
                discount_type=data.discount_type,
                discount_value=data.discount_value,
                discount_percentage=data.discount_percentage,
                referral_code=data.referral_code,
                shelf_charge=totals["shelf_charge"],
                order_total=totals["order_total"],
                num_of_fabrics=0,
            )
            for item in items:
                order.shelf_items.append(OrderShelfItem(
                    shelf_id=item.shelf_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                ))
            db.add(order)
            db.flush()

            stock_errors = StockService.deduct_for_order(db, order)
            if stock_errors:
                db.rollback()
                return {"status": FAILED, "errors": stock_errors}

            write_audit(db, "orders", order.id, "INSERT",
                        after={"customer_id": order.customer_id,
                               "order_type": order.order_type,
                               "checkout_status": order.checkout_status,
                               "invoice_number": order.invoice_number,
                               "order_total": str(order.order_total)},
                        performed_by=performed_by)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Sales order for customer {customer.id} failed: {e}")
            return {"status": FAILED, "errors": [f"Database error: {e}"]}

        db.refresh(order)
        logger.info(f"Sales order {order.id} confirmed as invoice {order.invoice_number}")
        return {"status": SUCCESS, "errors": [], "order": order}
