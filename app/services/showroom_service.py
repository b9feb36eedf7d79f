"""
Showroom Service - Follow-up of finished orders waiting at the shop
"""
from sqlalchemy.orm import Session, selectinload
from typing import Dict, List, Optional, Tuple
from datetime import datetime, date
import logging

from app.models import Order, CheckoutStatus, OrderType, ProductionStage
from .pricing_service import to_decimal

logger = logging.getLogger(__name__)

# Production stages in which garments are at the shop for the customer
SHOWROOM_STAGES = [
    ProductionStage.BROVA_AT_SHOP.value,
    ProductionStage.FINAL_AT_SHOP.value,
    ProductionStage.BROVA_AND_FINAL_AT_SHOP.value,
]

# kind -> (date field, notes field)
REMINDER_FIELDS = {
    "r1": ("r1_date", "r1_notes"),
    "r2": ("r2_date", "r2_notes"),
    "r3": ("r3_date", "r3_notes"),
    "call": ("call_reminder_date", "call_notes"),
    "escalation": ("escalation_date", "escalation_notes"),
}

class ShowroomService:
    """Showroom order listing, reminders and production stage updates"""

    @staticmethod
    def delay_in_days(delivery_date: Optional[datetime], today: Optional[date] = None) -> int:
        if not delivery_date:
            return 0
        today = today or date.today()
        return max(0, (today - delivery_date.date()).days)

    @staticmethod
    def list_orders(db: Session, stages: Optional[List[str]] = None, today: Optional[date] = None) -> List[Dict]:
        """Confirmed work orders sitting in the showroom, most overdue first"""
        stages = stages or SHOWROOM_STAGES
        orders = db.query(Order)\
            .options(selectinload(Order.customer))\
            .filter(
                Order.checkout_status == CheckoutStatus.CONFIRMED.value,
                Order.order_type == OrderType.WORK.value,
                Order.production_stage.in_(stages),
            )\
            .order_by(Order.delivery_date.asc(), Order.id.asc())\
            .all()

        results = []
        for order in orders:
            total = to_decimal(order.order_total)
            paid = to_decimal(order.paid)
            results.append({
                "order": order,
                "delay_in_days": ShowroomService.delay_in_days(order.delivery_date, today),
                "total": total,
                "balance": total - paid,
            })
        results.sort(key=lambda r: r["delay_in_days"], reverse=True)
        return results

    @staticmethod
    def record_reminder(
        db: Session,
        order_id: int,
        kind: str,
        when: Optional[datetime] = None,
        notes: Optional[str] = None,
        call_status: Optional[str] = None,
    ) -> Tuple[bool, str]:
        order = db.query(Order).filter(Order.id == order_id).first()
        if not order:
            return False, "Order not found"
        if kind not in REMINDER_FIELDS:
            return False, f"Invalid reminder kind: {kind}"

        date_field, notes_field = REMINDER_FIELDS[kind]
        setattr(order, date_field, when or datetime.now())
        if notes is not None:
            setattr(order, notes_field, notes)
        if kind == "call" and call_status is not None:
            order.call_status = call_status

        db.commit()
        logger.info(f"Order {order.id}: recorded {kind} reminder")
        return True, "Reminder recorded"

    @staticmethod
    def update_production_stage(db: Session, order_id: int, stage: str) -> Tuple[bool, str]:
        order = db.query(Order).filter(Order.id == order_id).first()
        if not order:
            return False, "Order not found"
        if stage not in [s.value for s in ProductionStage]:
            return False, f"Invalid production stage: {stage}"

        old_stage = order.production_stage
        order.production_stage = stage
        db.commit()

        logger.info(f"Order {order.id}: stage {old_stage} -> {stage}")
        return True, "Production stage updated"
