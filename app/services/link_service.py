"""
Link Service - Grouping confirmed work orders under a primary order
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, List, Optional, Tuple
from uuid import UUID
from datetime import datetime
import logging

from app.models import Order, Customer, CheckoutStatus, OrderType, ProductionStage
from .customer_service import CustomerService
from .order_service import write_audit, _iso

logger = logging.getLogger(__name__)

# Stages after which an order is no longer pending at the shop
CLOSED_STAGES = [ProductionStage.ORDER_COLLECTED.value, ProductionStage.ORDER_DELIVERED.value]

class LinkService:
    """Order linking and unlinking"""

    @staticmethod
    def is_linkable(order: Order) -> bool:
        return order.checkout_status == CheckoutStatus.CONFIRMED.value and order.order_type == OrderType.WORK.value

    @staticmethod
    def is_closed(order: Order) -> bool:
        return order.production_stage in CLOSED_STAGES

    @staticmethod
    def get_children(db: Session, order_id: int) -> List[Order]:
        return db.query(Order)\
            .filter(Order.linked_order_id == order_id)\
            .order_by(Order.id.asc())\
            .all()

    @staticmethod
    def get_candidates(db: Session, customer_id: int) -> List[Order]:
        """Confirmed, pending, not-yet-linked work orders of a customer"""
        return db.query(Order)\
            .filter(
                Order.customer_id == customer_id,
                Order.checkout_status == CheckoutStatus.CONFIRMED.value,
                Order.order_type == OrderType.WORK.value,
                Order.linked_order_id.is_(None),
                (Order.production_stage.is_(None)) | (Order.production_stage.notin_(CLOSED_STAGES)),
            )\
            .order_by(Order.order_date.desc(), Order.id.desc())\
            .all()

    @staticmethod
    def lookup(db: Session, mode: str, value: str) -> Dict:
        """Find orders to link by order id, invoice number or customer.

        Returns {"orders": [...], "customers": [...], "notice": str|None}.
        """
        result = {"orders": [], "customers": [], "notice": None}
        value = (value or "").strip()
        if not value:
            result["notice"] = "Enter a value to search"
            return result

        if mode in ("id", "invoice"):
            if not value.isdigit():
                result["notice"] = f"'{value}' is not a valid number"
                return result
            if mode == "id":
                order = db.query(Order).filter(Order.id == int(value)).first()
            else:
                order = db.query(Order).filter(Order.invoice_number == int(value)).first()

            if not order:
                result["notice"] = "Order not found"
            elif not LinkService.is_linkable(order):
                result["notice"] = f"Order #{order.id} is not a confirmed work order"
            elif LinkService.is_closed(order):
                result["notice"] = f"Order #{order.id} is already {order.production_stage}"
            elif order.linked_order_id:
                result["notice"] = f"Order #{order.id} is already linked to order #{order.linked_order_id}"
            else:
                result["orders"] = [order]
            return result

        if mode == "customer":
            customers = CustomerService.search_fuzzy(db, value)
            if not customers:
                result["notice"] = "No customers found"
                return result
            for customer in customers:
                result["customers"].append({
                    "customer": customer,
                    "orders": LinkService.get_candidates(db, customer.id),
                })
            if len(customers) == 1 and not result["customers"][0]["orders"]:
                result["notice"] = f"{customers[0].name} has no pending work orders"
            return result

        result["notice"] = f"Unknown lookup mode: {mode}"
        return result

    @staticmethod
    def expand_selection(db: Session, order_ids: List[int]) -> Tuple[List[int], int]:
        """Add children of any selected primary. Returns (ids, auto_added)"""
        selected = list(dict.fromkeys(order_ids))
        added = 0
        for order_id in list(selected):
            for child in LinkService.get_children(db, order_id):
                if child.id not in selected:
                    selected.append(child.id)
                    added += 1
        return selected, added

    @staticmethod
    def validate_link(db: Session, order_ids: List[int], primary_id: Optional[int], delivery_date: Optional[datetime]) -> Tuple[List[str], List[Order]]:
        """Check every link rule before any write. Returns (errors, orders)"""
        errors = []
        ids = list(dict.fromkeys(order_ids))

        if len(ids) < 2:
            errors.append("Select at least two orders to link")
        if primary_id is None:
            errors.append("Select a primary order")
        elif primary_id not in ids:
            errors.append(f"Primary order #{primary_id} is not in the selection")
        if not delivery_date:
            errors.append("A revised delivery date is required")

        orders = db.query(Order).filter(Order.id.in_(ids)).all() if ids else []
        found = {o.id for o in orders}
        for missing in [i for i in ids if i not in found]:
            errors.append(f"Order #{missing} not found")

        for order in orders:
            if not LinkService.is_linkable(order):
                errors.append(f"Order #{order.id} is not a confirmed work order")
            if LinkService.is_closed(order):
                errors.append(f"Order #{order.id} is already {order.production_stage}")
            if order.linked_order_id == order.id:
                errors.append(f"Order #{order.id} cannot be linked to itself")
            elif order.linked_order_id and order.linked_order_id != primary_id:
                errors.append(f"Order #{order.id} is already linked to order #{order.linked_order_id}")
            if order.id != primary_id and LinkService.get_children(db, order.id):
                errors.append(f"Order #{order.id} is the primary of another link group and cannot become a child")

        return errors, orders

    @staticmethod
    def link_orders(
        db: Session,
        order_ids: List[int],
        primary_id: Optional[int],
        delivery_date: Optional[datetime],
        performed_by: Optional[UUID] = None,
    ) -> Dict:
        """Link the selected orders under the primary in one transaction"""
        errors, orders = LinkService.validate_link(db, order_ids, primary_id, delivery_date)
        if errors:
            logger.warning(f"Link of {order_ids} rejected: {errors}")
            return {"status": "failed", "errors": errors}

        now = datetime.now()
        try:
            for order in orders:
                before = {
                    "linked_order_id": order.linked_order_id,
                    "delivery_date": _iso(order.delivery_date),
                }
                if order.id == primary_id:
                    order.linked_order_id = None
                else:
                    order.linked_order_id = primary_id
                    order.linked_date = now
                order.unlinked_date = None
                order.delivery_date = delivery_date

                write_audit(db, "orders", order.id, "LINK", before=before,
                            after={"linked_order_id": order.linked_order_id,
                                   "delivery_date": _iso(delivery_date)},
                            performed_by=performed_by)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Link of {order_ids} failed: {e}")
            return {"status": "failed", "errors": [f"Database error: {e}"]}

        logger.info(f"Linked orders {[o.id for o in orders]} under #{primary_id}")
        return {"status": "success", "errors": [], "primary_order_id": primary_id,
                "linked": [o.id for o in orders if o.id != primary_id]}

    @staticmethod
    def unlink_order(db: Session, order_id: int, delivery_date: Optional[datetime], performed_by: Optional[UUID] = None) -> Tuple[bool, str]:
        """Detach a child order from its group with a new delivery date"""
        order = db.query(Order).filter(Order.id == order_id).first()
        if not order:
            return False, "Order not found"
        if not order.linked_order_id:
            return False, f"Order #{order.id} is not linked"
        if not delivery_date:
            return False, "A new delivery date is required to unlink"

        before = {"linked_order_id": order.linked_order_id, "delivery_date": _iso(order.delivery_date)}
        order.linked_order_id = None
        order.unlinked_date = datetime.now()
        order.delivery_date = delivery_date

        write_audit(db, "orders", order.id, "UNLINK", before=before,
                    after={"linked_order_id": None, "delivery_date": _iso(delivery_date)},
                    performed_by=performed_by)
        db.commit()

        logger.info(f"Unlinked order {order.id} from #{before['linked_order_id']}")
        return True, "Order unlinked successfully"

    @staticmethod
    def get_link_groups(db: Session, search: Optional[str] = None) -> List[Dict]:
        """Children grouped by primary, filtered by id, invoice number or customer name"""
        children = db.query(Order)\
            .filter(Order.linked_order_id.isnot(None))\
            .order_by(Order.linked_order_id.asc(), Order.id.asc())\
            .all()

        groups: Dict[int, Dict] = {}
        for child in children:
            group = groups.get(child.linked_order_id)
            if group is None:
                group = {"primary": child.linked_order, "children": []}
                groups[child.linked_order_id] = group
            group["children"].append(child)

        if not search or not search.strip():
            return list(groups.values())

        term = search.strip().lower()
        filtered = []
        for group in groups.values():
            members = [group["primary"]] + group["children"]
            for order in members:
                customer: Optional[Customer] = order.customer
                if term.isdigit() and (int(term) == order.id or int(term) == order.invoice_number):
                    filtered.append(group)
                    break
                if customer and customer.name and term in customer.name.lower():
                    filtered.append(group)
                    break
        return filtered
