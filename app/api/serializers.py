"""
Response formatting shared by the API routers
"""
from typing import Optional
from datetime import datetime

from app.models import Order, Garment, OrderShelfItem


def money(value) -> float:
    return float(value or 0)


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def garment_dict(g: Garment) -> dict:
    return {
        "id": str(g.id),
        "garment_id": g.garment_id,
        "measurement_id": str(g.measurement_id) if g.measurement_id else None,
        "fabric_source": g.fabric_source,
        "fabric_id": g.fabric_id,
        "style_id": g.style_id,
        "style": g.style,
        "shop_name": g.shop_name,
        "color": g.color,
        "quantity": g.quantity,
        "fabric_length": float(g.fabric_length) if g.fabric_length is not None else None,
        "collar_type": g.collar_type,
        "collar_button": g.collar_button,
        "cuffs_type": g.cuffs_type,
        "front_pocket_type": g.front_pocket_type,
        "jabzour_1": g.jabzour_1,
        "jabzour_2": g.jabzour_2,
        "lines": g.lines,
        "express": g.express,
        "brova": g.brova,
        "home_delivery": g.home_delivery,
        "delivery_date": iso(g.delivery_date),
        "fabric_price_snapshot": money(g.fabric_price_snapshot),
        "stitching_price_snapshot": money(g.stitching_price_snapshot),
        "style_price_snapshot": money(g.style_price_snapshot),
    }


def shelf_item_dict(item: OrderShelfItem) -> dict:
    return {
        "id": item.id,
        "shelf_id": item.shelf_id,
        "quantity": item.quantity,
        "unit_price": money(item.unit_price),
    }


def order_summary(o: Order) -> dict:
    return {
        "id": o.id,
        "invoice_number": o.invoice_number,
        "customer_id": o.customer_id,
        "customer_name": o.customer.name if o.customer else None,
        "checkout_status": o.checkout_status,
        "production_stage": o.production_stage,
        "order_type": o.order_type,
        "order_date": iso(o.order_date),
        "delivery_date": iso(o.delivery_date),
        "linked_order_id": o.linked_order_id,
        "linked_date": iso(o.linked_date),
        "unlinked_date": iso(o.unlinked_date),
        "order_total": money(o.order_total),
        "paid": money(o.paid),
    }


def order_detail(o: Order) -> dict:
    data = order_summary(o)
    data.update({
        "campaign_id": o.campaign_id,
        "payment_type": o.payment_type,
        "payment_ref_no": o.payment_ref_no,
        "payment_note": o.payment_note,
        "discount_type": o.discount_type,
        "discount_value": money(o.discount_value),
        "discount_percentage": money(o.discount_percentage),
        "referral_code": o.referral_code,
        "advance": money(o.advance),
        "stitching_price": money(o.stitching_price),
        "fabric_charge": money(o.fabric_charge),
        "stitching_charge": money(o.stitching_charge),
        "style_charge": money(o.style_charge),
        "delivery_charge": money(o.delivery_charge),
        "shelf_charge": money(o.shelf_charge),
        "num_of_fabrics": o.num_of_fabrics,
        "home_delivery": o.home_delivery,
        "notes": o.notes,
        "garments": [garment_dict(g) for g in o.garments],
        "shelf_items": [shelf_item_dict(i) for i in o.shelf_items],
    })
    return data


def draft_dict(draft) -> dict:
    return {
        "order_id": draft.order_id,
        "customer_id": draft.customer_id,
        "current_step": draft.current_step,
        "saved_steps": list(draft.saved_steps),
        "measurement_id": str(draft.measurement_id) if draft.measurement_id else None,
        "garment_count": len(draft.garments),
        "stitching_price": money(draft.stitching_price),
        "checkout_status": draft.checkout_status,
        "totals": {key: money(value) for key, value in draft.totals.items()},
    }
