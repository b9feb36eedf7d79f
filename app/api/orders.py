"""
Work Orders API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.core import get_db
from app.services import OrderService
from app.services.order_service import SUCCESS, LOCKED
from app.schemas.order import (
    OrderCreate, OrderUpdate, GarmentInput, GarmentBatch, ShelfBatch, CheckoutRequest, TotalsPreviewRequest,
    StartOrderRequest, SalesOrderCreate,
)
from app.workflow import WorkOrderWizard, PendingDraftChoice
from app.api.serializers import order_detail, order_summary, garment_dict, draft_dict, money

router = APIRouter(prefix="/work-orders", tags=["work orders"])


def _check_result(result: Optional[dict]) -> dict:
    """Map a batch write result to an HTTP error when it did not succeed"""
    if result is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if result["status"] == LOCKED:
        raise HTTPException(status_code=409, detail=result["errors"])
    if result["status"] != SUCCESS:
        raise HTTPException(status_code=400, detail=result["errors"])
    return result


def _get_draft(db: Session, order_id: int):
    order = OrderService.get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if not OrderService.is_draft(order):
        raise HTTPException(status_code=409, detail=f"Order {order.id} is {order.checkout_status}")
    return order

# ===================== ORDERS =====================

@router.post("")
async def create_order(data: OrderCreate, db: Session = Depends(get_db)):
    order = OrderService.create_order(db, data)
    if not order:
        raise HTTPException(status_code=404, detail="Customer not found")
    return order_detail(order)

@router.post("/totals/preview")
async def preview_totals(data: TotalsPreviewRequest, db: Session = Depends(get_db)):
    totals, error = OrderService.preview_totals(db, data)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return {key: money(value) for key, value in totals.items()}

@router.get("/invoice/{invoice_number}")
async def get_order_by_invoice(invoice_number: int, db: Session = Depends(get_db)):
    order = OrderService.get_order_by_invoice_number(db, invoice_number)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_detail(order)

@router.get("/{order_id}")
async def get_order(order_id: int, db: Session = Depends(get_db)):
    order = OrderService.get_order_by_id(db, order_id, with_relations=True)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_detail(order)

@router.put("/{order_id}")
async def update_order(order_id: int, data: OrderUpdate, db: Session = Depends(get_db)):
    _get_draft(db, order_id)
    order, error = OrderService.update_order(db, order_id, data)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return order_detail(order)

# ===================== WIZARD =====================

@router.post("/start")
async def start_order(data: StartOrderRequest, db: Session = Depends(get_db)):
    wizard = WorkOrderWizard(db, performed_by=data.order_taker_id)
    if data.force_new:
        result = wizard.start_new(data.customer_id)
    else:
        result = wizard.select_customer(data.customer_id)

    if isinstance(result, PendingDraftChoice):
        return {"pending": True, "orders": [order_summary(o) for o in result.orders]}
    if not result.ok:
        raise HTTPException(status_code=404, detail=result.errors)
    return {"pending": False, "draft": draft_dict(result.draft)}

@router.get("/{order_id}/resume")
async def resume_order(order_id: int, db: Session = Depends(get_db)):
    wizard = WorkOrderWizard(db)
    result = wizard.load_order(order_id)
    if not result.ok:
        raise HTTPException(status_code=409 if result.locked else 404, detail=result.errors)
    return {"draft": draft_dict(result.draft)}

@router.post("/{order_id}/discard")
async def discard_draft(order_id: int, db: Session = Depends(get_db)):
    wizard = WorkOrderWizard(db)
    pending = wizard.cancel_pending_draft(order_id)
    return {"orders": [order_summary(o) for o in pending]}

# ===================== GARMENTS & SHELF =====================

@router.post("/{order_id}/garments")
async def save_garments(order_id: int, data: GarmentBatch, db: Session = Depends(get_db)):
    result = _check_result(OrderService.save_garments(
        db, order_id, data.garments,
        stitching_price=data.stitching_price,
        home_delivery=data.home_delivery,
    ))
    return order_detail(result["order"])

@router.post("/{order_id}/garments/single")
async def add_garment(order_id: int, data: GarmentInput, db: Session = Depends(get_db)):
    result = _check_result(OrderService.create_garment(db, order_id, data))
    return garment_dict(result["garment"])

@router.put("/garments/{garment_id}")
async def update_garment(garment_id: UUID, data: GarmentInput, db: Session = Depends(get_db)):
    result = OrderService.update_garment(db, garment_id, data)
    if result is None:
        raise HTTPException(status_code=404, detail="Garment not found")
    result = _check_result(result)
    return garment_dict(result["garment"])

@router.post("/{order_id}/shelf-items")
async def save_shelf_items(order_id: int, data: ShelfBatch, db: Session = Depends(get_db)):
    result = _check_result(OrderService.save_shelf_items(db, order_id, data.items))
    return order_detail(result["order"])

# ===================== CHECKOUT =====================

@router.post("/{order_id}/confirm")
async def confirm_order(order_id: int, data: CheckoutRequest, db: Session = Depends(get_db)):
    result = _check_result(OrderService.complete_work_order(db, order_id, data))
    return order_detail(result["order"])

@router.post("/{order_id}/cancel")
async def cancel_order(order_id: int, db: Session = Depends(get_db)):
    order = OrderService.get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    success, message = OrderService.cancel_order(db, order_id)
    if not success:
        raise HTTPException(status_code=409, detail=message)

    return {"success": True, "message": message}


# ===================== ORDER HISTORY & SALES =====================

history_router = APIRouter(prefix="/orders", tags=["orders"])

@history_router.get("")
async def list_orders(
    customer_id: Optional[int] = Query(None),
    checkout_status: Optional[str] = Query(None, description="draft, confirmed, cancelled or all"),
    order_type: Optional[str] = Query(None, description="WORK, SALES or all"),
    production_stage: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Order id, invoice number, customer name or phone"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db)
):
    orders, total = OrderService.get_orders(
        db, customer_id, checkout_status, order_type, production_stage,
        search, date_from, date_to, page, per_page,
    )
    return {
        "orders": [
            dict(order_summary(o), num_of_garments=len(o.garments))
            for o in orders
        ],
        "total": total,
        "page": page,
        "per_page": per_page,
    }

@history_router.post("/sales")
async def create_sales_order(data: SalesOrderCreate, db: Session = Depends(get_db)):
    result = OrderService.create_complete_sales_order(db, data)
    if result is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    result = _check_result(result)
    return order_detail(result["order"])
