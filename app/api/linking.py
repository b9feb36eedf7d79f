"""
Order Linking API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core import get_db
from app.services import LinkService, CustomerService
from app.schemas.link import LinkRequest, UnlinkRequest, SelectionRequest
from app.api.serializers import order_summary

router = APIRouter(prefix="/links", tags=["linking"])

@router.get("/lookup")
async def lookup_orders(
    mode: str = Query("id", pattern="^(id|invoice|customer)$"),
    value: str = Query(...),
    db: Session = Depends(get_db)
):
    result = LinkService.lookup(db, mode, value)
    return {
        "orders": [order_summary(o) for o in result["orders"]],
        "customers": [
            {
                "id": entry["customer"].id,
                "name": entry["customer"].name,
                "phone": entry["customer"].phone,
                "orders": [order_summary(o) for o in entry["orders"]],
            }
            for entry in result["customers"]
        ],
        "notice": result["notice"],
    }

@router.get("/candidates/{customer_id}")
async def link_candidates(customer_id: int, db: Session = Depends(get_db)):
    if not CustomerService.get_by_id(db, customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    orders = LinkService.get_candidates(db, customer_id)
    notice = None if orders else "Customer has no pending work orders"
    return {"orders": [order_summary(o) for o in orders], "notice": notice}

@router.post("/selection")
async def expand_selection(data: SelectionRequest, db: Session = Depends(get_db)):
    order_ids, auto_added = LinkService.expand_selection(db, data.order_ids)
    return {"order_ids": order_ids, "auto_added": auto_added}

@router.post("")
async def link_orders(data: LinkRequest, db: Session = Depends(get_db)):
    order_ids, auto_added = LinkService.expand_selection(db, data.order_ids)
    result = LinkService.link_orders(db, order_ids, data.primary_order_id, data.delivery_date, data.performed_by)
    if result["status"] != "success":
        raise HTTPException(status_code=400, detail=result["errors"])
    result["auto_added"] = auto_added
    return result

@router.post("/{order_id}/unlink")
async def unlink_order(order_id: int, data: UnlinkRequest, db: Session = Depends(get_db)):
    success, message = LinkService.unlink_order(db, order_id, data.delivery_date, data.performed_by)
    if not success:
        status = 404 if message == "Order not found" else 400
        raise HTTPException(status_code=status, detail=message)
    return {"success": True, "message": message}

@router.get("/groups")
async def link_groups(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    groups = LinkService.get_link_groups(db, search)
    return {
        "groups": [
            {
                "primary": order_summary(g["primary"]),
                "children": [order_summary(c) for c in g["children"]],
            }
            for g in groups
        ],
        "total": len(groups),
    }
