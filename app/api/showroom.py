"""
Showroom API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core import get_db
from app.services import ShowroomService
from app.schemas.order import ReminderUpdate, StageUpdate
from app.api.serializers import order_summary, money

router = APIRouter(prefix="/showroom", tags=["showroom"])

@router.get("")
async def list_showroom_orders(stage: Optional[List[str]] = Query(None), db: Session = Depends(get_db)):
    rows = ShowroomService.list_orders(db, stage)
    return {
        "orders": [
            {
                **order_summary(r["order"]),
                "delay_in_days": r["delay_in_days"],
                "total": money(r["total"]),
                "balance": money(r["balance"]),
            }
            for r in rows
        ],
        "total": len(rows),
    }

@router.post("/{order_id}/reminders")
async def record_reminder(order_id: int, data: ReminderUpdate, db: Session = Depends(get_db)):
    success, message = ShowroomService.record_reminder(db, order_id, data.kind, data.date, data.notes, data.call_status)
    if not success:
        status = 404 if message == "Order not found" else 400
        raise HTTPException(status_code=status, detail=message)
    return {"success": True, "message": message}

@router.post("/{order_id}/stage")
async def update_stage(order_id: int, data: StageUpdate, db: Session = Depends(get_db)):
    success, message = ShowroomService.update_production_stage(db, order_id, data.production_stage)
    if not success:
        status = 404 if message == "Order not found" else 400
        raise HTTPException(status_code=status, detail=message)
    return {"success": True, "message": message}
