"""
Customers & Measurements API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.core import get_db
from app.services import CustomerService, MeasurementService, OrderService
from app.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse, AccountTypeLookup
from app.schemas.measurement import MeasurementCreate, MeasurementUpdate, MeasurementResponse
from app.api.serializers import order_summary

router = APIRouter(prefix="/customers", tags=["customers"])
measurements_router = APIRouter(prefix="/measurements", tags=["measurements"])

# ===================== CUSTOMERS =====================

@router.get("/search", response_model=List[CustomerResponse])
async def search_customers(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return CustomerService.search_fuzzy(db, q)

@router.get("/by-phone", response_model=List[CustomerResponse])
async def customers_by_phone(phone: str = Query(...), db: Session = Depends(get_db)):
    return CustomerService.find_by_phone(db, phone)

@router.get("/account-type", response_model=AccountTypeLookup)
async def account_type_for_phone(
    phone: Optional[str] = Query(None),
    exclude_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    return CustomerService.resolve_account_type(db, phone, exclude_id)

@router.post("", response_model=CustomerResponse)
async def create_customer(data: CustomerCreate, db: Session = Depends(get_db)):
    customer, error = CustomerService.create_customer(db, data)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return customer

@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = CustomerService.get_by_id(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer

@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(customer_id: int, data: CustomerUpdate, db: Session = Depends(get_db)):
    customer, error = CustomerService.update_customer(db, customer_id, data)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer

@router.get("/{customer_id}/measurements", response_model=List[MeasurementResponse])
async def customer_measurements(customer_id: int, db: Session = Depends(get_db)):
    if not CustomerService.get_by_id(db, customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    return MeasurementService.get_for_customer(db, customer_id)

@router.get("/{customer_id}/pending-orders")
async def customer_pending_orders(
    customer_id: int,
    checkout_status: str = Query("draft"),
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: Session = Depends(get_db)
):
    orders = OrderService.get_pending_orders(db, customer_id, limit=limit, checkout_status=checkout_status)
    return {"orders": [order_summary(o) for o in orders], "total": len(orders)}

# ===================== MEASUREMENTS =====================

@measurements_router.post("", response_model=MeasurementResponse)
async def create_measurement(data: MeasurementCreate, db: Session = Depends(get_db)):
    measurement = MeasurementService.create_measurement(db, data)
    if not measurement:
        raise HTTPException(status_code=404, detail="Customer not found")
    return measurement

@measurements_router.get("/{measurement_id}", response_model=MeasurementResponse)
async def get_measurement(measurement_id: UUID, db: Session = Depends(get_db)):
    measurement = MeasurementService.get_by_id(db, measurement_id)
    if not measurement:
        raise HTTPException(status_code=404, detail="Measurement not found")
    return measurement

@measurements_router.put("/{measurement_id}", response_model=MeasurementResponse)
async def update_measurement(measurement_id: UUID, data: MeasurementUpdate, db: Session = Depends(get_db)):
    measurement = MeasurementService.update_measurement(db, measurement_id, data)
    if not measurement:
        raise HTTPException(status_code=404, detail="Measurement not found")
    return measurement
