"""
Catalog API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core import get_db
from app.services import CatalogService
from app.schemas.catalog import (
    FabricResponse, StyleResponse, ShelfProductResponse, PriceResponse, CampaignResponse,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])

@router.get("/fabrics", response_model=List[FabricResponse])
async def list_fabrics(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return CatalogService.list_fabrics(db, search)

@router.get("/styles", response_model=List[StyleResponse])
async def list_styles(db: Session = Depends(get_db)):
    return CatalogService.list_styles(db)

@router.get("/shelf", response_model=List[ShelfProductResponse])
async def list_shelf(db: Session = Depends(get_db)):
    return CatalogService.list_shelf(db)

@router.get("/prices", response_model=List[PriceResponse])
async def list_prices(db: Session = Depends(get_db)):
    return CatalogService.list_prices(db)

@router.get("/campaigns", response_model=List[CampaignResponse])
async def list_campaigns(active_only: bool = Query(True), db: Session = Depends(get_db)):
    return CatalogService.list_campaigns(db, active_only)
