"""
Catalog Schemas
"""
from pydantic import BaseModel
from typing import Optional
from decimal import Decimal

class FabricResponse(BaseModel):
    id: int
    name: str
    color: Optional[str]
    real_stock: Optional[Decimal]
    price_per_meter: Optional[Decimal]

    class Config:
        from_attributes = True

class StyleResponse(BaseModel):
    id: int
    name: str
    type: Optional[str]
    rate_per_item: Optional[Decimal]
    image_url: Optional[str]

    class Config:
        from_attributes = True

class ShelfProductResponse(BaseModel):
    id: int
    type: Optional[str]
    brand: Optional[str]
    stock: Optional[int]
    price: Optional[Decimal]

    class Config:
        from_attributes = True

class PriceResponse(BaseModel):
    key: str
    value: Decimal
    description: Optional[str]

    class Config:
        from_attributes = True

class CampaignResponse(BaseModel):
    id: int
    name: str
    active: Optional[bool]

    class Config:
        from_attributes = True
