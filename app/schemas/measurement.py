"""
Measurement Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from decimal import Decimal

Dimension = Optional[Decimal]

class MeasurementFields(BaseModel):
    measurer_id: Optional[UUID] = None
    measurement_date: Optional[datetime] = None
    type: Optional[str] = "Body"
    reference: Optional[str] = None
    notes: Optional[str] = None

    collar_width: Dimension = Field(None, ge=0)
    collar_height: Dimension = Field(None, ge=0)
    shoulder: Dimension = Field(None, ge=0)
    armhole: Dimension = Field(None, ge=0)
    armhole_front: Dimension = Field(None, ge=0)
    chest_upper: Dimension = Field(None, ge=0)
    chest_full: Dimension = Field(None, ge=0)
    chest_front: Dimension = Field(None, ge=0)
    chest_back: Dimension = Field(None, ge=0)
    sleeve_length: Dimension = Field(None, ge=0)
    sleeve_width: Dimension = Field(None, ge=0)
    elbow: Dimension = Field(None, ge=0)
    top_pocket_length: Dimension = Field(None, ge=0)
    top_pocket_width: Dimension = Field(None, ge=0)
    top_pocket_distance: Dimension = Field(None, ge=0)
    side_pocket_length: Dimension = Field(None, ge=0)
    side_pocket_width: Dimension = Field(None, ge=0)
    side_pocket_distance: Dimension = Field(None, ge=0)
    side_pocket_opening: Dimension = Field(None, ge=0)
    waist_front: Dimension = Field(None, ge=0)
    waist_back: Dimension = Field(None, ge=0)
    waist_full: Dimension = Field(None, ge=0)
    length_front: Dimension = Field(None, ge=0)
    length_back: Dimension = Field(None, ge=0)
    bottom: Dimension = Field(None, ge=0)
    jabzour_width: Dimension = Field(None, ge=0)
    jabzour_length: Dimension = Field(None, ge=0)

class MeasurementCreate(MeasurementFields):
    customer_id: int

class MeasurementUpdate(MeasurementFields):
    type: Optional[str] = None

class MeasurementResponse(MeasurementFields):
    id: UUID
    customer_id: int
    measurement_id: Optional[str]
    armhole_provision: Dimension = None
    chest_provision: Dimension = None
    waist_provision: Dimension = None

    class Config:
        from_attributes = True
