"""
Order Linking Schemas
"""
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

class LinkRequest(BaseModel):
    order_ids: List[int]
    primary_order_id: Optional[int] = None
    delivery_date: Optional[datetime] = None
    performed_by: Optional[UUID] = None

class UnlinkRequest(BaseModel):
    delivery_date: Optional[datetime] = None
    performed_by: Optional[UUID] = None

class SelectionRequest(BaseModel):
    """Orders picked so far; the response adds children of any selected primary"""
    order_ids: List[int]
