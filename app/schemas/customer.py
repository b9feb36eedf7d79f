"""
Customer Schemas
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class CustomerBase(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    nick_name: Optional[str] = None
    arabic_name: Optional[str] = None
    arabic_nickname: Optional[str] = None
    alternate_mobile: Optional[str] = None
    whatsapp: Optional[bool] = None
    whatsapp_alt: Optional[bool] = None
    email: Optional[str] = None
    insta_id: Optional[str] = None

    country_code: Optional[str] = None
    city: Optional[str] = None
    block: Optional[str] = None
    street: Optional[str] = None
    house_no: Optional[str] = None
    area: Optional[str] = None
    address_note: Optional[str] = None

    nationality: Optional[str] = None
    dob: Optional[datetime] = None
    customer_segment: Optional[str] = None
    account_type: Optional[str] = None  # Primary, Secondary
    relation: Optional[str] = None
    notes: Optional[str] = None

class CustomerCreate(CustomerBase):
    name: str
    country_code: Optional[str] = "+965"
    nationality: Optional[str] = "Kuwait"
    customer_segment: Optional[str] = "Low"
    whatsapp: bool = False
    whatsapp_alt: bool = False

class CustomerUpdate(CustomerBase):
    pass

class CustomerResponse(CustomerBase):
    id: int
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AccountTypeLookup(BaseModel):
    """Result of the phone type-ahead check for account type"""
    phone: Optional[str]
    account_type: str
    primary_customer_id: Optional[int] = None
    primary_customer_name: Optional[str] = None
