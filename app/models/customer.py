"""
Customer Models
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index, func
from sqlalchemy.orm import relationship
import enum

from app.core import Base


class AccountType(str, enum.Enum):
    PRIMARY = "Primary"
    SECONDARY = "Secondary"   # Shares the phone number of a Primary account


class Customer(Base):
    """Customer"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Identity
    name = Column(String(200), nullable=False)
    phone = Column(String(30), index=True)
    nick_name = Column(String(100))
    arabic_name = Column(String(200))
    arabic_nickname = Column(String(100))

    # Contact
    alternate_mobile = Column(String(30))
    whatsapp = Column(Boolean, default=False)
    whatsapp_alt = Column(Boolean, default=False)
    email = Column(String(200))
    insta_id = Column(String(100))

    # Address
    country_code = Column(String(10))
    city = Column(String(100))
    block = Column(String(50))
    street = Column(String(100))
    house_no = Column(String(50))
    area = Column(String(100))
    address_note = Column(Text)

    # Demographics
    nationality = Column(String(100))
    dob = Column(DateTime)
    customer_segment = Column(String(50))
    account_type = Column(String(20))  # Primary, Secondary
    relation = Column(String(100))

    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    orders = relationship("Order", back_populates="customer")
    measurements = relationship("Measurement", back_populates="customer", order_by="Measurement.measurement_date")

    __table_args__ = (
        Index("customers_search_idx", phone, name),
    )
