"""
Measurement Models
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
import enum

from app.core import Base
from .base import UUIDMixin


class MeasurementType(str, enum.Enum):
    BODY = "Body"
    DISHDASHA = "Dishdasha"


# Dimension columns accepted from input, in form order
DIMENSION_FIELDS = [
    "collar_width", "collar_height", "shoulder", "armhole", "armhole_front",
    "chest_upper", "chest_full", "chest_front", "chest_back",
    "sleeve_length", "sleeve_width", "elbow",
    "top_pocket_length", "top_pocket_width", "top_pocket_distance",
    "side_pocket_length", "side_pocket_width", "side_pocket_distance", "side_pocket_opening",
    "waist_front", "waist_back", "waist_full",
    "length_front", "length_back", "bottom",
    "jabzour_width", "jabzour_length",
]

# Derived from dimensions, never written directly
PROVISION_FIELDS = ["armhole_provision", "chest_provision", "waist_provision"]


class Measurement(Base, UUIDMixin):
    """Versioned snapshot of a customer's body dimensions"""
    __tablename__ = "measurements"

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    measurer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"))
    measurement_date = Column(DateTime)

    measurement_id = Column(String(30))  # e.g. 123-1
    type = Column(String(20))  # Body, Dishdasha
    reference = Column(String(100))
    notes = Column(Text)

    # Collar / shoulder / arm
    collar_width = Column(Numeric(5, 2))
    collar_height = Column(Numeric(5, 2))
    shoulder = Column(Numeric(5, 2))
    armhole = Column(Numeric(5, 2))
    armhole_front = Column(Numeric(5, 2))
    sleeve_length = Column(Numeric(5, 2))
    sleeve_width = Column(Numeric(5, 2))
    elbow = Column(Numeric(5, 2))

    # Chest
    chest_upper = Column(Numeric(5, 2))
    chest_full = Column(Numeric(5, 2))
    chest_front = Column(Numeric(5, 2))
    chest_back = Column(Numeric(5, 2))

    # Pockets
    top_pocket_length = Column(Numeric(5, 2))
    top_pocket_width = Column(Numeric(5, 2))
    top_pocket_distance = Column(Numeric(5, 2))
    side_pocket_length = Column(Numeric(5, 2))
    side_pocket_width = Column(Numeric(5, 2))
    side_pocket_distance = Column(Numeric(5, 2))
    side_pocket_opening = Column(Numeric(5, 2))

    # Waist / length
    waist_front = Column(Numeric(5, 2))
    waist_back = Column(Numeric(5, 2))
    waist_full = Column(Numeric(5, 2))
    length_front = Column(Numeric(5, 2))
    length_back = Column(Numeric(5, 2))
    bottom = Column(Numeric(5, 2))

    # Jabzour
    jabzour_width = Column(Numeric(5, 2))
    jabzour_length = Column(Numeric(5, 2))

    # Provisions
    armhole_provision = Column(Numeric(5, 2))
    chest_provision = Column(Numeric(5, 2))
    waist_provision = Column(Numeric(5, 2))

    # Relationships
    customer = relationship("Customer", back_populates="measurements")
    garments = relationship("Garment", back_populates="measurement")
