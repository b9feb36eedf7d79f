"""
Catalog Tables: Fabric, Style, Shelf, Price, Campaign
"""
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, Text, func
from app.core import Base

class Fabric(Base):
    """Fabric roll held in shop stock"""
    __tablename__ = "fabrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)
    color = Column(String(50))
    real_stock = Column(Numeric(10, 2))  # meters
    price_per_meter = Column(Numeric(10, 3))

class Style(Base):
    """Garment style (kuwaiti, design, ...)"""
    __tablename__ = "styles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    type = Column(String(50))
    rate_per_item = Column(Numeric(10, 3))
    image_url = Column(Text)

class ShelfProduct(Base):
    """Pre-manufactured stock product"""
    __tablename__ = "shelf"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(100), unique=True)
    brand = Column(String(100))
    stock = Column(Integer)
    price = Column(Numeric(10, 3))

class Price(Base):
    """Price table keyed by option code (STY_LINE, COL_TABBAGI, HOME_DELIVERY, ...)"""
    __tablename__ = "prices"

    key = Column(String(100), primary_key=True)
    value = Column(Numeric(10, 3), nullable=False)
    description = Column(Text)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

class Campaign(Base):
    """Marketing campaign an order can be attributed to"""
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    active = Column(Boolean, default=True)
