"""
Catalog Service - Fabrics, styles, shelf products, prices and campaigns
"""
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from decimal import Decimal

from app.models import Fabric, Style, ShelfProduct, Price, Campaign

class CatalogService:
    """Read access to the catalog tables"""

    @staticmethod
    def list_fabrics(db: Session, search: Optional[str] = None) -> List[Fabric]:
        query = db.query(Fabric)
        if search:
            query = query.filter(Fabric.name.ilike(f"%{search}%"))
        return query.order_by(Fabric.name.asc()).all()

    @staticmethod
    def list_styles(db: Session) -> List[Style]:
        return db.query(Style).order_by(Style.name.asc()).all()

    @staticmethod
    def list_shelf(db: Session) -> List[ShelfProduct]:
        return db.query(ShelfProduct).order_by(ShelfProduct.type.asc()).all()

    @staticmethod
    def list_prices(db: Session) -> List[Price]:
        return db.query(Price).order_by(Price.key.asc()).all()

    @staticmethod
    def list_campaigns(db: Session, active_only: bool = True) -> List[Campaign]:
        query = db.query(Campaign)
        if active_only:
            query = query.filter(Campaign.active == True)
        return query.order_by(Campaign.name.asc()).all()

    @staticmethod
    def price_map(db: Session) -> Dict[str, Decimal]:
        return {p.key: p.value for p in CatalogService.list_prices(db)}
