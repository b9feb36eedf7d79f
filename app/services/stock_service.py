"""
Stock Service - Fabric and shelf stock checks and deductions
"""
from sqlalchemy.orm import Session
from typing import Dict, Iterable, List
from decimal import Decimal
import logging

from app.models import Fabric, ShelfProduct, Order, FabricSource
from .pricing_service import to_decimal, ZERO

logger = logging.getLogger(__name__)

class StockService:
    """Stock/Inventory business logic"""

    @staticmethod
    def requested_fabric(garments: List) -> Dict[int, Decimal]:
        """Total meters requested per shop fabric across all rows"""
        totals: Dict[int, Decimal] = {}
        for g in garments:
            if g.fabric_source != FabricSource.IN.value or not g.fabric_id:
                continue
            totals[g.fabric_id] = totals.get(g.fabric_id, ZERO) + to_decimal(g.fabric_length)
        return totals

    @staticmethod
    def load_fabrics(db: Session, fabric_ids: Iterable[int]) -> Dict[int, Fabric]:
        """Current fabric rows, locked for update where the database supports it"""
        fabric_ids = list(fabric_ids)
        if not fabric_ids:
            return {}
        fabrics = db.query(Fabric)\
            .filter(Fabric.id.in_(fabric_ids))\
            .populate_existing()\
            .with_for_update()\
            .all()
        return {f.id: f for f in fabrics}

    @staticmethod
    def validate_fabric_stock(garments: List, fabrics: Dict[int, Fabric]) -> List[str]:
        """One error per row whose fabric is over-requested by the whole set"""
        totals = StockService.requested_fabric(garments)
        errors = []
        for row, g in enumerate(garments, start=1):
            if g.fabric_source != FabricSource.IN.value or not g.fabric_id:
                continue
            fabric = fabrics.get(g.fabric_id)
            if not fabric:
                errors.append(f"Row {row}: Fabric {g.fabric_id} not found")
                continue
            available = to_decimal(fabric.real_stock)
            requested = totals[g.fabric_id]
            if requested > available:
                errors.append(
                    f"Row {row}: Insufficient stock for {fabric.name}. "
                    f"Total requested: {requested:.2f}m, Available: {available:.2f}m"
                )
        return errors

    @staticmethod
    def validate_shelf_stock(db: Session, items: List) -> List[str]:
        requested: Dict[int, int] = {}
        for item in items:
            requested[item.shelf_id] = requested.get(item.shelf_id, 0) + (item.quantity or 0)

        errors = []
        for row, item in enumerate(items, start=1):
            product = db.query(ShelfProduct).filter(ShelfProduct.id == item.shelf_id).first()
            if not product:
                errors.append(f"Row {row}: Shelf product {item.shelf_id} not found")
                continue
            available = product.stock or 0
            if requested[item.shelf_id] > available:
                errors.append(
                    f"Row {row}: Insufficient stock for {product.type}. "
                    f"Total requested: {requested[item.shelf_id]}, Available: {available}"
                )
        return errors

    @staticmethod
    def validate_order_stock(db: Session, order: Order) -> List[str]:
        """Re-check the order's fabric and shelf lines against current stock"""
        fabrics = StockService.load_fabrics(db, StockService.requested_fabric(order.garments).keys())
        errors = StockService.validate_fabric_stock(order.garments, fabrics)
        errors += StockService.validate_shelf_stock(db, order.shelf_items)
        return errors

    @staticmethod
    def deduct_for_order(db: Session, order: Order) -> List[str]:
        """Take the order's shop fabric and shelf items out of stock.

        Nothing is deducted when any line would take stock below zero; the
        stock errors are returned instead. Caller commits.
        """
        errors = StockService.validate_order_stock(db, order)
        if errors:
            logger.warning(f"Order {order.id}: stock deduction refused ({len(errors)} errors)")
            return errors

        for fabric_id, meters in StockService.requested_fabric(order.garments).items():
            fabric = db.query(Fabric).filter(Fabric.id == fabric_id).first()
            fabric.real_stock = to_decimal(fabric.real_stock) - meters
            logger.info(f"Fabric {fabric.name}: -{meters}m for order {order.id}")

        for item in order.shelf_items:
            product = db.query(ShelfProduct).filter(ShelfProduct.id == item.shelf_id).first()
            product.stock = (product.stock or 0) - (item.quantity or 0)
            logger.info(f"Shelf {product.type}: -{item.quantity} for order {order.id}")

        return []
