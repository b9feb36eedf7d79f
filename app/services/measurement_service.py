"""
Measurement Service - Body measurements and derived provisions
"""
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from uuid import UUID
from datetime import datetime
import logging

from app.models import Customer, Measurement, DIMENSION_FIELDS, PROVISION_FIELDS
from app.schemas.measurement import MeasurementCreate, MeasurementUpdate
from .pricing_service import to_decimal, ZERO

logger = logging.getLogger(__name__)


def apply_provisions(values: Dict) -> Dict:
    """Return a copy of values with provisions recomputed from the dimensions.

    Missing dimensions count as 0. Provision keys already present in values
    are overwritten.
    """
    result = dict(values)

    armhole = to_decimal(values.get("armhole"))
    armhole_front = to_decimal(values.get("armhole_front"))
    chest_full = to_decimal(values.get("chest_full"))
    chest_front = to_decimal(values.get("chest_front"))
    waist_front = to_decimal(values.get("waist_front"))
    waist_back = to_decimal(values.get("waist_back"))
    waist_full = to_decimal(values.get("waist_full"))

    result["armhole_provision"] = max(ZERO, 2 * armhole_front - armhole)
    result["chest_provision"] = max(ZERO, 2 * chest_front - chest_full)
    result["waist_provision"] = max(ZERO, waist_front + waist_back - waist_full)
    return result


class MeasurementService:
    """Measurement business logic"""

    @staticmethod
    def get_for_customer(db: Session, customer_id: int) -> List[Measurement]:
        """Measurements of a customer, oldest first"""
        return db.query(Measurement)\
            .filter(Measurement.customer_id == customer_id)\
            .order_by(Measurement.measurement_date.asc(), Measurement.measurement_id.asc())\
            .all()

    @staticmethod
    def get_by_id(db: Session, measurement_id: UUID) -> Optional[Measurement]:
        return db.query(Measurement).filter(Measurement.id == measurement_id).first()

    @staticmethod
    def next_code(db: Session, customer_id: int) -> str:
        count = db.query(Measurement).filter(Measurement.customer_id == customer_id).count()
        return f"{customer_id}-{count + 1}"

    @staticmethod
    def create_measurement(db: Session, data: MeasurementCreate) -> Optional[Measurement]:
        """Create measurement; returns None when the customer does not exist"""
        customer = db.query(Customer).filter(Customer.id == data.customer_id).first()
        if not customer:
            return None

        values = apply_provisions(data.model_dump())
        if not values.get("measurement_date"):
            values["measurement_date"] = datetime.now()

        measurement = Measurement(
            measurement_id=MeasurementService.next_code(db, data.customer_id),
            **values
        )
        db.add(measurement)
        db.commit()
        db.refresh(measurement)

        logger.info(f"Created measurement {measurement.measurement_id} for customer {customer.id}")
        return measurement

    @staticmethod
    def update_measurement(db: Session, measurement_id: UUID, data: MeasurementUpdate) -> Optional[Measurement]:
        measurement = MeasurementService.get_by_id(db, measurement_id)
        if not measurement:
            return None

        changes = data.model_dump(exclude_unset=True)
        for key in PROVISION_FIELDS:
            changes.pop(key, None)

        current = {f: getattr(measurement, f) for f in DIMENSION_FIELDS}
        current.update(changes)
        merged = apply_provisions(current)

        for field_name, value in changes.items():
            setattr(measurement, field_name, value)
        for key in PROVISION_FIELDS:
            setattr(measurement, key, merged[key])

        db.commit()
        db.refresh(measurement)

        logger.info(f"Updated measurement {measurement.measurement_id}")
        return measurement

