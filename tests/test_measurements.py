"""
Measurement provisions and codes
"""
from decimal import Decimal

from app.schemas.measurement import MeasurementCreate, MeasurementUpdate
from app.services import MeasurementService, apply_provisions


def test_armhole_provision_is_derived():
    result = apply_provisions({"armhole": Decimal("20"), "armhole_front": Decimal("11")})
    assert result["armhole_provision"] == Decimal("2")


def test_direct_provision_edit_is_overwritten():
    result = apply_provisions({"armhole": 20, "armhole_front": 11, "armhole_provision": 99})
    assert result["armhole_provision"] == Decimal("2")


def test_provisions_floor_at_zero_and_are_idempotent():
    values = {
        "armhole": 30, "armhole_front": 10,
        "chest_full": 50, "chest_front": 27,
        "waist_front": 20, "waist_back": 22, "waist_full": 40,
    }
    once = apply_provisions(values)
    twice = apply_provisions(once)

    assert once["armhole_provision"] == Decimal("0")
    assert once["chest_provision"] == Decimal("4")
    assert once["waist_provision"] == Decimal("2")
    assert once == twice


def test_create_measurement_assigns_code_and_provisions(db_session, make_customer):
    customer = make_customer()

    first = MeasurementService.create_measurement(db_session, MeasurementCreate(
        customer_id=customer.id, armhole=Decimal("20"), armhole_front=Decimal("11"),
    ))
    second = MeasurementService.create_measurement(db_session, MeasurementCreate(customer_id=customer.id))

    assert first.measurement_id == f"{customer.id}-1"
    assert second.measurement_id == f"{customer.id}-2"
    assert first.armhole_provision == Decimal("2")
    assert [m.id for m in MeasurementService.get_for_customer(db_session, customer.id)] == [first.id, second.id]


def test_create_measurement_for_missing_customer(db_session):
    assert MeasurementService.create_measurement(db_session, MeasurementCreate(customer_id=404)) is None


def test_update_recomputes_from_stored_dimensions(db_session, make_customer):
    customer = make_customer()
    measurement = MeasurementService.create_measurement(db_session, MeasurementCreate(
        customer_id=customer.id, armhole=Decimal("20"), armhole_front=Decimal("11"),
    ))

    updated = MeasurementService.update_measurement(db_session, measurement.id, MeasurementUpdate(armhole_front=Decimal("12")))

    assert updated.armhole == Decimal("20")
    assert updated.armhole_provision == Decimal("4")
