"""
OrderDraft transitions
"""
from decimal import Decimal

import pytest

from app.models import Fabric
from app.schemas.order import GarmentInput
from app.services.pricing_service import PricingContext
from app.workflow import draft as d


def test_initial_draft():
    draft = d.reset()
    assert draft.order_id is None
    assert draft.current_step == d.DEMOGRAPHICS
    assert draft.saved_steps == ()
    assert draft.stitching_price == Decimal("9")
    assert draft.checkout_status == "draft"


def test_add_saved_step_is_idempotent_and_sorted():
    draft = d.add_saved_step(d.reset(), 2)
    draft = d.add_saved_step(draft, 0)
    draft = d.add_saved_step(draft, 2)
    assert draft.saved_steps == (0, 2)


def test_remove_saved_step_marks_edit_mode():
    draft = d.add_saved_step(d.add_saved_step(d.reset(), 0), 1)
    draft = d.remove_saved_step(draft, 1)
    assert draft.saved_steps == (0,)
    assert not draft.is_saved(1)


def test_proceed_advances_and_caps_at_last_step():
    draft = d.proceed(d.reset(), d.DEMOGRAPHICS)
    assert draft.current_step == d.MEASUREMENTS
    assert draft.is_saved(d.DEMOGRAPHICS)

    last = d.proceed(draft, d.REVIEW_PAYMENT)
    assert last.current_step == d.REVIEW_PAYMENT


def test_transitions_do_not_mutate_original():
    original = d.reset()
    d.with_order_fields(d.proceed(original, 0), home_delivery=True)
    assert original.saved_steps == ()
    assert original.order == {}


def test_invalid_step_rejected():
    with pytest.raises(ValueError):
        d.set_current_step(d.reset(), 5)


def test_recompute_uses_draft_stitching_tier():
    fabric = Fabric(id=1, name="Cotton", real_stock=Decimal("10"), price_per_meter=Decimal("2"))
    ctx = PricingContext(price_map={"STY_LINE": Decimal("1")}, fabrics={1: fabric})

    draft = d.with_garments(d.reset(), [
        GarmentInput(fabric_source="IN", fabric_id=1, fabric_length=Decimal("3")),
        GarmentInput(style="design", fabric_source="OUT", shop_name="Other", fabric_length=Decimal("3")),
    ])
    draft = d.recompute(d.with_stitching_price(draft, 7), ctx)

    assert [p["stitching_price_snapshot"] for p in draft.garment_prices] == [Decimal("7"), Decimal("9")]
    assert draft.totals["fabric_charge"] == Decimal("6")
    # 1 (line) + 6 (design fallback)
    assert draft.totals["style_charge"] == Decimal("7")
    assert draft.totals["order_total"] == Decimal("29")
