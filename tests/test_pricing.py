"""
Pricing rules: stitching tiers, style options, delivery, discounts
"""
from decimal import Decimal

import pytest

from app.models import Fabric
from app.schemas.order import GarmentInput, ShelfItemInput
from app.services.pricing_service import PricingService, PricingContext


@pytest.fixture
def ctx():
    fabric = Fabric(id=1, name="Cotton", real_stock=Decimal("10"), price_per_meter=Decimal("2.500"))
    return PricingContext(
        price_map={
            "STY_LINE": Decimal("1"),
            "COL_TABBAGI": Decimal("0.500"),
            "BUTTON": Decimal("0.250"),
            "HOME_DELIVERY": Decimal("5"),
            "EXPRESS_SURCHARGE": Decimal("2"),
        },
        fabrics={1: fabric},
        stitching_price=Decimal("7"),
    )


def test_design_style_uses_designer_stitching_price_regardless_of_tier(ctx):
    garment = GarmentInput(style="design")
    assert PricingService.stitching_price(garment, Decimal("7")) == Decimal("9")
    assert PricingService.stitching_price(garment, Decimal("9")) == Decimal("9")


@pytest.mark.parametrize("tier", [Decimal("7"), Decimal("9")])
def test_regular_style_uses_selected_tier(tier):
    garment = GarmentInput(style="kuwaiti")
    assert PricingService.stitching_price(garment, tier) == tier


def test_fabric_price_only_for_shop_fabric(ctx):
    shop = GarmentInput(fabric_source="IN", fabric_id=1, fabric_length=Decimal("3"))
    outside = GarmentInput(fabric_source="OUT", shop_name="Other", fabric_length=Decimal("3"))
    assert PricingService.fabric_price(shop, ctx.fabrics) == Decimal("7.500")
    assert PricingService.fabric_price(outside, ctx.fabrics) == Decimal("0")


def test_style_price_sums_lines_and_option_codes(ctx):
    garment = GarmentInput(lines=2, collar_type="COL_TABBAGI", jabzour_1="BUTTON", cuffs_type="UNKNOWN")
    # 2 x STY_LINE + collar + jabzour; unknown codes price at 0
    assert PricingService.style_price(garment, ctx) == Decimal("2.750")


def test_design_style_price_falls_back_to_default(ctx):
    garment = GarmentInput(style="design", collar_type="COL_TABBAGI")
    assert PricingService.style_price(garment, ctx) == Decimal("6")


def test_delivery_charge_home_and_express(ctx):
    plain = GarmentInput()
    express = GarmentInput(express=True)
    home = GarmentInput(home_delivery=True)

    assert PricingService.delivery_charge(False, [plain], ctx) == Decimal("0")
    assert PricingService.delivery_charge(True, [plain], ctx) == Decimal("5")
    assert PricingService.delivery_charge(False, [home], ctx) == Decimal("5")
    assert PricingService.delivery_charge(False, [home, express], ctx) == Decimal("7")
    assert PricingService.delivery_charge(False, [express], ctx) == Decimal("2")


@pytest.mark.parametrize("discount_type,pct,value,expected", [
    ("flat", Decimal("10"), None, Decimal("3.33")),
    ("referral", Decimal("5"), None, Decimal("1.67")),
    ("loyalty", Decimal("0"), None, Decimal("0.00")),
    ("by_value", None, Decimal("4"), Decimal("4")),
    (None, Decimal("10"), Decimal("4"), Decimal("0")),
])
def test_discount_amount(discount_type, pct, value, expected):
    assert PricingService.discount_amount(Decimal("33.30"), discount_type, pct, value) == expected


def test_totals_include_shelf_and_floor_at_zero(ctx):
    garments = [GarmentInput(fabric_source="IN", fabric_id=1, fabric_length=Decimal("2"))]
    shelf = [ShelfItemInput(shelf_id=1, quantity=2, unit_price=Decimal("4"))]

    totals = PricingService.calculate_totals(garments, shelf, ctx)
    # fabric 5 + stitching 7 + style 1 + shelf 8
    assert totals["fabric_charge"] == Decimal("5.000")
    assert totals["stitching_charge"] == Decimal("7")
    assert totals["style_charge"] == Decimal("1")
    assert totals["shelf_charge"] == Decimal("8")
    assert totals["order_total"] == Decimal("21.000")

    discounted = PricingService.calculate_totals(garments, shelf, ctx, discount_type="by_value", discount_value=Decimal("100"))
    assert discounted["order_total"] == Decimal("0")


def test_stitching_price_must_match_a_configured_tier():
    ctx = PricingContext(price_map={"STITCHING_ECONOMY": Decimal("6")})

    assert PricingService.check_stitching_price(ctx, None) is None
    assert PricingService.check_stitching_price(ctx, Decimal("6")) is None
    assert PricingService.check_stitching_price(ctx, Decimal("9")) is None
    assert PricingService.check_stitching_price(ctx, Decimal("7")) == "Stitching price must be 6 or 9"
