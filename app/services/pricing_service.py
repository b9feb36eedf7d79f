"""
Pricing Service - Derived prices for garments and work orders
"""
from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from app.core.config import settings
from app.models import Fabric, FabricSource, DiscountType
from .catalog_service import CatalogService

ZERO = Decimal("0")

# Garment attributes whose value is itself a price key
STYLE_OPTION_FIELDS = ["collar_type", "collar_button", "jabzour_1", "front_pocket_type", "cuffs_type"]

PERCENT_DISCOUNTS = [DiscountType.FLAT.value, DiscountType.REFERRAL.value, DiscountType.LOYALTY.value]


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class PricingContext:
    """Catalog data needed to price a draft"""
    price_map: Dict[str, Decimal] = field(default_factory=dict)
    fabrics: Dict[int, Fabric] = field(default_factory=dict)
    stitching_price: Decimal = Decimal("9")

    def price(self, key: Optional[str], default=ZERO) -> Decimal:
        if not key:
            return to_decimal(default)
        if key in self.price_map:
            return to_decimal(self.price_map[key])
        return to_decimal(default)


class PricingService:
    """Stitching, fabric, style, delivery and discount rules"""

    @staticmethod
    def build_context(db: Session, stitching_price=None) -> PricingContext:
        """Load prices and fabrics into a PricingContext"""
        price_map = {k: to_decimal(v) for k, v in CatalogService.price_map(db).items()}
        fabrics = {f.id: f for f in CatalogService.list_fabrics(db)}
        tier = stitching_price
        if tier is None:
            tier = price_map.get("STITCHING_STANDARD", settings.STITCHING_PRICE_STANDARD)
        return PricingContext(price_map=price_map, fabrics=fabrics, stitching_price=to_decimal(tier))

    @staticmethod
    def stitching_tiers(price_map: Dict[str, Decimal]) -> List[Decimal]:
        """Economy and standard stitching prices, price table first"""
        return [
            to_decimal(price_map.get("STITCHING_ECONOMY", settings.STITCHING_PRICE_ECONOMY)),
            to_decimal(price_map.get("STITCHING_STANDARD", settings.STITCHING_PRICE_STANDARD)),
        ]

    @staticmethod
    def check_stitching_price(ctx: PricingContext, tier) -> Optional[str]:
        """Error message when tier is not one of the stitching tiers"""
        if tier is None:
            return None
        tiers = PricingService.stitching_tiers(ctx.price_map)
        if to_decimal(tier) in tiers:
            return None
        allowed = " or ".join(f"{t.normalize():f}" for t in tiers)
        return f"Stitching price must be {allowed}"

    @staticmethod
    def stitching_price(garment, tier) -> Decimal:
        if garment.style == "design":
            return to_decimal(settings.DESIGN_STITCHING_PRICE)
        return to_decimal(tier)

    @staticmethod
    def fabric_price(garment, fabrics: Dict[int, Fabric]) -> Decimal:
        if garment.fabric_source != FabricSource.IN.value or not garment.fabric_id:
            return ZERO
        fabric = fabrics.get(garment.fabric_id)
        if not fabric:
            return ZERO
        return to_decimal(fabric.price_per_meter) * to_decimal(garment.fabric_length)

    @staticmethod
    def style_price(garment, ctx: PricingContext) -> Decimal:
        if garment.style == "design":
            return ctx.price("STY_DESIGN", settings.DESIGN_STYLE_PRICE)

        line_price = ctx.price("STY_LINE")
        total = line_price * 2 if garment.lines == 2 else line_price

        for attr in STYLE_OPTION_FIELDS:
            total += ctx.price(getattr(garment, attr, None))

        return total

    @staticmethod
    def garment_snapshot(garment, ctx: PricingContext) -> Dict[str, Decimal]:
        """Price snapshot stored on the garment row at save time"""
        return {
            "fabric_price_snapshot": PricingService.fabric_price(garment, ctx.fabrics),
            "stitching_price_snapshot": PricingService.stitching_price(garment, ctx.stitching_price),
            "style_price_snapshot": PricingService.style_price(garment, ctx),
        }

    @staticmethod
    def delivery_charge(home_delivery: bool, garments: Iterable, ctx: PricingContext) -> Decimal:
        garments = list(garments)
        charge = ZERO
        if home_delivery or any(g.home_delivery for g in garments):
            charge += ctx.price("HOME_DELIVERY", settings.HOME_DELIVERY_CHARGE)
        if any(g.express for g in garments):
            charge += ctx.price("EXPRESS_SURCHARGE", settings.EXPRESS_DELIVERY_CHARGE)
        return charge

    @staticmethod
    def shelf_charge(items: Iterable) -> Decimal:
        return sum((to_decimal(i.unit_price) * (i.quantity or 0) for i in items), ZERO)

    @staticmethod
    def discount_amount(
        subtotal: Decimal,
        discount_type: Optional[str],
        discount_percentage=None,
        discount_value=None,
    ) -> Decimal:
        if discount_type in PERCENT_DISCOUNTS:
            pct = to_decimal(discount_percentage)
            return (subtotal * pct / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        if discount_type == DiscountType.BY_VALUE.value:
            return to_decimal(discount_value)
        return ZERO

    @staticmethod
    def calculate_totals(
        garments: List,
        shelf_items: List,
        ctx: PricingContext,
        home_delivery: bool = False,
        discount_type: Optional[str] = None,
        discount_percentage=None,
        discount_value=None,
    ) -> Dict[str, Decimal]:
        """Order charges, discount and total for a set of garments and shelf lines"""
        fabric = stitching = style = ZERO
        for g in garments:
            snapshot = PricingService.garment_snapshot(g, ctx)
            fabric += snapshot["fabric_price_snapshot"]
            stitching += snapshot["stitching_price_snapshot"]
            style += snapshot["style_price_snapshot"]

        delivery = PricingService.delivery_charge(home_delivery, garments, ctx)
        shelf = PricingService.shelf_charge(shelf_items)

        subtotal = fabric + stitching + style + delivery + shelf
        discount = PricingService.discount_amount(subtotal, discount_type, discount_percentage, discount_value)

        return {
            "fabric_charge": fabric,
            "stitching_charge": stitching,
            "style_charge": style,
            "delivery_charge": delivery,
            "shelf_charge": shelf,
            "subtotal": subtotal,
            "discount": discount,
            "order_total": max(ZERO, subtotal - discount),
        }
