"""Cart models mirrored from the restaurant API"""

from typing import Any, Optional

from pydantic import BaseModel, Field

PLACEHOLDER_IMAGE = "/placeholder.svg"


class DeliveryLocation(BaseModel):
    """Delivery coordinates used to price the delivery fee"""
    lat: float
    lng: float

    def to_params(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


class ProductRef(BaseModel):
    """Menu product handed to the cart when the user taps "add" """
    product_id: str
    name: str
    price: float = Field(ge=0)
    image_url: Optional[str] = None
    variant: Optional[str] = None
    product_type: Optional[str] = None


class CartItem(BaseModel):
    """One product (+variant) line in the cart"""
    product_id: str
    line_id: str = ""  # server-assigned, empty until the first refetch
    name: str
    unit_price: float
    quantity: int = Field(ge=1)
    variant: Optional[str] = None
    image_url: str = PLACEHOLDER_IMAGE
    product_type: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @property
    def is_confirmed(self) -> bool:
        return bool(self.line_id)

    def matches(self, product_id: str, variant: Optional[str]) -> bool:
        return self.product_id == product_id and self.variant == variant

    @classmethod
    def from_product(cls, product: ProductRef) -> "CartItem":
        return cls(
            product_id=product.product_id,
            name=product.name,
            unit_price=product.price,
            quantity=1,
            variant=product.variant,
            image_url=product.image_url or PLACEHOLDER_IMAGE,
            product_type=product.product_type,
        )

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "CartItem":
        """Parse a cart line; `product` may be an id or an embedded product"""
        product = data.get("product")
        embedded = product if isinstance(product, dict) else {}
        product_id = embedded.get("_id") or product or data.get("_id")

        return cls(
            product_id=str(product_id),
            line_id=str(data.get("_id") or ""),
            name=data.get("name") or embedded.get("name") or "Unknown",
            unit_price=float(data.get("price") or 0),
            quantity=int(data["quantity"]) if data.get("quantity") is not None else 1,
            variant=data.get("variant"),
            image_url=data.get("imageURL") or embedded.get("imageURL") or PLACEHOLDER_IMAGE,
            product_type=data.get("type") or embedded.get("type"),
        )


class TaxBreakdown(BaseModel):
    """Componentized tax: CGST + SGST for intra-state, IGST for inter-state"""
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0

    @property
    def total(self) -> float:
        return round(self.cgst + self.sgst + self.igst, 2)

    def scaled(self, factor: float) -> "TaxBreakdown":
        return TaxBreakdown(
            cgst=round(self.cgst * factor, 2),
            sgst=round(self.sgst * factor, 2),
            igst=round(self.igst * factor, 2),
        )


class AppliedCoupon(BaseModel):
    """The single coupon attached to the cart"""
    code: str
    discount_amount: float = 0.0
    min_order_value: Optional[float] = None

    @classmethod
    def from_wire(cls, data: Optional[dict[str, Any]]) -> Optional["AppliedCoupon"]:
        if not data or not data.get("code"):
            return None
        return cls(
            code=data["code"],
            discount_amount=float(data.get("discountAmount") or 0),
            min_order_value=data.get("minOrderValue"),
        )


class CartTotals(BaseModel):
    """Derived totals; everything but items_subtotal comes from the bill endpoint"""
    items_subtotal: float = 0.0
    tax_amount: float = 0.0
    tax_breakdown: TaxBreakdown = Field(default_factory=TaxBreakdown)
    delivery_fee: float = 0.0
    discount_amount: float = 0.0
    final_total: float = 0.0

    @property
    def expected_final_total(self) -> float:
        return round(
            self.items_subtotal + self.tax_amount + self.delivery_fee - self.discount_amount,
            2,
        )

    @property
    def is_consistent(self) -> bool:
        return abs(self.final_total - self.expected_final_total) < 0.01

    @classmethod
    def from_bill(cls, bill: dict[str, Any], items_subtotal: float) -> "CartTotals":
        breakdown = bill.get("taxBreakdown") or {}
        totals = cls(
            items_subtotal=items_subtotal,
            tax_amount=float(bill.get("tax") or 0),
            tax_breakdown=TaxBreakdown(
                cgst=float(breakdown.get("cgst") or 0),
                sgst=float(breakdown.get("sgst") or 0),
                igst=float(breakdown.get("igst") or 0),
            ),
            delivery_fee=float(bill.get("shipping") or 0),
            discount_amount=float(bill.get("discount") or 0),
        )
        final_total = bill.get("finalTotal")
        totals.final_total = (
            float(final_total) if final_total is not None else totals.expected_final_total
        )
        return totals


class CartState(BaseModel):
    """Snapshot of the cart mirror; replaced wholesale on every change"""
    items: list[CartItem] = []
    totals: CartTotals = Field(default_factory=CartTotals)
    applied_coupon: Optional[AppliedCoupon] = None

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
