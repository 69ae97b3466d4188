"""Menu models for mock restaurant"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelModel


class FoodType(str, Enum):
    VEG = "Veg"
    NON_VEG = "Non-Veg"


class Variant(CamelModel):
    name: str
    price: float = Field(gt=0)


class MenuItem(CamelModel):
    """Dish on the menu"""
    id: str = Field(alias="_id")
    name: str
    description: str = ""
    price: float = Field(gt=0)
    category: str
    type: FoodType
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    variants: list[Variant] = []
    discount_percentage: float = Field(default=0, ge=0, le=100)
    is_available: bool = True

    def base_price(self, variant: Optional[str] = None) -> Optional[float]:
        """List price for a variant; None if the variant does not exist"""
        if not variant:
            return self.price
        match = next((v for v in self.variants if v.name == variant), None)
        return match.price if match else None

    def effective_price(self, variant: Optional[str] = None) -> Optional[float]:
        """Price after the dish's active discount"""
        price = self.base_price(variant)
        if price is None:
            return None
        return round(price * (1 - self.discount_percentage / 100), 2)
