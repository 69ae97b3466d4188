"""Restaurant models for mock restaurant"""

from .base import CamelModel


class Coordinates(CamelModel):
    lat: float
    lng: float


class Restaurant(CamelModel):
    """The single restaurant behind the storefront"""
    name: str
    is_open: bool = True
    location: Coordinates
    # IGST instead of CGST + SGST when the kitchen bills across state lines
    interstate: bool = False
    free_delivery_radius_km: float = 3.0
    base_delivery_fee: float = 30.0
    per_km_fee: float = 8.0
    default_delivery_fee: float = 40.0
