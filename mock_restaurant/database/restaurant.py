"""Restaurant settings for mock restaurant"""

import os
import math
from typing import Optional

from ..models.restaurant import Coordinates, Restaurant

EARTH_RADIUS_KM = 6371.0


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle (haversine) distance"""
    lat1, lng1, lat2, lng2 = map(math.radians, (a.lat, a.lng, b.lat, b.lng))
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


class RestaurantDatabase:
    """In-memory restaurant settings"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.restaurant = Restaurant(
            name=os.getenv("RESTAURANT_NAME", "Spice Route Kitchen"),
            is_open=True,
            location=Coordinates(
                lat=_env_float("RESTAURANT_LAT", 12.9716),
                lng=_env_float("RESTAURANT_LNG", 77.5946),
            ),
            interstate=os.getenv("RESTAURANT_INTERSTATE", "false").lower() == "true",
        )

    def get(self) -> Restaurant:
        return self.restaurant

    def set_open(self, is_open: bool) -> Restaurant:
        self.restaurant.is_open = is_open
        return self.restaurant

    def delivery_fee(self, location: Optional[Coordinates]) -> float:
        """
        Delivery fee for a drop location.

        Flat default fee when no coordinates are known; otherwise the base
        fee inside the free radius plus a per-km charge beyond it.
        """
        restaurant = self.restaurant
        if location is None:
            return restaurant.default_delivery_fee

        distance = distance_km(restaurant.location, location)
        extra_km = max(0.0, distance - restaurant.free_delivery_radius_km)
        return round(restaurant.base_delivery_fee + math.ceil(extra_km) * restaurant.per_km_fee, 2)


# Singleton instance
restaurant_db = RestaurantDatabase()
