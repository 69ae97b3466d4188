"""Restaurant status routes for mock restaurant"""

import logging
from fastapi import APIRouter
from pydantic import Field

from ..models.base import CamelModel
from ..models.restaurant import Restaurant
from ..database.restaurant import restaurant_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurant", tags=["Restaurant"])


class RestaurantStatusRequest(CamelModel):
    is_open: bool = Field(description="Whether the kitchen accepts orders")


@router.get("", response_model=Restaurant)
async def get_restaurant():
    """Restaurant details, including whether it is accepting orders"""
    return restaurant_db.get()


@router.put("/status", response_model=Restaurant)
async def set_restaurant_status(request: RestaurantStatusRequest):
    """Open or close the kitchen"""
    restaurant = restaurant_db.set_open(request.is_open)
    logger.info(f"Restaurant is now {'open' if restaurant.is_open else 'closed'}")
    return restaurant
