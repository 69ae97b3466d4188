"""Menu API routes for mock restaurant"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from ..models.menu import FoodType, MenuItem
from ..database.menu import menu_db

router = APIRouter(prefix="/api/menu", tags=["Menu"])


@router.get("", response_model=list[MenuItem])
async def list_menu(
    category: Optional[str] = Query(None, description="Filter by category"),
    food_type: Optional[FoodType] = Query(None, alias="type", description="Veg or Non-Veg"),
    search: Optional[str] = Query(None, description="Search name and description"),
    include_unavailable: bool = Query(False, alias="includeUnavailable"),
):
    """List dishes on the menu"""
    return menu_db.list_items(
        category=category,
        food_type=food_type,
        search=search,
        available_only=not include_unavailable,
    )


@router.get("/{product_id}", response_model=MenuItem)
async def get_menu_item(product_id: str):
    """Get dish details"""
    item = menu_db.get_item(product_id)
    if not item:
        raise HTTPException(status_code=404, detail="Product not found")
    return item
