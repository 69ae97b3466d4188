"""Mock menu database"""

from typing import Optional

from ..models.menu import FoodType, MenuItem, Variant


def _seed_menu() -> dict[str, MenuItem]:
    items = [
        MenuItem(
            id="dish-001",
            name="Masala Dosa",
            description="Crisp rice crepe with spiced potato filling, sambar and chutney.",
            price=120,
            category="South Indian",
            type=FoodType.VEG,
            image_url="/static/images/masala-dosa.jpg",
        ),
        MenuItem(
            id="dish-002",
            name="Veg Samosa Plate",
            description="Two Punjabi samosas with mint and tamarind chutney.",
            price=100,
            category="Snacks",
            type=FoodType.VEG,
            image_url="/static/images/samosa.jpg",
        ),
        MenuItem(
            id="dish-003",
            name="Masala Chai",
            description="Ginger and cardamom tea.",
            price=50,
            category="Beverages",
            type=FoodType.VEG,
            image_url="/static/images/chai.jpg",
        ),
        MenuItem(
            id="dish-004",
            name="Butter Chicken",
            description="Tandoori chicken in a tomato and butter gravy.",
            price=380,
            category="Main Course",
            type=FoodType.NON_VEG,
            image_url="/static/images/butter-chicken.jpg",
            variants=[Variant(name="Half", price=220), Variant(name="Full", price=380)],
        ),
        MenuItem(
            id="dish-005",
            name="Paneer Tikka",
            description="Char-grilled cottage cheese with peppers and onions.",
            price=280,
            category="Starters",
            type=FoodType.VEG,
            image_url="/static/images/paneer-tikka.jpg",
            discount_percentage=10,
        ),
        MenuItem(
            id="dish-006",
            name="Chicken Biryani",
            description="Dum-cooked basmati rice with chicken, served with raita.",
            price=320,
            category="Biryani",
            type=FoodType.NON_VEG,
            image_url="/static/images/chicken-biryani.jpg",
        ),
        MenuItem(
            id="dish-007",
            name="Gulab Jamun",
            description="Two milk dumplings soaked in rose syrup.",
            price=90,
            category="Desserts",
            type=FoodType.VEG,
            image_url="/static/images/gulab-jamun.jpg",
        ),
        MenuItem(
            id="dish-008",
            name="Mutton Rogan Josh",
            description="Kashmiri slow-cooked mutton curry.",
            price=420,
            category="Main Course",
            type=FoodType.NON_VEG,
            image_url="/static/images/rogan-josh.jpg",
            is_available=False,
        ),
    ]
    return {item.id: item for item in items}


class MenuDatabase:
    """In-memory menu for mock restaurant"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.items = _seed_menu()

    def get_item(self, product_id: str) -> Optional[MenuItem]:
        """Get a dish by ID"""
        return self.items.get(product_id)

    def list_items(
        self,
        category: Optional[str] = None,
        food_type: Optional[FoodType] = None,
        search: Optional[str] = None,
        available_only: bool = True,
    ) -> list[MenuItem]:
        """List dishes with optional filters"""
        results = list(self.items.values())

        if category:
            results = [i for i in results if i.category.lower() == category.lower()]

        if food_type:
            results = [i for i in results if i.type == food_type]

        if search:
            search_lower = search.lower()
            results = [
                i for i in results
                if search_lower in i.name.lower() or search_lower in i.description.lower()
            ]

        if available_only:
            results = [i for i in results if i.is_available]

        return results


# Singleton instance
menu_db = MenuDatabase()
