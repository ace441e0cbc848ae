"""Editable static menu and ingredient configuration."""

from __future__ import annotations

INGREDIENT_CATEGORIES: dict[str, str] = {
    "VEGETABLES": "Vegetables",
    "PULSES": "Pulses",
    "SAUCES_AND_TOPPINGS": "Sauces & Toppings",
}

# Prices in rupees. Zero-price rows can be toggled off without changing the total.
INGREDIENTS_BY_CATEGORY: dict[str, list[dict[str, object]]] = {
    "VEGETABLES": [
        {"id": "onion", "name": "Onion", "price": 0, "default": True},
        {"id": "corn", "name": "Corn", "price": 0, "default": True},
        {"id": "capsicum", "name": "Capsicum", "price": 0, "default": True},
        {"id": "tomato", "name": "Tomato", "price": 0, "default": True},
        {"id": "mushroom", "name": "Mushroom", "price": 10, "default": False},
        {"id": "cabbage", "name": "Cabbage", "price": 0, "default": True},
        {"id": "carrot", "name": "Carrot", "price": 0, "default": True},
        {"id": "beetroot", "name": "Beetroot", "price": 0, "default": True},
    ],
    "PULSES": [
        {"id": "chana", "name": "Chana", "price": 0, "default": False},
        {"id": "sprouts", "name": "Sprouts", "price": 0, "default": False},
        {"id": "bean", "name": "Bean", "price": 0, "default": False},
    ],
    "SAUCES_AND_TOPPINGS": [
        {"id": "cheese", "name": "Cheese (Extra)", "price": 15, "default": False},
        {"id": "paneer", "name": "Add Paneer", "price": 20, "default": False},
        {"id": "red-ketchup", "name": "Red Ketchup", "price": 0, "default": True},
        {"id": "schezwan", "name": "Schezwan Chutney", "price": 0, "default": True},
        {"id": "mayonnaise", "name": "Mayonnaise", "price": 10, "default": False},
        {"id": "tandoori-sauce", "name": "Tandoori Sauce", "price": 10, "default": False},
    ],
}

MENU_ITEMS: list[dict[str, object]] = [
    {"id": "frankie", "name": "Frankie", "price": 60, "category": "Rolls", "customizable": True},
    {"id": "bhel", "name": "Bhel Puri", "price": 30, "category": "Chaat", "customizable": False},
    {"id": "mix-chips", "name": "Mix Chips (Large)", "price": 40, "category": "Snacks", "customizable": True},
]
