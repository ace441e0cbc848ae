"""Static menu and ingredient catalog."""

from __future__ import annotations

from dataclasses import dataclass, field

from stall.constant import INGREDIENT_CATEGORIES, INGREDIENTS_BY_CATEGORY, MENU_ITEMS
from stall.models import Ingredient, IngredientCategory, MenuItem


@dataclass(frozen=True)
class Catalog:
    """Immutable menu configuration handed to the cart, flows and renderers."""

    categories: tuple[IngredientCategory, ...]
    menu: tuple[MenuItem, ...]
    _ingredients_by_id: dict[str, Ingredient] = field(init=False, repr=False, compare=False)
    _menu_by_id: dict[str, MenuItem] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ingredients: dict[str, Ingredient] = {}
        for category in self.categories:
            for ingredient in category.ingredients:
                if ingredient.ingredient_id in ingredients:
                    raise ValueError(f"Duplicate ingredient id {ingredient.ingredient_id!r}")
                ingredients[ingredient.ingredient_id] = ingredient
        menu_by_id: dict[str, MenuItem] = {}
        for item in self.menu:
            if item.item_id in menu_by_id:
                raise ValueError(f"Duplicate menu item id {item.item_id!r}")
            menu_by_id[item.item_id] = item
        object.__setattr__(self, "_ingredients_by_id", ingredients)
        object.__setattr__(self, "_menu_by_id", menu_by_id)

    def all_ingredients(self) -> tuple[Ingredient, ...]:
        return tuple(self._ingredients_by_id.values())

    def ingredient(self, ingredient_id: str) -> Ingredient | None:
        return self._ingredients_by_id.get(ingredient_id)

    def default_ingredient_ids(self) -> tuple[str, ...]:
        return tuple(i.ingredient_id for i in self._ingredients_by_id.values() if i.default_included)

    def ordered_selection(self, ingredient_ids) -> tuple[str, ...]:
        """Return known ids from ``ingredient_ids`` in catalog order, without duplicates."""
        wanted = set(ingredient_ids)
        return tuple(i for i in self._ingredients_by_id if i in wanted)

    def menu_item(self, item_id: str) -> MenuItem | None:
        return self._menu_by_id.get(item_id)

    def menu_item_by_name(self, name: str) -> MenuItem | None:
        for item in self.menu:
            if item.name == name:
                return item
        return None


def build_catalog(
    categories: dict[str, str] = INGREDIENT_CATEGORIES,
    ingredients_by_category: dict[str, list[dict[str, object]]] = INGREDIENTS_BY_CATEGORY,
    menu_items: list[dict[str, object]] = MENU_ITEMS,
) -> Catalog:
    """Build a :class:`Catalog` from raw configuration tables."""
    return Catalog(
        categories=tuple(
            IngredientCategory(
                key=key,
                label=label,
                ingredients=tuple(
                    Ingredient(
                        ingredient_id=str(raw["id"]),
                        name=str(raw["name"]),
                        price=int(raw["price"]),  # type: ignore[arg-type]
                        default_included=bool(raw["default"]),
                    )
                    for raw in ingredients_by_category.get(key, [])
                ),
            )
            for key, label in categories.items()
        ),
        menu=tuple(
            MenuItem(
                item_id=str(raw["id"]),
                name=str(raw["name"]),
                base_price=int(raw["price"]),  # type: ignore[arg-type]
                category=str(raw["category"]),
                customizable=bool(raw["customizable"]),
            )
            for raw in menu_items
        ),
    )


DEFAULT_CATALOG: Catalog = build_catalog()
