from typing import Dict, List, Tuple
from .schemas import Ingredient, MealBlock, Recipe, ShoppingItem

UNKNOWN_INGREDIENT = "Unknown ingredient"

def aggregate(blocks: List[MealBlock], recipes: List[Recipe], ingredients: List[Ingredient]) -> List[ShoppingItem]:
    """Total the ingredients needed to cook every block once.

    Lines merge on (lower-cased ingredient name, unit), so two ingredient
    records with the same name and unit end up on one line.
    """
    recipe_map = {r.id: r for r in recipes}
    ingredient_map = {i.id: i for i in ingredients}
    agg: Dict[Tuple[str, str], ShoppingItem] = {}
    for block in blocks:
        recipe = recipe_map.get(block.recipe_id)
        if recipe is None:
            continue
        for it in recipe.ingredients:
            ingredient = ingredient_map.get(it.ingredient_id)
            name = ingredient.name if ingredient else UNKNOWN_INGREDIENT
            key = (name.lower(), it.unit)
            if key not in agg:
                agg[key] = ShoppingItem(ingredient_id=it.ingredient_id, name=name, unit=it.unit, quantity=0.0)
            agg[key].quantity += it.quantity
    return sorted(agg.values(), key=lambda item: (item.name.casefold(), item.name, item.unit))
