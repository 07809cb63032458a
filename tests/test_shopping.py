import itertools
from weekplan.schemas import Ingredient, MealBlock, Recipe, RecipeIngredient
from weekplan.shopping import aggregate

def block(bid, recipe, start, duration=1):
    return MealBlock(id=bid, recipe_id=recipe, start_day_index=start, duration_days=duration)

def recipe(rid, *items):
    return Recipe(id=rid, name=rid, ingredients=[RecipeIngredient(ingredient_id=i, quantity=q, unit=u) for i, q, u in items])

def test_sums_by_name_and_unit():
    blocks = [block("m1", "r1", 0, 2), block("m2", "r2", 2)]
    recipes = [recipe("r1", ("i1", 2, "cup")), recipe("r2", ("i1", 1, "cup"))]
    ingredients = [Ingredient(id="i1", name="Carrot", unit="cup")]
    items = aggregate(blocks, recipes, ingredients)
    assert [i.model_dump() for i in items] == [
        {"ingredient_id": "i1", "name": "Carrot", "unit": "cup", "quantity": 3.0}
    ]

def test_leftover_days_do_not_multiply_quantities():
    items = aggregate([block("m1", "r1", 0, 4)], [recipe("r1", ("i1", 2, "g"))], [Ingredient(id="i1", name="Rice", unit="g")])
    assert items[0].quantity == 2

def test_same_name_different_records_merge():
    ingredients = [Ingredient(id="i1", name="Onion", unit="pcs"), Ingredient(id="i2", name="onion", unit="pcs")]
    recipes = [recipe("r1", ("i1", 1, "pcs")), recipe("r2", ("i2", 2, "pcs"))]
    items = aggregate([block("a", "r1", 0), block("b", "r2", 1)], recipes, ingredients)
    assert len(items) == 1
    assert items[0].quantity == 3
    assert items[0].ingredient_id == "i1"

def test_different_units_stay_separate():
    ingredients = [Ingredient(id="i1", name="Milk", unit="ml")]
    recipes = [recipe("r1", ("i1", 200, "ml"), ("i1", 1, "cup"))]
    items = aggregate([block("a", "r1", 0)], recipes, ingredients)
    assert sorted((i.unit, i.quantity) for i in items) == [("cup", 1), ("ml", 200)]

def test_unknown_ingredient_and_missing_recipe():
    recipes = [recipe("r1", ("ghost", 2, "g"), ("ghost2", 1, "g"))]
    items = aggregate([block("a", "r1", 0), block("b", "missing", 1)], recipes, [])
    assert len(items) == 1
    assert items[0].name == "Unknown ingredient"
    assert items[0].quantity == 3

def test_sorted_by_name():
    ingredients = [Ingredient(id="1", name="Tomato", unit=""), Ingredient(id="2", name="Basil", unit=""),
                   Ingredient(id="3", name="Garlic", unit="")]
    recipes = [recipe("r1", ("1", 1, "pcs"), ("2", 1, "bunch"), ("3", 2, "cloves"))]
    names = [i.name for i in aggregate([block("a", "r1", 0)], recipes, ingredients)]
    assert names == ["Basil", "Garlic", "Tomato"]

def test_block_order_does_not_change_result():
    ingredients = [Ingredient(id="i1", name="Beans", unit="g"), Ingredient(id="i2", name="Corn", unit="g")]
    recipes = [recipe("r1", ("i1", 100, "g")), recipe("r2", ("i2", 50, "g"), ("i1", 25, "g")),
               recipe("r3", ("i2", 10, "can"))]
    blocks = [block("a", "r1", 0), block("b", "r2", 1), block("c", "r3", 2)]
    expected = aggregate(blocks, recipes, ingredients)
    for perm in itertools.permutations(blocks):
        assert aggregate(list(perm), recipes, ingredients) == expected

def test_sorted_alphabetically_across_case():
    ingredients = [Ingredient(id="1", name="milk", unit="ml"), Ingredient(id="2", name="Zucchini", unit="pcs"),
                   Ingredient(id="3", name="apples", unit="pcs")]
    recipes = [recipe("r1", ("1", 200, "ml"), ("2", 1, "pcs"), ("3", 3, "pcs"))]
    names = [i.name for i in aggregate([block("a", "r1", 0)], recipes, ingredients)]
    assert names == ["apples", "milk", "Zucchini"]
