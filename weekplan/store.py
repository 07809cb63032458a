import logging
import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from . import models, schemas
from .config import DEFAULT_PATTERN_NAMES
from .dates import week_start
from .schedule import reconcile_order

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1

# ---------- Row <-> schema ----------
def _block_out(row: models.MealBlock) -> schemas.MealBlock:
    return schemas.MealBlock(
        id=row.block_id, recipe_id=row.recipe_id,
        start_day_index=row.start_day_index, duration_days=row.duration_days,
    )

def _block_rows(blocks: List[schemas.MealBlock]) -> List[models.MealBlock]:
    return [models.MealBlock(block_id=b.id, recipe_id=b.recipe_id,
                             start_day_index=b.start_day_index, duration_days=b.duration_days)
            for b in blocks]

def _recipe_out(row: models.Recipe) -> schemas.Recipe:
    return schemas.Recipe(
        id=row.id,
        name=row.name,
        ingredients=[schemas.RecipeIngredient(ingredient_id=it.ingredient_id, quantity=it.quantity, unit=it.unit)
                     for it in row.items],
        steps=[s.text for s in row.steps],
    )

def _pattern_out(row: models.Pattern) -> schemas.Pattern:
    return schemas.Pattern(id=row.id, name=row.name, meal_blocks=[_block_out(b) for b in row.blocks])

def _override_out(row: models.WeekOverride) -> schemas.WeekOverride:
    return schemas.WeekOverride(week_start_date=row.week_start, meal_blocks=[_block_out(b) for b in row.blocks])

def _replace_blocks(db: Session, owner, blocks: List[schemas.MealBlock]) -> None:
    # flush the orphan deletes first so re-used block ids do not trip the unique constraint
    owner.blocks.clear()
    db.flush()
    owner.blocks.extend(_block_rows(blocks))

# ---------- Ingredients ----------
def list_ingredients(db: Session) -> List[schemas.Ingredient]:
    rows = db.query(models.Ingredient).order_by(models.Ingredient.name).all()
    return [schemas.Ingredient(id=r.id, name=r.name, unit=r.unit) for r in rows]

def _write_ingredient(db: Session, ingredient: schemas.Ingredient) -> None:
    row = db.get(models.Ingredient, ingredient.id)
    if not row:
        row = models.Ingredient(id=ingredient.id)
        db.add(row)
    row.name = ingredient.name.strip()
    row.unit = ingredient.unit.strip()

def save_ingredient(db: Session, ingredient: schemas.Ingredient) -> None:
    _write_ingredient(db, ingredient)
    db.commit()

def delete_ingredient(db: Session, ingredient_id: str) -> bool:
    row = db.get(models.Ingredient, ingredient_id)
    if not row:
        return False
    db.delete(row); db.commit()
    return True

# ---------- Recipes ----------
def list_recipes(db: Session) -> List[schemas.Recipe]:
    rows = db.query(models.Recipe).order_by(models.Recipe.name).all()
    return [_recipe_out(r) for r in rows]

def _write_recipe(db: Session, recipe: schemas.Recipe) -> None:
    row = db.get(models.Recipe, recipe.id)
    if not row:
        row = models.Recipe(id=recipe.id)
        db.add(row)
    row.name = recipe.name.strip()
    row.items.clear()
    row.steps.clear()
    db.flush()
    for pos, it in enumerate(recipe.ingredients):
        row.items.append(models.RecipeIngredient(position=pos, ingredient_id=it.ingredient_id,
                                                 quantity=float(it.quantity), unit=it.unit.strip()))
    for pos, text in enumerate(recipe.steps):
        row.steps.append(models.RecipeStep(position=pos, text=text))

def save_recipe(db: Session, recipe: schemas.Recipe) -> None:
    _write_recipe(db, recipe)
    db.commit()

def delete_recipe(db: Session, recipe_id: str) -> bool:
    row = db.get(models.Recipe, recipe_id)
    if not row:
        return False
    db.delete(row); db.commit()
    return True

# ---------- Patterns ----------
def list_patterns(db: Session) -> List[schemas.Pattern]:
    rows = db.query(models.Pattern).order_by(models.Pattern.name).all()
    return [_pattern_out(r) for r in rows]

def get_pattern(db: Session, pattern_id: str) -> Optional[schemas.Pattern]:
    row = db.get(models.Pattern, pattern_id)
    return _pattern_out(row) if row else None

def _write_pattern(db: Session, pattern: schemas.Pattern) -> None:
    row = db.get(models.Pattern, pattern.id)
    if not row:
        row = models.Pattern(id=pattern.id)
        db.add(row)
    row.name = pattern.name.strip()
    _replace_blocks(db, row, pattern.meal_blocks)

def save_pattern(db: Session, pattern: schemas.Pattern) -> None:
    """Create or replace a pattern, block set included."""
    _write_pattern(db, pattern)
    db.commit()
    logger.info("saved pattern %s with %d blocks", pattern.id, len(pattern.meal_blocks))

def replace_pattern_blocks(db: Session, pattern_id: str, blocks: List[schemas.MealBlock]) -> None:
    row = db.get(models.Pattern, pattern_id)
    if row is None:
        raise KeyError(pattern_id)
    _replace_blocks(db, row, blocks)
    db.commit()
    logger.info("replaced blocks of pattern %s (%d blocks)", pattern_id, len(blocks))

def count_patterns(db: Session) -> int:
    return db.query(models.Pattern).count()

def delete_pattern(db: Session, pattern_id: str) -> bool:
    row = db.get(models.Pattern, pattern_id)
    if not row:
        return False
    settings_row = _settings_row(db)
    kept = [e.pattern_id for e in settings_row.order if e.pattern_id != pattern_id]
    _write_order(db, settings_row, kept)
    db.delete(row); db.commit()
    logger.info("deleted pattern %s", pattern_id)
    return True

# ---------- Settings (singleton) ----------
def _settings_row(db: Session) -> models.Settings:
    row = db.get(models.Settings, SETTINGS_ROW_ID)
    if row is None:
        row = models.Settings(id=SETTINGS_ROW_ID, pattern_start_date=None)
        db.add(row); db.flush()
    return row

def _write_order(db: Session, row: models.Settings, order: List[str]) -> None:
    row.order.clear()
    db.flush()
    for pos, pid in enumerate(order):
        row.order.append(models.PatternOrderEntry(position=pos, pattern_id=pid))

def get_settings(db: Session) -> schemas.Settings:
    row = _settings_row(db)
    return schemas.Settings(pattern_start_date=row.pattern_start_date,
                            pattern_order=[e.pattern_id for e in row.order])

def _write_settings(db: Session, settings: schemas.Settings) -> None:
    db.flush()
    settings = reconcile_order(settings, list_patterns(db))
    row = _settings_row(db)
    row.pattern_start_date = week_start(settings.pattern_start_date) if settings.pattern_start_date else None
    _write_order(db, row, settings.pattern_order)

def save_settings(db: Session, settings: schemas.Settings) -> schemas.Settings:
    """Persist settings; the start date is snapped to its Monday and the order
    is reconciled against the patterns that exist."""
    _write_settings(db, settings)
    db.commit()
    return get_settings(db)

# ---------- Week overrides ----------
def get_override(db: Session, week: date) -> Optional[schemas.WeekOverride]:
    row = db.get(models.WeekOverride, week_start(week))
    return _override_out(row) if row else None

def list_overrides(db: Session) -> List[schemas.WeekOverride]:
    rows = db.query(models.WeekOverride).order_by(models.WeekOverride.week_start).all()
    return [_override_out(r) for r in rows]

def _write_override(db: Session, override: schemas.WeekOverride) -> None:
    key = week_start(override.week_start_date)
    row = db.get(models.WeekOverride, key)
    if row is None:
        row = models.WeekOverride(week_start=key)
        db.add(row); db.flush()
        logger.info("created override for week %s", key)
    _replace_blocks(db, row, override.meal_blocks)

def save_override(db: Session, override: schemas.WeekOverride) -> None:
    """Create the override for its week, or replace its block set."""
    _write_override(db, override)
    db.commit()

def delete_override(db: Session, week: date) -> bool:
    key = week_start(week)
    row = db.get(models.WeekOverride, key)
    if not row:
        return False
    db.delete(row); db.commit()
    logger.info("reset week %s to its pattern", key)
    return True

# ---------- Bootstrap ----------
def ensure_defaults(db: Session) -> None:
    """First run: create the default patterns and the settings row."""
    if count_patterns(db) == 0:
        for name in DEFAULT_PATTERN_NAMES:
            db.add(models.Pattern(id=str(uuid.uuid4()), name=name))
        logger.info("created default patterns %s", ", ".join(DEFAULT_PATTERN_NAMES))
    save_settings(db, get_settings(db))

# ---------- Export / import ----------
def export_all(db: Session) -> schemas.DataDump:
    return schemas.DataDump(
        ingredients=list_ingredients(db),
        recipes=list_recipes(db),
        patterns=list_patterns(db),
        settings=get_settings(db),
        week_overrides=list_overrides(db),
    )

def import_all(db: Session, data: schemas.DataDump) -> None:
    """Replace every stored entity with the contents of an export, in one transaction."""
    for model in (models.MealBlock, models.PatternOrderEntry, models.WeekOverride, models.Pattern,
                  models.RecipeIngredient, models.RecipeStep, models.Recipe, models.Ingredient):
        db.query(model).delete()
    db.expire_all()
    for ing in data.ingredients:
        _write_ingredient(db, ing)
    for recipe in data.recipes:
        _write_recipe(db, recipe)
    for pattern in data.patterns:
        _write_pattern(db, pattern)
    for override in data.week_overrides:
        _write_override(db, override)
    _write_settings(db, data.settings)
    db.commit()
    logger.info("imported %d ingredients, %d recipes, %d patterns, %d overrides",
                len(data.ingredients), len(data.recipes), len(data.patterns), len(data.week_overrides))
