from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Date, ForeignKey, Float, UniqueConstraint, CheckConstraint
from .database import Base

class Ingredient(Base):
    __tablename__ = "ingredients"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Names are not unique; the shopping list merges by lower-cased name
    name: Mapped[str] = mapped_column(String(255), index=True)
    unit: Mapped[str] = mapped_column(String(50), default="")

class Recipe(Base):
    __tablename__ = "recipes"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)

    items = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeIngredient.position",
    )
    steps = relationship(
        "RecipeStep", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeStep.position",
    )

class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    recipe_id: Mapped[str] = mapped_column(String(64), ForeignKey("recipes.id", ondelete="CASCADE"))
    position: Mapped[int] = mapped_column(Integer, default=0)
    # No FK: a recipe may outlive an ingredient it references
    ingredient_id: Mapped[str] = mapped_column(String(64), index=True)
    quantity: Mapped[float] = mapped_column(Float, default=0.0)
    unit: Mapped[str] = mapped_column(String(50), default="")

    recipe = relationship("Recipe", back_populates="items")

class RecipeStep(Base):
    __tablename__ = "recipe_steps"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    recipe_id: Mapped[str] = mapped_column(String(64), ForeignKey("recipes.id", ondelete="CASCADE"))
    position: Mapped[int] = mapped_column(Integer, default=0)
    text: Mapped[str] = mapped_column(String(4000), default="")

    recipe = relationship("Recipe", back_populates="steps")

class Pattern(Base):
    __tablename__ = "patterns"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)

    blocks = relationship(
        "MealBlock", back_populates="pattern", cascade="all, delete-orphan",
        order_by="MealBlock.id",
    )

class WeekOverride(Base):
    __tablename__ = "week_overrides"
    week_start: Mapped[date] = mapped_column(Date, primary_key=True)  # always a Monday

    blocks = relationship(
        "MealBlock", back_populates="override", cascade="all, delete-orphan",
        order_by="MealBlock.id",
    )

class MealBlock(Base):
    __tablename__ = "meal_blocks"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    block_id: Mapped[str] = mapped_column(String(64))
    # exactly one owner: a pattern or a week override
    pattern_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("patterns.id", ondelete="CASCADE"), nullable=True, index=True)
    override_week: Mapped[date | None] = mapped_column(
        Date, ForeignKey("week_overrides.week_start", ondelete="CASCADE"), nullable=True, index=True)
    recipe_id: Mapped[str] = mapped_column(String(64))
    start_day_index: Mapped[int] = mapped_column(Integer)  # 0..6, Monday=0
    duration_days: Mapped[int] = mapped_column(Integer, default=1)

    pattern = relationship("Pattern", back_populates="blocks")
    override = relationship("WeekOverride", back_populates="blocks")

    __table_args__ = (
        UniqueConstraint("pattern_id", "block_id", name="uq_pattern_block"),
        UniqueConstraint("override_week", "block_id", name="uq_override_block"),
        CheckConstraint("(pattern_id IS NULL) != (override_week IS NULL)", name="ck_block_single_owner"),
    )

class Settings(Base):
    __tablename__ = "settings"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)  # single row, id 1
    pattern_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    order = relationship(
        "PatternOrderEntry", back_populates="settings", cascade="all, delete-orphan",
        order_by="PatternOrderEntry.position",
    )

class PatternOrderEntry(Base):
    __tablename__ = "pattern_order"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    settings_id: Mapped[int] = mapped_column(Integer, ForeignKey("settings.id", ondelete="CASCADE"))
    position: Mapped[int] = mapped_column(Integer)
    pattern_id: Mapped[str] = mapped_column(String(64), ForeignKey("patterns.id", ondelete="CASCADE"))

    settings = relationship("Settings", back_populates="order")

    __table_args__ = (UniqueConstraint("settings_id", "pattern_id", name="uq_order_pattern"),)
