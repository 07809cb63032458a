from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List
from sqlalchemy.orm import Session
from ..deps import get_db
from .. import store
from ..schemas import Recipe, RecipeIngredient

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

class RecipeIn(BaseModel):
    name: str
    ingredients: List[RecipeIngredient] = []
    steps: List[str] = []

@router.get("", response_model=list[Recipe])
def list_recipes(db: Session = Depends(get_db)):
    return store.list_recipes(db)

@router.put("/{rid}", response_model=dict)
def save_recipe(rid: str, data: RecipeIn, db: Session = Depends(get_db)):
    if not data.name.strip():
        raise HTTPException(400, "Missing recipe fields.")
    steps = [s.strip() for s in data.steps if s.strip()]
    store.save_recipe(db, Recipe(id=rid, name=data.name, ingredients=data.ingredients, steps=steps))
    return {"ok": True}

@router.delete("/{rid}", response_model=dict)
def delete_recipe(rid: str, db: Session = Depends(get_db)):
    store.delete_recipe(db, rid)
    return {"ok": True}
