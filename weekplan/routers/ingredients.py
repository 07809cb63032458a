from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from ..deps import get_db
from .. import store
from ..schemas import Ingredient

router = APIRouter(prefix="/api/ingredients", tags=["ingredients"])

class IngredientIn(BaseModel):
    name: str
    unit: str

@router.get("", response_model=list[Ingredient])
def list_ingredients(db: Session = Depends(get_db)):
    return store.list_ingredients(db)

@router.put("/{iid}", response_model=dict)
def save_ingredient(iid: str, data: IngredientIn, db: Session = Depends(get_db)):
    if not data.name.strip() or not data.unit.strip():
        raise HTTPException(400, "Missing ingredient fields.")
    store.save_ingredient(db, Ingredient(id=iid, name=data.name, unit=data.unit))
    return {"ok": True}

@router.delete("/{iid}", response_model=dict)
def delete_ingredient(iid: str, db: Session = Depends(get_db)):
    store.delete_ingredient(db, iid)
    return {"ok": True}
