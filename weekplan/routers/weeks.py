from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from ..deps import get_db, settle
from ..placement import change_duration, find_block, place_block, remove_block
from ..relocation import relocate
from ..schemas import MealBlock, ShoppingItem
from ..weeks import ActiveWeek, active_week, commit_blocks, customize_week, reset_week, shopping_list, week_view

router = APIRouter(prefix="/api/weeks", tags=["weeks"])

class PlaceIn(BaseModel):
    block: MealBlock
    confirm: bool = False

class DurationIn(BaseModel):
    duration_days: int = Field(ge=1)

class RelocateIn(BaseModel):
    source_day: int = Field(ge=0, le=6)
    target_day: int = Field(ge=0, le=6)
    confirm: bool = False

def _editable_week(db: Session, day: date) -> ActiveWeek:
    week = active_week(db, day)
    if week.pattern is None and week.override is None:
        raise HTTPException(409, "No pattern is configured for this week.")
    return week

def _commit(db: Session, week: ActiveWeek, blocks) -> dict:
    if blocks is None:
        blocks = week.blocks
    else:
        commit_blocks(db, week, blocks)
    return {"customized": week.customized, "meal_blocks": [b.model_dump() for b in blocks]}

@router.get("/{day}", response_model=dict)
def get_week(day: date, db: Session = Depends(get_db)):
    return week_view(db, day)

@router.post("/{day}/customize", response_model=dict)
def customize(day: date, db: Session = Depends(get_db)):
    try:
        override = customize_week(db, day)
    except ValueError as e:
        raise HTTPException(409, str(e))
    return override.model_dump(mode="json")

@router.delete("/{day}/override", response_model=dict)
def reset(day: date, db: Session = Depends(get_db)):
    return {"reset": reset_week(db, day)}

@router.post("/{day}/blocks", response_model=dict)
def place(day: date, data: PlaceIn, db: Session = Depends(get_db)):
    week = _editable_week(db, day)
    return _commit(db, week, settle(place_block(week.blocks, data.block), data.confirm))

@router.patch("/{day}/blocks/{bid}", response_model=dict)
def change(day: date, bid: str, data: DurationIn, db: Session = Depends(get_db)):
    week = _editable_week(db, day)
    if not find_block(week.blocks, bid):
        raise HTTPException(404, "Not found")
    return _commit(db, week, settle(change_duration(week.blocks, bid, data.duration_days), confirm=False))

@router.delete("/{day}/blocks/{bid}", response_model=dict)
def remove(day: date, bid: str, db: Session = Depends(get_db)):
    week = _editable_week(db, day)
    return _commit(db, week, remove_block(week.blocks, bid))

@router.post("/{day}/relocate", response_model=dict)
def move(day: date, data: RelocateIn, db: Session = Depends(get_db)):
    week = active_week(db, day)
    if not week.customized:
        raise HTTPException(409, "Customize this week before moving meals.")
    return _commit(db, week, settle(relocate(week.blocks, data.source_day, data.target_day), data.confirm))

@router.get("/{day}/shopping-list", response_model=list[ShoppingItem])
def get_shopping_list(day: date, db: Session = Depends(get_db)):
    return shopping_list(db, day)
