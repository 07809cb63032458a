from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from sqlalchemy.orm import Session
from ..deps import get_db, settle
from .. import store
from ..placement import change_duration, find_block, place_block, remove_block, validate_block_set
from ..schedule import move_in_order, next_pattern_name
from ..schemas import MealBlock, Pattern

router = APIRouter(prefix="/api/patterns", tags=["patterns"])

class NewPatternIn(BaseModel):
    id: str
    name: Optional[str] = None

class PatternIn(BaseModel):
    name: str
    meal_blocks: List[MealBlock] = []

class MoveIn(BaseModel):
    direction: Literal[-1, 1]

class PlaceIn(BaseModel):
    block: MealBlock
    confirm: bool = False

class DurationIn(BaseModel):
    duration_days: int = Field(ge=1)

def _pattern_or_404(db: Session, pid: str) -> Pattern:
    pattern = store.get_pattern(db, pid)
    if not pattern:
        raise HTTPException(404, "Not found")
    return pattern

@router.get("", response_model=list[Pattern])
def list_patterns(db: Session = Depends(get_db)):
    return store.list_patterns(db)

@router.post("", response_model=Pattern)
def add_pattern(data: NewPatternIn, db: Session = Depends(get_db)):
    if store.get_pattern(db, data.id):
        raise HTTPException(400, "Pattern already exists.")
    name = (data.name or "").strip() or next_pattern_name(store.list_patterns(db))
    pattern = Pattern(id=data.id, name=name)
    store.save_pattern(db, pattern)
    # new patterns join the end of the cycle
    store.save_settings(db, store.get_settings(db))
    return pattern

@router.get("/{pid}", response_model=Pattern)
def get_pattern(pid: str, db: Session = Depends(get_db)):
    return _pattern_or_404(db, pid)

@router.put("/{pid}", response_model=dict)
def save_pattern(pid: str, data: PatternIn, db: Session = Depends(get_db)):
    if not data.name.strip():
        raise HTTPException(400, "Missing pattern fields.")
    problem = validate_block_set(data.meal_blocks)
    if problem:
        raise HTTPException(400, problem)
    store.save_pattern(db, Pattern(id=pid, name=data.name, meal_blocks=data.meal_blocks))
    store.save_settings(db, store.get_settings(db))
    return {"ok": True}

@router.delete("/{pid}", response_model=dict)
def delete_pattern(pid: str, db: Session = Depends(get_db)):
    if not store.get_pattern(db, pid):
        return {"ok": True}
    if store.count_patterns(db) <= 1:
        raise HTTPException(409, "You must keep at least one pattern.")
    store.delete_pattern(db, pid)
    return {"ok": True}

@router.post("/{pid}/move", response_model=dict)
def move_pattern(pid: str, data: MoveIn, db: Session = Depends(get_db)):
    _pattern_or_404(db, pid)
    settings = store.save_settings(db, move_in_order(store.get_settings(db), pid, data.direction))
    return {"pattern_order": settings.pattern_order}

@router.post("/{pid}/blocks", response_model=dict)
def place_pattern_block(pid: str, data: PlaceIn, db: Session = Depends(get_db)):
    pattern = _pattern_or_404(db, pid)
    blocks = settle(place_block(pattern.meal_blocks, data.block), data.confirm)
    if blocks is not None:
        store.replace_pattern_blocks(db, pid, blocks)
    return {"meal_blocks": [b.model_dump() for b in (blocks if blocks is not None else pattern.meal_blocks)]}

@router.patch("/{pid}/blocks/{bid}", response_model=dict)
def change_pattern_block(pid: str, bid: str, data: DurationIn, db: Session = Depends(get_db)):
    pattern = _pattern_or_404(db, pid)
    if not find_block(pattern.meal_blocks, bid):
        raise HTTPException(404, "Not found")
    blocks = settle(change_duration(pattern.meal_blocks, bid, data.duration_days), confirm=False)
    if blocks is not None:
        store.replace_pattern_blocks(db, pid, blocks)
    return {"meal_blocks": [b.model_dump() for b in (blocks if blocks is not None else pattern.meal_blocks)]}

@router.delete("/{pid}/blocks/{bid}", response_model=dict)
def remove_pattern_block(pid: str, bid: str, db: Session = Depends(get_db)):
    pattern = _pattern_or_404(db, pid)
    blocks = remove_block(pattern.meal_blocks, bid)
    store.replace_pattern_blocks(db, pid, blocks)
    return {"meal_blocks": [b.model_dump() for b in blocks]}
