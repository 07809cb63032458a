from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List, Optional
from sqlalchemy.orm import Session
from ..deps import get_db
from .. import store
from ..dates import to_iso_date, week_start
from ..placement import validate_block_set
from ..schedule import pattern_by_id, resolve_pattern_id
from ..schemas import DataDump, Settings

router = APIRouter(prefix="/api", tags=["settings"])

class SettingsIn(BaseModel):
    pattern_start_date: Optional[date] = None
    pattern_order: List[str] = []

@router.post("/bootstrap", response_model=dict)
def bootstrap(db: Session = Depends(get_db)):
    store.ensure_defaults(db)
    return {
        "patterns": [p.model_dump() for p in store.list_patterns(db)],
        "settings": store.get_settings(db).model_dump(mode="json"),
    }

@router.get("/settings", response_model=Settings)
def get_settings(db: Session = Depends(get_db)):
    return store.get_settings(db)

@router.put("/settings", response_model=Settings)
def save_settings(data: SettingsIn, db: Session = Depends(get_db)):
    if len(set(data.pattern_order)) != len(data.pattern_order):
        raise HTTPException(400, "Pattern order must not repeat a pattern.")
    return store.save_settings(db, Settings(pattern_start_date=data.pattern_start_date, pattern_order=data.pattern_order))

@router.get("/settings/today", response_model=dict)
def current_pattern(db: Session = Depends(get_db)):
    today = date.today()
    settings = store.get_settings(db)
    pattern = pattern_by_id(store.list_patterns(db), resolve_pattern_id(today, settings))
    return {
        "week_start": to_iso_date(week_start(today)),
        "pattern": {"id": pattern.id, "name": pattern.name} if pattern else None,
    }

@router.get("/data/export", response_model=DataDump)
def export_data(db: Session = Depends(get_db)):
    return store.export_all(db)

@router.post("/data/import", response_model=dict)
def import_data(data: DataDump, db: Session = Depends(get_db)):
    if not data.patterns:
        raise HTTPException(400, "Import must contain at least one pattern.")
    owners = [(p.name, p.meal_blocks) for p in data.patterns]
    owners += [(f"week of {o.week_start_date}", o.meal_blocks) for o in data.week_overrides]
    for owner, blocks in owners:
        problem = validate_block_set(blocks)
        if problem:
            raise HTTPException(400, f"{owner}: {problem}")
    store.import_all(db, data)
    return {"ok": True}
