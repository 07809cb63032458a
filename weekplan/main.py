import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from .config import LOG_LEVEL
from .database import Base, SessionLocal, engine
from .store import ensure_defaults
from .routers.ingredients import router as ingredients_router
from .routers.recipes import router as recipes_router
from .routers.patterns import router as patterns_router
from .routers.settings import router as settings_router
from .routers.weeks import router as weeks_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

Base.metadata.create_all(bind=engine)

@asynccontextmanager
async def lifespan(_app: FastAPI):
    db = SessionLocal()
    try:
        ensure_defaults(db)
    finally:
        db.close()
    yield

app = FastAPI(title="WeekPlan", version="0.1.0", lifespan=lifespan)

@app.get("/api/health")
def health():
    return JSONResponse({"ok": True})

# mount routers
app.include_router(ingredients_router)
app.include_router(recipes_router)
app.include_router(patterns_router)
app.include_router(settings_router)
app.include_router(weeks_router)
