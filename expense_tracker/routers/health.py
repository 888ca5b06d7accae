from fastapi import APIRouter, Depends

from expense_tracker.core.config import Settings
from expense_tracker.db.dal import Database
from expense_tracker.routers.expenses import get_app_settings, get_db

router = APIRouter(tags=["system"])


@router.get("/health", summary="Liveness check including a store read")
def healthcheck(db: Database = Depends(get_db), settings: Settings = Depends(get_app_settings)):
    db.ping()
    return {"status": "ok", "version": settings.version}
