from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e}")
        database = "unavailable"

    return {"status": "ok" if database == "ok" else "degraded", "database": database}
