"""
Service status endpoints.
GET /status - Liveness of Redis and the database.
GET /stats  - Number of users and file entries.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from apps.api.auth.service import count_users
from apps.api.dependencies import get_db, get_redis
from apps.api.files.service import count_files
from apps.api.redis_client import redis_is_alive

logger = logging.getLogger(__name__)

router = APIRouter(tags=["App"])


def db_is_alive(db: Session) -> bool:
    """True if the database answers SELECT 1."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database ping failed: {e}")
        return False


@router.get("/status")
def get_status(
    db: Session = Depends(get_db),
    redis_client: Any = Depends(get_redis),
) -> dict[str, bool]:
    """Report whether each backing store is reachable."""
    return {"redis": redis_is_alive(redis_client), "db": db_is_alive(db)}


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)) -> dict[str, int]:
    """Count users and file entries."""
    return {"users": count_users(db), "files": count_files(db)}
