# health checks (DB / Redis probes on ?deep=true)

import logging

import redis
from fastapi import APIRouter
from sqlalchemy import text

from stylist.core.config import settings
from stylist.db.session import engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(deep: bool = False):
    if not deep:
        return {"status": "ok"}

    checks = {}
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        checks["db"] = "ok"
    except Exception as e:
        logger.warning("health.db_failed err=%s", e)
        checks["db"] = "error"

    try:
        redis.from_url(settings.REDIS_URL, socket_connect_timeout=2).ping()
        checks["redis"] = "ok"
    except redis.RedisError as e:
        logger.warning("health.redis_failed err=%s", e)
        checks["redis"] = "error"

    status = "ok" if all(v == "ok" for v in checks.values()) else "degraded"
    return {"status": status, **checks}
