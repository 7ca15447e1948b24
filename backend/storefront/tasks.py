# storefront/tasks.py
import json
import logging

import redis
from celery import Celery

from . import config, seed
from .database import SessionLocal

logger = logging.getLogger(__name__)

celery_app = Celery("storefront", broker=config.BROKER_URL, backend=config.RESULT_BACKEND)

r = redis.Redis.from_url(config.REDIS_URL, decode_responses=True)

PROGRESS_TTL = 3600


def progress_key(task_id: str) -> str:
    return f"seed_progress:{task_id}"


def set_progress(task_id: str, percent: int, status: str, meta=None):
    """
    Store progress information for a given task in Redis.
    Frontend /sse/progress/{task_id} reads this.
    """
    key = progress_key(task_id)
    payload = {"percent": percent, "status": status, "meta": meta or {}}
    r.set(key, json.dumps(payload))
    r.expire(key, PROGRESS_TTL)


def get_progress(task_id: str):
    val = r.get(progress_key(task_id))
    return json.loads(val) if val else None


@celery_app.task(bind=True)
def seed_catalog_task(self, reset: bool = True):
    """Replace the catalog with the demo categories and products."""
    task_id = self.request.id
    db = SessionLocal()
    try:
        set_progress(task_id, 0, "starting")
        counts = seed.seed_catalog(
            db,
            reset=reset,
            progress=lambda percent, status: set_progress(task_id, percent, status),
        )
        set_progress(task_id, 100, "done", counts)
        return {"status": "ok", **counts}
    except Exception as e:
        set_progress(task_id, 100, "error", {"detail": str(e)})
        logger.exception("Seeding task %s failed", task_id)
        # re-raise so the worker records the failure
        raise
    finally:
        db.close()
