# cartengine/celery_worker.py
from celery import Celery

from cartengine.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CART_SWEEP_INTERVAL_SECONDS,
)

celery_app = Celery(
    "cartengine",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# import tasks explicitly so the worker registers them
celery_app.conf.imports = ("cartengine.tasks.expire",)

celery_app.conf.beat_schedule = {
    "disable-abandoned-carts": {
        "task": "cartengine.tasks.expire.disable_abandoned_carts_task",
        "schedule": CART_SWEEP_INTERVAL_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
