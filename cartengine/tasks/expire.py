# cartengine/tasks/expire.py
from cartengine.celery_worker import celery_app
from cartengine.data.database import SessionLocal
from cartengine.services.cart_lifecycle import CartLifecycle
from cartengine.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="cartengine.tasks.expire.disable_abandoned_carts_task")
def disable_abandoned_carts_task(idle_seconds: int | None = None):
    logger.info("Abandoned cart sweep started")

    disabled = CartLifecycle(SessionLocal).disable_abandoned_carts(idle_seconds)

    logger.info(f"Abandoned cart sweep finished, disabled carts: {disabled}")
    return {"disabled": disabled}
