# cartengine/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cartengine.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 20))
# postgres only, sqlite waits on its busy timeout instead
DB_LOCK_TIMEOUT_MS = int(os.getenv("DB_LOCK_TIMEOUT_MS", 5000))
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

# cart with content and no activity for this long is treated as abandoned
CART_ABANDON_SECONDS = int(os.getenv("CART_ABANDON_SECONDS", 60 * 60))
CART_SWEEP_INTERVAL_SECONDS = float(os.getenv("CART_SWEEP_INTERVAL_SECONDS", 5 * 60))

TX_RETRY_ATTEMPTS = int(os.getenv("TX_RETRY_ATTEMPTS", 3))
CONFLICT_RETRY_ATTEMPTS = int(os.getenv("CONFLICT_RETRY_ATTEMPTS", 3))

DEFAULT_PAYMENT_METHOD = os.getenv("DEFAULT_PAYMENT_METHOD", "Credit Card")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
