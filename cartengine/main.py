# cartengine/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from cartengine.api import register_routers
from cartengine.api.error_handlers import register_error_handlers
from cartengine.data.database import init_db
from cartengine.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Cart engine started")
    yield
    logger.info("Cart engine shutting down")


def create_app(init_database: bool = True) -> FastAPI:
    app = FastAPI(
        title="Cart Engine",
        version="1.0.0",
        lifespan=lifespan if init_database else None,
    )

    register_error_handlers(app)
    register_routers(app)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
