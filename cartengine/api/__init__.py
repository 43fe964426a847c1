# cartengine/api/__init__.py
from fastapi import FastAPI

from cartengine.api.routers import cart_lines, carts, health, orders, users


def register_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(cart_lines.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
