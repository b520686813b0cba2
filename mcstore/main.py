# mcstore/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from mcstore.api.routers import carts, health, orders, payments, products, session, shipping, wishlist
from mcstore.data.database import Base, engine
from mcstore.utils.logging import get_logger

# import modeli przed create_all
from mcstore.data.models import LocalSessionModel  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Creating local tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="MC Store Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(wishlist.router)
    app.include_router(orders.router)
    app.include_router(shipping.router)
    app.include_router(payments.router)
    app.include_router(session.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
