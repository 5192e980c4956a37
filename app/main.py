import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.db.session import Database
from app.routers import (
    bundles,
    collections,
    customers,
    delivery_options,
    homepage_settings,
    mailing_list,
    orders,
    personalized_orders,
    pricing_config,
    product_types,
    products,
    sub_categories,
    system,
    users,
)

logger = logging.getLogger("app")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app_started", extra={"project": settings.project_name})
        yield
        database.close()
        logger.info("app_stopped")

    app = FastAPI(
        title=settings.project_name,
        description="E-commerce administration API",
        openapi_url="/swagger.json",
        docs_url="/docs",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (
        system,
        users,
        customers,
        product_types,
        sub_categories,
        products,
        delivery_options,
        orders,
        personalized_orders,
        bundles,
        collections,
        pricing_config,
        homepage_settings,
        mailing_list,
    ):
        app.include_router(module.router)
    return app


app = create_app()
