"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from freshpos.config import get_settings
from freshpos.database import engine, Base, AsyncSessionLocal
from freshpos.exceptions import StoreError
from freshpos.api import products, pos, orders, purchases, customers, reports, dashboard
from freshpos.services.catalog import list_products
from freshpos.services.customers import list_customers
from freshpos.utils.logger import configure_logging

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")

    # Seed demo catalog and customers if the tables are empty
    if settings.SEED_DEFAULT_DATA:
        async with AsyncSessionLocal() as session:
            catalog = await list_products(session)
            known_customers = await list_customers(session)
            logger.info(f"Catalog has {len(catalog)} products, {len(known_customers)} customers")

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=503, content={"detail": exc.message, "code": exc.code})


# Include routers
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(pos.router, prefix="/api/pos", tags=["Point of Sale"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(purchases.router, prefix="/api/purchases", tags=["Purchases"])
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "freshpos.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
