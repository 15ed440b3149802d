"""Create the database tables and load the default catalog and demo customers"""
import asyncio
from freshpos.database import engine, Base, AsyncSessionLocal
from freshpos.models import *  # noqa: F401,F403 - Import all models to register them
from freshpos.services.catalog import list_products
from freshpos.services.customers import list_customers


async def init():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        products = await list_products(session)
        customers = await list_customers(session)
    print(f"Database ready: {len(products)} products, {len(customers)} customers.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
