"""
Test fixtures - in-memory SQLite database + HTTP client
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from freshpos.database import Base, get_db
from freshpos.main import app
from freshpos.models.customer import Customer
from freshpos.models.product import Product, ProductCategory, UnitType


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: eggs, chicken, a low-stock cheese + 1 customer"""
    eggs = Product(
        id="p-eggs", name="Huevo Rosado", category=ProductCategory.EGGS, unit=UnitType.UNIT,
        price=0.18, cost=0.12, stock=1500, min_stock=300,
    )
    chicken = Product(
        id="p-chicken", name="Pechuga de Pollo", category=ProductCategory.CHICKEN, unit=UnitType.KG,
        price=8.50, cost=5.80, stock=45.5, min_stock=10,
    )
    cheese = Product(
        id="p-cheese", name="Queso Fresco", category=ProductCategory.CHEESE, unit=UnitType.KG,
        price=12.00, cost=9.00, stock=2, min_stock=3,
    )
    juan = Customer(
        id="c-juan", name="Juan Perez", phone="999888777", address="Av. Principal 123",
        is_frequent=True, total_purchases=1500.0,
    )

    db_session.add_all([eggs, chicken, cheese, juan])
    await db_session.commit()

    return {"eggs": eggs, "chicken": chicken, "cheese": cheese, "juan": juan}


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def empty_client(db_session):
    """Client over an empty database (exercises default seeding)"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
