import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from database import Base
from main import app
from routers import rate_limit
from services.local_store import LocalContentStore
from services.remote_store import RemoteContentStore


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest.fixture
def local_store(tmp_path):
    return LocalContentStore(str(tmp_path / "cache"))


@pytest.fixture
def empty_local_store(tmp_path):
    return LocalContentStore(str(tmp_path / "empty_cache"), seed_demo_data=False)


@pytest_asyncio.fixture
async def remote_store(tmp_path):
    db_path = tmp_path / "remote.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield RemoteContentStore(session_maker)
    await engine.dispose()
