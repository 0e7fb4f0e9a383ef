import pytest
from sqlalchemy import text

from projectflow_ai.core.database import create_all, create_engine, create_sessionmaker


@pytest.mark.parametrize(
    "raw_url",
    [
        "postgres://u:p@db:5432/app",
        "postgresql://u:p@db:5432/app",
        "postgresql+psycopg2://u:p@db:5432/app",
        "postgresql+asyncpg://u:p@db:5432/app",
    ],
)
def test_create_engine_normalizes_postgres_urls(raw_url: str) -> None:
    engine = create_engine(raw_url)

    assert engine.url.drivername == "postgresql+asyncpg"
    assert engine.url.host == "db"
    assert engine.url.database == "app"


def test_create_engine_keeps_sqlite_url() -> None:
    engine = create_engine("sqlite+aiosqlite:///:memory:")

    assert engine.url.drivername == "sqlite+aiosqlite"


async def test_create_all_and_sessionmaker() -> None:
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await create_all(engine)
    try:
        session_factory = create_sessionmaker(engine)
        async with session_factory() as session:
            rows = await session.execute(text("SELECT name FROM sqlite_master WHERE type = 'table'"))
            tables = {row[0] for row in rows}
        assert {"user", "projects", "tasks", "agent_runs", "agent_run_events"} <= tables
    finally:
        await engine.dispose()
