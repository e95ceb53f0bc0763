import os
import tempfile

import pytest

_TEST_DB_DIR = tempfile.mkdtemp(prefix="roach-reports-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'test.sqlite3')}"
os.environ["PLACES_API_KEY"] = ""


@pytest.fixture(autouse=True, scope="session")
def setup_test_db():
    import asyncio

    from roach_reports.database import create_tables, async_session
    from roach_reports.seed import seed_data

    async def _setup():
        await create_tables()
        async with async_session() as session:
            await seed_data(session)

    asyncio.run(_setup())
