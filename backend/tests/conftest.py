"""
RootNote Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches storage gets its own SQLite file under
       pytest's tmp_path, so tests never share rows.

Fixtures:
    database_url:       aiosqlite URL of a fresh, empty database file
    store:              opened PlantStore on that database (closed afterwards)
    test_client:        HTTPX AsyncClient wired to an app serving `store`
    sample_plant_data:  JSON body with every plant field populated
"""

import os
import tempfile

# Settings are read at import time; point them away from ./rootnote.db
# before anything from rootnote is imported.
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="rootnote_test_"), "default.db")
)
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rootnote.config import Settings
from rootnote.main import create_app
from rootnote.services.plant_store import PlantStore


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'plants.db'}"


@pytest_asyncio.fixture
async def store(database_url):
    """
    An opened PlantStore on an empty database.

    Usage:
        async def test_list(store):
            assert await store.list_plants() == []
    """
    plant_store = PlantStore(database_url)
    await plant_store.open()
    yield plant_store
    await plant_store.close()


@pytest_asyncio.fixture
async def test_client(store, database_url):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    ASGITransport does not run the lifespan, so the app serves the already
    opened `store` fixture directly.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/plants")
            assert response.status_code == 200
    """
    app = create_app(
        settings=Settings(database_url=database_url, log_level="WARNING"),
        store=store,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_plant_data():
    """Create body with every field set, in the client's camelCase."""
    return {
        "commonName": "Tomato",
        "variety": "Beefsteak",
        "cultivar": "Brandywine",
        "notes": "South bed, needs staking",
        "lastWateredOn": "2025-06-01",
        "seededDate": "2025-03-10",
        "sproutedDate": "2025-03-17",
        "transplantedDate": "2025-04-20",
        "firstFlowerDate": "2025-05-28",
        "firstFruitDate": None,
        "lastPrunedDate": "2025-05-30",
        "lastFertilizedDate": "2025-05-15",
        "lastHarvestedDate": None,
    }
