"""
Fixtures for tests against the Firestore emulator.

Set ``FIRESTORE_EMULATOR_HOST=localhost:8080`` to run them; otherwise every
test in this package is skipped.
"""

import os

import httpx
import pytest
import pytest_asyncio

from postboard import FirestoreDB, Post, User, init_postboard

EMULATOR_HOST = os.environ.get("FIRESTORE_EMULATOR_HOST", "").strip()
PROJECT_ID = os.environ.get("GOOGLE_CLOUD_PROJECT") or "test-project"
IS_EMULATOR = bool(EMULATOR_HOST)


def pytest_collection_modifyitems(config, items):
    if IS_EMULATOR:
        return
    skip = pytest.mark.skip(reason="FIRESTORE_EMULATOR_HOST is not set")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest.fixture()
def emulator_db():
    """Function-scoped so each test's AsyncClient binds to its own event loop."""
    return FirestoreDB(project_id=PROJECT_ID, emulator_host=EMULATOR_HOST)


@pytest.fixture()
def raw_client(emulator_db):
    return emulator_db.client


async def _wipe_emulator():
    url = (
        f"http://{EMULATOR_HOST}/emulator/v1/projects/"
        f"{PROJECT_ID}/databases/(default)/documents"
    )
    async with httpx.AsyncClient() as client:
        await client.delete(url)


@pytest_asyncio.fixture(autouse=True)
async def clean_firestore():
    """Wipe all data before and after each test."""
    if not IS_EMULATOR:
        yield
        return
    await _wipe_emulator()
    yield
    await _wipe_emulator()


@pytest_asyncio.fixture
async def emulator_models(emulator_db):
    init_postboard(emulator_db, [User, Post])
    return {"User": User, "Post": Post}
