"""MongoDB access helpers for the orders app.

Views run the async controller through ``async_to_sync``, which may use a
different event loop per request. Motor clients are bound to the loop
they first run on, so a client is opened and closed around each use
instead of being shared at module level.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from django.conf import settings
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection


def _client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        settings.MONGO_URL,
        serverSelectionTimeoutMS=getattr(settings, "MONGO_TIMEOUT_MS", 5000),
    )


@asynccontextmanager
async def get_collection(name: str) -> AsyncIterator[AsyncIOMotorCollection]:
    """Yield the named collection from the configured database.

    The underlying client is closed on context exit.

    Args:
        name: Collection name, e.g. ``"orders"``.

    Yields:
        AsyncIOMotorCollection: Collection handle bound to the running loop.
    """
    client = _client()
    try:
        yield client[settings.MONGO_DB_NAME][name]
    finally:
        client.close()


async def ping() -> bool:
    """Return True when the server answers a ``ping`` command."""
    client = _client()
    try:
        await client.admin.command("ping")
        return True
    finally:
        client.close()
