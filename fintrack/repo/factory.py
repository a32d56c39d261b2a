"""Select and initialize the configured property store."""

import logging

from fintrack.config import Settings
from fintrack.repo.base import PropertyRepo
from fintrack.repo.file import FileRepo
from fintrack.repo.memory import MemoryRepo
from fintrack.repo.sql import SqlRepo

logger = logging.getLogger(__name__)


async def create_repo(settings: Settings) -> PropertyRepo:
    """Build the store named by settings.data_store and initialize it.

    Unknown store names fall back to memory.
    """
    store = settings.data_store.lower()
    if store == "file":
        repo: PropertyRepo = FileRepo(settings.data_file)
    elif store == "sql":
        repo = SqlRepo(settings.database_url, echo=settings.debug)
    else:
        if store != "memory":
            logger.warning("Unknown data store %r, falling back to memory", settings.data_store)
        repo = MemoryRepo()

    await repo.initialize()
    logger.info("Using %s property store", type(repo).__name__)
    return repo
