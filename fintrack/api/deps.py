"""FastAPI dependency injection."""

import asyncio

from fintrack.config import settings
from fintrack.repo.base import PropertyRepo
from fintrack.repo.factory import create_repo

_repo: PropertyRepo | None = None
_repo_lock = asyncio.Lock()


async def get_repo() -> PropertyRepo:
    global _repo
    if _repo is None:
        # Concurrent first requests share one store
        async with _repo_lock:
            if _repo is None:
                _repo = await create_repo(settings)
    return _repo


async def close_repo() -> None:
    global _repo
    async with _repo_lock:
        if _repo is not None:
            await _repo.close()
            _repo = None
