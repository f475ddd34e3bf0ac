from __future__ import annotations

import asyncio
import sys

from aiohttp import AsyncResolver, ClientSession, TCPConnector
from asyncpg import Pool
from cashews import cache
from fastapi import FastAPI
from loguru import logger

from vocab_api.wiktionary import ScraperRegistry
from vocab_api.wiktionary.adapter import WiktionaryAdapter
from vocab_api.wiktionary.lookup import LookupService
from vocab_api.words.repository import WordRepository, create_pool
from vocab_api.words.service import WordService
from .config import CACHE, SCRAPER

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

DEFAULT_HEADERS = {
    "User-Agent": SCRAPER.USER_AGENT,
}


class Services:
    app: FastAPI
    session: ClientSession
    pool: Pool
    repository: WordRepository
    registry: ScraperRegistry
    lookup: LookupService
    words: WordService

    async def setup(self, app: FastAPI) -> None:
        cache.setup(CACHE.URL)
        self.app = app
        self.session = ClientSession(
            headers=DEFAULT_HEADERS,
            connector=TCPConnector(resolver=AsyncResolver()),
        )
        self.pool = await create_pool()
        self.repository = WordRepository(self.pool)
        await self.repository.setup()

        self.registry = ScraperRegistry.from_session(self.session)
        self.lookup = LookupService(self.registry, WiktionaryAdapter())
        self.words = WordService(self.repository, self.lookup)
        logger.info("Serving {}", ", ".join(self.registry.languages))

    async def close(self) -> None:
        if hasattr(self, "session"):
            await self.session.close()

        if hasattr(self, "pool"):
            await self.pool.close()


services = Services()
