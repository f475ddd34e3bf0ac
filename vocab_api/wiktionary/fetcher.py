from __future__ import annotations

import asyncio
import random
from collections import defaultdict
from time import monotonic
from typing import Any, Dict, List

from aiohttp import ClientError, ClientSession, ClientTimeout
from loguru import logger
from ujson import loads
from yarl import URL

from vocab_api.shared import CancelToken
from vocab_api.shared.config import SCRAPER
from vocab_api.words.errors import UpstreamUnavailable, WordNotFound

SUGGESTION_LIMIT = 10


class DocumentFetcher:
    """
    Retrieve pages and suggestion lists from one Wiktionary edition.

    Requests to the same domain are spaced by a fixed delay plus a random
    jitter, whichever fetcher issues them.
    """

    lock: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
    last_request: Dict[str, float] = {}

    def __init__(
        self,
        session: ClientSession,
        base_url: str,
        *,
        timeout: float = SCRAPER.TIMEOUT,
        delay: float = SCRAPER.DELAY,
        jitter: float = SCRAPER.JITTER,
    ) -> None:
        self.session = session
        self.base_url = URL(base_url)
        self.timeout = ClientTimeout(total=timeout)
        self.delay = delay
        self.jitter = jitter

    @property
    def domain(self) -> str:
        return self.base_url.host or str(self.base_url)

    def page_url(self, headword: str) -> URL:
        return self.base_url.with_path(f"/wiki/{headword.replace(' ', '_')}")

    def suggestion_url(self, prefix: str, limit: int = SUGGESTION_LIMIT) -> URL:
        return self.base_url.with_path("/w/rest.php/v1/search/title").with_query(
            q=prefix, limit=limit
        )

    async def fetch_page(self, headword: str, token: CancelToken) -> str:
        return await self._get(self.page_url(headword), token)

    async def fetch_suggestions(
        self, prefix: str, token: CancelToken, limit: int = SUGGESTION_LIMIT
    ) -> List[str]:
        data = await self._get(self.suggestion_url(prefix, limit), token, json=True)
        return [page["title"] for page in data.get("pages", []) if page.get("title")]

    async def _throttle(self) -> None:
        async with self.lock[self.domain]:
            last = self.last_request.get(self.domain)
            if last is not None:
                wait = self.delay + random.uniform(0, self.jitter) - (monotonic() - last)
                if wait > 0:
                    await asyncio.sleep(wait)

            self.last_request[self.domain] = monotonic()

    async def _get(self, url: URL, token: CancelToken, json: bool = False) -> Any:
        token.raise_if_cancelled()
        await self._throttle()
        token.raise_if_cancelled()

        logger.debug("Requesting {}", url)
        try:
            async with self.session.get(url, timeout=self.timeout) as response:
                if response.status == 404:
                    raise WordNotFound(f"{url} does not exist")

                if response.status != 200:
                    raise UpstreamUnavailable(
                        f"{url} responded with status {response.status}"
                    )

                if json:
                    return await response.json(loads=loads, content_type=None)

                return await response.text()
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise UpstreamUnavailable(f"{url} could not be fetched: {exc!r}") from exc
