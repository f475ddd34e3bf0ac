from __future__ import annotations

from typing import Dict, Iterable, List, Protocol

from aiohttp import ClientSession
from bs4 import BeautifulSoup
from cashews import cache
from loguru import logger

from vocab_api.shared import CancelToken, executor_function
from vocab_api.shared.config import SCRAPER
from vocab_api.words.errors import UnsupportedLanguage, WordNotFound
from .extraction import ContentExtractor
from .fetcher import DocumentFetcher
from .models import RelatedResponse, ScrapedWord
from .profiles import PROFILES, LanguageProfile
from .structure import StructureDiscovery


class Scraper(Protocol):
    language: str

    async def fetch_word(self, text: str, token: CancelToken) -> ScrapedWord:
        ...

    async def fetch_related(self, text: str, token: CancelToken) -> RelatedResponse:
        ...

    async def fetch_suggestions(self, prefix: str, token: CancelToken) -> List[str]:
        ...


@cache(ttl="1h", key="{language}:{prefix}", prefix="wiktionary:suggestions")
async def cached_suggestions(
    fetcher: DocumentFetcher, language: str, prefix: str, token: CancelToken
) -> List[str]:
    return await fetcher.fetch_suggestions(prefix, token)


class WiktionaryScraper:
    def __init__(self, profile: LanguageProfile, fetcher: DocumentFetcher) -> None:
        self.profile = profile
        self.fetcher = fetcher
        self.discovery = StructureDiscovery(profile)
        self.extractor = ContentExtractor(profile)

    def __repr__(self) -> str:
        return f"<WiktionaryScraper language={self.language!r}>"

    @property
    def language(self) -> str:
        return self.profile.code

    async def fetch_word(self, text: str, token: CancelToken) -> ScrapedWord:
        html = await self.fetcher.fetch_page(text, token)
        word = await self.parse(html, text)
        word.url = str(self.fetcher.page_url(text))
        logger.info(
            "Scraped {} ({}) with {} definitions",
            text,
            self.language,
            len(word.definitions),
        )
        return word

    async def fetch_related(self, text: str, token: CancelToken) -> RelatedResponse:
        word = await self.fetch_word(text, token)
        return RelatedResponse(
            text=word.text,
            language=word.language,
            synonyms=word.synonyms,
            antonyms=word.antonyms,
        )

    async def fetch_suggestions(self, prefix: str, token: CancelToken) -> List[str]:
        return await cached_suggestions(self.fetcher, self.language, prefix, token)

    @executor_function
    def parse(self, html: str, headword: str) -> ScrapedWord:
        """
        Run structure discovery then extraction over a page.

        A page without the language section and a section without any
        definition are both reported as a missing word.
        """

        soup = BeautifulSoup(html, "lxml")
        structure = self.discovery.discover(soup)
        if not structure.has_language_section:
            raise WordNotFound(
                f"{headword!r} has no {self.profile.section_name} section"
            )

        word, found = self.extractor.extract(soup, structure, headword)
        if not found:
            raise WordNotFound(
                f"{headword!r} has a {self.profile.section_name} section without definitions"
            )

        return word


class ScraperRegistry:
    """Language code to scraper table, built once at startup."""

    def __init__(self, scrapers: Iterable[Scraper]) -> None:
        self.scrapers: Dict[str, Scraper] = {
            scraper.language: scraper for scraper in scrapers
        }

    @classmethod
    def from_session(cls, session: ClientSession) -> "ScraperRegistry":
        return cls(
            WiktionaryScraper(
                profile,
                DocumentFetcher(
                    session,
                    profile.base_url,
                    timeout=SCRAPER.TIMEOUT,
                    delay=SCRAPER.DELAY,
                    jitter=SCRAPER.JITTER,
                ),
            )
            for profile in PROFILES.values()
        )

    @property
    def languages(self) -> List[str]:
        return sorted(self.scrapers)

    def get(self, language: str) -> Scraper:
        try:
            return self.scrapers[language]
        except KeyError:
            raise UnsupportedLanguage(f"no scraper registered for {language!r}") from None


__all__ = (
    "Scraper",
    "WiktionaryScraper",
    "ScraperRegistry",
    "DocumentFetcher",
    "LanguageProfile",
    "PROFILES",
)
