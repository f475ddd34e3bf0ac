from typing import List

from loguru import logger

from vocab_api.shared import CancelToken
from vocab_api.words.models import RelatedWords, Word
from . import ScraperRegistry
from .adapter import WiktionaryAdapter


class LookupService:
    """Live Wiktionary lookups returning domain objects."""

    def __init__(self, registry: ScraperRegistry, adapter: WiktionaryAdapter) -> None:
        self.registry = registry
        self.adapter = adapter

    async def get_word(self, text: str, language: str, token: CancelToken) -> Word:
        scraper = self.registry.get(language)
        response = await scraper.fetch_word(text, token)
        return self.adapter.to_word(response)

    async def get_related_words(self, word: Word, token: CancelToken) -> RelatedWords:
        scraper = self.registry.get(word.language)
        response = await scraper.fetch_related(word.text, token)
        return self.adapter.to_related_words(response, word)

    async def get_suggestions(
        self, prefix: str, language: str, token: CancelToken
    ) -> List[str]:
        scraper = self.registry.get(language)
        return await scraper.fetch_suggestions(prefix, token)

    async def enrich_missing_fields(self, word: Word, token: CancelToken) -> Word:
        status = word.enrichment_status()
        if not status.any:
            logger.debug("{} ({}) has nothing to enrich", word.text, word.language)
            return word

        scraper = self.registry.get(word.language)
        response = await scraper.fetch_word(word.text, token)
        return self.adapter.enrich(word, response, status)
