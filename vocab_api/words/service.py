from __future__ import annotations

from typing import TYPE_CHECKING, List

from loguru import logger

from vocab_api.shared import CancelToken
from vocab_api.shared.formatter import normalize_headword
from .errors import InvalidWord, RequestCancelled, WordError, WordNotFound
from .models import RelatedWords, Word
from .related import RelatedWordResolver
from .repository import WordStore

if TYPE_CHECKING:
    from vocab_api.wiktionary.lookup import LookupService

MIN_PREFIX_LENGTH = 2
DEFAULT_LIMIT = 10


class WordService:
    """
    Answers word requests from the store first and Wiktionary second.

    A word fetched live is saved on a best effort basis, the caller gets it
    back even when the store refuses it.
    """

    def __init__(self, store: WordStore, lookup: "LookupService") -> None:
        self.store = store
        self.lookup = lookup
        self.resolver = RelatedWordResolver(self.search, lookup, self.persist)

    async def search(self, text: str, language: str, token: CancelToken) -> Word:
        if not text or not text.strip():
            raise InvalidWord("the headword is empty")

        text = normalize_headword(text)
        try:
            return await self.store.find_by_text(text, language)
        except WordNotFound:
            pass

        try:
            return await self.store.find_by_any_form(text, language)
        except WordNotFound:
            pass

        logger.info("{} ({}) isn't stored, fetching it", text, language)
        word = await self.lookup.get_word(text, language, token)
        return await self.persist(word)

    async def persist(self, word: Word) -> Word:
        try:
            return await self.store.save(word)
        except WordError as exc:
            logger.warning(
                "Couldn't save {} ({}): {}", word.text, word.language, exc.detail
            )
            return word

    async def get_recent(self, language: str, limit: int = DEFAULT_LIMIT) -> List[Word]:
        return await self.store.list({"language": language}, limit=limit, offset=0)

    async def get_related(self, word_id: str, token: CancelToken) -> RelatedWords:
        word = await self.store.find_by_id(word_id)
        return await self.resolver.resolve(word, token)

    async def get_suggestions(
        self, prefix: str, language: str, token: CancelToken
    ) -> List[str]:
        prefix = normalize_headword(prefix)
        if not prefix:
            return []

        try:
            suggestions = await self.store.find_suggestions(prefix, language)
        except WordError as exc:
            logger.warning("Stored suggestions for {} failed: {}", prefix, exc.detail)
            suggestions = []

        if suggestions:
            return suggestions

        return await self.lookup.get_suggestions(prefix, language, token)

    async def autocomplete(
        self, prefix: str, language: str, token: CancelToken
    ) -> List[str]:
        """
        Stored and live suggestions merged into one sorted list.

        The live source may fail as long as the store had something to say.
        """

        prefix = normalize_headword(prefix)
        if len(prefix) < MIN_PREFIX_LENGTH:
            raise InvalidWord(
                f"autocomplete needs at least {MIN_PREFIX_LENGTH} characters"
            )

        try:
            stored = await self.store.find_suggestions(prefix, language)
        except WordError as exc:
            logger.warning("Stored suggestions for {} failed: {}", prefix, exc.detail)
            stored = []

        try:
            fetched = await self.lookup.get_suggestions(prefix, language, token)
        except RequestCancelled:
            raise
        except WordError as exc:
            if not stored:
                raise

            logger.warning("Live suggestions for {} failed: {}", prefix, exc.detail)
            fetched = []

        return sorted(set(stored) | set(fetched))

    async def enrich(self, word_id: str, token: CancelToken) -> Word:
        word = await self.store.find_by_id(word_id)
        if not word.enrichment_status().any:
            return word

        word = await self.lookup.enrich_missing_fields(word, token)
        return await self.persist(word)
