from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable, List, Set

from loguru import logger

from vocab_api.shared import CancelToken
from vocab_api.shared.formatter import normalize_headword
from .errors import RequestCancelled, WordError
from .models import RelatedWords, Word

if TYPE_CHECKING:
    from vocab_api.wiktionary.lookup import LookupService

Search = Callable[[str, str, CancelToken], Awaitable[Word]]
Persist = Callable[[Word], Awaitable[Word]]


class RelatedWordResolver:
    """
    Expand the synonym and antonym texts of a word into words.

    Entries are looked up one after the other and the cancellation token
    is checked before each of them.
    """

    def __init__(self, search: Search, lookup: "LookupService", persist: Persist) -> None:
        self.search = search
        self.lookup = lookup
        self.persist = persist

    async def resolve(self, word: Word, token: CancelToken) -> RelatedWords:
        if not word.synonyms and not word.antonyms:
            return await self._fetch_for_source(word, token)

        return RelatedWords(
            source_word=word,
            synonyms=await self._resolve_entries(word.synonyms, word.language, token),
            antonyms=await self._resolve_entries(word.antonyms, word.language, token),
        )

    async def _resolve_entries(
        self, entries: List[str], language: str, token: CancelToken
    ) -> List[Word]:
        resolved: List[Word] = []
        processed: Set[str] = set()
        for entry in entries:
            token.raise_if_cancelled()
            entry = entry.strip()
            key = normalize_headword(entry)
            if not key or key in processed:
                continue

            processed.add(key)
            try:
                resolved.append(await self.search(entry, language, token))
            except RequestCancelled:
                raise
            except WordError as exc:
                logger.debug("Using a placeholder for {}: {}", entry, exc.detail)
                resolved.append(Word.placeholder(entry, language))

        return resolved

    async def _fetch_for_source(self, word: Word, token: CancelToken) -> RelatedWords:
        try:
            related = await self.lookup.get_related_words(word, token)
        except RequestCancelled:
            raise
        except WordError as exc:
            logger.warning(
                "Couldn't fetch related words of {} ({}): {}",
                word.text,
                word.language,
                exc.detail,
            )
            return RelatedWords(source_word=word)

        for synonym in related.synonyms:
            word.add_synonym(synonym.text)

        for antonym in related.antonyms:
            word.add_antonym(antonym.text)

        await self.persist(word)
        return related
