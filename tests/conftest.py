from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pytest
from cashews import cache

from vocab_api.wiktionary import ScraperRegistry
from vocab_api.wiktionary.adapter import WiktionaryAdapter
from vocab_api.wiktionary.lookup import LookupService
from vocab_api.wiktionary.models import (
    RelatedResponse,
    ScrapedDefinition,
    ScrapedForm,
    ScrapedWord,
)
from vocab_api.words.errors import StoreError, WordNotFound
from vocab_api.words.models import Word
from vocab_api.words.service import WordService

FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class MemoryStore:
    """Word store keeping copies of saved words in a dict."""

    def __init__(self, words: Optional[List[Word]] = None) -> None:
        self.words: Dict[str, Word] = {}
        self.calls: List[str] = []
        self.fail_save = False
        self.fail_suggestions = False
        self.fail_reads = False
        for word in words or []:
            self.add(word)

    def add(self, word: Word) -> Word:
        for stored in self.words.values():
            if stored.text == word.text and stored.language == word.language:
                word.assign_id(stored.id)

        if word.id is None:
            word.assign_id(str(uuid4()))

        self.words[word.id] = word.model_copy(deep=True)
        return word

    async def find_by_id(self, word_id: str) -> Word:
        self.calls.append("find_by_id")
        if word_id not in self.words:
            raise WordNotFound(f"no word with id {word_id}")

        return self.words[word_id].model_copy(deep=True)

    async def find_by_text(self, text: str, language: str) -> Word:
        self.calls.append("find_by_text")
        if self.fail_reads:
            raise StoreError("the store is down")

        for word in self.words.values():
            if word.text == text and word.language == language:
                return word.model_copy(deep=True)

        raise WordNotFound(f"{text} is not stored")

    async def find_by_any_form(self, text: str, language: str) -> Word:
        self.calls.append("find_by_any_form")
        for word in self.words.values():
            if text in word.search_terms and word.language == language:
                return word.model_copy(deep=True)

        raise WordNotFound(f"no stored word has the form {text}")

    async def save(self, word: Word) -> Word:
        self.calls.append("save")
        if self.fail_save:
            raise StoreError("the store is down")

        return self.add(word)

    async def list(
        self, filters: Dict[str, Any], limit: int = 10, offset: int = 0
    ) -> List[Word]:
        self.calls.append("list")
        words = [
            word
            for word in self.words.values()
            if all(getattr(word, column) == value for column, value in filters.items())
        ]
        words.sort(key=lambda word: word.updated_at, reverse=True)
        return words[offset : offset + limit]

    async def find_by_prefix(
        self, prefix: str, language: str, limit: int = 10
    ) -> List[Word]:
        self.calls.append("find_by_prefix")
        return [
            word
            for word in self.words.values()
            if word.language == language and word.text.lower().startswith(prefix)
        ][:limit]

    async def find_suggestions(
        self, prefix: str, language: str, limit: int = 10
    ) -> List[str]:
        self.calls.append("find_suggestions")
        if self.fail_suggestions:
            raise StoreError("the store is down")

        return [word.text for word in await self.find_by_prefix(prefix, language, limit)]


class FakeScraper:
    """Scraper answering from a dict of prepared results."""

    def __init__(
        self,
        language: str,
        words: Optional[Dict[str, ScrapedWord]] = None,
        suggestions: Optional[List[str]] = None,
    ) -> None:
        self.language = language
        self.words = words or {}
        self.suggestions = suggestions or []
        self.suggestion_error: Optional[Exception] = None
        self.requested: List[str] = []

    async def fetch_word(self, text, token) -> ScrapedWord:
        token.raise_if_cancelled()
        self.requested.append(text)
        if text not in self.words:
            raise WordNotFound(f"{text} has no page")

        return self.words[text].model_copy(deep=True)

    async def fetch_related(self, text, token) -> RelatedResponse:
        word = await self.fetch_word(text, token)
        return RelatedResponse(
            text=word.text,
            language=word.language,
            synonyms=word.synonyms,
            antonyms=word.antonyms,
        )

    async def fetch_suggestions(self, prefix, token) -> List[str]:
        token.raise_if_cancelled()
        self.requested.append(prefix)
        if self.suggestion_error is not None:
            raise self.suggestion_error

        return list(self.suggestions)


def scraped_test_word() -> ScrapedWord:
    return ScrapedWord(
        text="test",
        language="en",
        definitions=[
            ScrapedDefinition(
                text="A challenge, trial.",
                word_type="noun",
                examples=["The test was hard."],
                language_specifics={"plural": "tests"},
            ),
            ScrapedDefinition(
                text="(education) An examination given to students.",
                word_type="noun",
                examples=["She passed the test."],
                language_specifics={"plural": "tests"},
                notes=["education"],
            ),
        ],
        examples=["The test was hard.", "She passed the test."],
        etymology="From Middle English test.",
        pronunciation="/tɛst/",
        translations={"fr": "test, essai", "de": "Test", "plural": "tests"},
        synonyms=["trial", "exam"],
        antonyms=["guess"],
        search_terms=["tests"],
        forms=[ScrapedForm(text="tests", attributes=["plural"])],
    )


@pytest.fixture(autouse=True)
def memory_cache():
    cache.setup("mem://")


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def scraper() -> FakeScraper:
    return FakeScraper(
        "en",
        {
            "test": scraped_test_word(),
            "trial": ScrapedWord(
                text="trial",
                language="en",
                definitions=[ScrapedDefinition(text="An attempt.", word_type="noun")],
            ),
        },
    )


@pytest.fixture()
def lookup(scraper: FakeScraper) -> LookupService:
    return LookupService(ScraperRegistry([scraper]), WiktionaryAdapter())


@pytest.fixture()
def service(store: MemoryStore, lookup: LookupService) -> WordService:
    return WordService(store, lookup)


@pytest.fixture()
def page():
    return read_fixture


@pytest.fixture()
def fake_scraper():
    return FakeScraper


@pytest.fixture()
def sample_word() -> ScrapedWord:
    return scraped_test_word()
