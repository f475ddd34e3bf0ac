from datetime import timedelta

import pytest

from vocab_api.shared import CancelToken
from vocab_api.words.errors import (
    InvalidWord,
    RequestCancelled,
    UnsupportedLanguage,
    UpstreamUnavailable,
    WordNotFound,
)
from vocab_api.words.models import Word


@pytest.fixture()
def token() -> CancelToken:
    return CancelToken()


async def test_search_fetches_and_stores_missing_word(service, store, scraper, token):
    word = await service.search("  Test ", "en", token)

    assert store.calls == ["find_by_text", "find_by_any_form", "save"]
    assert scraper.requested == ["test"]
    assert word.id is not None
    assert len(word.definitions) == 2
    assert store.words[word.id].text == "test"


async def test_search_prefers_the_store(service, store, scraper, token):
    await store.save(Word(text="test", language="en", etymology="Stored."))
    store.calls.clear()

    word = await service.search("test", "en", token)

    assert word.etymology == "Stored."
    assert store.calls == ["find_by_text"]
    assert scraper.requested == []


async def test_search_matches_any_stored_form(service, store, scraper, token):
    await store.save(Word(text="test", language="en", search_terms=["tests"]))
    store.calls.clear()

    word = await service.search("tests", "en", token)

    assert word.text == "test"
    assert store.calls == ["find_by_text", "find_by_any_form"]
    assert scraper.requested == []


@pytest.mark.parametrize("text", ["", "   "])
async def test_search_rejects_empty_text(service, store, text, token):
    with pytest.raises(InvalidWord):
        await service.search(text, "en", token)

    assert store.calls == []


async def test_search_reports_unknown_words(service, token):
    with pytest.raises(WordNotFound):
        await service.search("zzzz", "en", token)


async def test_search_rejects_unsupported_language(service, token):
    with pytest.raises(UnsupportedLanguage):
        await service.search("test", "de", token)


async def test_search_returns_word_when_store_refuses_it(service, store, token):
    store.fail_save = True

    word = await service.search("test", "en", token)

    assert word.text == "test"
    assert word.id is None
    assert store.words == {}


async def test_search_stops_when_cancelled(service, scraper):
    token = CancelToken()
    token.cancel()

    with pytest.raises(RequestCancelled):
        await service.search("test", "en", token)

    assert scraper.requested == []


async def test_get_recent_lists_newest_first(service, store):
    older = await store.save(Word(text="trial", language="en"))
    newer = Word(text="test", language="en")
    newer.updated_at = older.updated_at + timedelta(minutes=1)
    await store.save(newer)
    await store.save(Word(text="essai", language="fr"))

    words = await service.get_recent("en", limit=5)

    assert [word.text for word in words] == ["test", "trial"]
    assert len(await service.get_recent("en", limit=1)) == 1


async def test_autocomplete_merges_sources(service, store, scraper, token):
    for text in ("test1", "test2"):
        await store.save(Word(text=text, language="en"))
    scraper.suggestions = ["test2", "test3"]

    assert await service.autocomplete("TE", "en", token) == ["test1", "test2", "test3"]


async def test_autocomplete_rejects_short_prefix(service, scraper, token):
    with pytest.raises(InvalidWord):
        await service.autocomplete(" t ", "en", token)

    assert scraper.requested == []


async def test_autocomplete_tolerates_network_failure_with_stored_results(
    service, store, scraper, token
):
    await store.save(Word(text="test1", language="en"))
    scraper.suggestion_error = UpstreamUnavailable("offline")

    assert await service.autocomplete("te", "en", token) == ["test1"]


async def test_autocomplete_raises_network_failure_without_stored_results(
    service, scraper, token
):
    scraper.suggestion_error = UpstreamUnavailable("offline")

    with pytest.raises(UpstreamUnavailable):
        await service.autocomplete("te", "en", token)


async def test_autocomplete_tolerates_store_failure(service, store, scraper, token):
    store.fail_suggestions = True
    scraper.suggestions = ["test"]

    assert await service.autocomplete("te", "en", token) == ["test"]


async def test_suggestions_come_from_store_first(service, store, scraper, token):
    await store.save(Word(text="test", language="en"))
    scraper.suggestions = ["testament"]

    assert await service.get_suggestions("te", "en", token) == ["test"]
    assert scraper.requested == []


async def test_suggestions_fall_back_to_live_source(service, store, scraper, token):
    store.fail_suggestions = True
    scraper.suggestions = ["testament"]

    assert await service.get_suggestions("te", "en", token) == ["testament"]
    assert scraper.requested == ["te"]


async def test_suggestions_for_blank_prefix(service, scraper, token):
    assert await service.get_suggestions("  ", "en", token) == []
    assert scraper.requested == []


async def test_enrich_fills_missing_fields(service, store, token):
    stored = await store.save(Word(text="test", language="en", etymology="Stored."))

    word = await service.enrich(stored.id, token)

    assert word.id == stored.id
    assert word.etymology == "Stored."
    assert len(word.definitions) == 2
    assert word.synonyms == ["trial", "exam"]
    assert store.words[stored.id].synonyms == ["trial", "exam"]


async def test_enrich_complete_word_skips_fetch(service, store, scraper, token):
    complete = await service.search("test", "en", token)
    complete.set_etymology("Known.")
    await store.save(complete)
    scraper.requested.clear()

    word = await service.enrich(complete.id, token)

    assert word.etymology == "Known."
    assert scraper.requested == []


async def test_enrich_unknown_id(service, token):
    with pytest.raises(WordNotFound):
        await service.enrich("missing", token)


async def test_store_outage_is_reported_as_unavailable(service, store, scraper, token):
    store.fail_reads = True

    with pytest.raises(UpstreamUnavailable) as info:
        await service.search("test", "en", token)

    assert info.value.status_code == 503
    assert scraper.requested == []
