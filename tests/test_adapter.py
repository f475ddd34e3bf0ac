import pytest

from vocab_api.wiktionary.adapter import WiktionaryAdapter
from vocab_api.wiktionary.models import RelatedResponse, ScrapedDefinition, ScrapedWord
from vocab_api.words.errors import InvalidWord
from vocab_api.words.models import Definition, EnrichmentStatus, Word


@pytest.fixture()
def adapter() -> WiktionaryAdapter:
    return WiktionaryAdapter()


def test_to_word_keeps_every_definition(adapter, sample_word):
    word = adapter.to_word(sample_word)

    assert word.id is None
    assert len(word.definitions) == len(sample_word.definitions)
    assert word.word_type == "noun"
    assert word.examples == ["The test was hard.", "She passed the test."]
    assert word.pronunciation == {"ipa": "/tɛst/"}
    assert word.synonyms == ["trial", "exam"]
    assert word.antonyms == ["guess"]
    assert word.translations["fr"] == "test, essai"
    assert word.search_terms == ["test", "tests"]
    assert [form.text for form in word.forms] == ["tests"]


def test_invalid_grammar_is_dropped_not_fatal(adapter):
    response = ScrapedWord(
        text="test",
        language="en",
        definitions=[
            ScrapedDefinition(text="A challenge.", word_type="nom", gender="masculin")
        ],
    )

    word = adapter.to_word(response)

    assert word.definitions[0].text == "A challenge."
    assert word.definitions[0].word_type is None
    assert word.definitions[0].gender is None
    assert word.word_type is None


def test_lemma_becomes_search_term(adapter):
    word = adapter.to_word(
        ScrapedWord(
            text="tests",
            language="en",
            lemma="test",
            definitions=[ScrapedDefinition(text="plural of test")],
        )
    )

    assert word.lemma == "test"
    assert word.search_terms == ["tests", "test"]


def test_related_words_are_placeholders(adapter):
    source = Word(text="test", language="en")
    response = RelatedResponse(
        text="test",
        language="en",
        synonyms=["trial", "exam", "trial", ""],
        antonyms=["guess"],
    )

    related = adapter.to_related_words(response, source)

    assert related.source_word is source
    assert [word.text for word in related.synonyms] == ["trial", "exam"]
    assert [word.text for word in related.antonyms] == ["guess"]
    assert all(word.id and word.language == "en" for word in related.synonyms)


def test_enrich_fills_only_flagged_fields(adapter, sample_word):
    existing = Word(id="1", text="test", language="en", etymology="Old.")
    existing.add_definition(Definition(text="Kept.", word_type="noun"))
    status = EnrichmentStatus(needs_synonyms=True, needs_translations=True)

    enriched = adapter.enrich(existing, sample_word, status)

    assert enriched is existing
    assert enriched.id == "1"
    assert [d.text for d in enriched.definitions] == ["Kept."]
    assert enriched.etymology == "Old."
    assert enriched.pronunciation == {}
    assert enriched.antonyms == []
    assert enriched.synonyms == ["trial", "exam"]
    assert enriched.translations["de"] == "Test"


def test_enrich_requires_a_word(adapter, sample_word):
    with pytest.raises(InvalidWord):
        adapter.enrich(None, sample_word, EnrichmentStatus(needs_definitions=True))


def test_definition_lists_are_deduplicated(adapter):
    response = ScrapedWord(
        text="test",
        language="fr",
        definitions=[
            ScrapedDefinition(
                text="(Figuré) Épreuve.",
                word_type="nom",
                examples=["Le test a duré deux heures.", "Le test a duré deux heures."],
                notes=["Figuré", "Figuré"],
                language_specifics={"plural": "tests"},
            )
        ],
    )

    definition = adapter.to_word(response).definitions[0]

    assert definition.examples == ["Le test a duré deux heures."]
    assert definition.notes == ["Figuré"]
    assert definition.language_specifics == {"plural": "tests"}
