from __future__ import annotations

from typing import Optional

from loguru import logger

from vocab_api.words.errors import InvalidGender, InvalidWord, InvalidWordType
from vocab_api.words.models import (
    Definition,
    EnrichmentStatus,
    Form,
    RelatedWords,
    Word,
)
from .models import RelatedResponse, ScrapedDefinition, ScrapedWord


class WiktionaryAdapter:
    """
    Turn scraped, source-shaped results into `Word` aggregates.

    Every value goes through the aggregate's own methods so the search term,
    word type and de-duplication rules hold for scraped data too.
    """

    def to_word(self, response: ScrapedWord) -> Word:
        word = Word(text=response.text, language=response.language)
        self._fill(word, response)
        return word

    def to_related_words(self, response: RelatedResponse, source: Word) -> RelatedWords:
        return RelatedWords(
            source_word=source,
            synonyms=[
                Word.placeholder(text, source.language)
                for text in dict.fromkeys(response.synonyms)
                if text
            ],
            antonyms=[
                Word.placeholder(text, source.language)
                for text in dict.fromkeys(response.antonyms)
                if text
            ],
        )

    def enrich(
        self,
        existing: Optional[Word],
        response: ScrapedWord,
        status: EnrichmentStatus,
    ) -> Word:
        """
        Fill the fields `status` flags as missing, leave the rest alone.

        The scraped data is converted into a scratch word first, the existing
        word only changes during the final merge.
        """

        if existing is None:
            raise InvalidWord("there is no word to enrich")

        scratch = Word(text=existing.text, language=existing.language)
        self._fill(scratch, response, status)
        existing.merge_with(scratch)
        logger.debug("Enriched {} ({}) with {}", existing.text, existing.language, status)
        return existing

    def _fill(
        self,
        word: Word,
        response: ScrapedWord,
        status: Optional[EnrichmentStatus] = None,
    ) -> None:
        everything = status is None

        if (everything or status.needs_etymology) and response.etymology:
            word.set_etymology(response.etymology)

        if (everything or status.needs_pronunciation) and response.pronunciation:
            word.set_pronunciation(response.pronunciation)

        if response.lemma:
            word.set_lemma(response.lemma)

        if everything or status.needs_definitions:
            for raw in response.definitions:
                word.add_definition(self._definition(word, raw))
                for example in raw.examples:
                    word.add_example(example)

            for example in response.examples:
                word.add_example(example)

            for note in response.usage_notes:
                word.add_usage_note(note)

            for form in response.forms:
                word.add_form(Form(**form.model_dump()))

        if everything or status.needs_translations:
            for language, translation in response.translations.items():
                word.add_translation(language, translation)

        if everything or status.needs_synonyms:
            for synonym in response.synonyms:
                word.add_synonym(synonym)

        if everything or status.needs_antonyms:
            for antonym in response.antonyms:
                word.add_antonym(antonym)

        for term in response.search_terms:
            word.add_search_term(term)

    def _definition(self, word: Word, raw: ScrapedDefinition) -> Definition:
        definition = Definition(
            text=raw.text,
            word_type=raw.word_type,
            gender=raw.gender,
            pronunciation=raw.pronunciation,
        )
        for example in raw.examples:
            definition.add_example(example)

        for key, value in raw.language_specifics.items():
            definition.add_language_specific(key, value)

        for note in raw.notes:
            definition.add_note(note)

        while True:
            try:
                word.validate_definition(definition)
                return definition
            except InvalidWordType as exc:
                logger.warning("Dropping word type of {}: {}", word.text, exc.detail)
                definition.word_type = None
            except InvalidGender as exc:
                logger.warning("Dropping gender of {}: {}", word.text, exc.detail)
                definition.gender = None
