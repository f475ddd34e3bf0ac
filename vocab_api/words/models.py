from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import field_validator, model_validator

from vocab_api.shared import BaseModel, Field, computed_field
from .errors import InvalidGender, InvalidWord, InvalidWordType
from .grammar import grammar_for


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Definition(BaseModel):
    text: str = ""
    word_type: Optional[str] = None
    examples: List[str] = Field(default_factory=list)
    gender: Optional[str] = None
    pronunciation: Optional[str] = None
    language_specifics: Dict[str, str] = Field(default_factory=dict)
    notes: List[str] = Field(default_factory=list)

    def add_example(self, example: str) -> None:
        if example and example not in self.examples:
            self.examples.append(example)

    def add_language_specific(self, key: str, value: str) -> None:
        if key and value:
            self.language_specifics[key] = value

    def add_note(self, note: str) -> None:
        if note and note not in self.notes:
            self.notes.append(note)


class Form(BaseModel):
    text: str
    attributes: List[str] = Field(default_factory=list)
    is_lemma: bool = False


class EnrichmentStatus(BaseModel):
    needs_definitions: bool = False
    needs_etymology: bool = False
    needs_translations: bool = False
    needs_synonyms: bool = False
    needs_antonyms: bool = False
    needs_pronunciation: bool = False

    @classmethod
    def for_word(cls, word: "Word") -> "EnrichmentStatus":
        return cls(
            needs_definitions=not word.definitions,
            needs_etymology=not word.etymology,
            needs_translations=not word.translations,
            needs_synonyms=not word.synonyms,
            needs_antonyms=not word.antonyms,
            needs_pronunciation=not word.pronunciation,
        )

    @property
    def any(self) -> bool:
        return any(self.model_dump().values())


class Word(BaseModel):
    """
    Canonical dictionary entry.

    Every mutation goes through the methods below, they keep `search_terms`
    seeded with `text`, skip values that are already present and refresh
    `updated_at`.
    """

    id: Optional[str] = None
    text: str
    language: str
    word_type: Optional[str] = None
    definitions: List[Definition] = Field(default_factory=list)
    examples: List[str] = Field(
        default_factory=list,
        description="General examples not tied to a specific definition.",
    )
    pronunciation: Dict[str, str] = Field(default_factory=dict)
    etymology: str = ""
    translations: Dict[str, str] = Field(default_factory=dict)
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    search_terms: List[str] = Field(
        default_factory=list,
        description="Every surface form the word can be found under.",
    )
    lemma: Optional[str] = None
    usage_notes: List[str] = Field(default_factory=list)
    forms: List[Form] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "definitions",
        "examples",
        "synonyms",
        "antonyms",
        "search_terms",
        "usage_notes",
        "forms",
        mode="before",
    )
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("pronunciation", "translations", mode="before")
    @classmethod
    def _null_mapping(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("etymology", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _seed_search_terms(self) -> "Word":
        if self.text not in self.search_terms:
            self.search_terms.insert(0, self.text)

        return self

    @classmethod
    def placeholder(cls, text: str, language: str) -> "Word":
        """Minimal word used when a related entry can't be resolved."""

        return cls(id=str(uuid4()), text=text, language=language)

    @computed_field
    @property
    def primary_word_type(self) -> Optional[str]:
        if self.definitions:
            return self.definitions[0].word_type

        return None

    def touch(self) -> None:
        self.updated_at = utcnow()

    def assign_id(self, word_id: str) -> None:
        self.id = word_id

    def set_etymology(self, etymology: str) -> None:
        self.etymology = etymology
        self.touch()

    def set_pronunciation(self, value: str, notation: str = "ipa") -> None:
        self.pronunciation[notation] = value
        self.touch()

    def set_lemma(self, lemma: str) -> None:
        self.lemma = lemma
        self.add_search_term(lemma)
        self.touch()

    def add_definition(self, definition: Definition) -> None:
        self.definitions.append(definition)
        if not self.word_type and definition.word_type:
            self.word_type = definition.word_type

        for term in definition.language_specifics.values():
            self.add_search_term(term)

        self.touch()

    def add_example(self, example: str) -> None:
        if not example or example in self.examples:
            return

        self.examples.append(example)
        self.touch()

    def add_search_term(self, term: str) -> None:
        if not term or term in self.search_terms:
            return

        self.search_terms.append(term)
        self.touch()

    def add_synonym(self, synonym: str) -> None:
        if not synonym or synonym in self.synonyms:
            return

        self.synonyms.append(synonym)
        self.touch()

    def add_antonym(self, antonym: str) -> None:
        if not antonym or antonym in self.antonyms:
            return

        self.antonyms.append(antonym)
        self.touch()

    def add_translation(self, language: str, translation: str) -> None:
        """Append the comma separated renderings that aren't known yet."""

        if not language:
            return

        current = self.translations.get(language, "")
        known = [part.strip() for part in current.split(",") if part.strip()]
        added = [
            part
            for part in dict.fromkeys(part.strip() for part in translation.split(","))
            if part and part not in known
        ]
        if not added:
            return

        self.translations[language] = ", ".join(known + added)
        self.touch()

    def add_usage_note(self, note: str) -> None:
        if not note or note in self.usage_notes:
            return

        self.usage_notes.append(note)
        self.touch()

    def add_form(self, form: Form) -> None:
        if any(existing.text == form.text for existing in self.forms):
            return

        self.forms.append(form)
        self.add_search_term(form.text)
        self.touch()

    def validate_definition(self, definition: Definition) -> None:
        """
        Check a definition against the grammar of the word's language.

        Languages without a registered grammar accept anything.
        """

        grammar = grammar_for(self.language)
        if grammar is None:
            return

        if definition.word_type and not grammar.is_valid_word_type(
            definition.word_type
        ):
            raise InvalidWordType(
                f"{definition.word_type!r} is not a {self.language} word type"
            )

        if definition.gender and not grammar.is_valid_gender(definition.gender):
            raise InvalidGender(
                f"{definition.gender!r} is not a {self.language} gender"
            )

    def all_specifics(self) -> List[str]:
        return [
            value
            for definition in self.definitions
            for value in definition.language_specifics.values()
        ]

    def definitions_by_type(self, word_type: str) -> List[Definition]:
        return [
            definition
            for definition in self.definitions
            if definition.word_type == word_type
        ]

    def enrichment_status(self) -> EnrichmentStatus:
        return EnrichmentStatus.for_word(self)

    def merge_with(self, other: "Word") -> None:
        """
        Fill the fields of this word that are empty from `other`.

        Nothing already present is overwritten or removed.
        """

        if other.text != self.text or other.language != self.language:
            raise InvalidWord(
                f"cannot merge {other.text!r} ({other.language}) into {self.text!r} ({self.language})"
            )

        if not self.definitions:
            for definition in other.definitions:
                self.add_definition(definition.model_copy(deep=True))

        if not self.examples:
            for example in other.examples:
                self.add_example(example)

        if not self.etymology and other.etymology:
            self.set_etymology(other.etymology)

        for notation, value in other.pronunciation.items():
            if notation not in self.pronunciation:
                self.set_pronunciation(value, notation)

        for language, translation in other.translations.items():
            if language not in self.translations:
                self.add_translation(language, translation)

        if not self.synonyms:
            for synonym in other.synonyms:
                self.add_synonym(synonym)

        if not self.antonyms:
            for antonym in other.antonyms:
                self.add_antonym(antonym)

        if not self.lemma and other.lemma:
            self.set_lemma(other.lemma)

        if not self.usage_notes:
            for note in other.usage_notes:
                self.add_usage_note(note)

        if not self.forms:
            for form in other.forms:
                self.add_form(form.model_copy())

        for term in other.search_terms:
            self.add_search_term(term)

        self.touch()


class RelatedWords(BaseModel):
    source_word: Word
    synonyms: List[Word] = Field(default_factory=list)
    antonyms: List[Word] = Field(default_factory=list)


__all__ = (
    "Definition",
    "Form",
    "EnrichmentStatus",
    "Word",
    "RelatedWords",
)
