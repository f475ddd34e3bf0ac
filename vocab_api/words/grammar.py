from enum import Enum
from typing import Dict, FrozenSet, Optional


class FrenchWordType(str, Enum):
    NOUN = "nom"
    VERB = "verbe"
    ADJECTIVE = "adjectif"
    ADVERB = "adverbe"
    PRONOUN = "pronom"
    PREPOSITION = "préposition"
    CONJUNCTION = "conjonction"
    INTERJECTION = "interjection"


class FrenchGender(str, Enum):
    MASCULINE = "masculin"
    FEMININE = "féminin"
    PLURAL = "pluriel"


class EnglishWordType(str, Enum):
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PRONOUN = "pronoun"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"


class Grammar:
    """Closed word-type and gender vocabularies of one language."""

    def __init__(self, word_types: FrozenSet[str], genders: FrozenSet[str]) -> None:
        self.word_types = word_types
        self.genders = genders

    def is_valid_word_type(self, word_type: str) -> bool:
        return word_type in self.word_types

    def is_valid_gender(self, gender: str) -> bool:
        return gender in self.genders


GRAMMARS: Dict[str, Grammar] = {
    "fr": Grammar(
        frozenset(member.value for member in FrenchWordType),
        frozenset(member.value for member in FrenchGender),
    ),
    # English has no grammatical gender
    "en": Grammar(
        frozenset(member.value for member in EnglishWordType),
        frozenset(),
    ),
}


def grammar_for(language: str) -> Optional[Grammar]:
    return GRAMMARS.get(language)
