from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern, Tuple

FALLBACK_MIN_LENGTH = 15
DELIMITERS = (" : ", " — ", "« ")


@dataclass(frozen=True)
class LanguageProfile:
    """
    Everything that differs between two editions of Wiktionary.

    Section titles are classified by case-sensitive substring matching
    against the fragment rows below, word types first, then roles.
    Supporting a new title is a new row, not new code.
    """

    code: str
    section_name: str
    base_url: str
    word_types: Tuple[Tuple[str, str], ...]
    roles: Tuple[Tuple[str, Tuple[str, ...]], ...]
    pronunciation_selector: str
    pronunciation_delimiters: Tuple[Tuple[str, str], ...]
    example_selector: str
    annotation_selector: str
    example_placeholders: Tuple[str, ...]
    etymology_placeholders: Tuple[str, ...]
    etymology_markers: Tuple[str, ...]
    translation_boxes: Tuple[str, ...]
    translation_languages: Dict[str, str] = field(default_factory=dict)
    form_of: Optional[Pattern[str]] = None
    gender_selector: Optional[str] = None
    genders: Tuple[Tuple[str, str], ...] = ()
    inflection_table: Optional[str] = None
    plural_label: str = "plural"
    inline_plural_selector: Optional[str] = None
    thesaurus_prefix: str = "Thesaurus:"

    def names_language(self, title: str) -> bool:
        return title.strip() == self.section_name

    def classify_word_type(self, title: str) -> Optional[str]:
        for fragment, word_type in self.word_types:
            if fragment in title:
                return word_type

        return None

    def classify_role(self, title: str) -> Optional[str]:
        for role, fragments in self.roles:
            if any(fragment in title for fragment in fragments):
                return role

        return None

    def gender_of(self, text: str) -> Optional[str]:
        for fragment, gender in self.genders:
            if fragment in text:
                return gender

        return None

    def language_code(self, name: str) -> Optional[str]:
        return self.translation_languages.get(name.strip())

    def valid_pronunciation(self, text: str) -> Optional[str]:
        text = text.strip()
        if len(text) < 3:
            return None

        for opening, closing in self.pronunciation_delimiters:
            if text.startswith(opening) and text.endswith(closing):
                return text

        return None

    def is_example_placeholder(self, text: str) -> bool:
        return any(marker in text for marker in self.example_placeholders)

    def is_etymology_placeholder(self, text: str) -> bool:
        return any(marker in text for marker in self.etymology_placeholders)

    def looks_like_etymology(self, text: str) -> bool:
        return any(marker in text for marker in self.etymology_markers)

    def lemma_of(self, text: str) -> Optional[str]:
        if self.form_of is None:
            return None

        match = self.form_of.search(text)
        return match.group("lemma") if match else None


FRENCH = LanguageProfile(
    code="fr",
    section_name="Français",
    base_url="https://fr.wiktionary.org",
    word_types=(
        ("Pronom", "pronom"),
        ("Nom", "nom"),
        ("Verbe", "verbe"),
        ("Adjectif", "adjectif"),
        ("Adverbe", "adverbe"),
        ("Préposition", "préposition"),
        ("Conjonction", "conjonction"),
        ("Interjection", "interjection"),
    ),
    roles=(
        ("etymology", ("Étymologie",)),
        ("pronunciation", ("Prononciation",)),
        ("synonyms", ("Synonymes",)),
        ("antonyms", ("Antonymes",)),
        ("translations", ("Traductions",)),
        ("derivatives", ("Dérivés",)),
        ("related", ("Apparentés",)),
        ("variants", ("Variantes",)),
        ("see_also", ("Voir aussi",)),
        ("references", ("Références",)),
        ("usage_notes", ("Notes", "Remarques")),
    ),
    pronunciation_selector="span.API",
    pronunciation_delimiters=(("\\", "\\"), ("/", "/"), ("[", "]")),
    example_selector="span.example",
    annotation_selector="span.term, span.emploi",
    example_placeholders=("Exemple d’utilisation manquant", "Exemple d'utilisation manquant", "utilisation manquant. (Ajouter)"),
    etymology_placeholders=("Étymologie manquante ou incomplète",),
    etymology_markers=("Étymologie", "Du latin", "Dérivé de", "Emprunté", "De l’"),
    translation_boxes=(".boite",),
    translation_languages={
        "Allemand": "de",
        "Anglais": "en",
        "Espagnol": "es",
        "Italien": "it",
        "Portugais": "pt",
        "Roumain": "ro",
    },
    form_of=re.compile(
        r"(?i)\b(?:pluriel|féminin|masculin)(?: pluriel| singulier)? de\s+(?P<lemma>[\w'’-]+)"
    ),
    gender_selector="span.ligne-de-forme",
    genders=(
        ("masculin", "masculin"),
        ("féminin", "féminin"),
    ),
    inflection_table="table.flextable",
    plural_label="pluriel",
    thesaurus_prefix="Thésaurus:",
)

ENGLISH = LanguageProfile(
    code="en",
    section_name="English",
    base_url="https://en.wiktionary.org",
    word_types=(
        ("Pronoun", "pronoun"),
        ("Proper noun", "noun"),
        ("Noun", "noun"),
        ("Verb", "verb"),
        ("Adjective", "adjective"),
        ("Adverb", "adverb"),
        ("Preposition", "preposition"),
        ("Conjunction", "conjunction"),
        ("Interjection", "interjection"),
    ),
    roles=(
        ("etymology", ("Etymology",)),
        ("pronunciation", ("Pronunciation",)),
        ("synonyms", ("Synonyms",)),
        ("antonyms", ("Antonyms",)),
        ("translations", ("Translations",)),
        ("derivatives", ("Derived terms",)),
        ("related", ("Related terms",)),
        ("variants", ("Alternative forms",)),
        ("see_also", ("See also",)),
        ("references", ("References",)),
        ("usage_notes", ("Usage notes",)),
    ),
    pronunciation_selector="span.IPA",
    pronunciation_delimiters=(("/", "/"), ("[", "]")),
    example_selector=".h-usage-example",
    annotation_selector="span.usage-label-sense",
    example_placeholders=("Please add an English translation",),
    etymology_placeholders=("etymology is missing or incomplete",),
    etymology_markers=("From Middle", "From Old", "borrowed from", "Etymology"),
    translation_boxes=(".translations", ".NavFrame"),
    translation_languages={
        "French": "fr",
        "German": "de",
        "Spanish": "es",
        "Italian": "it",
        "Portuguese": "pt",
        "Romanian": "ro",
    },
    form_of=re.compile(
        r"(?i)\b(?:plural|alternative form|alternative spelling|past participle|present participle|simple past)(?: tense)? of\s+(?P<lemma>[\w'’-]+)"
    ),
    inline_plural_selector="b.p-form-of",
)

PROFILES: Dict[str, LanguageProfile] = {
    profile.code: profile for profile in (FRENCH, ENGLISH)
}
