from __future__ import annotations

import re
from copy import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from bs4 import BeautifulSoup, Tag
from loguru import logger

from vocab_api.shared.formatter import squash, strip_references
from .models import ScrapedDefinition, ScrapedForm, ScrapedWord
from .profiles import DELIMITERS, FALLBACK_MIN_LENGTH, LanguageProfile
from .structure import PageStructure, section_anchor, section_blocks

QUOTES = "«»“”\" \u00a0\u202f"
LANGUAGE_MARKER = re.compile(r"\(\w{2,3}\)")
PLURAL_KEY = "plural"


@dataclass
class HeadwordLine:
    """Grammatical details read above a definition list."""

    pronunciation: Optional[str] = None
    gender: Optional[str] = None
    plural: Optional[str] = None
    forms: List[ScrapedForm] = field(default_factory=list)


def cut_at_delimiter(text: str) -> str:
    positions = [text.find(delimiter) for delimiter in DELIMITERS]
    positions = [position for position in positions if position > 0]
    if not positions:
        return text

    return text[: min(positions)].strip()


def unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(value for value in values if value))


class ContentExtractor:
    """
    Extract a raw word from a page once its structure is known.

    Each word-type section gives definitions, each role section is handed
    to its own rule. When the structured pass finds no definition at all,
    a degraded pass accepts any long enough list item or paragraph of the
    content area.
    """

    def __init__(self, profile: LanguageProfile) -> None:
        self.profile = profile

    def extract(
        self, soup: BeautifulSoup, structure: PageStructure, headword: str
    ) -> Tuple[ScrapedWord, bool]:
        word = ScrapedWord(text=headword, language=self.profile.code)
        seen: Set[str] = set()
        headlines: List[HeadwordLine] = []

        for title, anchor_id in structure.word_type_sections.items():
            headline = self._word_type_section(soup, title, anchor_id, word, seen)
            if headline is not None:
                headlines.append(headline)

        self._pronunciation(soup, structure, word, headlines)
        self._etymology(soup, structure, word)
        self._usage_notes(soup, structure, word)
        word.synonyms = self._related_list(soup, structure.role("synonyms"))
        word.antonyms = self._related_list(soup, structure.role("antonyms"))
        self._translations(soup, structure.role("translations"), word)

        for headline in headlines:
            if headline.plural:
                word.translations.setdefault(PLURAL_KEY, headline.plural)

            for form in headline.forms:
                if not any(existing.text == form.text for existing in word.forms):
                    word.forms.append(form)

                if form.text not in word.search_terms:
                    word.search_terms.append(form.text)

        if not word.definitions:
            logger.debug(
                "Structured pass found no definition for {}, trying fallback",
                headword,
            )
            self._fallback(soup, word)

        return word, bool(word.definitions)

    def _word_type_section(
        self,
        soup: BeautifulSoup,
        title: str,
        anchor_id: str,
        word: ScrapedWord,
        seen: Set[str],
    ) -> Optional[HeadwordLine]:
        anchor = section_anchor(soup, anchor_id)
        if anchor is None:
            logger.debug("Section {} ({}) has no anchor", title, anchor_id)
            return None

        word_type = self.profile.classify_word_type(title)
        headline = HeadwordLine()
        for block in section_blocks(anchor):
            if block.name == "p":
                self._headword_line(block, word, headline)
                continue

            table = self._inflection_table(block)
            if table is not None:
                self._inflections(table, word, headline)
                continue

            if block.name != "ol":
                continue

            for item in block.find_all("li", recursive=False):
                definition = self._definition(item, word_type, headline, word, seen)
                if definition is not None:
                    word.definitions.append(definition)

            break

        return headline

    def _headword_line(
        self, block: Tag, word: ScrapedWord, headline: HeadwordLine
    ) -> None:
        pronunciation = self._pronunciation_in(block)
        if pronunciation and not headline.pronunciation:
            headline.pronunciation = pronunciation

        if self.profile.gender_selector:
            for span in block.select(self.profile.gender_selector):
                gender = self.profile.gender_of(span.get_text())
                if gender:
                    headline.gender = gender
                    break

        if self.profile.inline_plural_selector:
            plural = block.select_one(self.profile.inline_plural_selector)
            if plural is not None and squash(plural.get_text()):
                headline.plural = squash(plural.get_text())
                headline.forms.append(
                    ScrapedForm(
                        text=headline.plural, attributes=[self.profile.plural_label]
                    )
                )

        lemma = self.profile.lemma_of(squash(block.get_text()))
        if lemma and not word.lemma:
            word.lemma = lemma

    def _inflection_table(self, block: Tag) -> Optional[Tag]:
        selector = self.profile.inflection_table
        if not selector:
            return None

        if block.name == "table":
            return block if block.css.match(selector) else None

        return block.select_one(selector)

    def _inflections(self, table: Tag, word: ScrapedWord, headline: HeadwordLine) -> None:
        """
        Read the inflection table into forms.

        Header cells label the columns, a leading header cell labels the row
        (e.g. Masculin / Féminin), every data cell is one surface form.
        """

        columns: List[str] = []
        for row in table.find_all("tr"):
            cells = row.find_all(["th", "td"], recursive=False)
            if not cells:
                continue

            if all(cell.name == "th" for cell in cells):
                columns = [squash(cell.get_text()).lower() for cell in cells]
                continue

            label = ""
            if cells[0].name == "th":
                label = squash(cells[0].get_text()).lower()

            values = [cell for cell in cells if cell.name == "td"]
            offset = len(columns) - len(values)
            for index, cell in enumerate(values):
                text = self._cell_text(cell)
                if not text:
                    continue

                column = columns[offset + index] if 0 <= offset + index < len(columns) else ""
                attributes = unique([label, column])
                form = ScrapedForm(
                    text=text, attributes=attributes, is_lemma=text == word.text
                )
                headline.forms.append(form)

                if (
                    self.profile.plural_label in attributes
                    and text != word.text
                    and not headline.plural
                ):
                    headline.plural = text

    def _cell_text(self, cell: Tag) -> str:
        cell = copy(cell)
        for node in cell.select(self.profile.pronunciation_selector):
            node.decompose()

        link = cell.find("a")
        if link is not None and squash(link.get_text()):
            return squash(link.get_text())

        return squash(cell.get_text())

    def _definition(
        self,
        item: Tag,
        word_type: Optional[str],
        headline: HeadwordLine,
        word: ScrapedWord,
        seen: Set[str],
    ) -> Optional[ScrapedDefinition]:
        body_node = copy(item)
        annotation = None
        for node in body_node.select(self.profile.annotation_selector):
            label = squash(node.get_text()).strip("() ")
            if label and annotation is None:
                annotation = label
            node.decompose()

        for node in body_node.select(self.profile.example_selector):
            node.decompose()

        for node in body_node.find_all(["ul", "ol", "dl", "sup"]):
            node.decompose()

        body = squash(body_node.get_text())
        if not body:
            body = cut_at_delimiter(squash(item.get_text()))

        if not body:
            return None

        if annotation:
            body = f"({annotation}) {body}"

        examples = []
        for node in item.select(self.profile.example_selector):
            example = self._example(node, seen)
            if example:
                examples.append(example)
                if example not in word.examples:
                    word.examples.append(example)

        lemma = self.profile.lemma_of(body)
        if lemma and not word.lemma:
            word.lemma = lemma

        definition = ScrapedDefinition(
            text=body,
            word_type=word_type,
            examples=examples,
            gender=headline.gender,
            pronunciation=headline.pronunciation,
            notes=[annotation] if annotation else [],
        )
        if headline.plural:
            definition.language_specifics[PLURAL_KEY] = headline.plural

        return definition

    def _example(self, node: Tag, seen: Set[str]) -> Optional[str]:
        text = squash(node.get_text()).strip(QUOTES).strip()
        if not text or self.profile.is_example_placeholder(text):
            return None

        key = text.casefold()
        if key in seen:
            return None

        seen.add(key)
        return text

    def _pronunciation_in(self, block: Tag) -> Optional[str]:
        for node in block.select(self.profile.pronunciation_selector):
            pronunciation = self.profile.valid_pronunciation(squash(node.get_text()))
            if pronunciation:
                return pronunciation

        return None

    def _pronunciation(
        self,
        soup: BeautifulSoup,
        structure: PageStructure,
        word: ScrapedWord,
        headlines: List[HeadwordLine],
    ) -> None:
        for block in self._role_blocks(soup, structure.role("pronunciation")):
            pronunciation = self._pronunciation_in(block)
            if pronunciation:
                word.pronunciation = pronunciation
                return

        for headline in headlines:
            if headline.pronunciation:
                word.pronunciation = headline.pronunciation
                return

        pronunciation = self._pronunciation_in(soup)
        if pronunciation:
            word.pronunciation = pronunciation

    def _role_blocks(self, soup: BeautifulSoup, anchor_id: Optional[str]) -> List[Tag]:
        if not anchor_id:
            return []

        anchor = section_anchor(soup, anchor_id)
        if anchor is None:
            return []

        return list(section_blocks(anchor))

    def _first_text(self, soup: BeautifulSoup, anchor_id: Optional[str]) -> str:
        for block in self._role_blocks(soup, anchor_id):
            if block.name in ("p", "dl", "ul"):
                block = copy(block)
                for node in block.find_all("sup"):
                    node.decompose()

                return strip_references(block.get_text())

        return ""

    def _etymology(
        self, soup: BeautifulSoup, structure: PageStructure, word: ScrapedWord
    ) -> None:
        text = self._first_text(soup, structure.role("etymology"))
        if text and not self.profile.is_etymology_placeholder(text):
            word.etymology = text

    def _usage_notes(
        self, soup: BeautifulSoup, structure: PageStructure, word: ScrapedWord
    ) -> None:
        text = self._first_text(soup, structure.role("usage_notes"))
        if text:
            word.usage_notes.append(text)

    def _related_list(self, soup: BeautifulSoup, anchor_id: Optional[str]) -> List[str]:
        for block in self._role_blocks(soup, anchor_id)[:2]:
            listing = block if block.name == "ul" else block.find("ul")
            if listing is None:
                continue

            values = []
            for item in listing.find_all("li", recursive=False):
                every_link = item.find_all("a")
                links = [
                    link
                    for link in every_link
                    if not link.get("title", "").startswith(self.profile.thesaurus_prefix)
                    and squash(link.get_text())
                ]
                if every_link and not links:
                    continue

                values.append(
                    squash(links[0].get_text()) if links else squash(item.get_text())
                )

            return unique(values)

        return []

    def _translations(
        self, soup: BeautifulSoup, anchor_id: Optional[str], word: ScrapedWord
    ) -> None:
        box = self._translation_box(self._role_blocks(soup, anchor_id)[:3])
        if box is None:
            return

        found: Dict[str, str] = {}
        for item in box.find_all("li"):
            name, separator, value = squash(item.get_text()).partition(":")
            if not separator:
                continue

            code = self.profile.language_code(name)
            if not code or code in found:
                continue

            renderings = unique(
                [squash(node.get_text()) for node in item.select("span[lang]")]
            )
            value = ", ".join(renderings) or squash(LANGUAGE_MARKER.sub("", value))
            if value:
                found[code] = value

        for code, value in found.items():
            word.translations.setdefault(code, value)

    def _translation_box(self, blocks: List[Tag]) -> Optional[Tag]:
        for block in blocks:
            for selector in self.profile.translation_boxes:
                if block.css.match(selector):
                    return block

                box = block.select_one(selector)
                if box is not None:
                    return box

        return None

    def _fallback(self, soup: BeautifulSoup, word: ScrapedWord) -> None:
        content = soup.select_one("#mw-content-text") or soup
        for item in content.select("ol > li"):
            item = copy(item)
            for node in item.find_all(["ul", "ol", "dl"]):
                node.decompose()

            text = squash(item.get_text())
            if len(text) > FALLBACK_MIN_LENGTH:
                word.definitions.append(ScrapedDefinition(text=text))

        if word.definitions:
            return

        for paragraph in content.find_all("p"):
            text = squash(paragraph.get_text())
            if len(text) > FALLBACK_MIN_LENGTH and not self.profile.looks_like_etymology(
                text
            ):
                word.definitions.append(ScrapedDefinition(text=text))
