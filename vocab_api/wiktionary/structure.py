from __future__ import annotations

from copy import copy
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup, Tag
from loguru import logger

from vocab_api.shared.formatter import squash
from .profiles import LanguageProfile

TOC_SELECTOR = "#mw-panel-toc-list"
TOC_PREFIX = "toc-"
TOC_SKIPPED = ("toc-mw-content-text",)
HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")
MAX_DEPTH = 3


@dataclass
class PageStructure:
    section_ids: Dict[str, str] = field(default_factory=dict)
    has_language_section: bool = False
    word_type_sections: Dict[str, str] = field(default_factory=dict)
    role_sections: Dict[str, str] = field(default_factory=dict)

    def role(self, name: str) -> Optional[str]:
        return self.role_sections.get(name)


def is_heading(element: Tag) -> bool:
    if element.name in HEADINGS:
        return True

    return "mw-heading" in (element.get("class") or [])


def heading_title(heading: Tag) -> str:
    headline = heading.select_one(".mw-headline")
    if headline is not None:
        return squash(headline.get_text())

    heading = copy(heading)
    for edit in heading.select(".mw-editsection"):
        edit.decompose()

    return squash(heading.get_text())


def heading_id(heading: Tag) -> Optional[str]:
    if heading.get("id"):
        return heading["id"]

    headline = heading.select_one(".mw-headline[id]")
    return headline["id"] if headline is not None else None


def section_anchor(soup: BeautifulSoup, anchor_id: str) -> Optional[Tag]:
    """
    Resolve a section id to the element whose siblings hold its content.

    Handles both the `<div class="mw-heading"><h3 id=..>` layout and the
    older `<h3><span class="mw-headline" id=..>` one.
    """

    element = soup.find(id=anchor_id)
    if element is None:
        return None

    if element.name not in HEADINGS:
        parent = element.find_parent(HEADINGS)
        if parent is not None:
            element = parent

    wrapper = element.parent
    if wrapper is not None and "mw-heading" in (wrapper.get("class") or []):
        return wrapper

    return element


def section_blocks(anchor: Tag) -> Iterator[Tag]:
    """Yield the block siblings of a section until the next heading."""

    for sibling in anchor.find_next_siblings():
        if is_heading(sibling):
            return

        yield sibling


class StructureDiscovery:
    def __init__(self, profile: LanguageProfile) -> None:
        self.profile = profile

    def discover(self, soup: BeautifulSoup) -> PageStructure:
        structure = PageStructure()
        outline = soup.select_one(TOC_SELECTOR)
        if outline is not None:
            self._read_outline(outline, structure)

        if not structure.has_language_section:
            logger.debug(
                "No {} entry in the outline, scanning headings",
                self.profile.section_name,
            )
            self._scan_headings(soup, structure)

        return structure

    def _classify(self, title: str, anchor_id: str, structure: PageStructure) -> None:
        structure.section_ids[title] = anchor_id
        if self.profile.classify_word_type(title):
            structure.word_type_sections[title] = anchor_id
            return

        role = self.profile.classify_role(title)
        if role:
            structure.role_sections[role] = anchor_id

    def _read_outline(self, outline: Tag, structure: PageStructure) -> None:
        for entry in outline.find_all("li", recursive=False):
            entry_id = entry.get("id", "")
            if not entry_id.startswith(TOC_PREFIX) or entry_id in TOC_SKIPPED:
                continue

            title = self._entry_title(entry)
            structure.section_ids[title] = entry_id[len(TOC_PREFIX) :]
            if self.profile.names_language(title):
                structure.has_language_section = True
                self._read_children(entry, structure, depth=1)

    def _read_children(self, entry: Tag, structure: PageStructure, depth: int) -> None:
        if depth > MAX_DEPTH:
            return

        children = entry.find("ul", recursive=False)
        if children is None:
            return

        for child in children.find_all("li", recursive=False):
            child_id = child.get("id", "")
            if not child_id.startswith(TOC_PREFIX):
                continue

            self._classify(
                self._entry_title(child), child_id[len(TOC_PREFIX) :], structure
            )
            self._read_children(child, structure, depth + 1)

    def _entry_title(self, entry: Tag) -> str:
        link = entry.find("a", class_="vector-toc-link", recursive=False) or entry.find("a")
        href = link.get("href", "") if link is not None else ""
        if href.startswith("#"):
            return unquote(href[1:]).replace("_", " ")

        return entry.get("id", "")[len(TOC_PREFIX) :].replace("_", " ")

    def _scan_headings(self, soup: BeautifulSoup, structure: PageStructure) -> None:
        inside = False
        for heading in soup.find_all(["h2", "h3", "h4"]):
            title = heading_title(heading)
            anchor_id = heading_id(heading)
            if not title or not anchor_id:
                continue

            if heading.name == "h2":
                inside = self.profile.names_language(title)
                if inside:
                    structure.has_language_section = True
                    structure.section_ids[title] = anchor_id

                continue

            if inside:
                self._classify(title, anchor_id, structure)
