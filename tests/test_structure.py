from bs4 import BeautifulSoup

from vocab_api.wiktionary.profiles import ENGLISH, FRENCH
from vocab_api.wiktionary.structure import (
    StructureDiscovery,
    section_anchor,
    section_blocks,
)


def discover(profile, html):
    return StructureDiscovery(profile).discover(BeautifulSoup(html, "lxml"))


def test_outline_is_classified_for_target_language(page):
    structure = discover(FRENCH, page("fr_test.html"))

    assert structure.has_language_section
    assert structure.word_type_sections == {"Nom commun": "Nom_commun"}
    assert structure.role_sections == {
        "etymology": "Étymologie",
        "synonyms": "Synonymes",
        "translations": "Traductions",
        "pronunciation": "Prononciation",
    }
    assert structure.section_ids["Anglais"] == "Anglais"
    assert "Nom commun 2" not in structure.word_type_sections


def test_headings_are_scanned_without_outline(page):
    structure = discover(ENGLISH, page("en_test.html"))

    assert structure.has_language_section
    assert structure.word_type_sections == {"Noun": "Noun"}
    assert structure.role("etymology") == "Etymology"
    assert structure.role("pronunciation") == "Pronunciation"
    assert structure.role("synonyms") == "Synonyms"
    assert structure.role("antonyms") == "Antonyms"
    assert structure.role("translations") == "Translations"


def test_missing_language_section(page):
    structure = discover(ENGLISH, page("fr_test.html"))

    assert not structure.has_language_section
    assert structure.word_type_sections == {}


def test_page_without_outline_or_headings():
    structure = discover(FRENCH, "<html><body><p>Rien ici.</p></body></html>")

    assert not structure.has_language_section


def test_classification_is_case_sensitive():
    assert FRENCH.classify_word_type("Nom commun") == "nom"
    assert FRENCH.classify_word_type("Pronom personnel") == "pronom"
    assert FRENCH.classify_word_type("nom commun") is None
    assert ENGLISH.classify_word_type("Pronoun") == "pronoun"
    assert ENGLISH.classify_role("Usage notes") == "usage_notes"
    assert ENGLISH.classify_role("Anagrams") is None


def test_duplicate_titles_keep_the_last_section():
    html = """
    <h2><span class="mw-headline" id="English">English</span></h2>
    <h3><span class="mw-headline" id="Etymology_1">Etymology</span></h3>
    <p>First.</p>
    <h3><span class="mw-headline" id="Etymology_2">Etymology</span></h3>
    <p>Second.</p>
    """
    structure = discover(ENGLISH, html)

    assert structure.section_ids["Etymology"] == "Etymology_2"
    assert structure.role("etymology") == "Etymology_2"


def test_section_blocks_stop_at_next_heading(page):
    soup = BeautifulSoup(page("fr_test.html"), "lxml")
    anchor = section_anchor(soup, "Synonymes")

    assert [block.name for block in section_blocks(anchor)] == ["ul"]
    assert section_anchor(soup, "Missing") is None
