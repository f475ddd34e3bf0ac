from typing import Dict, List, Optional

from vocab_api.shared import BaseModel, Field


class ScrapedDefinition(BaseModel):
    text: str
    word_type: Optional[str] = Field(default=None)
    examples: List[str] = Field(default_factory=list)
    gender: Optional[str] = Field(default=None)
    pronunciation: Optional[str] = Field(default=None)
    language_specifics: Dict[str, str] = Field(default_factory=dict)
    notes: List[str] = Field(default_factory=list)


class ScrapedForm(BaseModel):
    text: str
    attributes: List[str] = Field(default_factory=list)
    is_lemma: bool = Field(default=False)


class ScrapedWord(BaseModel):
    """Source-shaped result of one page extraction, before adaptation."""

    text: str
    language: str
    url: Optional[str] = Field(default=None)
    definitions: List[ScrapedDefinition] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)
    etymology: str = Field(default="")
    pronunciation: str = Field(default="")
    translations: Dict[str, str] = Field(default_factory=dict)
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    search_terms: List[str] = Field(default_factory=list)
    lemma: Optional[str] = Field(default=None)
    usage_notes: List[str] = Field(default_factory=list)
    forms: List[ScrapedForm] = Field(default_factory=list)


class RelatedResponse(BaseModel):
    text: str
    language: str
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)


__all__ = (
    "ScrapedDefinition",
    "ScrapedForm",
    "ScrapedWord",
    "RelatedResponse",
)
