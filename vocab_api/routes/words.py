from typing import List, Literal

from fastapi import APIRouter, Depends, Query, Request

from vocab_api.shared import BaseModel, CancelToken, Field
from vocab_api.shared.config import SCRAPER
from vocab_api.shared.services import services
from vocab_api.words.models import RelatedWords, Word
from vocab_api.words.service import DEFAULT_LIMIT

router = APIRouter(
    prefix="/api/v1/words",
    tags=["Words"],
)

Language = Literal["fr", "en"]


class SearchRequest(BaseModel):
    text: str
    language: Language = Field(default="fr")


def request_token() -> CancelToken:
    return CancelToken(timeout=SCRAPER.REQUEST_TIMEOUT)


@router.post("/search", response_model=Word)
async def search_word(
    request: Request,
    payload: SearchRequest,
    token: CancelToken = Depends(request_token),
):
    """Look a word up, fetching it from Wiktionary when it isn't stored."""

    return await services.words.search(payload.text, payload.language, token)


@router.get("/recent", response_model=List[Word])
async def recent_words(
    request: Request,
    language: Language = "fr",
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
):
    """The most recently updated words of a language."""

    return await services.words.get_recent(language, limit)


@router.get("/autocomplete", response_model=List[str])
async def autocomplete(
    request: Request,
    q: str,
    lang: Language = "fr",
    token: CancelToken = Depends(request_token),
):
    return await services.words.autocomplete(q, lang, token)


@router.get("/suggestions", response_model=List[str])
async def suggestions(
    request: Request,
    q: str,
    lang: Language = "fr",
    token: CancelToken = Depends(request_token),
):
    return await services.words.get_suggestions(q, lang, token)


@router.get("/{word_id}/related", response_model=RelatedWords)
async def related_words(
    request: Request,
    word_id: str,
    token: CancelToken = Depends(request_token),
):
    """Synonyms and antonyms of a stored word, resolved into words."""

    return await services.words.get_related(word_id, token)


@router.post("/{word_id}/enrich", response_model=Word)
async def enrich_word(
    request: Request,
    word_id: str,
    token: CancelToken = Depends(request_token),
):
    """Fill the missing fields of a stored word from a fresh fetch."""

    return await services.words.enrich(word_id, token)
