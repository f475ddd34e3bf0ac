from typing import Optional


class WordError(Exception):
    """
    Base class for every error the word API can surface.

    `message` is the public text rendered to clients, the exception
    arguments keep the internal detail for the logs.
    """

    status_code: int = 500
    message: str = "An internal server error occurred."

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class InvalidWord(WordError):
    status_code = 400
    message = "Invalid word."


class InvalidWordType(InvalidWord):
    message = "Invalid word type."


class InvalidGender(InvalidWord):
    message = "Invalid gender."


class WordNotFound(WordError):
    status_code = 404
    message = "Word not found."


class UnsupportedLanguage(WordNotFound):
    message = "Language is not supported."


class UpstreamUnavailable(WordError):
    status_code = 503
    message = "The dictionary source is currently unavailable."


class RequestCancelled(UpstreamUnavailable):
    message = "The request was cancelled."


class StoreError(UpstreamUnavailable):
    message = "The word store is currently unavailable."


__all__ = (
    "WordError",
    "InvalidWord",
    "InvalidWordType",
    "InvalidGender",
    "WordNotFound",
    "UnsupportedLanguage",
    "UpstreamUnavailable",
    "RequestCancelled",
    "StoreError",
)
