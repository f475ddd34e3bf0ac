import re

REFERENCE_MARKER = re.compile(r"\[\d+\]\s*")


def squash(value: str) -> str:
    """Collapse every run of whitespace into a single space."""

    return " ".join(value.split())


def normalize_headword(value: str) -> str:
    return value.strip().lower()


def strip_references(value: str) -> str:
    return squash(REFERENCE_MARKER.sub("", value))
