"""Search input sanitization, validation and type detection.

Raw text from the user goes through ``sanitize`` and ``validate`` before it
is handed to the store; ``classify`` tags it as a postal code, a known
region, or a city name.
"""

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

MAX_QUERY_LENGTH = 100


class SearchType(StrEnum):
    ZIP_CODE = "zip_code"
    CITY = "city"
    REGION = "region"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SearchQuery:
    type: SearchType
    value: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


class InvalidSearchError(ValueError):
    """Raised when search input fails validation."""


# Postal code patterns; any match classifies as ZIP_CODE
POSTAL_PATTERNS = [
    re.compile(r"^\d{5}(-\d{4})?$"),                              # US ZIP / ZIP+4
    re.compile(r"^[A-Za-z]\d[A-Za-z][ -]?\d[A-Za-z]\d$"),         # Canada
    re.compile(r"^[A-Za-z]{1,2}\d[A-Za-z\d]?[ ]?\d[A-Za-z]{2}$"),  # UK
    re.compile(r"^\d{4,6}$"),                                     # generic numeric
]

US_STATES = frozenset({
    "alabama", "al", "alaska", "ak", "arizona", "az", "arkansas", "ar",
    "california", "ca", "colorado", "co", "connecticut", "ct", "delaware", "de",
    "florida", "fl", "georgia", "ga", "hawaii", "hi", "idaho", "id",
    "illinois", "il", "indiana", "in", "iowa", "ia", "kansas", "ks",
    "kentucky", "ky", "louisiana", "la", "maine", "me", "maryland", "md",
    "massachusetts", "ma", "michigan", "mi", "minnesota", "mn", "mississippi", "ms",
    "missouri", "mo", "montana", "mt", "nebraska", "ne", "nevada", "nv",
    "new hampshire", "nh", "new jersey", "nj", "new mexico", "nm", "new york", "ny",
    "north carolina", "nc", "north dakota", "nd", "ohio", "oh", "oklahoma", "ok",
    "oregon", "or", "pennsylvania", "pa", "rhode island", "ri", "south carolina", "sc",
    "south dakota", "sd", "tennessee", "tn", "texas", "tx", "utah", "ut",
    "vermont", "vt", "virginia", "va", "washington", "wa", "west virginia", "wv",
    "wisconsin", "wi", "wyoming", "wy", "district of columbia", "dc",
})

COUNTRIES = frozenset({
    "united states", "usa", "us", "canada", "mexico", "united kingdom", "uk",
    "england", "scotland", "wales", "ireland", "france", "germany", "italy",
    "spain", "portugal", "netherlands", "belgium", "switzerland", "austria",
    "australia", "new zealand", "japan", "china", "india", "brazil", "argentina",
    "south africa", "egypt", "russia", "sweden", "norway", "denmark", "finland",
    "poland", "czech republic", "greece", "turkey", "south korea", "singapore",
    "thailand", "vietnam", "philippines", "indonesia", "malaysia",
})

_TAG_RE = re.compile(r"<[^>]*>")
_UNSAFE_CHARS_RE = re.compile(r"[<>'\"`;\\]")
_WHITESPACE_RE = re.compile(r"\s+")


def classify(value: Any) -> SearchQuery:
    """Detect the search type of a raw input.

    Non-string input is never classified: it comes back as UNKNOWN with its
    string form as the value.
    """
    if value is None:
        return SearchQuery(SearchType.UNKNOWN, "")
    if not isinstance(value, str):
        return SearchQuery(SearchType.UNKNOWN, str(value))

    trimmed = value.strip()
    if not trimmed:
        return SearchQuery(SearchType.UNKNOWN, "")

    if is_postal_code(trimmed):
        return SearchQuery(SearchType.ZIP_CODE, trimmed)
    if is_region(trimmed):
        return SearchQuery(SearchType.REGION, trimmed)
    return SearchQuery(SearchType.CITY, trimmed)


def is_postal_code(text: str) -> bool:
    return any(p.match(text) for p in POSTAL_PATTERNS)


def is_region(text: str) -> bool:
    normalized = text.lower()
    return normalized in US_STATES or normalized in COUNTRIES


def sanitize(value: Any) -> str:
    """Strip markup and injection characters, normalize whitespace, cap length."""
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)

    text = _TAG_RE.sub("", text)
    text = _UNSAFE_CHARS_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()

    if len(text) > MAX_QUERY_LENGTH:
        text = text[:MAX_QUERY_LENGTH].strip()
    return text


def validate(value: Any) -> ValidationResult:
    """Validate raw search input. Length checks apply to the sanitized form."""
    if value is None or value == "":
        return ValidationResult(False, "Search input is required")
    if not isinstance(value, str):
        return ValidationResult(False, "Search input must be a string")

    sanitized = sanitize(value)
    if not sanitized:
        return ValidationResult(False, "Search input is required")
    if len(sanitized) < 2:
        return ValidationResult(False, "Search input must be at least 2 characters")
    return ValidationResult(True)


def prepare_query(value: Any) -> SearchQuery:
    """Validate, sanitize and classify in one step.

    Raises InvalidSearchError with the validation message, so nothing is
    fetched for bad input.
    """
    result = validate(value)
    if not result.valid:
        raise InvalidSearchError(result.error)
    return classify(sanitize(value))
